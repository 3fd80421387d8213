"""Custom exceptions for the Pickleball Club backend."""

from __future__ import annotations


class InitializationFault(RuntimeError):
    """Raised when the application's object graph cannot be constructed."""

    def __init__(self, message: str, *, component: str | None = None) -> None:
        super().__init__(message)
        self.component = component


class MissingConfigurationError(InitializationFault):
    """Raised when a required configuration value is absent for the active profile."""

    def __init__(self, message: str, *, fields: list[str], component: str | None = "settings") -> None:
        super().__init__(message, component=component)
        self.fields = fields


class InvalidConfigurationError(InitializationFault):
    """Raised when a configuration value is present but fails validation."""


class UnresolvedDependencyError(InitializationFault):
    """Raised when a component depends on a name nothing registers."""

    def __init__(self, component: str, dependency: str) -> None:
        super().__init__(
            f"Component '{component}' depends on '{dependency}', which is not registered.",
            component=component,
        )
        self.dependency = dependency


class CircularDependencyError(InitializationFault):
    """Raised when component dependencies form a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(
            f"Circular dependency between components: {' -> '.join(cycle)}",
            component=cycle[0],
        )
        self.cycle = cycle


class ComponentConstructionError(InitializationFault):
    """Raised when a component factory fails while building the graph."""
