"""Explicit component container used by the composition root.

Components are registered by name together with a factory and the names of the
components the factory needs. ``build`` constructs them in dependency order and
passes each already-built dependency to the factory as a keyword argument of
the same name, so the graph can be assembled with substituted components in
tests without any discovery magic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterator

from pickleball_club.exceptions import (
    CircularDependencyError,
    ComponentConstructionError,
    InitializationFault,
    UnresolvedDependencyError,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentDefinition:
    """Registration record for a single component."""

    name: str
    factory: Callable[..., Any]
    depends_on: tuple[str, ...] = ()


class ApplicationContext:
    """Built components, kept in construction order."""

    def __init__(self, components: dict[str, Any], *, profile: str | None = None) -> None:
        self._components = components
        self.profile = profile
        self._closed = False

    @property
    def names(self) -> list[str]:
        return list(self._components)

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, name: str) -> Any:
        try:
            return self._components[name]
        except KeyError:
            raise KeyError(f"No component named '{name}' in the application context") from None

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def __iter__(self) -> Iterator[str]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def close(self) -> None:
        """Close components in reverse construction order."""
        if self._closed:
            return
        self._closed = True
        _close_all(reversed(list(self._components.items())))

    def __enter__(self) -> ApplicationContext:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _close_all(items) -> None:
    for name, instance in items:
        close = getattr(instance, "close", None)
        if not callable(close):
            continue
        try:
            close()
            logger.debug(f"Closed component '{name}'")
        except Exception:
            # Keep closing the rest; the failure is reported, not raised
            logger.exception(f"Failed to close component '{name}'")


class Container:
    """Registry of component factories."""

    def __init__(self) -> None:
        self._definitions: dict[str, ComponentDefinition] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def register(
        self,
        name: str,
        factory: Callable[..., Any],
        *,
        depends_on: tuple[str, ...] | list[str] = (),
    ) -> None:
        """Register a component factory.

        Args:
            name: Unique component name; also the keyword it is injected under
            factory: Callable receiving one keyword argument per dependency
            depends_on: Names of the components the factory needs

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._definitions:
            raise ValueError(f"Component '{name}' is already registered")
        self._definitions[name] = ComponentDefinition(name, factory, tuple(depends_on))

    def register_instance(self, name: str, instance: Any) -> None:
        """Register an already constructed component."""
        self.register(name, lambda: instance)

    def override(
        self,
        name: str,
        factory: Callable[..., Any],
        *,
        depends_on: tuple[str, ...] | list[str] | None = None,
    ) -> None:
        """Replace the factory of a registered component.

        The component keeps its declared dependencies unless ``depends_on`` is given.
        """
        if name not in self._definitions:
            raise KeyError(f"Cannot override unknown component '{name}'")
        current = self._definitions[name]
        self._definitions[name] = replace(
            current,
            factory=factory,
            depends_on=current.depends_on if depends_on is None else tuple(depends_on),
        )

    def resolution_order(self) -> list[str]:
        """Return component names with every dependency ahead of its dependants.

        Raises:
            UnresolvedDependencyError: If a dependency is not registered
            CircularDependencyError: If dependencies form a cycle
        """
        order: list[str] = []
        done: set[str] = set()

        for root in self._definitions:
            if root in done:
                continue
            # Iterative DFS; the path holds the chain currently being resolved
            path: list[str] = [root]
            pending: list[Iterator[str]] = [iter(self._definitions[root].depends_on)]
            while pending:
                dependency = next(pending[-1], None)
                if dependency is None:
                    finished = path.pop()
                    pending.pop()
                    done.add(finished)
                    order.append(finished)
                    continue
                if dependency in done:
                    continue
                if dependency not in self._definitions:
                    raise UnresolvedDependencyError(path[-1], dependency)
                if dependency in path:
                    cycle = path[path.index(dependency):] + [dependency]
                    raise CircularDependencyError(cycle)
                path.append(dependency)
                pending.append(iter(self._definitions[dependency].depends_on))

        return order

    def build(self, *, profile: str | None = None) -> ApplicationContext:
        """Construct every registered component.

        Raises:
            InitializationFault: On the first component that cannot be built;
                components built before it are closed first
        """
        order = self.resolution_order()
        built: dict[str, Any] = {}

        for name in order:
            definition = self._definitions[name]
            kwargs = {dependency: built[dependency] for dependency in definition.depends_on}
            logger.debug(f"Constructing component '{name}'")
            try:
                built[name] = definition.factory(**kwargs)
            except InitializationFault as e:
                if e.component is None:
                    e.component = name
                _close_all(reversed(list(built.items())))
                raise
            except Exception as e:
                _close_all(reversed(list(built.items())))
                raise ComponentConstructionError(
                    f"Failed to construct component '{name}': {type(e).__name__}: {e}",
                    component=name,
                ) from e

        logger.info(f"Constructed {len(built)} components: {', '.join(built)}")
        return ApplicationContext(built, profile=profile)
