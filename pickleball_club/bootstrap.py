"""Composition root for the Pickleball Club backend.

Assembles the application's components for a named configuration profile and
provides the startup check that proves the whole graph can be built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from pickleball_club.config import load_settings
from pickleball_club.container import ApplicationContext, Container
from pickleball_club.database import Datasource
from pickleball_club.exceptions import InitializationFault
from pickleball_club.services import ClubSettingsService


logger = logging.getLogger(__name__)

TEST_PROFILE = "test"


def build_container(
    profile: str,
    *,
    env_dir: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Container:
    """Register every application component for ``profile``.

    Args:
        profile: Configuration profile to load settings for
        env_dir: Directory holding the profile env files
        overrides: Explicit setting values, taking precedence over all sources

    Returns:
        A container ready to be built
    """
    setting_overrides = dict(overrides or {})

    container = Container()
    container.register("settings", lambda: load_settings(profile, env_dir=env_dir, **setting_overrides))
    container.register("datasource", Datasource.from_settings, depends_on=("settings",))
    container.register("club_settings_service", ClubSettingsService, depends_on=("settings",))
    return container


def build_context(
    profile: str,
    *,
    env_dir: Path | None = None,
    overrides: dict[str, Any] | None = None,
    configure: Callable[[Container], None] | None = None,
) -> ApplicationContext:
    """Build the application context for ``profile``.

    ``configure`` receives the container before it is built, which lets callers
    substitute or add components.

    Raises:
        InitializationFault: If any component cannot be constructed
            or ``configure`` fails
    """
    container = build_container(profile, env_dir=env_dir, overrides=overrides)
    if configure is not None:
        try:
            configure(container)
        except InitializationFault:
            raise
        except Exception as e:
            raise InitializationFault(
                f"Failed to configure the component container: {type(e).__name__}: {e}"
            ) from e
    return container.build(profile=profile)


def run_startup_check(
    profile: str = TEST_PROFILE,
    *,
    env_dir: Path | None = None,
    overrides: dict[str, Any] | None = None,
    configure: Callable[[Container], None] | None = None,
) -> None:
    """Build the full application graph for ``profile`` and release it again.

    Returns nothing on success. There is no retry and no recovery.

    Raises:
        InitializationFault: The first fault encountered while building the graph
    """
    logger.info(f"Running startup check for profile '{profile}'")
    try:
        context = build_context(profile, env_dir=env_dir, overrides=overrides, configure=configure)
    except InitializationFault as e:
        logger.error(f"Startup check failed for profile '{profile}' in component '{e.component}': {e}")
        raise

    with context:
        logger.info(f"Startup check passed for profile '{profile}' ({len(context)} components)")


@dataclass(frozen=True)
class StartupReport:
    """Outcome of a startup check that does not raise."""

    profile: str
    fault: InitializationFault | None = None

    @property
    def ok(self) -> bool:
        return self.fault is None


def check_startup(profile: str = TEST_PROFILE, **kwargs) -> StartupReport:
    """Run :func:`run_startup_check` and capture a fault instead of raising it."""
    try:
        run_startup_check(profile, **kwargs)
    except InitializationFault as e:
        return StartupReport(profile=profile, fault=e)
    return StartupReport(profile=profile)
