"""Profile-aware application settings and logging setup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pickleball_club.exceptions import InvalidConfigurationError, MissingConfigurationError


ENV_PREFIX = "PICKLEBALL_"
ENV_NESTED_DELIMITER = "__"

# Shared values load first, then the profile file overrides them
PROFILE_DIR = Path(__file__).resolve().parents[1] / "profiles"
SHARED_PROFILE_FILE = "application.env"

DEFAULT_PROFILE = "default"

_LOG_LEVEL_ENV = f"{ENV_PREFIX}LOG_LEVEL"
_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)


class ClubPolicySettings(BaseModel):
    """Booking and court usage rules for the club."""

    booking_advance_days: int = Field(default=14, ge=1)
    max_bookings_per_user: int = Field(default=3, ge=1)
    cancellation_hours: int = Field(default=24, ge=0)
    match_duration_minutes: int = Field(default=90, gt=0)
    court_maintenance_buffer: int = Field(default=15, ge=0)  # minutes between bookings
    auto_release_minutes: int = Field(default=10, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
        extra="ignore",
    )

    profile: str = DEFAULT_PROFILE

    # Club identity
    club_name: str = "Sunshine Pickleball Club"
    club_timezone: str = "UTC"
    club_currency: str = "USD"

    # Datasource; every profile has to provide one
    datasource_url: str
    datasource_verify_connection: bool = True

    log_level: str = "INFO"
    cors_allowed_origins: str = "*"

    policy: ClubPolicySettings = Field(default_factory=ClubPolicySettings)

    @field_validator("datasource_url")
    @classmethod
    def _datasource_url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("datasource URL must not be blank")
        return value.strip()

    @field_validator("club_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone '{value}'") from e
        return value

    @field_validator("club_currency")
    @classmethod
    def _currency_code(cls, value: str) -> str:
        code = value.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("currency must be a three-letter ISO 4217 code")
        return code

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{value}'")
        return level

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins parsed from the comma separated setting."""
        raw = self.cors_allowed_origins.strip()
        if raw in ("*", ""):
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


def profile_env_files(profile: str, env_dir: Path | None = None) -> list[Path]:
    """Return the env files that exist for a profile, lowest precedence first."""
    directory = env_dir if env_dir is not None else PROFILE_DIR
    candidates = [directory / SHARED_PROFILE_FILE, directory / f"{profile}.env"]
    return [path for path in candidates if path.is_file()]


def _env_var_name(loc: tuple) -> str:
    return ENV_PREFIX + ENV_NESTED_DELIMITER.join(str(part) for part in loc).upper()


def load_settings(profile: str, /, *, env_dir: Path | None = None, **overrides) -> Settings:
    """Load and validate settings for a profile.

    Precedence, highest first: keyword overrides, ``PICKLEBALL_*`` environment
    variables, ``<profile>.env``, ``application.env``, field defaults.

    Args:
        profile: Profile name, e.g. ``"test"``
        env_dir: Directory holding the profile env files (defaults to ``profiles/``)
        **overrides: Explicit setting values

    Returns:
        Validated Settings instance

    Raises:
        MissingConfigurationError: If a required value is absent
        InvalidConfigurationError: If a value fails validation
            or ``overrides`` tries to replace the profile name
    """
    if "profile" in overrides:
        raise InvalidConfigurationError(
            f"The profile is selected by name ('{profile}') and cannot be overridden",
            component="settings",
        )

    env_files = profile_env_files(profile, env_dir)
    if not env_files:
        logger.warning(f"No env files found for profile '{profile}', using environment and defaults only")
    else:
        logger.debug(f"Loading profile '{profile}' from {[str(p) for p in env_files]}")

    try:
        return Settings(_env_file=tuple(env_files) or None, profile=profile, **overrides)
    except ValidationError as e:
        missing = [err["loc"] for err in e.errors() if err["type"] == "missing"]
        if missing:
            fields = [".".join(str(part) for part in loc) for loc in missing]
            described = ", ".join(f"{f} ({_env_var_name(loc)})" for f, loc in zip(fields, missing))
            raise MissingConfigurationError(
                f"Missing required configuration for profile '{profile}': {described}",
                fields=fields,
            ) from e

        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidConfigurationError(
            f"Invalid configuration for profile '{profile}': {problems}",
            component="settings",
        ) from e


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service.

    Args:
        level: Log level name; falls back to ``PICKLEBALL_LOG_LEVEL`` then INFO
    """
    resolved = (level or os.getenv(_LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(level=resolved, format=_LOG_FORMAT)
    logging.getLogger().setLevel(resolved)
