"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

ACCESS_SECRET_KEY: Final[str] = "JWT_ACCESS_SECRET"
REFRESH_SECRET_KEY: Final[str] = "JWT_REFRESH_SECRET"

DEFAULT_ACCESS_TTL: Final[str] = "15m"
DEFAULT_REFRESH_TTL: Final[str] = "30d"
DEFAULT_MIN_SECRET_LENGTH: Final[int] = 32

_TTL_PATTERN = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_TTL_UNITS: Final[dict[str, int]] = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
}


# Load .env in development (no-op when the file is absent)
load_dotenv()


class ConfigError(RuntimeError):
    """
    Raised when required configuration is missing or inconsistent.

    This error is fatal: the application factory lets it propagate so the
    process never starts serving requests with an unusable token setup.
    """


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return bool(value)


def parse_ttl(value: Any) -> timedelta:
    """Convert a lifetime setting into a :class:`~datetime.timedelta`.

    Accepted inputs are a ``timedelta``, an integer number of seconds, or a
    string such as ``"90"``, ``"15m"``, ``"12h"``, ``"30d"`` or ``"2w"``.

    :param value: Raw configuration value.
    :returns: Positive lifetime.
    :raises ConfigError: If the value cannot be parsed or is not positive.
    """
    if isinstance(value, timedelta):
        ttl = value
    elif isinstance(value, int) and not isinstance(value, bool):
        ttl = timedelta(seconds=value)
    elif isinstance(value, str):
        match = _TTL_PATTERN.match(value)
        if match is None:
            raise ConfigError(f"Invalid token lifetime: {value!r}")
        amount, unit = match.groups()
        ttl = timedelta(seconds=int(amount) * _TTL_UNITS[unit.lower()])
    else:
        raise ConfigError(f"Invalid token lifetime: {value!r}")

    if ttl.total_seconds() <= 0:
        raise ConfigError(f"Token lifetime must be positive: {value!r}")
    return ttl


def require_secret(
    config: Mapping[str, Any],
    name: str,
    *,
    min_length: int = DEFAULT_MIN_SECRET_LENGTH,
) -> str:
    """Return the signing secret stored under ``name``.

    :param config: Mapping holding configuration (e.g. ``app.config``).
    :param name: Key of the secret.
    :param min_length: Minimum accepted secret length.
    :returns: The secret value.
    :raises ConfigError: If the secret is absent, blank, or too short.
    """
    raw = config.get(name)
    value = raw.strip() if isinstance(raw, str) else ""
    if not value:
        raise ConfigError(f"Missing {name} in configuration")
    if len(value) < min_length:
        raise ConfigError(f"{name} must be at least {min_length} characters long")
    return value


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable token configuration resolved once at startup.

    :param access_secret: HMAC key for access tokens.
    :param refresh_secret: HMAC key for refresh tokens (must differ).
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: JWS algorithm used for both token classes.
    :param leeway: Clock skew tolerated when checking ``exp``.
    :param refresh_cookie_name: Cookie carrying the refresh token for web clients.
    :param revoke_on_replay: Revoke all of a user's refresh tokens when a
        consumed or tampered one is presented again.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=30)
    algorithm: str = "HS256"
    leeway: timedelta = timedelta(0)
    refresh_cookie_name: str = "refresh_token"
    revoke_on_replay: bool = False

    def __post_init__(self) -> None:
        if self.access_secret == self.refresh_secret:
            raise ConfigError(
                f"{ACCESS_SECRET_KEY} and {REFRESH_SECRET_KEY} must be different values"
            )

    def __repr__(self) -> str:
        # Never render secrets in logs or tracebacks
        return (
            f"AuthSettings(algorithm={self.algorithm!r}, access_ttl={self.access_ttl!r}, "
            f"refresh_ttl={self.refresh_ttl!r}, revoke_on_replay={self.revoke_on_replay!r})"
        )

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthSettings:
        """Build settings from a Flask config (or any mapping).

        :param config: Source mapping.
        :returns: Validated settings.
        :raises ConfigError: On missing/short/equal secrets or bad lifetimes.
        """
        min_length = int(config.get("JWT_MIN_SECRET_LENGTH", DEFAULT_MIN_SECRET_LENGTH))
        return cls(
            access_secret=require_secret(config, ACCESS_SECRET_KEY, min_length=min_length),
            refresh_secret=require_secret(config, REFRESH_SECRET_KEY, min_length=min_length),
            access_ttl=parse_ttl(config.get("JWT_ACCESS_TTL") or DEFAULT_ACCESS_TTL),
            refresh_ttl=parse_ttl(config.get("JWT_REFRESH_TTL") or DEFAULT_REFRESH_TTL),
            algorithm=str(config.get("JWT_ALGORITHM") or "HS256"),
            leeway=timedelta(seconds=int(config.get("JWT_LEEWAY_SECONDS") or 0)),
            refresh_cookie_name=str(config.get("REFRESH_COOKIE_NAME") or "refresh_token"),
            revoke_on_replay=_as_bool(config.get("AUTH_REVOKE_ON_REPLAY", False)),
        )


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_ACCESS_SECRET: str | None
        Signing key for access tokens. Required.
    JWT_REFRESH_SECRET: str | None
        Signing key for refresh tokens. Required and distinct from the access key.
    JWT_ACCESS_TTL: str
        Access token lifetime (``"15m"`` by default).
    JWT_REFRESH_TTL: str
        Refresh token lifetime (``"30d"`` by default).
    AUTH_REVOKE_ON_REPLAY: bool
        Revoke every refresh token of a user when a consumed one is replayed.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_ACCESS_SECRET = os.getenv(ACCESS_SECRET_KEY)
    JWT_REFRESH_SECRET = os.getenv(REFRESH_SECRET_KEY)
    JWT_MIN_SECRET_LENGTH = int(os.getenv("JWT_MIN_SECRET_LENGTH", DEFAULT_MIN_SECRET_LENGTH))

    # Token lifetimes & policy
    JWT_ACCESS_TTL = os.getenv("JWT_ACCESS_TTL", DEFAULT_ACCESS_TTL)
    JWT_REFRESH_TTL = os.getenv("JWT_REFRESH_TTL", DEFAULT_REFRESH_TTL)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_LEEWAY_SECONDS = int(os.getenv("JWT_LEEWAY_SECONDS", "0"))
    AUTH_REVOKE_ON_REPLAY = env_bool("AUTH_REVOKE_ON_REPLAY", False)
    REFRESH_COOKIE_NAME = os.getenv("REFRESH_COOKIE_NAME", "refresh_token")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
