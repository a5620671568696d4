"""Centralized configuration management for the KiesCompass backend."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables defined in a local .env file before instantiating the
# settings singleton so every module importing :mod:`kiescompass.settings` sees the
# same values regardless of import order.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_SQLITE_DATABASE_URL = "sqlite+aiosqlite:///./data/app.db"
POSTGRES_ASYNC_PREFIX = "postgresql+psycopg://"
POSTGRES_SYNC_PREFIXES = ("postgres://", "postgresql://")
DEFAULT_JWT_SECRET = "change-me"
DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_JWT_EXPIRES_MINUTES = 60
DEFAULT_RECOMMENDATION_LIMIT = 10
DEFAULT_LOG_LEVEL = "INFO"


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


def _extract_origin(url: str | None) -> str | None:
    """Return the scheme + netloc portion of ``url`` when valid."""

    if not url:
        return None

    try:
        from urllib.parse import urlsplit

        parsed = urlsplit(url.strip())
    except ValueError:
        return None

    if not parsed.scheme or not parsed.netloc:
        return None

    return f"{parsed.scheme}://{parsed.netloc}"


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides the raw environment values the class exposes derived helpers such
    as the async-compatible database URL and the CORS origin list so callers
    never repeat parsing logic.
    """

    _explicit_jwt_secret: bool = PrivateAttr(default=False)
    _explicit_cors_allow_origins: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_jwt_secret = "jwt_secret" in normalized_keys
        self._explicit_cors_allow_origins = (
            "cors_allow_origins_raw" in normalized_keys
            or "cors_allow_origins" in normalized_keys
        )
        jwt_env = os.getenv("JWT_SECRET")
        if jwt_env is not None and jwt_env.strip():
            self._explicit_jwt_secret = True
        cors_env = os.getenv("CORS_ALLOW_ORIGINS")
        if cors_env is not None and cors_env.strip():
            self._explicit_cors_allow_origins = True

    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "Full SQLAlchemy-compatible database URL. Postgres URLs supplied in"
            " sync format (postgres:// or postgresql://) are coerced into the"
            " async psycopg driver string at runtime."
        ),
    )
    use_sqlite: bool = Field(
        default=False,
        alias="USE_SQLITE",
        description=(
            "Force SQLite usage regardless of DATABASE_URL. Helpful for local"
            " development and test suites that do not require PostgreSQL."
        ),
    )
    jwt_secret: str = Field(
        default=DEFAULT_JWT_SECRET,
        alias="JWT_SECRET",
        description="Shared secret used to sign and verify bearer tokens.",
    )
    jwt_algorithm: str = Field(
        default=DEFAULT_JWT_ALGORITHM,
        alias="JWT_ALGORITHM",
        description="Signing algorithm passed to PyJWT.",
    )
    jwt_expires_minutes: int = Field(
        default=DEFAULT_JWT_EXPIRES_MINUTES,
        alias="JWT_EXPIRES_MINUTES",
        ge=1,
        description="Lifetime of issued access tokens in minutes.",
    )
    recommendation_default_limit: int = Field(
        default=DEFAULT_RECOMMENDATION_LIMIT,
        alias="RECOMMENDATION_DEFAULT_LIMIT",
        ge=1,
        description="Number of recommendations returned when no limit is supplied.",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description=(
            "Comma-separated list of additional CORS origins supplied via environment variable."
        ),
    )
    cors_allow_origin_regex: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGIN_REGEX",
        description=(
            "Optional regular expression evaluated by FastAPI's CORS middleware."
        ),
    )
    app_url: str | None = Field(
        default=None,
        alias="APP_URL",
        description="Public frontend URL whose origin is always allowed by CORS.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    slow_query_threshold: float = Field(
        default=0.1,
        alias="SLOW_QUERY_THRESHOLD",
        description=(
            "Threshold in seconds after which queries are considered slow for"
            " monitoring instrumentation."
        ),
    )

    @property
    def resolved_database_url(self) -> str:
        """Return the async-compatible database URL after applying fallbacks."""

        if self.use_sqlite:
            return DEFAULT_SQLITE_DATABASE_URL

        if not self.database_url:
            return DEFAULT_SQLITE_DATABASE_URL

        url = self.database_url.strip()

        for prefix in POSTGRES_SYNC_PREFIXES:
            if url.startswith(prefix):
                return url.replace(prefix, POSTGRES_ASYNC_PREFIX, 1)

        if url.startswith(POSTGRES_ASYNC_PREFIX) or url.startswith("sqlite+aiosqlite://"):
            return url

        raise RuntimeError(
            f"Expected a PostgreSQL connection string or SQLite fallback, received: {url}"
        )

    @property
    def database_type(self) -> str:
        """Return ``sqlite`` when using SQLite otherwise ``postgresql``."""

        url = self.resolved_database_url
        if url.startswith("sqlite"):
            return "sqlite"
        return "postgresql"

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins supplied via environment variables."""

        if not self.cors_allow_origins_raw:
            return []

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def derived_cors_origins(self) -> list[str]:
        """Return origins inferred from the public frontend URL."""

        origin = _extract_origin(self.app_url)
        return [origin] if origin else []

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_jwt_secret and self.jwt_secret == DEFAULT_JWT_SECRET:
            warnings.append(
                "JWT_SECRET is not set - tokens are signed with an insecure default "
                "(never run like this in production)"
            )

        if (
            not self._explicit_cors_allow_origins
            and not self.cors_allow_origins
            and not self.derived_cors_origins
        ):
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - using default localhost origins only "
                "(may cause CORS issues in production)"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


settings = get_settings()

__all__ = [
    "AppSettings",
    "DEFAULT_JWT_ALGORITHM",
    "DEFAULT_JWT_EXPIRES_MINUTES",
    "DEFAULT_JWT_SECRET",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_RECOMMENDATION_LIMIT",
    "DEFAULT_SQLITE_DATABASE_URL",
    "POSTGRES_ASYNC_PREFIX",
    "POSTGRES_SYNC_PREFIXES",
    "get_settings",
    "settings",
]
