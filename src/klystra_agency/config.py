"""Runtime configuration loaded from environment variables.

Every option has a development fallback so the API can be started locally
with no environment at all. The recognised variables are:

- ``APP_ENV``: ``development`` (default), ``production`` or ``test``
- ``DB_URL``: full SQLAlchemy URL, takes precedence over ``DB_FILE``
- ``DB_FILE``: SQLite database file (default ``klystra.db``)
- ``UPLOAD_DIR``: directory for uploaded media (default ``uploads``)
- ``MAX_UPLOAD_BYTES``: per-file upload ceiling (default 500 MiB)
- ``SESSION_SECRET``: key used to digest session tokens at rest
- ``SESSION_TTL_HOURS``: session lifetime in hours (default 24)
- ``CORS_ORIGIN``: comma-separated list of allowed origins
- ``PORT``: listening port (default 5000)
- ``ADMIN_USERNAME`` / ``ADMIN_PASSWORD``: seed-time admin credentials
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from sqlalchemy.engine import URL

DEFAULT_DB_FILE = "klystra.db"
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_MAX_UPLOAD_BYTES = 500 * 1024 * 1024
DEFAULT_SESSION_SECRET = "klystra-dev-session-secret-change-in-production"
DEFAULT_SESSION_TTL_HOURS = 24
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)
DEFAULT_PORT = 5000
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    environment: str = "development"
    database_url: str = URL.create("sqlite", database=DEFAULT_DB_FILE).render_as_string()
    upload_dir: Path = Path(DEFAULT_UPLOAD_DIR)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    session_secret: str = DEFAULT_SESSION_SECRET
    session_ttl: timedelta = timedelta(hours=DEFAULT_SESSION_TTL_HOURS)
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    port: int = DEFAULT_PORT
    admin_username: str = DEFAULT_ADMIN_USERNAME
    admin_password: str = DEFAULT_ADMIN_PASSWORD

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def uses_default_secret(self) -> bool:
        return self.session_secret == DEFAULT_SESSION_SECRET

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``environ`` (``os.environ`` when omitted).

        Raises:
            ValueError: If a numeric variable cannot be parsed or is not positive.
        """
        env = os.environ if environ is None else environ

        return cls(
            environment=env.get("APP_ENV", "development").strip().lower() or "development",
            database_url=get_database_url(env),
            upload_dir=Path(env.get("UPLOAD_DIR") or DEFAULT_UPLOAD_DIR).expanduser(),
            max_upload_bytes=_positive_int(env, "MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            session_secret=env.get("SESSION_SECRET") or DEFAULT_SESSION_SECRET,
            session_ttl=timedelta(
                hours=_positive_int(env, "SESSION_TTL_HOURS", DEFAULT_SESSION_TTL_HOURS)
            ),
            cors_origins=_split_origins(env.get("CORS_ORIGIN")),
            port=_positive_int(env, "PORT", DEFAULT_PORT),
            admin_username=env.get("ADMIN_USERNAME") or DEFAULT_ADMIN_USERNAME,
            admin_password=env.get("ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
        )


def get_database_url(environ: Mapping[str, str] | None = None) -> str:
    """Return the database URL, allowing overrides via environment variable."""
    env = os.environ if environ is None else environ
    env_url = env.get("DB_URL")
    if env_url:
        return env_url

    db_path = Path(env.get("DB_FILE") or DEFAULT_DB_FILE).expanduser()
    return URL.create("sqlite", database=str(db_path)).render_as_string(hide_password=False)


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_CORS_ORIGINS
    origins = tuple(origin.strip() for origin in raw.split(",") if origin.strip())
    return origins or DEFAULT_CORS_ORIGINS
