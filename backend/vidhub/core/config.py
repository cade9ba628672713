"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Load .env in development (no-op when the file is missing)
load_dotenv()


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


def env_seconds(name: str, default: int) -> timedelta:
    """Read a lifetime expressed in seconds and return it as ``timedelta``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return timedelta(seconds=default)
    return timedelta(seconds=int(raw))


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Access-token signing key consumed by ``flask-jwt-extended``. Sourced
        from ``ACCESS_TOKEN_SECRET``.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access-token lifetime.
    REFRESH_TOKEN_SECRET: str
        Refresh-token signing key. Must differ from the access secret.
    REFRESH_TOKEN_EXPIRES: timedelta
        Refresh-token lifetime.
    JWT_ACCESS_COOKIE_NAME / JWT_REFRESH_COOKIE_NAME: str
        Cookie names used by the session endpoints.
    JWT_COOKIE_SECURE: bool
        Session cookies are always flagged ``Secure`` (and ``HttpOnly``).
    CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY / CLOUDINARY_API_SECRET: str
        Credentials for the remote asset host.
    ASSET_UPLOAD_TIMEOUT: float
        Seconds before an upload to the asset host is abandoned.
    UPLOAD_TEMP_DIR: str
        Directory where multipart uploads are staged before forwarding.
    MAX_CONTENT_LENGTH: int
        Upper bound for request bodies, in bytes.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Access tokens (flask-jwt-extended)
    JWT_SECRET_KEY = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES = env_seconds("ACCESS_TOKEN_EXPIRES_SECONDS", 24 * 60 * 60)
    JWT_TOKEN_LOCATION = ["cookies", "headers"]
    JWT_ACCESS_COOKIE_NAME = "accessToken"
    JWT_REFRESH_COOKIE_NAME = "refreshToken"
    JWT_COOKIE_SECURE = True
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_COOKIE_SAMESITE = os.getenv("JWT_COOKIE_SAMESITE", "Lax")

    # Refresh tokens (signed separately, see infra.jwt)
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    REFRESH_TOKEN_EXPIRES = env_seconds("REFRESH_TOKEN_EXPIRES_SECONDS", 10 * 24 * 60 * 60)

    # Asset host
    ASSET_STORE = os.getenv("ASSET_STORE", "cloudinary")
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_UPLOAD_URL = os.getenv(
        "CLOUDINARY_UPLOAD_URL", "https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload"
    )
    ASSET_UPLOAD_TIMEOUT = float(os.getenv("ASSET_UPLOAD_TIMEOUT", "30"))
    UPLOAD_TEMP_DIR = os.getenv(
        "UPLOAD_TEMP_DIR", os.path.join(tempfile.gettempdir(), "vidhub-uploads")
    )
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(16 * 1024 * 1024)))

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses an in-process asset store so no upload leaves the machine.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    ASSET_STORE = "memory"
    JWT_SECRET_KEY = "test-access-secret-0123456789abcdef"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-0123456789abcdef"
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
