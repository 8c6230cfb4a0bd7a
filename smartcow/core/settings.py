# ==============================================================================
# SETTINGS CONFIGURATION - Environment Management
# ==============================================================================
# Pydantic Settings for type-safe environment variable management
# Remote store gating, local store medium, security and logging options
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RemoteBackend(str, Enum):
    """
    Supported remote connection styles.

    Attributes:
        REST: Hosted PostgREST-style HTTP endpoint (URL + anonymous key)
        SQL: Directly reachable relational database (SQLAlchemy async URL)
    """
    REST = "rest"
    SQL = "sql"


class Environment(str, Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application Settings Configuration.

    Manages all environment variables with type validation and defaults.
    Uses Pydantic BaseSettings for automatic .env file loading and
    environment variable parsing.

    The two remote gating parameters (``SUPABASE_URL`` and
    ``SUPABASE_ANON_KEY``) decide whether the remote store is attempted at
    all. When either is blank every operation runs against the local store.

    Example:
        >>> from smartcow.core.settings import settings
        >>> settings.remote_configured
        False
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # --------------------------------------------------------------------------
    APP_NAME: str = Field(
        default="SmartCow Marketplace Sync",
        description="Application display name"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application semantic version"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (logs, stack traces)"
    )
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current deployment environment"
    )

    # --------------------------------------------------------------------------
    # API CONFIGURATION
    # --------------------------------------------------------------------------
    API_V1_PREFIX: str = Field(
        default="/api/v1",
        description="API version 1 route prefix"
    )
    API_TITLE: str = Field(
        default="SmartCow Marketplace API",
        description="OpenAPI documentation title"
    )
    API_DESCRIPTION: str = Field(
        default="Marketplace, moderation and telemetry data layer with local fallback",
        description="OpenAPI documentation description"
    )

    # --------------------------------------------------------------------------
    # REMOTE STORE (gated by URL + anonymous key)
    # --------------------------------------------------------------------------
    SUPABASE_URL: str = Field(
        default="",
        description="Remote endpoint URL; blank disables the remote store"
    )
    SUPABASE_ANON_KEY: str = Field(
        default="",
        description="Remote anonymous access key; blank disables the remote store"
    )
    REMOTE_BACKEND: RemoteBackend = Field(
        default=RemoteBackend.REST,
        description="Remote connection style (rest, sql)"
    )
    REMOTE_DATABASE_URL: Optional[str] = Field(
        default=None,
        description="SQLAlchemy async URL used when REMOTE_BACKEND=sql"
    )
    REMOTE_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout for the REST backend"
    )

    # --------------------------------------------------------------------------
    # LOCAL STORE
    # --------------------------------------------------------------------------
    LOCAL_STORE_URL: str = Field(
        default="sqlite:///./smartcow_local.db",
        description="Local medium: memory:// or a SQLite URL"
    )
    WRITE_THROUGH: bool = Field(
        default=True,
        description="Mirror successful remote results into the local store"
    )

    # --------------------------------------------------------------------------
    # SECURITY SETTINGS
    # --------------------------------------------------------------------------
    SECRET_KEY: str = Field(
        default="your-super-secret-key-change-in-production",
        min_length=32,
        description="JWT signing secret key (min 32 chars)"
    )
    ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60,
        ge=1,
        le=1440,
        description="Access token expiration in minutes"
    )
    BCRYPT_ROUNDS: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt work factor"
    )
    ADMIN_EMAIL: str = Field(
        default="admin@smartcow.com",
        description="Built-in administrator e-mail"
    )
    ADMIN_PASSWORD: str = Field(
        default="admin123",
        description="Built-in administrator password"
    )

    # --------------------------------------------------------------------------
    # CORS SETTINGS
    # --------------------------------------------------------------------------
    CORS_ORIGINS: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # --------------------------------------------------------------------------
    # LOGGING CONFIGURATION
    # --------------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    LOG_FORMAT: str = Field(
        default="text",
        description="Log format (json, text)"
    )

    # --------------------------------------------------------------------------
    # COMPUTED PROPERTIES
    # --------------------------------------------------------------------------
    @computed_field
    @property
    def remote_configured(self) -> bool:
        """Both remote gating parameters are present."""
        return bool(self.SUPABASE_URL.strip() and self.SUPABASE_ANON_KEY.strip())

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    # --------------------------------------------------------------------------
    # VALIDATORS
    # --------------------------------------------------------------------------
    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Warn when the default SECRET_KEY is in use."""
        if v == "your-super-secret-key-change-in-production":
            import warnings
            warnings.warn(
                "Using default SECRET_KEY. Generate a secure key for production!",
                UserWarning
            )
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [origin.strip() for origin in v.split(",")]
        return v


@dataclass(frozen=True)
class RemoteConfig:
    """
    Remote store connection parameters, resolved once at start-up.

    Passed explicitly into the store factory so that the "is remote
    configured" decision is made a single time rather than on every call.

    Attributes:
        url: Remote endpoint URL
        anon_key: Anonymous access key
        backend: Connection style
        database_url: SQLAlchemy URL for the SQL backend
        timeout: HTTP timeout for the REST backend
    """

    url: str = ""
    anon_key: str = ""
    backend: RemoteBackend = RemoteBackend.REST
    database_url: Optional[str] = None
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        """Both gating parameters are non-empty."""
        return bool(self.url.strip() and self.anon_key.strip())

    @classmethod
    def from_settings(cls, source: Settings) -> "RemoteConfig":
        """Build the config from application settings."""
        return cls(
            url=source.SUPABASE_URL.strip(),
            anon_key=source.SUPABASE_ANON_KEY.strip(),
            backend=source.REMOTE_BACKEND,
            database_url=source.REMOTE_DATABASE_URL,
            timeout=source.REMOTE_TIMEOUT_SECONDS,
        )

    @classmethod
    def disabled(cls) -> "RemoteConfig":
        """Config that routes everything to the local store."""
        return cls()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Uses lru_cache to ensure settings are only loaded once,
    providing a singleton-like behavior for the settings object.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


# Module-level settings instance for convenient imports
settings = get_settings()
