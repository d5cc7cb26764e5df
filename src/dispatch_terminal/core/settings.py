"""Application settings and configuration.

This module defines all configuration options for the Dispatch Terminal service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Dispatch Terminal", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./dispatch.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT sessions for administrators and PIN guests
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 12,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    admin_access_key: str | None = Field(default=None, alias="ADMIN_ACCESS_KEY")
    guest_default_label: str = Field(default="Operador", alias="GUEST_DEFAULT_LABEL")

    # Calendar used for exit dates and report formatting
    timezone: str = Field(default="UTC", alias="TIMEZONE")

    # Destructive purge confirmation
    purge_challenge_ttl_seconds: int = Field(default=30, alias="PURGE_CHALLENGE_TTL_SECONDS")

    # Reporting windows and limits
    recent_exits_limit: int = Field(default=10, alias="RECENT_EXITS_LIMIT")
    history_default_days: int = Field(default=30, alias="HISTORY_DEFAULT_DAYS")
    productivity_default_days: int = Field(default=7, alias="PRODUCTIVITY_DEFAULT_DAYS")
    zones: list[str] = Field(
        default=["NORTE", "OESTE", "CENTRO OESTE", "CENTRO SUL", "SUL", "LESTE"],
        alias="ZONES",
    )
    frequency_companies: list[str] = Field(
        default=["INNOVATIVE", "NAVEGAM"],
        alias="FREQUENCY_COMPANIES",
    )

    # Realtime change feed
    realtime_buffer_size: int = Field(default=100, alias="REALTIME_BUFFER_SIZE")

    # CORS configuration for the browser terminal
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def admin_login_enabled(self) -> bool:
        """Return True when an admin access key has been configured."""
        return bool(self.admin_access_key)


settings = Settings()  # type: ignore[call-arg]
