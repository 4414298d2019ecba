"""Configuration models for the favorites sync client."""

from pydantic import BaseModel, Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordStoreConfig(BaseModel):
    """Configuration for the remote record store."""

    base_url: HttpUrl = Field(
        default="https://jsonplaceholder.typicode.com",
        validate_default=True,
        description="Base URL of the record store API",
    )
    resource: str = Field(
        default="users", min_length=1, description="Collection path for list and create"
    )
    timeout_seconds: float = Field(
        default=10.0, gt=0, le=300, description="Per-request timeout in seconds"
    )


class StorageConfig(BaseModel):
    """Configuration for local persistence."""

    path: str = Field(default="./favorites.db", description="SQLite file for the key-value store")
    favorites_key: str = Field(
        default="@my_favorites_ids", min_length=1, description="Key of the favorites blob"
    )
    records_key: str = Field(
        default="@my_users_data",
        min_length=1,
        description="Reserved key for locally cached records (currently unused)",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        description="If True, output JSON logs. If False, use console format.",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional path to log file. If None, logs only to stdout.",
    )


class AppConfig(BaseSettings):
    """Main application configuration.

    This class uses pydantic-settings to load configuration from environment
    variables with the APP_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    record_store: RecordStoreConfig = Field(default_factory=RecordStoreConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
