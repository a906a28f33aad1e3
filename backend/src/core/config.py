"""Application configuration using pydantic-settings."""
from functools import lru_cache
from urllib.parse import urlparse
from uuid import UUID

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # Development mode - requests without an X-User-Id header act as dev_user_id
    dev_mode: bool = Field(default=False, validation_alias="DEV_MODE")
    dev_user_id: UUID = Field(
        default=UUID("00000000-0000-7000-8000-000000000001"),
        validation_alias="DEV_USER_ID",
    )

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    # Field length limits
    max_title_length: int = Field(default=200, validation_alias="MAX_TITLE_LENGTH")
    max_annotations_length: int = Field(
        default=2000, validation_alias="MAX_ANNOTATIONS_LENGTH",
    )
    max_description_length: int = Field(
        default=500, validation_alias="MAX_DESCRIPTION_LENGTH",
    )
    max_content_length: int = Field(
        default=100_000, validation_alias="MAX_CONTENT_LENGTH",
    )
    max_folder_name_length: int = Field(
        default=100, validation_alias="MAX_FOLDER_NAME_LENGTH",
    )
    max_tag_length: int = Field(default=50, validation_alias="MAX_TAG_LENGTH")

    @model_validator(mode="after")
    def validate_dev_mode_security(self) -> "Settings":
        """
        Prevent DEV_MODE from being enabled with a production database.

        DEV_MODE lets unauthenticated requests act as the development user, so it
        must only be used with local databases.
        """
        if not self.dev_mode:
            return self

        if self.database_url.startswith("sqlite"):
            return self

        try:
            parsed = urlparse(self.database_url)
            hostname = parsed.hostname or ""
        except ValueError:
            hostname = ""

        local_hosts = {"localhost", "127.0.0.1", "0.0.0.0", "::1"}
        if hostname.lower() not in local_hosts:
            raise ValueError(
                f"DEV_MODE cannot be enabled with a non-local database. "
                f"Database host '{hostname}' appears to be a production database.",
            )

        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
