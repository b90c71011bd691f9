"""
Application settings loaded from the environment and an optional .env file.
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio import __version__


class Settings(BaseSettings):
    """Runtime configuration for the API, CLI and services."""

    app_name: str = "Portfolio Admin"
    app_version: str = __version__
    environment: str = Field(default="development", description="Execution environment")
    debug: bool = False
    api_v1_prefix: str = "/api/v1"

    # Database
    database_url: str = Field(
        default="sqlite:///./portfolio.db",
        description="SQLAlchemy connection string",
    )
    db_echo: bool = False

    # Logging
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    log_dir: Optional[str] = Field(default=None, description="Directory for rotating log files")

    # Payload storage
    media_root: str = "./media"
    max_upload_size_mb: int = 20
    image_max_width: int = 1080
    image_max_height: int = 1440
    image_quality: int = Field(default=85, ge=1, le=100)

    # Admin auth: bcrypt hash of the client-side SHA-256 password proof
    admin_password_hash: Optional[str] = None

    reorder_retry_attempts: int = Field(default=3, ge=1)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


settings = Settings()
