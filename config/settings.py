"""
ONIX Books Sync - Configuration Settings
Pydantic Settings for type-safe configuration from .env
"""

from pathlib import Path
from typing import Literal, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    input_dir: Path = Field(default=Path("./data/onix"))

    # Database
    db_backend: Literal["sqlite", "postgresql"] = Field(default="sqlite")
    db_path: Path = Field(default=Path("./books.db"))
    db_host: str = Field(default="127.0.0.1")
    db_name: str = Field(default="KATALOG")
    db_user: str = Field(default="root")
    db_password: str = Field(default="")
    db_port: int = Field(default=5432)
    create_schema: bool = Field(default=True)

    # Processing
    fail_fast: bool = Field(default=False)  # Abort the run on the first bad file or failed record
    fix_text_encoding: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    log_json_format: bool = Field(default=False)  # Enable JSON logs for production
    log_file: Optional[Path] = Field(default=None)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def postgres_configured(self) -> bool:
        """Check if PostgreSQL connection parameters are complete."""
        return bool(self.db_host and self.db_name and self.db_user)


# Singleton instance
settings = Settings()
