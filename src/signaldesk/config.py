"""Configuration management for Signal Desk."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SIGNALDESK_",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str = Field(alias="OPENAI_API_KEY")
    openai_model: str = "gpt-5-mini"
    request_timeout: float = 60.0

    # Storage
    data_root: Path = Field(default_factory=Path.cwd)
    storage_key: str = "crypto_intelligence_insights"

    # Generation
    max_retries: int = 5
    retry_base_delay: float = 1.0

    @property
    def data_path(self) -> Path:
        return self.data_root / ".signaldesk"

    @property
    def storage_path(self) -> Path:
        return self.data_path / f"{self.storage_key}.json"

    @property
    def exports_path(self) -> Path:
        return self.data_path / "exports"

    @property
    def log_path(self) -> Path:
        return self.data_path / "error.log"


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
