"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


class IngestionConfig(BaseSettings):
    """Ingestion pipeline configuration."""

    backend: str = "simulated"  # 'simulated' or 'http'
    simulated_delay: float = 1.5
    tick_interval: float = 0.2
    tick_step: int = 10
    progress_cap: int = 90
    completion_hold: float = 1.0
    concurrency_policy: str = "serialize"  # 'serialize' or 'reject'
    timeout_seconds: float | None = None
    max_file_size_bytes: int = 25 * 1024 * 1024
    http_timeout: float = 10.0

    model_config = SettingsConfigDict(env_prefix="INGESTION_")


class ConversationConfig(BaseSettings):
    """Question answering configuration."""

    answerer: str = "simulated"
    response_delay: float = 1.5
    timeout_seconds: float | None = None

    model_config = SettingsConfigDict(env_prefix="CONVERSATION_")


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    app_name: str = "DeepNotes Workspace"
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list = Field(default_factory=lambda: ["*"])
    auto_select_uploads: bool = False

    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    conversation: ConversationConfig = Field(default_factory=ConversationConfig)

    model_config = SettingsConfigDict(env_file=str(_env_file), env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()
