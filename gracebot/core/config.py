"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 3978

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Word resources
    bad_words_path: str = str(DATA_DIR / "bad_words_en.txt")
    definitions_path: str = str(DATA_DIR / "dictionary.json")

    # Storage
    storage_backend: Literal["memory", "sql", "firestore"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./gracebot.db"
    database_echo: bool = False
    gcp_project_id: str = ""
    firestore_collection: str = "activities"

    # Bot Framework connector
    microsoft_app_id: str = ""
    microsoft_app_password: str = ""
    botframework_token_url: str = (
        "https://login.microsoftonline.com/botframework.com/oauth2/v2.0/token"
    )
    botframework_scope: str = "https://api.botframework.com/.default"
    channel_timeout_seconds: float = 10.0

    # LUIS
    luis_endpoint: str = ""
    luis_app_id: str = ""
    luis_api_key: str = ""
    luis_slot: str = "production"
    intent_confidence_threshold: float = 0.5

    # Canned replies
    profanity_reply: str = "Please mind your language. Let's keep this conversation friendly."
    fallback_reply: str = (
        "Sorry, I don't know the answer to that yet. Try asking me to define a term."
    )
    intent_replies: dict[str, str] = Field(
        default_factory=lambda: {
            "Greeting": "Hi there! Ask me what a term means and I'll do my best.",
            "Thanks": "You're welcome!",
        }
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def luis_configured(self) -> bool:
        return bool(self.luis_endpoint and self.luis_app_id and self.luis_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
