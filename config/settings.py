"""
Configuration module for the Classroom Bot.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(Exception):
    """Raised when a required setting (credentials, connection string) is missing or invalid."""

    def __init__(self, message: str, setting: str = None):
        self.message = message
        self.setting = setting
        super().__init__(self.message)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: Optional[str] = None

    # Telegram
    telegram_bot_token: Optional[str] = None
    telegram_api_base: str = "https://api.telegram.org"
    telegram_webhook_secret: Optional[str] = None
    http_timeout: float = 10.0

    # LLM
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o"
    agent_max_steps: int = 5
    agent_history_limit: int = 10
    agent_memory_url: str = "sqlite:///agent_memory.sqlite"

    # Roster
    roster_path: Optional[str] = None

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def require(self, name: str) -> str:
        """Return a setting value, raising ConfigurationError if it is unset."""
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"{name.upper()} is not configured", setting=name)
        return value


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


settings = get_settings()
