# application settings loaded once from the environment and .env
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration, immutable after process start"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    APP_NAME: str = "Curriculum Builder API"
    LOG_LEVEL: str = "INFO"

    # generation provider
    AI_PROVIDER: str = "mock"
    MOCK_DELAY_SECONDS: float = 0.0
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama3"
    OLLAMA_TEMPERATURE: float = 0.7
    OLLAMA_TIMEOUT_SECONDS: Optional[float] = 120.0

    # uploads
    MAX_FILE_SIZE: int = 10 * 1024 * 1024

    # http server
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    HOST: str = "0.0.0.0"
    PORT: int = 8000


@lru_cache
def get_settings() -> Settings:
    return Settings()
