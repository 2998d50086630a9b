"""Application configuration using Pydantic Settings."""

import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from cache_ttl import THIRTY_DAYS_SECONDS
from lookup_cascade import GOOGLE_TRANSLATE_URL, JISHO_SEARCH_URL


class Settings(BaseSettings):
    """Application settings loaded from VOCAB_* environment variables."""

    # Application
    APP_NAME: str = "vocab-entry"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 52010

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost:51000",
        "http://localhost:5173",
    ]

    # Lookup cascade
    CACHE_TTL_SECONDS: float = THIRTY_DAYS_SECONDS
    LOOKUP_TIMEOUT_SECONDS: Optional[float] = 15.0
    MAX_MEANINGS: int = 8
    SOURCE_LANG: str = "en"
    TARGET_LANG: str = "ko"
    TRANSLATION_ENABLED: bool = True
    COALESCE_LOOKUPS: bool = True
    JISHO_SEARCH_URL: str = JISHO_SEARCH_URL
    TRANSLATE_URL: str = GOOGLE_TRANSLATE_URL
    AUTOFILL_DEBOUNCE_SECONDS: float = 0.4

    # Outbound HTTP
    HTTP_CONNECT_TIMEOUT: float = 5.0
    HTTP_READ_TIMEOUT: float = 10.0
    HTTP_WRITE_TIMEOUT: float = 10.0

    # Store
    REMOTE_DATABASE_URL: Optional[str] = None
    LOCAL_DATABASE_PATH: str = "vocab.sqlite3"
    STORE_IN_MEMORY: bool = False
    STORE_LOAD_TIMEOUT_SECONDS: float = 10.0

    # Sync
    REMOTE_IDENTITY: Optional[str] = None
    ACCOUNT_PROBE_URL: Optional[str] = None
    ACCOUNT_PROBE_TIMEOUT: float = 5.0
    SYNC_SETTLE_DELAY_SECONDS: float = 1.0

    class Config:
        env_prefix = "VOCAB_"
        case_sensitive = True
        env_file = None  # Use system env only


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
