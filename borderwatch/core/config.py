"""
Configuration settings for BorderWatch.

This module provides configuration settings loaded from environment variables.
"""

import os
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    # Project info
    PROJECT_NAME: str = "BorderWatch"
    VERSION: str = "0.1.0"
    DESCRIPTION: str = "Civilian border security dashboard: threat reports, live alerts and safety guidance"

    # Database
    DATABASE_URL: str = "sqlite:///./data/borderwatch.db"

    # API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "data/logs"

    # Admin endpoints require this key in X-API-Key when set
    ADMIN_API_KEY: Optional[str] = None

    # Ollama AI
    AI_ENABLED: bool = True
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    AI_MODEL: str = "llama3.2:3b"
    AI_VISION_MODEL: str = "llava:7b"
    AI_TIMEOUT: int = 20  # seconds

    # External alert feed
    EXTERNAL_FEED_ENABLED: bool = True
    ALERT_FEED_URLS: List[str] = [
        "https://feeds.bbci.co.uk/news/world/asia/india/rss.xml",
        "http://feeds.bbci.co.uk/news/world/rss.xml",
    ]
    FEED_TIMEOUT: int = 8  # seconds for the whole fetch
    FEED_CACHE_TTL: int = 300  # seconds
    MAX_FEED_ITEMS: int = 20

    # Report media uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024
    MAX_UPLOAD_FILES: int = 5

    # Safe zone search radius when none is given
    DEFAULT_SAFE_ZONE_RADIUS_KM: float = 50.0

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Ensure database directory exists"""
        if v.startswith("sqlite:///") and ":memory:" not in v:
            db_dir = os.path.dirname(v.replace("sqlite:///", ""))
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)
        return v

    @field_validator("UPLOAD_DIR")
    @classmethod
    def validate_upload_dir(cls, v: str) -> str:
        """Ensure upload directory exists"""
        os.makedirs(v, exist_ok=True)
        return v


# Create global settings instance
settings = Settings()
