"""
Application configuration management.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Analyzer settings loaded from REMINTY_* environment variables."""

    # Logging
    log_level: str = "INFO"

    # Pattern detection
    min_confidence: float = Field(0.0, ge=0.0, le=1.0)
    snippet_max_length: int = Field(120, gt=0)
    enable_source_detection: bool = True
    enable_semantic_detection: bool = True

    class Config:
        env_prefix = "REMINTY_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
