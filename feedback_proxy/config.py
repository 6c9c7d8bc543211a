"""
Configuration settings for the Feedback Proxy Service.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "Feedback Proxy"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # Remote feedback service
    feedback_api_base_url: str = "https://api.productboard.com"
    feedback_api_token: str = ""
    feedback_api_version: str = "1"          # Sent as the X-Version header
    request_timeout_seconds: float = 30.0    # Applied to every remote call

    # Change ledger
    changes_file: str = "./local_changes.json"

    # Company enrichment on note listing
    enrichment_max_workers: int = 8

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "FP_"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
