"""
Configuration settings for Task API.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings"""

    # Service information
    service_name: str = os.getenv("SERVICE_NAME", "task_api")
    service_version: str = os.getenv("SERVICE_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database configuration
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./task_api.db")
    db_connect_retries: int = int(os.getenv("DB_CONNECT_RETRIES", "5"))
    db_connect_delay: int = int(os.getenv("DB_CONNECT_DELAY", "2"))

    # Security
    secret_key: str = os.getenv(
        "SECRET_KEY",
        "task-api-secret-key-change-in-production"
    )
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_days: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))

    # API configuration
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

    # CORS / compression
    allowed_origins: List[str] = os.getenv("ALLOWED_ORIGINS", "*").split(",")
    allowed_methods: List[str] = os.getenv("ALLOWED_METHODS", "*").split(",")
    allowed_headers: List[str] = os.getenv("ALLOWED_HEADERS", "*").split(",")
    gzip_minimum_size: int = int(os.getenv("GZIP_MINIMUM_SIZE", "1000"))


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance."""
    return settings
