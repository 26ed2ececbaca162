import logging
from pydantic_settings import BaseSettings
from typing import Literal, Optional

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Google Cloud Configuration
    GOOGLE_CLOUD_PROJECT: str = "your-project-id"
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Trip storage
    STORAGE_BACKEND: Literal["file", "firestore"] = "file"
    DATA_DIR: str = ".wanderlust"
    TRIPS_STORAGE_KEY: str = "wanderlust_trips"
    FIRESTORE_PROJECT_ID: Optional[str] = None
    FIRESTORE_CREDENTIALS: Optional[str] = None  # path to Firestore service account json
    FIRESTORE_DATABASE_ID: Optional[str] = None  # defaults to '(default)'
    FIRESTORE_COLLECTION: str = "wanderlust"

    # API Configuration
    API_VERSION: str = "1.0.0"
    DEBUG_MODE: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Destination lookups
    LOOKUP_TEMPERATURE: float = 0.4
    LOOKUP_MAX_ATTEMPTS: int = 3
    CACHE_TTL_SECONDS: int = 3600

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = {"env_file": ".env", "case_sensitive": True}

# Global settings instance
settings = Settings()

def get_settings() -> Settings:
    """Get the global settings instance"""
    return settings

def validate_settings() -> bool:
    """Validate that all required settings are configured"""
    missing_settings = []
    if not settings.GOOGLE_CLOUD_PROJECT or settings.GOOGLE_CLOUD_PROJECT == "your-project-id":
        missing_settings.append("GOOGLE_CLOUD_PROJECT")
    if not settings.TRIPS_STORAGE_KEY:
        missing_settings.append("TRIPS_STORAGE_KEY")

    if missing_settings:
        logger.error(f"Missing or invalid settings: {', '.join(missing_settings)}")
        logger.error("Please configure these settings in your .env file or environment variables")
        return False

    # Firestore falls back to the Vertex AI project unless told otherwise
    if settings.STORAGE_BACKEND == "firestore" and not settings.FIRESTORE_PROJECT_ID:
        settings.FIRESTORE_PROJECT_ID = settings.GOOGLE_CLOUD_PROJECT

    return True
