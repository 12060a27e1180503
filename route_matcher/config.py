"""
Configuration settings for the Route Matcher service.

This module defines all configuration parameters using Pydantic Settings,
enabling environment variable overrides for production deployment.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Attributes:
        APP_NAME: Application identifier
        APP_VERSION: Semantic version
        DEBUG: Enable debug mode

        # Storage
        USE_MONGO: Read users and swipes from MongoDB instead of JSON
        MONGODB_URI: MongoDB connection string
        MONGODB_DB_NAME: Database name
        USERS_DATA_PATH: JSON file used by the development repository

        # Matching
        DISTANCE_THRESHOLD_KM: Maximum stop-to-stop distance for an overlap
        MAX_RESULTS: Number of ranked candidates returned
        DEPARTED_WINDOW_DAYS: How long a departed route still shows as sync

        # API Configuration
        API_V1_PREFIX: API version prefix
        HOST: Server host
        PORT: Server port
    """

    # Application
    APP_NAME: str = "Route Matcher"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"

    # Storage
    USE_MONGO: bool = False
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "route_matcher"
    USERS_DATA_PATH: str = "./data/users.json"

    # Matching
    DISTANCE_THRESHOLD_KM: float = 150.0
    MAX_RESULTS: int = 20
    DEPARTED_WINDOW_DAYS: int = 14

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8002

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Allow extra fields in .env


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings factory.

    Returns:
        Settings: Application configuration singleton
    """
    return Settings()


# Global settings instance
settings = get_settings()
