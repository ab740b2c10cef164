"""
Configuration settings for the Ride Booking application.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, Field
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    """Application settings loaded from the environment and .env."""

    # Environment
    ENVIRONMENT: str = Field(default="development", description="Application environment")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Ride Booking"

    # Snapshot storage
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./ride_booking.db",
        description="Database holding the system snapshot"
    )

    # Fare Policy (per km, by vehicle kind)
    CAR_RATE_PER_KM: float = Field(default=12.0, gt=0.0)
    CNG_RATE_PER_KM: float = Field(default=9.0, gt=0.0)
    BIKE_RATE_PER_KM: float = Field(default=7.0, gt=0.0)

    # Earnings
    PLATFORM_COMMISSION_RATE: float = Field(default=0.20, ge=0.0, le=1.0)

    # Surge is configuration only; fares charged at ride end never apply it
    SURGE_MULTIPLIER: float = Field(default=1.0, ge=1.0)
    SURGE_MULTIPLIER_MAX: float = Field(default=3.0, ge=1.0, le=10.0)

    # Identifier formats
    RIDE_ID_PREFIX: str = Field(default="RIDE-", min_length=1, pattern=r"^\D*$")
    COMPLAINT_ID_PREFIX: str = Field(default="CMP-", min_length=1, pattern=r"^\D*$")

    # The single admin account
    ADMIN_ID: str = "A100"
    ADMIN_NAME: str = "System Admin"
    ADMIN_PHONE: str = "01831650978"
    ADMIN_EMAIL: str = "admin@ridebooking.local"

    # Seed demo drivers and passengers into a fresh system
    SEED_DEMO_DATA: bool = False

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_FILE: Optional[str] = None

    # Security Headers
    CORS_ORIGINS: list = Field(default=["http://localhost:3000"], description="Allowed CORS origins")

    @field_validator('DATABASE_URL')
    @classmethod
    def validate_database_url(cls, v):
        if not v.startswith(('sqlite+aiosqlite://', 'postgresql+asyncpg://', 'postgresql://')):
            raise ValueError("DATABASE_URL must be an aiosqlite or asyncpg URL")
        if v.startswith('postgresql://'):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        allowed_envs = ['development', 'testing', 'staging', 'production']
        if v not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed_envs}")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        validate_assignment=True,
        extra="forbid",
    )

# Global settings instance with error handling
try:
    settings = Settings()
    if settings.is_production() and settings.DEBUG:
        logger.warning("DEBUG mode is enabled in production environment")
    if settings.SURGE_MULTIPLIER > settings.SURGE_MULTIPLIER_MAX:
        logger.warning("SURGE_MULTIPLIER exceeds SURGE_MULTIPLIER_MAX")
except Exception as e:
    logger.error(f"Failed to load settings: {e}")
    raise
