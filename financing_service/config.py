"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from financing_service.domain.models import RateConvention


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "financing-service"
    log_level: str = "INFO"
    api_prefix: str = "/v1"

    # Amortization engine
    # Stored rates are monthly decimal fractions (0.01 == 1%/month) unless overridden
    rate_convention: RateConvention = RateConvention.MONTHLY_DECIMAL


settings = Settings()
