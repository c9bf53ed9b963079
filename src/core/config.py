"""
Core configuration for the Drug Inventory API.
Manages environment variables and AWS service settings.
"""
import os
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # AWS Configuration
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    drugs_table_name: str = os.getenv("DRUGS_TABLE_NAME", "Drugs")
    dynamodb_endpoint_url: Optional[str] = os.getenv("DYNAMODB_ENDPOINT_URL") or None

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "Drug Inventory API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
