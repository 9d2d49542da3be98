"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Remote dashboard API
    api_base_url: str = "http://localhost:3001/api"
    api_token: Optional[str] = None
    api_timeout_seconds: float = 10.0

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Dashboard fetch sizes
    activity_limit: int = 5
    changelog_limit: int = 3

    # Invoice artifacts
    invoice_issuer_name: str = "PlanGuard Billing"
    invoice_default_format: str = "html"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
