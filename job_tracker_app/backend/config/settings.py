"""
Centralized configuration management for the Job Application Tracker.
All environment variables, API keys, and configuration settings are managed here.
"""
import secrets
from typing import Optional, List
from pydantic import validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with validation and type hints."""

    # =============================================================================
    # APPLICATION SETTINGS
    # =============================================================================
    app_name: str = "Job Application Tracker"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False

    # =============================================================================
    # SECURITY SETTINGS
    # =============================================================================
    secret_key: str = secrets.token_urlsafe(32)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 7 * 24 * 60  # 7 days
    password_reset_expire_minutes: int = 60

    # Resume encryption key (must be 64 hex characters for AES-256)
    encryption_key: str = secrets.token_hex(32)

    @validator('encryption_key')
    def validate_encryption_key(cls, v):
        if len(v) != 64:
            raise ValueError('Encryption key must be 64 hex characters (32 bytes)')
        try:
            int(v, 16)
        except ValueError:
            raise ValueError('Encryption key must be valid hexadecimal')
        return v

    # =============================================================================
    # DATABASE SETTINGS
    # =============================================================================
    database_url: str = "sqlite:///./job_tracker.db"
    database_echo: bool = False

    # =============================================================================
    # LOGGING SETTINGS
    # =============================================================================
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # =============================================================================
    # GEMINI SETTINGS
    # =============================================================================
    gemini_api_key: Optional[str] = None
    documents_model: str = "gemini-2.5-flash"
    job_parser_model: str = "gemini-2.0-flash"
    chat_model: str = "gemini-2.5-flash"

    # Job posting parser limits
    min_job_text_chars: int = 50
    max_job_text_chars: int = 20000

    # Chat assistant
    chat_upcoming_limit: int = 5

    # =============================================================================
    # INTERVIEW REMINDERS
    # =============================================================================
    reminders_enabled: bool = True
    reminder_day_before_hours: int = 24
    reminder_hour_before_minutes: int = 60

    # =============================================================================
    # NOTIFICATION SETTINGS
    # =============================================================================
    smtp_server: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    password_reset_url: str = "http://localhost:3000/update-password"

    # =============================================================================
    # DEVELOPMENT SETTINGS
    # =============================================================================
    api_docs_enabled: bool = True
    cors_enabled: bool = True
    cors_origins: List[str] = ["http://localhost:3000"]

    # =============================================================================
    # CONFIGURATION LOADING
    # =============================================================================
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.testing or self.environment.lower() == "testing"

    def get_database_url(self) -> str:
        """Get database URL with appropriate settings for environment."""
        if self.is_testing():
            return "sqlite:///:memory:"
        return self.database_url

    def validate_required_settings(self) -> List[str]:
        """Validate that all required settings are properly configured."""
        missing = []

        if self.is_production():
            if not self.secret_key or len(self.secret_key) < 32:
                missing.append("SECRET_KEY must be at least 32 characters in production")

            if not self.gemini_api_key:
                missing.append("GEMINI_API_KEY is required in production")

            if self.debug:
                missing.append("DEBUG must be False in production")

        if self.log_level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            missing.append(f"Invalid LOG_LEVEL: {self.log_level}")

        if self.min_job_text_chars >= self.max_job_text_chars:
            missing.append("MIN_JOB_TEXT_CHARS must be lower than MAX_JOB_TEXT_CHARS")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    This function is cached to avoid recreating the settings object multiple times.
    """
    return Settings()
