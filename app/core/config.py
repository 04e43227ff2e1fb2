# File: app/core/config.py
"""
Configuration settings for the tourism guide content platform.

This module defines application settings using Pydantic's BaseSettings,
which supports environment variable loading and validation.
"""

import json
from typing import Any, Dict, List, Optional, Union

from pydantic import validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    This class uses Pydantic's BaseSettings to load configuration from
    environment variables, with validation and type conversion.
    """

    PROJECT_NAME: str = "Tourism Guide Content"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Database
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: Optional[str] = None
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None
    DATABASE_PATH: str = "tourism_guide.db"
    DATABASE_URL: Optional[str] = None
    DB_ECHO: bool = False

    @validator("DATABASE_URL", pre=True, always=True)
    def assemble_db_connection(cls, v: Optional[str], values: Dict[str, Any]) -> Any:
        """Assemble database connection string."""
        if isinstance(v, str) and v:
            return v
        if (
                values.get("DATABASE_HOST")
                and values.get("DATABASE_PORT")
                and values.get("DATABASE_USER")
                and values.get("DATABASE_NAME")
        ):
            password = values.get("DATABASE_PASSWORD") or ""
            return f"postgresql://{values['DATABASE_USER']}:{password}@{values['DATABASE_HOST']}:{values['DATABASE_PORT']}/{values['DATABASE_NAME']}"
        return f"sqlite:///{values.get('DATABASE_PATH', 'tourism_guide.db')}"

    # ================================
    # Localization Configuration
    # ================================

    # Languages accepted by the translation store (two-letter codes)
    SUPPORTED_LANGUAGES: List[str] = [
        "pt",  # Portuguese
        "en",  # English
        "es",  # Spanish
    ]

    # Language used for writes without an explicit language and for fallback
    DEFAULT_LANGUAGE: str = "pt"

    # Upper bound for allocated reference IDs (fits a signed 32-bit column)
    REFERENCE_ID_MAX: int = 2_147_483_647
    REFERENCE_ID_MAX_ATTEMPTS: int = 10

    # Remove translation rows when an entity is hard deleted
    AUTO_CLEANUP_ORPHANED_TRANSLATIONS: bool = False

    @validator("SUPPORTED_LANGUAGES", pre=True)
    def validate_supported_languages(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse and validate supported languages from environment variables."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(code).strip().lower() for code in parsed if str(code).strip()]
            except json.JSONDecodeError:
                # Fallback to comma-separated format
                return [i.strip().lower() for i in v.split(",") if i.strip()]
        return [code.strip().lower() for code in (v or [])] or ["pt"]

    @validator("DEFAULT_LANGUAGE")
    def validate_default_language(cls, v: str, values: Dict[str, Any]) -> str:
        """Ensure default language is in supported languages."""
        v = v.strip().lower()
        supported_languages = values.get("SUPPORTED_LANGUAGES", ["pt"])
        if v not in supported_languages:
            return supported_languages[0] if supported_languages else "pt"
        return v

    @validator("REFERENCE_ID_MAX")
    def validate_reference_id_max(cls, v: int) -> int:
        """Keep reference IDs positive and within a signed 32-bit column."""
        return max(1000, min(v, 2 ** 31 - 1))

    @validator("REFERENCE_ID_MAX_ATTEMPTS")
    def validate_reference_id_attempts(cls, v: int) -> int:
        return max(1, v)

    # ================================
    # Pagination
    # ================================

    DEFAULT_PAGE: int = 1
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 500

    @validator("DEFAULT_PAGE_SIZE")
    def validate_default_page_size(cls, v: int) -> int:
        return max(1, v)

    # ================================
    # Logging
    # ================================

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        return v.upper() if v.upper() in valid_levels else "INFO"

    class Config:
        """Pydantic settings configuration."""

        case_sensitive = True
        env_file = ".env"
        extra = "ignore"


# Create settings instance
settings = Settings()
