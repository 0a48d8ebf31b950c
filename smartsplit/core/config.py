"""
Configuration management for SmartSplit.
Loads environment variables and provides centralized config access.
"""

from typing import Dict, Any

from pydantic_settings import BaseSettings
from pydantic import field_validator, Field

from .constants import SETTLEMENT_TOLERANCE, CONSERVATION_TOLERANCE


VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # =============================================================================
    # APPLICATION SETTINGS
    # =============================================================================
    app_name: str = "SmartSplit"
    version: str = "1.0.0"
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    # =============================================================================
    # SETTLEMENT ENGINE
    # =============================================================================
    settlement_tolerance: float = Field(default=SETTLEMENT_TOLERANCE)
    conservation_tolerance: float = Field(default=CONSERVATION_TOLERANCE)

    @field_validator("settlement_tolerance", "conservation_tolerance")
    @classmethod
    def validate_tolerance(cls, v):
        if not v > 0:
            raise ValueError("tolerances must be positive")
        return v

    # =============================================================================
    # DISPLAY
    # =============================================================================
    currency_symbol: str = Field(default="$")
    display_precision: int = Field(default=2)

    @field_validator("display_precision")
    @classmethod
    def validate_precision(cls, v):
        if v < 0 or v > 6:
            raise ValueError("DISPLAY_PRECISION must be between 0 and 6")
        return v

    # =============================================================================
    # COMPUTED PROPERTIES
    # =============================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    # =============================================================================
    # PYDANTIC SETTINGS CONFIG
    # =============================================================================
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        validate_assignment = True
        extra = "ignore"


# =============================================================================
# GLOBAL SETTINGS INSTANCE
# =============================================================================
def get_settings() -> Settings:
    """Get a freshly loaded settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# =============================================================================
# CONFIGURATION UTILITIES
# =============================================================================
def validate_configuration() -> Dict[str, Any]:
    """
    Validate all configuration settings and return status report.

    Returns:
        dict: Configuration validation report
    """
    try:
        config = get_settings()
    except ValueError as e:
        # pydantic's ValidationError derives from ValueError
        return {
            "valid": False,
            "errors": [str(e)],
            "warnings": [],
        }

    status = {
        "valid": True,
        "errors": [],
        "warnings": [],
    }

    if config.is_production and config.debug:
        status["warnings"].append("DEBUG mode enabled in production")

    if config.settlement_tolerance >= 1:
        status["warnings"].append(
            f"Settlement tolerance {config.settlement_tolerance} hides balances of a whole currency unit"
        )

    if config.conservation_tolerance >= config.settlement_tolerance:
        status["warnings"].append("Conservation tolerance is not tighter than settlement tolerance")

    return status
