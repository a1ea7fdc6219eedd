"""
Analytics engine configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Self


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Tutor Analytics"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Mistake clustering
    # Number of most frequent wrong values kept per question
    MISTAKE_TOP_N: int = Field(
        default=5,
        ge=1,
        description="Number of most frequent wrong answers reported per question",
    )

    # Decimal places for success rates and mistake percentages
    RATE_PRECISION: int = Field(default=1, ge=0, le=6)

    # Upper bound on collaborator lookups in flight during one report build
    MAX_CONCURRENT_LOOKUPS: int = Field(
        default=10,
        description="Maximum concurrent repository lookups per report fan-out",
    )

    # Display fallbacks
    UNKNOWN_STUDENT_NAME: str = "Unknown student"
    UNKNOWN_SUBJECT_NAME: str = "Not specified"
    UNKNOWN_ASSIGNMENT_TITLE: str = "Unknown assignment"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_concurrency(self) -> Self:
        """Reject a lookup limit that would deadlock the fan-out."""
        if self.MAX_CONCURRENT_LOOKUPS < 1:
            raise ValueError(
                f"MAX_CONCURRENT_LOOKUPS must be at least 1, "
                f"got {self.MAX_CONCURRENT_LOOKUPS}"
            )
        return self


settings = Settings()
