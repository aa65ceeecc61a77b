"""Application settings using Pydantic BaseSettings for environment variable management."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Attributes:
        gemini_api_key: Google Gemini API key (optional, only needed by the oracle)
        gemini_model: Default Gemini model to use
        oracle_enabled: Route expert/consensus rounds through the Gemini oracle
        oracle_temperature: Sampling temperature for oracle prompts
        oracle_max_retries: Attempts the Gemini client makes before giving up
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
    """

    gemini_api_key: str | None = Field(
        default=None,
        description="Google Gemini API key"
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash",
        description="Default Gemini model identifier"
    )
    oracle_enabled: bool = Field(
        default=False,
        description="Use the Gemini claim-assessment oracle for rounds 9 and 10"
    )
    oracle_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for oracle requests"
    )
    oracle_max_retries: int = Field(
        default=5,
        ge=1,
        description="Maximum attempts per oracle request (client-side backoff)"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance - import this throughout the application
settings = Settings()
