"""
Application settings using Pydantic BaseSettings.

Settings are built once at startup and handed to the client explicitly.
Variable names match the ones Sonarr tooling conventionally uses
(SONARR_URL, SONARR_API_KEY), so no prefix is applied.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from ..core.models import Credentials
from ..utils.exceptions import ConfigurationError

DEVELOPMENT_ENV = "development"


class Settings(BaseSettings):
    """Application configuration settings."""

    # Sonarr configuration
    sonarr_url: str | None = Field(default=None, description="Sonarr base URL")
    sonarr_api_key: str | None = Field(default=None, description="Sonarr API key")

    # Runtime environment; "development" enables response tracing
    app_env: str = Field(default="production", description="Runtime environment")

    # Logging configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format: json or console")

    # HTTP client configuration
    http_timeout: float | None = Field(
        default=30.0, description="HTTP request timeout in seconds"
    )

    config_file: Path | None = Field(
        default=None, description="Path to configuration file"
    )

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def debug(self) -> bool:
        """Whether raw vendor responses should be traced."""
        return self.app_env.strip().lower() == DEVELOPMENT_ENV

    @property
    def is_configured(self) -> bool:
        return not self.missing_keys()

    def missing_keys(self) -> list[str]:
        """Names of the required environment variables that are unset or blank."""
        missing = []
        if not (self.sonarr_url or "").strip():
            missing.append("SONARR_URL")
        if not (self.sonarr_api_key or "").strip():
            missing.append("SONARR_API_KEY")
        return missing

    def credentials(self) -> Credentials:
        """
        Resolve the Sonarr credentials.

        Raises ConfigurationError when the base URL or API key is missing.
        """
        missing = self.missing_keys()
        if missing:
            raise ConfigurationError(
                f"Sonarr is not configured: missing {', '.join(missing)}",
                config_key=missing[0],
            )
        return Credentials(
            base_url=self.sonarr_url.strip(), api_key=self.sonarr_api_key.strip()
        )


def get_settings(env_file: Path | str | None = None) -> Settings:
    """Get application settings instance."""
    if env_file is not None:
        return Settings(_env_file=str(env_file), config_file=Path(env_file))
    return Settings()
