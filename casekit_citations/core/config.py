"""Configuration management for the CaseKit citation engine."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Case storage
    CASEKIT_BASE_DIR: Path = Field(
        default_factory=lambda: Path.home() / "Documents" / "CaseKit",
        description="Root directory holding one folder per case",
    )

    # Outbound HTTP
    HTTP_USER_AGENT: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent sent to legal publishers"
    )
    HTTP_TIMEOUT_SECONDS: float = Field(
        default=15.0, ge=1.0, le=120.0, description="Per-request timeout (seconds)"
    )
    HTTP_MAX_REDIRECTS: int = Field(
        default=5, ge=0, le=20, description="Redirect limit for the following client"
    )
    REQUEST_PACING_MS: int = Field(
        default=200,
        ge=0,
        le=10_000,
        description="Pause between two outbound requests (milliseconds)",
    )

    # API Configuration
    API_HOST: str = Field(default="127.0.0.1", description="API host")
    API_PORT: int = Field(default=8010, description="API port")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format (json/text)")

    # Development
    DEBUG: bool = Field(default=False, description="Debug mode")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @property
    def request_pacing_seconds(self) -> float:
        """Pacing interval converted to seconds for ``asyncio.sleep``."""
        return self.REQUEST_PACING_MS / 1000.0


# Global settings instance
settings = Settings()
