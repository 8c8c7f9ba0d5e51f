import logging
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Centralized configuration for the render service.

    Loaded once from the environment (and ``.env``) and frozen afterwards;
    request handlers only ever read it.
    """

    # Environment
    environment: str = "development"
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Access control
    auth_token: Optional[str] = None
    cors_origins: str = "*"

    # Browser identity
    browser_headless: bool = True
    browser_args: List[str] = ["--no-sandbox", "--disable-setuid-sandbox"]
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = "en-US"
    timezone_id: str = "America/Chicago"
    viewport_width: int = 1366
    viewport_height: int = 768

    # Retry policy
    retry_pause_ms: int = 600

    # Diagnostics
    page_console_logging: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["debug", "info", "warning", "error", "critical"]
        if v.lower() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.lower()

    @field_validator("auth_token")
    @classmethod
    def blank_token_disables_gate(cls, v):
        if v is None or not v.strip():
            return None
        return v

    @field_validator("retry_pause_ms", "viewport_width", "viewport_height")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Value must not be negative")
        return v

    @property
    def auth_enabled(self) -> bool:
        return self.auth_token is not None

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def viewport(self) -> dict:
        return {"width": self.viewport_width, "height": self.viewport_height}


# Global settings instance
_settings = None


def get_settings() -> Settings:
    """Get global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.info(f"Configuration loaded for environment: {_settings.environment}")
    return _settings
