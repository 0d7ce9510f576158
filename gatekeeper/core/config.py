"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here — no scattered magic strings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        environment: Disclosure mode toggle. "production" hides error
            details from clients; anything else exposes stacks of
            programmer errors.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        host: Interface the server binds to.
        port: Port the server listens on.
        error_log_file: Optional path of a JSON-lines error log.
        trust_proxy: Key rate limits by the first X-Forwarded-For hop.
        rate_limit_storage_uri: limits storage URI shared between
            processes (e.g. redis://host:6379). None keeps counters
            in process memory, which is only correct for one process.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Gatekeeper"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 4000
    error_log_file: Optional[str] = None

    # Rate limiting
    trust_proxy: bool = True
    rate_limit_storage_uri: Optional[str] = None
    default_rate_limit_window_ms: int = 2 * 60 * 1000
    default_rate_limit_max: int = 100
    default_rate_limit_message: str = "Too many requests, please try again later."
    auth_rate_limit_window_ms: int = 15 * 60 * 1000
    auth_rate_limit_max: int = 30
    auth_rate_limit_message: str = (
        "Too many authentication requests, please try again later."
    )

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == PRODUCTION

    @property
    def debug(self) -> bool:
        return not self.is_production


settings = Settings()
