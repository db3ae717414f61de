"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Remote banking service
    bank_api_base: str = "http://localhost:8080/api"

    # Service
    service_name: str = "transfer-desk"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Session lifetime
    inactivity_timeout_seconds: int = 300
    sync_interval_seconds: float = 10.0

    # Dashboard behaviour
    view_return_delay_seconds: float = 2.0
    message_ttl_seconds: float = 5.0


settings = Settings()
