"""Configuration management for the Payment Gateway service."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BankSettings(BaseSettings):
    """Acquiring bank client settings."""

    client: Literal["http", "simulator"] = Field(
        default="http",
        description="Bank client implementation to use",
    )
    base_url: str = Field(
        default="http://localhost:8080",
        description="Acquiring bank base URL",
    )
    timeout_seconds: float = Field(default=10.0, description="Request timeout")
    simulator_latency_ms: int = Field(
        default=0,
        description="Simulated bank latency (simulator client only)",
    )


class ApiSettings(BaseSettings):
    """HTTP server settings."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, description="Bind port")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service Configuration
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(default="development", description="Environment name")
    service_name: str = Field(default="payment-gateway", description="Service name")

    # Processing
    lock_wait_timeout_seconds: float | None = Field(
        default=30.0,
        description="Max time to wait for an in-flight payment with the same identifier",
    )

    # Acquiring bank
    bank: BankSettings = Field(default_factory=BankSettings)

    # HTTP server
    api: ApiSettings = Field(default_factory=ApiSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


# Global settings instance
settings = Settings()
