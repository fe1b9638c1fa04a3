"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from ticket_relay.constants import (
    DEFAULT_DEQUEUE_MAX_ATTEMPTS,
    DEFAULT_DONE_TTL_SECONDS,
    DEFAULT_LEASE_TTL_SECONDS,
    DEFAULT_QUEUE_NAMESPACE,
    MAX_JOBS_PER_DRAIN,
    MIN_JOBS_PER_DRAIN,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Key-value store
    redis_url: str = "redis://localhost:6379/0"
    queue_namespace: str = DEFAULT_QUEUE_NAMESPACE

    # Shared secrets (required, startup fails without them)
    bridge_key: str
    worker_key: str

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    public_base_url: str | None = None
    kick_timeout_seconds: float = 5.0

    # Queue / lease / ledger
    lease_ttl_seconds: int = DEFAULT_LEASE_TTL_SECONDS
    done_ttl_seconds: int = DEFAULT_DONE_TTL_SECONDS
    dequeue_max_attempts: int = DEFAULT_DEQUEUE_MAX_ATTEMPTS

    # Worker Configuration
    worker_min_jobs: int = MIN_JOBS_PER_DRAIN
    worker_max_jobs: int = MAX_JOBS_PER_DRAIN
    worker_default_jobs: int = 1
    worker_poll_interval_seconds: float = 60.0

    # Processing
    default_processor: str = "log"
    processor_webhook_url: str | None = None
    processor_timeout_seconds: float = 30.0

    # Observability
    otel_exporter_otlp_endpoint: str = "http://localhost:4317"
    otel_enabled: bool = True
    otel_service_name: str = "ticket-relay"
    log_level: str = "INFO"
    log_format: str = "json"  # json or console


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
