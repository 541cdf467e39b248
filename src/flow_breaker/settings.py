from __future__ import annotations

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flow_breaker.circuit_breaker.breaker import CircuitBreakerService
from flow_breaker.circuit_breaker.storage import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
    InMemoryBreakerStore,
)
from flow_breaker.logging import configure_structlog, get_log_level_value

ENV_PREFIX = "FLOW_BREAKER_"


def prefixed_settings_config(prefix: str) -> SettingsConfigDict:
    """Build standard Pydantic settings config for prefixed environments."""
    return SettingsConfigDict(env_prefix=prefix, case_sensitive=False)


class BreakerSettings(BaseSettings):
    """Runtime settings for hosting circuit breakers in one process."""

    model_config = prefixed_settings_config(ENV_PREFIX)

    store_ttl_seconds: float = DEFAULT_TTL_SECONDS
    store_max_entries: int = DEFAULT_MAX_ENTRIES
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            get_log_level_value(value)
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def _validate_store_limits(self) -> BreakerSettings:
        if self.store_ttl_seconds <= 0:
            raise ValueError("store_ttl_seconds must be > 0")
        if self.store_max_entries < 1:
            raise ValueError("store_max_entries must be >= 1")
        return self


def build_service(settings: BreakerSettings | None = None) -> CircuitBreakerService:
    """Configure logging and wire an in-memory breaker service from settings."""
    resolved = BreakerSettings() if settings is None else settings
    logger = configure_structlog(log_level=resolved.log_level)
    store = InMemoryBreakerStore(
        ttl_seconds=resolved.store_ttl_seconds,
        max_entries=resolved.store_max_entries,
    )
    return CircuitBreakerService(store=store, logger=logger)
