"""State storage for circuit breakers.

Storage is intentionally decoupled from breaker logic: the service only
needs ``get`` and ``set``. Retention (time-to-live, size limits) belongs to
the backend; the service never deletes a breaker.

Backends are not expected to lock. Callers guarantee at most one in-flight
check or update per breaker identifier.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from cachetools import TTLCache

from flow_breaker.circuit_breaker.state import BreakerState

DEFAULT_TTL_SECONDS = 3600.0
DEFAULT_MAX_ENTRIES = 10_000


class AbstractBreakerStore(ABC):
    """Abstract breaker store interface."""

    @abstractmethod
    def get(self, breaker_id: str) -> BreakerState | None:
        """Return the stored state for ``breaker_id``, or ``None``."""

    @abstractmethod
    def set(self, breaker_id: str, state: BreakerState) -> None:
        """Store ``state`` under ``breaker_id``."""


class InMemoryBreakerStore(AbstractBreakerStore):
    """In-memory store whose entries expire ``ttl_seconds`` after their last write."""

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the backing TTL cache.

        Args:
            ttl_seconds: Lifetime of an entry after each ``set``.
            max_entries: Entries kept before least-recently-used eviction.
            timer: Monotonic clock in seconds used for expiry.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._states: TTLCache[str, BreakerState] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=timer
        )

    def get(self, breaker_id: str) -> BreakerState | None:
        """Return the live state for ``breaker_id``; expired entries read as absent."""
        return self._states.get(breaker_id)

    def set(self, breaker_id: str, state: BreakerState) -> None:
        """Store ``state`` and restart its time-to-live."""
        self._states[breaker_id] = state
