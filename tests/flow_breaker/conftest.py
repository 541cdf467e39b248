from __future__ import annotations

import pytest

from flow_breaker.circuit_breaker import CircuitBreakerService, InMemoryBreakerStore
from tests.flow_breaker.support.fakes import FakeClock, FakeLogger


@pytest.fixture
def fake_logger() -> FakeLogger:
    """Provide a fresh structured logger test double per test."""
    return FakeLogger()


@pytest.fixture
def clock() -> FakeClock:
    """Provide a millisecond clock that only moves when advanced."""
    return FakeClock()


@pytest.fixture
def store() -> InMemoryBreakerStore:
    return InMemoryBreakerStore()


@pytest.fixture
def service(
    store: InMemoryBreakerStore, clock: FakeClock, fake_logger: FakeLogger
) -> CircuitBreakerService:
    """Provide a breaker service wired to the fake clock and logger."""
    return CircuitBreakerService(store=store, clock=clock, logger=fake_logger)
