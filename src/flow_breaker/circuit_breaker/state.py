"""Circuit breaker state primitives."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from flow_breaker.circuit_breaker.params import ConfigParams


class CircuitStatus(StrEnum):
    """Circuit breaker status values."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "halfopen"


class Route(StrEnum):
    """Output a caller should follow after a breaker invocation."""

    NEXT = "next"
    OPEN = "open"
    ERROR = "error"


def _new_error_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ErrorEvent:
    """One recorded error.

    Attributes:
        timestamp: Epoch milliseconds when the error was recorded.
        cause: Human-readable cause, e.g. ``responseCode 500``.
        error_id: Random opaque identifier of this event.
    """

    timestamp: int
    cause: str
    error_id: str = field(default_factory=_new_error_id)


@dataclass(frozen=True)
class BreakerState:
    """Point-in-time breaker record as kept in the store.

    Instances are never mutated; transitions return updated copies.

    Attributes:
        id: Breaker identifier.
        status: Current breaker status.
        params: Parameters fixed when the breaker was created.
        errors: Recorded errors, oldest first.
        success_count: Successes counted since the last half-open entry.
        classification_cache: Response code to "is error" verdicts.
        opened_at: Epoch milliseconds of the last transition into ``OPEN``.
        last_route: Route computed by the most recent check.
    """

    id: str
    status: CircuitStatus = CircuitStatus.CLOSED
    params: ConfigParams = field(default_factory=ConfigParams)
    errors: tuple[ErrorEvent, ...] = ()
    success_count: int = 0
    classification_cache: Mapping[int, bool] = field(default_factory=dict)
    opened_at: int | None = None
    last_route: Route = Route.NEXT

    def __post_init__(self) -> None:
        """Freeze the classification cache to keep snapshots read-only."""
        frozen_cache = MappingProxyType(dict(self.classification_cache))
        object.__setattr__(self, "classification_cache", frozen_cache)
        object.__setattr__(self, "errors", tuple(self.errors))

    def to_flow_dict(self) -> dict[str, Any]:
        """Render the state with the field names flow definitions branch on."""
        params = self.params.to_flow_dict()
        params["circuitBreakerId"] = self.id
        value: dict[str, Any] = {
            "status": str(self.status),
            "output": str(self.last_route),
            "errors": [
                {
                    "error": event.error_id,
                    "timestamp": event.timestamp,
                    "cause": event.cause,
                }
                for event in self.errors
            ],
            "successCount": self.success_count,
            "errorCodeMap": dict(self.classification_cache),
            "params": params,
        }
        if self.opened_at is not None:
            value["openedTimestamp"] = self.opened_at
        return value
