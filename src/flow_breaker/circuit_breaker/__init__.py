"""Per-identifier circuit breaker for flow routing.

Each breaker identifier owns a ``BreakerState`` kept in a store. A *check*
decides which route a call should take and an *update* records the response
code the call produced.

Key behavior notes:
  - Errors are counted while ``CLOSED`` and the breaker opens once
    ``max_error_count`` errors are recorded. Errors are only pruned by the
    time window while evaluating ``OPEN``.
  - After ``recover_period_seconds`` an open breaker becomes ``HALF_OPEN``.
    Checks then alternate between ``next`` and ``open`` by the parity of the
    success count, and the breaker closes once ``half_open_successes``
    successes were recorded. Any error while half-open reopens it.
  - Response codes are judged against the breaker's return-code spec and the
    verdict is cached per breaker.
"""

from flow_breaker.circuit_breaker.breaker import BreakerResult, CircuitBreakerService
from flow_breaker.circuit_breaker.classifier import (
    CodeRange,
    ExactCode,
    classify,
    parse_return_codes,
)
from flow_breaker.circuit_breaker.exceptions import (
    CircuitBreakerError,
    InvalidParameterError,
    MalformedSpecError,
    MissingParameterError,
    UnknownBreakerError,
)
from flow_breaker.circuit_breaker.flow import (
    FlowOutput,
    check_circuit_breaker,
    update_circuit_breaker,
)
from flow_breaker.circuit_breaker.params import ConfigParams
from flow_breaker.circuit_breaker.state import (
    BreakerState,
    CircuitStatus,
    ErrorEvent,
    Route,
)
from flow_breaker.circuit_breaker.storage import (
    AbstractBreakerStore,
    InMemoryBreakerStore,
)
from flow_breaker.circuit_breaker.transitions import (
    create_state,
    evaluate,
    record_response,
)
from flow_breaker.circuit_breaker.window import prune_errors

__all__ = [
    "AbstractBreakerStore",
    "BreakerResult",
    "BreakerState",
    "CircuitBreakerError",
    "CircuitBreakerService",
    "CircuitStatus",
    "CodeRange",
    "ConfigParams",
    "ErrorEvent",
    "ExactCode",
    "FlowOutput",
    "InMemoryBreakerStore",
    "InvalidParameterError",
    "MalformedSpecError",
    "MissingParameterError",
    "Route",
    "UnknownBreakerError",
    "check_circuit_breaker",
    "classify",
    "create_state",
    "evaluate",
    "parse_return_codes",
    "prune_errors",
    "record_response",
    "update_circuit_breaker",
]
