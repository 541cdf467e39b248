"""Circuit breaker service: validation, store round-trips, and logging."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from flow_breaker.circuit_breaker.exceptions import (
    CircuitBreakerError,
    InvalidParameterError,
    MissingParameterError,
    UnknownBreakerError,
)
from flow_breaker.circuit_breaker.params import ConfigParams
from flow_breaker.circuit_breaker.state import BreakerState, Route
from flow_breaker.circuit_breaker.storage import (
    AbstractBreakerStore,
    InMemoryBreakerStore,
)
from flow_breaker.circuit_breaker.transitions import (
    create_state,
    evaluate,
    record_response,
)
from flow_breaker.logging import (
    StructuredLogger,
    log_debug,
    log_info,
    log_warning,
)

BREAKER_ID_PARAMETER = "circuitBreakerId"
RESPONSE_CODE_PARAMETER = "httpResponseCode"

ParamsInput = ConfigParams | Mapping[str, object] | None
ResponseCodeInput = int | str | None


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class BreakerResult:
    """Outcome of one check or update.

    Attributes:
        state: Stored breaker state, or ``None`` when validation failed.
        route: Route the caller should follow.
        error: Validation failure when ``route`` is ``ERROR``.
    """

    state: BreakerState | None
    route: Route
    error: CircuitBreakerError | None = None


def _require_identifier(identifier: str | None) -> str:
    if not identifier:
        raise MissingParameterError(BREAKER_ID_PARAMETER)
    return identifier


def _require_response_code(response_code: ResponseCodeInput) -> int:
    if response_code is None or response_code == "":
        raise MissingParameterError(RESPONSE_CODE_PARAMETER)
    if isinstance(response_code, bool):
        raise InvalidParameterError(RESPONSE_CODE_PARAMETER, "must be an integer")
    if isinstance(response_code, int):
        return response_code
    try:
        return int(str(response_code).strip())
    except ValueError as error:
        raise InvalidParameterError(
            RESPONSE_CODE_PARAMETER, "must be an integer"
        ) from error


def _build_params(params: ParamsInput) -> ConfigParams:
    if params is None:
        return ConfigParams()
    if isinstance(params, ConfigParams):
        return params
    try:
        return ConfigParams.model_validate(dict(params))
    except ValidationError as error:
        first = error.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "params"
        raise InvalidParameterError(location, first["msg"]) from error


class CircuitBreakerService:
    """Check and update named circuit breakers held in a store."""

    def __init__(
        self,
        *,
        store: AbstractBreakerStore | None = None,
        clock: Callable[[], int] | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        """Build a breaker service with optional custom dependencies.

        Args:
            store: Breaker state store. Defaults to an in-memory TTL store.
            clock: Returns the current epoch milliseconds.
            logger: Structured logger for breaker events.
        """
        self._store = InMemoryBreakerStore() if store is None else store
        self._clock = _now_ms if clock is None else clock
        self._logger: StructuredLogger = (
            structlog.stdlib.get_logger(__name__) if logger is None else logger
        )

    def _rejected(self, operation: str, error: CircuitBreakerError) -> BreakerResult:
        log_warning(
            self._logger,
            "circuit_breaker.invocation_rejected",
            operation=operation,
            error_type=type(error).__name__,
            error=str(error),
        )
        return BreakerResult(state=None, route=Route.ERROR, error=error)

    def _log_transition(self, before: BreakerState, after: BreakerState) -> None:
        if before.status == after.status:
            return
        log_debug(
            self._logger,
            "circuit_breaker.transition",
            breaker_id=after.id,
            old=str(before.status),
            new=str(after.status),
            error_count=len(after.errors),
            success_count=after.success_count,
        )

    def _load_or_create(self, breaker_id: str, params: ParamsInput) -> BreakerState:
        state = self._store.get(breaker_id)
        if state is not None:
            return state

        state = create_state(breaker_id, _build_params(params))
        log_info(
            self._logger,
            "circuit_breaker.created",
            breaker_id=breaker_id,
            params=state.params.to_flow_dict(),
        )
        return state

    def check(self, identifier: str | None, params: ParamsInput = None) -> BreakerResult:
        """Decide whether a call guarded by breaker ``identifier`` may proceed.

        ``params`` only apply when the breaker does not exist yet; an existing
        breaker keeps the parameters it was created with.

        Returns:
            ``NEXT`` to proceed, ``OPEN`` to short-circuit, or ``ERROR`` with
            the validation failure and no state change.
        """
        try:
            breaker_id = _require_identifier(identifier)
            state = self._load_or_create(breaker_id, params)
        except CircuitBreakerError as error:
            return self._rejected("check", error)

        log_debug(
            self._logger,
            "circuit_breaker.check",
            breaker_id=breaker_id,
            status=str(state.status),
            error_count=len(state.errors),
            success_count=state.success_count,
        )
        updated, route = evaluate(state, self._clock())
        self._log_transition(state, updated)
        self._store.set(breaker_id, updated)
        return BreakerResult(state=updated, route=route)

    def update(
        self, identifier: str | None, response_code: ResponseCodeInput
    ) -> BreakerResult:
        """Record the response code observed for a call guarded by ``identifier``.

        Returns:
            ``NEXT`` with the updated state, or ``ERROR`` with the validation
            failure and no state change.
        """
        try:
            breaker_id = _require_identifier(identifier)
            code = _require_response_code(response_code)
            state = self._store.get(breaker_id)
            if state is None:
                raise UnknownBreakerError(breaker_id)
        except CircuitBreakerError as error:
            return self._rejected("update", error)

        updated = record_response(state, code, self._clock())
        if updated.success_count != state.success_count:
            log_debug(
                self._logger,
                "circuit_breaker.success_recorded",
                breaker_id=breaker_id,
                response_code=code,
                success_count=updated.success_count,
            )
        self._log_transition(state, updated)
        self._store.set(breaker_id, updated)
        return BreakerResult(state=updated, route=Route.NEXT)
