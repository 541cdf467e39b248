"""Pure breaker transitions.

Every function takes the current state plus the current time in epoch
milliseconds and returns a new state; nothing here reads a clock or touches
storage.
"""

from __future__ import annotations

import dataclasses

from flow_breaker.circuit_breaker.classifier import classify
from flow_breaker.circuit_breaker.params import ConfigParams
from flow_breaker.circuit_breaker.state import (
    BreakerState,
    CircuitStatus,
    ErrorEvent,
    Route,
)
from flow_breaker.circuit_breaker.window import prune_errors


def create_state(breaker_id: str, params: ConfigParams | None = None) -> BreakerState:
    """Build the initial closed state for a newly seen breaker."""
    return BreakerState(
        id=breaker_id,
        params=ConfigParams() if params is None else params,
    )


def _evaluate_half_open(state: BreakerState) -> tuple[BreakerState, Route]:
    if state.success_count >= state.params.half_open_successes:
        closed = dataclasses.replace(
            state,
            status=CircuitStatus.CLOSED,
            errors=(),
            last_route=Route.NEXT,
        )
        return closed, Route.NEXT

    route = Route.NEXT if state.success_count % 2 == 0 else Route.OPEN
    return dataclasses.replace(state, last_route=route), route


def _evaluate_open(state: BreakerState, now: int) -> tuple[BreakerState, Route]:
    opened_at = now if state.opened_at is None else state.opened_at
    if now - opened_at >= state.params.recover_period_ms:
        half_open = dataclasses.replace(
            state, status=CircuitStatus.HALF_OPEN, success_count=0
        )
        return _evaluate_half_open(half_open)

    errors = prune_errors(state.errors, state.params.time_range_seconds, now)
    if len(errors) < state.params.max_error_count:
        closed = dataclasses.replace(
            state,
            status=CircuitStatus.CLOSED,
            errors=errors,
            last_route=Route.NEXT,
        )
        return closed, Route.NEXT

    still_open = dataclasses.replace(state, errors=errors, last_route=Route.OPEN)
    return still_open, Route.OPEN


def evaluate(state: BreakerState, now: int) -> tuple[BreakerState, Route]:
    """Apply the check transition for ``state`` at time ``now``.

    Returns:
        The updated state and the route the caller should follow.
    """
    if state.status == CircuitStatus.OPEN:
        return _evaluate_open(state, now)
    if state.status == CircuitStatus.HALF_OPEN:
        return _evaluate_half_open(state)
    return dataclasses.replace(state, last_route=Route.NEXT), Route.NEXT


def record_response(state: BreakerState, code: int, now: int) -> BreakerState:
    """Apply the update transition for one observed response code.

    An error is appended to ``errors`` and opens the breaker when it is
    half-open or the error count reached ``max_error_count``. A success only
    increments ``success_count``.
    """
    is_error, state = classify(state, code)
    if not is_error:
        return dataclasses.replace(state, success_count=state.success_count + 1)

    errors = (*state.errors, ErrorEvent(timestamp=now, cause=f"responseCode {code}"))
    if (
        state.status == CircuitStatus.HALF_OPEN
        or len(errors) >= state.params.max_error_count
    ):
        return dataclasses.replace(
            state, errors=errors, status=CircuitStatus.OPEN, opened_at=now
        )
    return dataclasses.replace(state, errors=errors)
