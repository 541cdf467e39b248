"""Time-window pruning of recorded errors."""

from __future__ import annotations

from collections.abc import Sequence

from flow_breaker.circuit_breaker.state import ErrorEvent


def prune_errors(
    errors: Sequence[ErrorEvent], time_range_seconds: int, now: int
) -> tuple[ErrorEvent, ...]:
    """Drop errors recorded before the window starting ``time_range_seconds`` ago.

    Args:
        errors: Recorded errors, oldest first.
        time_range_seconds: Window length.
        now: Current epoch milliseconds.

    Returns:
        Remaining errors in their original order.
    """
    window_start = now - time_range_seconds * 1000
    return tuple(event for event in errors if event.timestamp >= window_start)
