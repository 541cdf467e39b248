"""Return-code classification.

A return-code spec is a comma-separated list of tokens. Each token is either
an integer literal matched exactly, or an inclusive range written ``lo-hi``
with optional surrounding brackets, e.g. ``"[300-500], 999"``.

Verdicts are memoized per breaker in ``BreakerState.classification_cache``,
so a spec is evaluated against a given code at most once per breaker.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flow_breaker.circuit_breaker.exceptions import MalformedSpecError

if TYPE_CHECKING:
    from flow_breaker.circuit_breaker.state import BreakerState


@dataclass(frozen=True)
class ExactCode:
    """Token matching a single response code."""

    code: int

    def matches(self, code: int) -> bool:
        return code == self.code


@dataclass(frozen=True)
class CodeRange:
    """Token matching an inclusive range of response codes."""

    low: int
    high: int

    def matches(self, code: int) -> bool:
        return self.low <= code <= self.high


ReturnCodeRule = ExactCode | CodeRange


def _parse_int(spec: str, token: str, value: str) -> int:
    stripped = value.strip()
    try:
        return int(stripped)
    except ValueError as error:
        raise MalformedSpecError(spec, token) from error


def _parse_token(spec: str, token: str) -> ReturnCodeRule:
    body = token.strip("[]")
    if "-" not in body:
        return ExactCode(_parse_int(spec, token, body))

    bounds = body.split("-")
    if len(bounds) != 2:
        raise MalformedSpecError(spec, token)
    low = _parse_int(spec, token, bounds[0])
    high = _parse_int(spec, token, bounds[1])
    if low > high:
        raise MalformedSpecError(spec, token)
    return CodeRange(low, high)


def parse_return_codes(spec: str) -> tuple[ReturnCodeRule, ...]:
    """Parse a return-code spec into ordered rules.

    Raises:
        MalformedSpecError: A token is empty, non-numeric, or an inverted range.
    """
    return tuple(_parse_token(spec, token.strip()) for token in spec.split(","))


def matches_return_codes(spec: str, code: int) -> bool:
    """Return whether ``code`` matches any token of ``spec``."""
    return any(rule.matches(code) for rule in parse_return_codes(spec))


def classify(state: BreakerState, code: int) -> tuple[bool, BreakerState]:
    """Classify ``code`` for one breaker, consulting its cache first.

    Returns:
        The verdict and the state carrying the (possibly extended) cache.
    """
    cached = state.classification_cache.get(code)
    if cached is not None:
        return cached, state

    is_error = matches_return_codes(state.params.return_codes, code)
    cache = dict(state.classification_cache)
    cache[code] = is_error
    return is_error, dataclasses.replace(state, classification_cache=cache)
