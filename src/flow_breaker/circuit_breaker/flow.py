"""Flow-node adapter.

Exposes the breaker as two flow-node methods operating on the raw parameter
mapping a flow engine passes in (``circuitBreakerId``, ``httpResponseCode``
and the camelCase ``ConfigParams`` names). The returned ``FlowOutput`` names
the output the flow should follow and carries the value to hand it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from flow_breaker.circuit_breaker.breaker import (
    BREAKER_ID_PARAMETER,
    RESPONSE_CODE_PARAMETER,
    BreakerResult,
    CircuitBreakerService,
)
from flow_breaker.circuit_breaker.exceptions import CircuitBreakerError
from flow_breaker.circuit_breaker.state import Route


@dataclass(frozen=True)
class FlowOutput:
    """Selected flow output and its value.

    Attributes:
        output: ``next``, ``open`` or ``error``.
        value: Flow rendering of the breaker state, or the exception when
            ``output`` is ``error``.
    """

    output: str
    value: dict[str, Any] | Exception


def _to_flow_output(result: BreakerResult) -> FlowOutput:
    if result.state is None:
        error = result.error
        if error is None:
            error = CircuitBreakerError("circuit breaker returned no state")
        return FlowOutput(output=str(Route.ERROR), value=error)
    return FlowOutput(output=str(result.route), value=result.state.to_flow_dict())


def check_circuit_breaker(
    params: Mapping[str, Any], *, service: CircuitBreakerService
) -> FlowOutput:
    """Run the check method for a flow parameter mapping."""
    result = service.check(params.get(BREAKER_ID_PARAMETER), params)
    return _to_flow_output(result)


def update_circuit_breaker(
    params: Mapping[str, Any], *, service: CircuitBreakerService
) -> FlowOutput:
    """Run the update method for a flow parameter mapping."""
    result = service.update(
        params.get(BREAKER_ID_PARAMETER), params.get(RESPONSE_CODE_PARAMETER)
    )
    return _to_flow_output(result)
