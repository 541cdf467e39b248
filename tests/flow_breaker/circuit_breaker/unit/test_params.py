from __future__ import annotations

import pytest
from pydantic import ValidationError

from flow_breaker.circuit_breaker import ConfigParams


def test_accepts_snake_case_flow_and_long_names() -> None:
    snake = ConfigParams(time_range_seconds=3)
    flow = ConfigParams.model_validate({"timeRange": 3})
    long_name = ConfigParams.model_validate({"timeRangeSeconds": 3})

    assert snake.time_range_seconds == flow.time_range_seconds == 3
    assert long_name.time_range_seconds == 3
    assert snake.time_range_ms == 3_000


def test_ignores_unknown_flow_keys() -> None:
    params = ConfigParams.model_validate(
        {"circuitBreakerId": "svc", "recoverPeriod": "7", "communicationError": "false"}
    )

    assert params.recover_period_seconds == 7
    assert params.recover_period_ms == 7_000
    assert params.communication_error is False


def test_params_are_immutable() -> None:
    params = ConfigParams()

    with pytest.raises(ValidationError):
        params.max_error_count = 3  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"maxErrorCount": 0},
        {"timeRange": -1},
        {"halfOpenSuccesses": -1},
        {"recoverPeriod": -5},
        {"returnCodes": "five hundred"},
    ],
)
def test_rejects_invalid_values(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        ConfigParams.model_validate(overrides)


def test_to_flow_dict_uses_flow_names() -> None:
    flow_dict = ConfigParams(max_error_count=2).to_flow_dict()

    assert flow_dict["maxErrorCount"] == 2
    assert flow_dict["returnCodes"] == "[300-999]"
