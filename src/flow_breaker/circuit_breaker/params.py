"""Per-breaker configuration parameters."""

from __future__ import annotations

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from flow_breaker.circuit_breaker.classifier import parse_return_codes

DEFAULT_RETURN_CODES = "[300-999]"


def _aliases(name: str, *flow_names: str) -> AliasChoices:
    return AliasChoices(name, *flow_names)


class ConfigParams(BaseModel):
    """Breaker parameters, defaulted once when a breaker is created.

    Field names are snake_case; flow parameter mappings may use the camelCase
    names a flow definition carries (``maxErrorCount``, ``timeRange``, ...).
    Unknown keys are ignored so a raw flow parameter mapping can be validated
    directly. Keys set to ``None`` keep their default.

    Attributes:
        max_error_count: Errors recorded before the breaker opens.
        time_range_seconds: Window used to discount old errors while open.
        half_open_successes: Successes needed to close from half-open.
        recover_period_seconds: Delay before an open breaker probes.
        return_codes: Return-code spec deciding which codes are errors.
        max_response_time_ms: Carried for callers; not evaluated.
        communication_error: Carried for callers; not evaluated.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    max_error_count: int = Field(
        default=10,
        ge=1,
        validation_alias=_aliases("max_error_count", "maxErrorCount"),
        serialization_alias="maxErrorCount",
    )
    time_range_seconds: int = Field(
        default=300,
        ge=0,
        validation_alias=_aliases(
            "time_range_seconds", "timeRange", "timeRangeSeconds"
        ),
        serialization_alias="timeRange",
    )
    half_open_successes: int = Field(
        default=5,
        ge=0,
        validation_alias=_aliases("half_open_successes", "halfOpenSuccesses"),
        serialization_alias="halfOpenSuccesses",
    )
    recover_period_seconds: int = Field(
        default=30,
        ge=0,
        validation_alias=_aliases(
            "recover_period_seconds", "recoverPeriod", "recoverPeriodSeconds"
        ),
        serialization_alias="recoverPeriod",
    )
    return_codes: str = Field(
        default=DEFAULT_RETURN_CODES,
        validation_alias=_aliases("return_codes", "returnCodes", "returnCodesSpec"),
        serialization_alias="returnCodes",
    )
    max_response_time_ms: int = Field(
        default=100,
        ge=0,
        validation_alias=_aliases(
            "max_response_time_ms", "maxResponseTime", "maxResponseTimeMs"
        ),
        serialization_alias="maxResponseTime",
    )
    communication_error: bool = Field(
        default=True,
        validation_alias=_aliases(
            "communication_error", "communicationError", "communicationErrorFlag"
        ),
        serialization_alias="communicationError",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_unset_values(cls, data: object) -> object:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("return_codes", mode="after")
    @classmethod
    def _validate_return_codes(cls, value: str) -> str:
        parse_return_codes(value)
        return value

    @property
    def time_range_ms(self) -> int:
        return self.time_range_seconds * 1000

    @property
    def recover_period_ms(self) -> int:
        return self.recover_period_seconds * 1000

    def to_flow_dict(self) -> dict[str, Any]:
        """Return parameters keyed by their flow names."""
        return self.model_dump(by_alias=True)
