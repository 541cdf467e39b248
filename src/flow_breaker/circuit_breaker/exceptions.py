"""Circuit breaker exceptions.

Callers can distinguish between:
  - A required flow parameter being absent.
  - A supplied parameter failing validation.
  - A return-code spec token that cannot be parsed.
  - An update addressed to a breaker that was never checked.
"""


class CircuitBreakerError(Exception):
    """Base exception for the circuit breaker package."""


class MissingParameterError(CircuitBreakerError):
    """Raised when a required invocation parameter is absent.

    Attributes:
        parameter: Flow name of the missing parameter.
    """

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"Missing required parameter: {parameter}")


class InvalidParameterError(CircuitBreakerError):
    """Raised when a supplied parameter has an unusable value.

    Attributes:
        parameter: Flow name of the offending parameter.
        detail: Human-readable reason.
    """

    def __init__(self, parameter: str, detail: str) -> None:
        self.parameter = parameter
        self.detail = detail
        super().__init__(f"Invalid parameter {parameter}: {detail}")


class MalformedSpecError(CircuitBreakerError, ValueError):
    """Raised when a return-code spec contains an unparseable token.

    Attributes:
        spec: Full return-code spec being parsed.
        token: The offending token after trimming.
    """

    def __init__(self, spec: str, token: str) -> None:
        self.spec = spec
        self.token = token
        super().__init__(f"malformed return code token {token!r} in {spec!r}")


class UnknownBreakerError(CircuitBreakerError):
    """Raised when an update targets a breaker with no stored state.

    Attributes:
        breaker_id: Identifier that has no state in the store.
    """

    def __init__(self, breaker_id: str) -> None:
        self.breaker_id = breaker_id
        super().__init__(f"No circuit breaker initialized with ID: {breaker_id}")
