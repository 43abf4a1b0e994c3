from __future__ import annotations

from enum import Enum
from typing import Literal

Stage = Literal["prepare", "transport", "response"]


class ViolationCode(str, Enum):
    VALUE_REQUIRED = "VALUE_REQUIRED"
    VALUE_OUT_OF_BOUNDS = "VALUE_OUT_OF_BOUNDS"
    EXCEEDED_MAX_ENTITIES = "EXCEEDED_MAX_ENTITIES"
    NAME_INVALID = "NAME_INVALID"
    NAME_RESERVED = "NAME_RESERVED"


class RuleViolation(ValueError):
    """A request broke one of the documented Measurement Protocol limits.

    ``field`` is a dotted path into the request (``events[0].params.value``),
    ``index`` is the offending character position for name character rules.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ViolationCode,
        field: str,
        index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.field = field
        self.index = index

    def __str__(self) -> str:
        return f"{self.field}: {self.args[0]}"


class MeasurementProtocolError(Exception):
    stage: Stage = "prepare"

    def __init__(self, message: str) -> None:
        super().__init__(f"ga4mp: {message}")


class PreparationError(MeasurementProtocolError):
    stage: Stage = "prepare"


class EncodeError(PreparationError):
    pass


class RequestValidationError(PreparationError):
    def __init__(self, violation: RuleViolation) -> None:
        super().__init__(f"validate request: {violation}")
        self.violation = violation


class PayloadTooLargeError(PreparationError):
    def __init__(self, *, size: int, limit: int) -> None:
        super().__init__(f"payload exceeds {limit} bytes: {size}")
        self.size = size
        self.limit = limit


class TransportError(MeasurementProtocolError):
    stage: Stage = "transport"


class RequestTimeoutError(TransportError):
    pass


class ResponseError(MeasurementProtocolError):
    stage: Stage = "response"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        reason: str = "",
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class ResponseDecodeError(ResponseError):
    pass
