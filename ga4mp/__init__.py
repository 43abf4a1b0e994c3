from __future__ import annotations

from ga4mp.core.config import (
    COLLECT_ENDPOINT,
    DEBUG_ENDPOINT,
    ClientOptions,
    Settings,
    get_settings,
)
from ga4mp.core.errors import (
    EncodeError,
    MeasurementProtocolError,
    PayloadTooLargeError,
    PreparationError,
    RequestTimeoutError,
    RequestValidationError,
    ResponseDecodeError,
    ResponseError,
    RuleViolation,
    TransportError,
    ViolationCode,
)
from ga4mp.schemas.request import Event, Request
from ga4mp.schemas.validation import ValidationMessage, ValidationResponse
from ga4mp.services.client import Client, close_http
from ga4mp.services.validator import validate_event, validate_name, validate_request

__version__ = "0.1.0"

__all__ = [
    "COLLECT_ENDPOINT",
    "DEBUG_ENDPOINT",
    "Client",
    "ClientOptions",
    "EncodeError",
    "Event",
    "MeasurementProtocolError",
    "PayloadTooLargeError",
    "PreparationError",
    "Request",
    "RequestTimeoutError",
    "RequestValidationError",
    "ResponseDecodeError",
    "ResponseError",
    "RuleViolation",
    "Settings",
    "TransportError",
    "ValidationMessage",
    "ValidationResponse",
    "ViolationCode",
    "close_http",
    "get_settings",
    "validate_event",
    "validate_name",
    "validate_request",
]
