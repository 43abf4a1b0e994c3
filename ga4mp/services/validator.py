"""Client-side checks mirroring the Measurement Protocol's documented limits.

Every check is fail-fast: the first broken rule raises a ``RuleViolation`` and
nothing after it is inspected. Dict fields are walked in insertion order, so
the same request always reports the same violation.
"""

from __future__ import annotations

from collections.abc import Iterable

from ga4mp.core.errors import RuleViolation, ViolationCode
from ga4mp.core.reserved import (
    MAX_EVENT_NAME_LENGTH,
    MAX_EVENT_PARAMS,
    MAX_EVENTS,
    MAX_PARAM_NAME_LENGTH,
    MAX_PARAM_VALUE_LENGTH,
    MAX_TIMESTAMP_AGE_MICROS,
    MAX_USER_PROPERTIES,
    MAX_USER_PROPERTY_NAME_LENGTH,
    MAX_USER_PROPERTY_VALUE_LENGTH,
    RESERVED_EVENT_NAMES,
    RESERVED_PARAM_NAMES,
    RESERVED_PARAM_PREFIXES,
    RESERVED_USER_PROPERTY_NAMES,
    RESERVED_USER_PROPERTY_PREFIXES,
)
from ga4mp.schemas.request import Event, Request, now_micros as _now_micros


def _is_ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def validate_name(
    name: str,
    max_length: int,
    reserved_names: frozenset[str],
    reserved_prefixes: Iterable[str] = (),
    *,
    field: str = "name",
) -> None:
    if len(name) > max_length:
        raise RuleViolation(
            f"name longer than {max_length}: {name!r}",
            code=ViolationCode.NAME_INVALID,
            field=field,
        )
    if name in reserved_names:
        raise RuleViolation(
            f"name is reserved: {name!r}",
            code=ViolationCode.NAME_RESERVED,
            field=field,
        )
    for prefix in reserved_prefixes:
        if name.startswith(prefix):
            raise RuleViolation(
                f"name has reserved prefix {prefix!r}: {name!r}",
                code=ViolationCode.NAME_RESERVED,
                field=field,
            )
    if not name:
        raise RuleViolation(
            "name must not be empty",
            code=ViolationCode.NAME_INVALID,
            field=field,
            index=0,
        )

    for i, ch in enumerate(name):
        if _is_ascii_letter(ch):
            continue
        if _is_ascii_digit(ch) or ch == "_":
            if i == 0:
                raise RuleViolation(
                    f"name must begin with an alphabetic char: {name!r}",
                    code=ViolationCode.NAME_INVALID,
                    field=field,
                    index=0,
                )
            continue
        raise RuleViolation(
            f"illegal char at index {i}: {name!r}",
            code=ViolationCode.NAME_INVALID,
            field=field,
            index=i,
        )


def validate_event(event: Event, *, field: str = "event") -> None:
    validate_name(
        event.name,
        MAX_EVENT_NAME_LENGTH,
        RESERVED_EVENT_NAMES,
        field=f"{field}.name",
    )

    if len(event.params) > MAX_EVENT_PARAMS:
        raise RuleViolation(
            f"event exceeds {MAX_EVENT_PARAMS} params: {len(event.params)}",
            code=ViolationCode.EXCEEDED_MAX_ENTITIES,
            field=f"{field}.params",
        )
    for key, value in event.params.items():
        param_field = f"{field}.params.{key}"
        validate_name(
            key,
            MAX_PARAM_NAME_LENGTH,
            RESERVED_PARAM_NAMES,
            RESERVED_PARAM_PREFIXES,
            field=param_field,
        )
        # Only string values carry a length limit.
        if isinstance(value, str) and len(value) > MAX_PARAM_VALUE_LENGTH:
            raise RuleViolation(
                f"parameter longer than {MAX_PARAM_VALUE_LENGTH}: {value!r}",
                code=ViolationCode.VALUE_OUT_OF_BOUNDS,
                field=param_field,
            )


def validate_request(request: Request, *, now_micros: int | None = None) -> None:
    if not request.client_id:
        raise RuleViolation(
            "client_id must be set",
            code=ViolationCode.VALUE_REQUIRED,
            field="client_id",
        )

    now = _now_micros() if now_micros is None else now_micros
    age = now - request.timestamp_micros
    if age > MAX_TIMESTAMP_AGE_MICROS:
        raise RuleViolation(
            f"timestamp is more than 216 hours old: {age / 3_600_000_000:.1f}h",
            code=ViolationCode.VALUE_OUT_OF_BOUNDS,
            field="timestamp_micros",
        )

    if len(request.user_properties) > MAX_USER_PROPERTIES:
        raise RuleViolation(
            f"request exceeds {MAX_USER_PROPERTIES} user_properties: "
            f"{len(request.user_properties)}",
            code=ViolationCode.EXCEEDED_MAX_ENTITIES,
            field="user_properties",
        )
    for key, value in request.user_properties.items():
        prop_field = f"user_properties.{key}"
        validate_name(
            key,
            MAX_USER_PROPERTY_NAME_LENGTH,
            RESERVED_USER_PROPERTY_NAMES,
            RESERVED_USER_PROPERTY_PREFIXES,
            field=prop_field,
        )
        if len(value) > MAX_USER_PROPERTY_VALUE_LENGTH:
            raise RuleViolation(
                f"user property longer than {MAX_USER_PROPERTY_VALUE_LENGTH}: {value!r}",
                code=ViolationCode.VALUE_OUT_OF_BOUNDS,
                field=prop_field,
            )

    if len(request.events) > MAX_EVENTS:
        raise RuleViolation(
            f"request exceeds {MAX_EVENTS} events: {len(request.events)}",
            code=ViolationCode.EXCEEDED_MAX_ENTITIES,
            field="events",
        )
    for i, event in enumerate(request.events):
        validate_event(event, field=f"events[{i}]")
