from __future__ import annotations

import pytest

from ga4mp import Event, Request, RuleViolation, ViolationCode
from ga4mp.core.reserved import (
    RESERVED_EVENT_NAMES,
    RESERVED_PARAM_NAMES,
    RESERVED_PARAM_PREFIXES,
)
from ga4mp.services.validator import validate_event, validate_name, validate_request

from conftest import HOUR_MICROS, NOW_MICROS


def _validate(request: Request) -> None:
    validate_request(request, now_micros=NOW_MICROS)


def test_valid_request_passes(valid_request: Request) -> None:
    _validate(valid_request)


def test_empty_client_id_fails_before_anything_else() -> None:
    req = Request(
        client_id="",
        timestamp_micros=0,
        user_properties={"1bad": "x" * 99},
        events=[Event(name="session_start")],
    )

    with pytest.raises(RuleViolation) as exc:
        _validate(req)

    assert exc.value.code is ViolationCode.VALUE_REQUIRED
    assert exc.value.field == "client_id"


@pytest.mark.parametrize(
    "age_micros,ok",
    [
        (215 * HOUR_MICROS + 59 * 60 * 1_000_000, True),
        (216 * HOUR_MICROS, True),
        (216 * HOUR_MICROS + 1, False),
        (400 * HOUR_MICROS, False),
    ],
)
def test_timestamp_freshness(age_micros: int, ok: bool) -> None:
    req = Request(client_id="c", timestamp_micros=NOW_MICROS - age_micros)
    if ok:
        _validate(req)
        return

    with pytest.raises(RuleViolation) as exc:
        _validate(req)
    assert exc.value.code is ViolationCode.VALUE_OUT_OF_BOUNDS
    assert exc.value.field == "timestamp_micros"


def test_default_timestamp_is_fresh() -> None:
    validate_request(Request(client_id="c", events=[Event(name="login")]))


def test_exactly_25_events_and_user_properties_pass() -> None:
    req = Request(
        client_id="c",
        timestamp_micros=NOW_MICROS,
        user_properties={f"prop_{i}": "v" for i in range(25)},
        events=[Event(name=f"event_{i}") for i in range(25)],
    )
    _validate(req)


def test_26_user_properties_fail() -> None:
    req = Request(
        client_id="c",
        timestamp_micros=NOW_MICROS,
        user_properties={f"prop_{i}": "v" for i in range(26)},
    )

    with pytest.raises(RuleViolation) as exc:
        _validate(req)

    assert exc.value.code is ViolationCode.EXCEEDED_MAX_ENTITIES
    assert exc.value.field == "user_properties"


def test_26_events_fail() -> None:
    req = Request(
        client_id="c",
        timestamp_micros=NOW_MICROS,
        events=[Event(name=f"event_{i}") for i in range(26)],
    )

    with pytest.raises(RuleViolation) as exc:
        _validate(req)

    assert exc.value.code is ViolationCode.EXCEEDED_MAX_ENTITIES
    assert exc.value.field == "events"


def test_user_property_rules() -> None:
    base = {"client_id": "c", "timestamp_micros": NOW_MICROS}

    _validate(Request(**base, user_properties={"p" * 24: "v" * 36}))

    with pytest.raises(RuleViolation) as exc:
        _validate(Request(**base, user_properties={"p" * 25: "v"}))
    assert exc.value.code is ViolationCode.NAME_INVALID

    with pytest.raises(RuleViolation) as exc:
        _validate(Request(**base, user_properties={"tier": "v" * 37}))
    assert exc.value.code is ViolationCode.VALUE_OUT_OF_BOUNDS
    assert exc.value.field == "user_properties.tier"

    with pytest.raises(RuleViolation) as exc:
        _validate(Request(**base, user_properties={"user_id": "v"}))
    assert exc.value.code is ViolationCode.NAME_RESERVED

    with pytest.raises(RuleViolation) as exc:
        _validate(Request(**base, user_properties={"ga_segment": "v"}))
    assert exc.value.code is ViolationCode.NAME_RESERVED


@pytest.mark.parametrize("name", sorted(RESERVED_EVENT_NAMES))
def test_reserved_event_names_fail(name: str) -> None:
    with pytest.raises(RuleViolation) as exc:
        validate_event(Event(name=name, params={"value": 1}))

    assert exc.value.code is ViolationCode.NAME_RESERVED
    assert exc.value.field == "event.name"


def test_event_names_have_no_reserved_prefixes() -> None:
    validate_event(Event(name="google_signup"))


def test_event_param_rules() -> None:
    validate_event(Event(name="search", params={f"p{i}": i for i in range(25)}))

    with pytest.raises(RuleViolation) as exc:
        validate_event(Event(name="search", params={f"p{i}": i for i in range(26)}))
    assert exc.value.code is ViolationCode.EXCEEDED_MAX_ENTITIES
    assert exc.value.field == "event.params"

    with pytest.raises(RuleViolation) as exc:
        validate_event(Event(name="search", params={"term": "t" * 101}))
    assert exc.value.code is ViolationCode.VALUE_OUT_OF_BOUNDS
    assert exc.value.field == "event.params.term"

    validate_event(Event(name="search", params={"term": "t" * 100}))


def test_non_string_params_are_not_length_checked() -> None:
    validate_event(
        Event(
            name="purchase",
            params={
                "items": [{"item_id": "sku" * 100}] * 30,
                "value": 10**200,
                "flag": True,
            },
        )
    )


@pytest.mark.parametrize("name", sorted(RESERVED_PARAM_NAMES))
def test_reserved_param_names_fail(name: str) -> None:
    with pytest.raises(RuleViolation) as exc:
        validate_event(Event(name="purchase", params={name: 1}))
    assert exc.value.code is ViolationCode.NAME_RESERVED


def test_reserved_param_prefix_fails_at_event_level() -> None:
    with pytest.raises(RuleViolation) as exc:
        validate_event(Event(name="purchase", params={"value": 1, "google_x": 1}))

    assert exc.value.code is ViolationCode.NAME_RESERVED
    assert exc.value.field == "event.params.google_x"


def test_first_bad_event_is_reported() -> None:
    req = Request(
        client_id="c",
        timestamp_micros=NOW_MICROS,
        events=[
            Event(name="ok_event"),
            Event(name="bad-name"),
            Event(name="session_start"),
        ],
    )

    with pytest.raises(RuleViolation) as exc:
        _validate(req)

    assert exc.value.field == "events[1].name"
    assert exc.value.index == 3


@pytest.mark.parametrize("name", ["1abc", "_abc", "9", "_"])
def test_name_must_start_with_letter(name: str) -> None:
    with pytest.raises(RuleViolation) as exc:
        validate_name(name, 40, frozenset())

    assert exc.value.code is ViolationCode.NAME_INVALID
    assert exc.value.index == 0


@pytest.mark.parametrize("name", ["a1_2", "A", "purchase", "Level_Up_2", "z_"])
def test_valid_names_pass(name: str) -> None:
    validate_name(name, 40, frozenset(), RESERVED_PARAM_PREFIXES)


@pytest.mark.parametrize(
    "name,index",
    [("ab-c", 2), ("café", 3), ("with space", 4), ("dot.", 3)],
)
def test_illegal_characters_report_index(name: str, index: int) -> None:
    with pytest.raises(RuleViolation) as exc:
        validate_name(name, 40, frozenset())

    assert exc.value.code is ViolationCode.NAME_INVALID
    assert exc.value.index == index
    assert f"index {index}" in str(exc.value)


@pytest.mark.parametrize("name", ["google_foo", "ga_", "firebase_anything_1"])
def test_reserved_prefix_fails_regardless_of_suffix(name: str) -> None:
    with pytest.raises(RuleViolation) as exc:
        validate_name(name, 40, frozenset(), RESERVED_PARAM_PREFIXES, field="p")

    assert exc.value.code is ViolationCode.NAME_RESERVED
    assert exc.value.field == "p"


def test_prefix_only_matches_at_start() -> None:
    validate_name("x_google_foo", 40, frozenset(), RESERVED_PARAM_PREFIXES)


def test_name_length_limit() -> None:
    validate_name("a" * 40, 40, frozenset())

    with pytest.raises(RuleViolation) as exc:
        validate_name("a" * 41, 40, frozenset())
    assert exc.value.code is ViolationCode.NAME_INVALID
    assert exc.value.index is None


def test_empty_name_fails() -> None:
    with pytest.raises(RuleViolation) as exc:
        validate_name("", 40, frozenset())

    assert exc.value.code is ViolationCode.NAME_INVALID
    assert exc.value.index == 0
