from __future__ import annotations

import os

import pytest

# Ensure CI can build settings without a local .env file.
_ENV_DEFAULTS = {
    "GA4MP_API_SECRET": "test-api-secret",
    "GA4MP_MEASUREMENT_ID": "G-TEST000000",
}
for _key, _value in _ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)

from ga4mp import Event, Request, get_settings

NOW_MICROS = 1_780_000_000_000_000
HOUR_MICROS = 3_600_000_000


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def valid_request() -> Request:
    return Request(
        client_id="555.1234",
        user_id="user-1",
        timestamp_micros=NOW_MICROS - HOUR_MICROS,
        user_properties={"favorite_team": "blue"},
        events=[
            Event(name="purchase", params={"value": 9.99, "currency": "USD"}),
            Event(name="level_up", params={"level": 3, "character": "wizard"}),
        ],
    )
