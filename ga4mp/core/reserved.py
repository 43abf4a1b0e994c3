from __future__ import annotations

# https://developers.google.com/analytics/devguides/collection/protocol/ga4/reference#reserved_names

RESERVED_EVENT_NAMES: frozenset[str] = frozenset(
    {
        "ad_activeview",
        "ad_click",
        "ad_exposure",
        "ad_impression",
        "ad_query",
        "adunit_exposure",
        "app_clear_data",
        "app_install",
        "app_update",
        "app_remove",
        "error",
        "first_open",
        "first_visit",
        "in_app_purchase",
        "notification_dismiss",
        "notification_foreground",
        "notification_open",
        "notification_receive",
        "os_update",
        "screen_view",
        "session_start",
        "user_engagement",
    }
)

RESERVED_PARAM_NAMES: frozenset[str] = frozenset({"firebase_conversion"})

RESERVED_PARAM_PREFIXES: frozenset[str] = frozenset({"google_", "ga_", "firebase_"})

RESERVED_USER_PROPERTY_NAMES: frozenset[str] = frozenset(
    {
        "first_open_time",
        "first_visit_time",
        "last_deep_link_referrer",
        "user_id",
        "first_open_after_install",
    }
)

RESERVED_USER_PROPERTY_PREFIXES: frozenset[str] = frozenset(
    {"google_", "ga_", "firebase_"}
)

MAX_EVENTS = 25
MAX_EVENT_PARAMS = 25
MAX_USER_PROPERTIES = 25

MAX_EVENT_NAME_LENGTH = 40
MAX_PARAM_NAME_LENGTH = 40
MAX_PARAM_VALUE_LENGTH = 100
MAX_USER_PROPERTY_NAME_LENGTH = 24
MAX_USER_PROPERTY_VALUE_LENGTH = 36

# 3 x 72h backdating window.
MAX_TIMESTAMP_AGE_MICROS = 3 * 72 * 60 * 60 * 1_000_000

MAX_PAYLOAD_BYTES = 130_000
