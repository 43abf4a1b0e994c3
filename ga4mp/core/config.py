from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import httpx
from pydantic import AnyHttpUrl, Field
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

COLLECT_ENDPOINT = "https://www.google-analytics.com/mp/collect"
DEBUG_ENDPOINT = "https://www.google-analytics.com/debug/mp/collect"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class ClientOptions:
    # Admin > Data Streams > (stream) > Measurement Protocol API secrets
    api_secret: str
    # Admin > Data Streams > (stream) > Measurement ID
    measurement_id: str
    # Run client-side checks before anything goes on the wire.
    validate: bool = False
    # Falls back to the shared module client when unset.
    http_client: httpx.AsyncClient | None = None
    collect_endpoint: str = COLLECT_ENDPOINT
    debug_endpoint: str = DEBUG_ENDPOINT
    # None defers to the http client's own timeout.
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_secret: str = Field(alias="GA4MP_API_SECRET")
    measurement_id: str = Field(alias="GA4MP_MEASUREMENT_ID")
    validate_requests: bool = Field(default=False, alias="GA4MP_VALIDATE")

    collect_endpoint: AnyHttpUrl = Field(
        default=COLLECT_ENDPOINT,
        alias="GA4MP_COLLECT_ENDPOINT",
        validate_default=True,
    )
    debug_endpoint: AnyHttpUrl = Field(
        default=DEBUG_ENDPOINT,
        alias="GA4MP_DEBUG_ENDPOINT",
        validate_default=True,
    )
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS, alias="GA4MP_TIMEOUT_SECONDS"
    )

    @model_validator(mode="after")
    def validate_runtime_constraints(self) -> "Settings":
        if not (0 < self.timeout_seconds <= 300):
            raise ValueError("GA4MP_TIMEOUT_SECONDS must be in (0, 300]")
        if str(self.collect_endpoint) == str(self.debug_endpoint):
            raise ValueError(
                "GA4MP_COLLECT_ENDPOINT and GA4MP_DEBUG_ENDPOINT must differ"
            )
        return self

    def to_options(self, *, http_client: httpx.AsyncClient | None = None) -> ClientOptions:
        return ClientOptions(
            api_secret=self.api_secret,
            measurement_id=self.measurement_id,
            validate=self.validate_requests,
            http_client=http_client,
            collect_endpoint=str(self.collect_endpoint),
            debug_endpoint=str(self.debug_endpoint),
            timeout_seconds=self.timeout_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]  # populated from env
