from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from ga4mp.core.config import ClientOptions, Settings, get_settings
from ga4mp.core.errors import (
    EncodeError,
    PayloadTooLargeError,
    RequestTimeoutError,
    RequestValidationError,
    ResponseDecodeError,
    ResponseError,
    RuleViolation,
    TransportError,
)
from ga4mp.core.reserved import MAX_PAYLOAD_BYTES
from ga4mp.schemas.request import Request
from ga4mp.schemas.validation import ValidationResponse
from ga4mp.services.validator import validate_request

logger = logging.getLogger(__name__)

T = TypeVar("T")

_http: httpx.AsyncClient | None = None


def get_http() -> httpx.AsyncClient:
    global _http
    if _http is None:
        _http = httpx.AsyncClient()
    return _http


async def close_http() -> None:
    global _http
    if _http is not None:
        await _http.aclose()
        _http = None


def _expect_success(resp: httpx.Response) -> None:
    if 200 <= resp.status_code < 300:
        return
    body = resp.text
    raise ResponseError(
        f"{resp.status_code} {resp.reason_phrase}: {body!r}",
        status_code=resp.status_code,
        reason=resp.reason_phrase,
        body=body,
    )


def _decode_validation_response(resp: httpx.Response) -> ValidationResponse:
    # The debug endpoint reports problems in the body whatever the status.
    try:
        return ValidationResponse.model_validate_json(resp.content)
    except ValidationError as exc:
        raise ResponseDecodeError(
            f"parse validation response: {exc.error_count()} error(s)",
            status_code=resp.status_code,
            reason=resp.reason_phrase,
            body=resp.text,
        ) from exc


class Client:
    """Measurement Protocol client.

    All configuration is fixed at construction, so one instance can serve
    concurrent callers. Construction does no I/O and never validates the
    credentials; a wrong secret surfaces as a server-side rejection.
    """

    def __init__(self, options: ClientOptions) -> None:
        self._query = urlencode(
            {"api_secret": options.api_secret, "measurement_id": options.measurement_id}
        )
        self._validate = options.validate
        self._http = options.http_client
        self._collect_endpoint = options.collect_endpoint
        self._debug_endpoint = options.debug_endpoint
        self._timeout = options.timeout_seconds

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> "Client":
        settings = settings or get_settings()
        return cls(settings.to_options(http_client=http_client))

    @property
    def validates(self) -> bool:
        return self._validate

    def __repr__(self) -> str:
        return (
            f"Client(collect={self._collect_endpoint!r}, "
            f"debug={self._debug_endpoint!r}, validate={self._validate})"
        )

    def _transport(self) -> httpx.AsyncClient:
        return self._http if self._http is not None else get_http()

    def _prepare(self, request: Request) -> bytes:
        try:
            body = request.to_json()
        except ValueError as exc:
            # pydantic_core.PydanticSerializationError is a ValueError.
            raise EncodeError(f"marshal request: {exc}") from exc

        if self._validate:
            try:
                validate_request(request)
            except RuleViolation as exc:
                raise RequestValidationError(exc) from exc
            if len(body) > MAX_PAYLOAD_BYTES:
                raise PayloadTooLargeError(size=len(body), limit=MAX_PAYLOAD_BYTES)
        return body

    async def _submit(
        self,
        endpoint: str,
        request: Request,
        interpret: Callable[[httpx.Response], T],
        *,
        timeout: float | None = None,
    ) -> T:
        body = self._prepare(request)
        effective_timeout = self._timeout if timeout is None else timeout

        logger.debug(
            "Posting %d event(s) (%d bytes) to %s",
            len(request.events),
            len(body),
            endpoint,
        )
        try:
            resp = await self._transport().post(
                f"{endpoint}?{self._query}",
                content=body,
                headers={"content-type": "application/json"},
                timeout=(
                    httpx.USE_CLIENT_DEFAULT
                    if effective_timeout is None
                    else httpx.Timeout(effective_timeout)
                ),
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"post: timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"post: {exc}") from exc

        logger.debug("%s responded %s", endpoint, resp.status_code)
        return interpret(resp)

    async def send(
        self, request: Request, *, timeout: float | None = None
    ) -> None:
        """Record ``request`` through the collect endpoint.

        The collect endpoint answers 2xx for anything it can parse and does not
        report why an event was dropped; use ``debug`` to see that.
        """
        await self._submit(
            self._collect_endpoint, request, _expect_success, timeout=timeout
        )

    async def debug(
        self, request: Request, *, timeout: float | None = None
    ) -> ValidationResponse:
        """Dry-run ``request`` against the validation server.

        Local validation, when enabled, still runs first and can fail before
        the request is sent.
        """
        result = await self._submit(
            self._debug_endpoint,
            request,
            _decode_validation_response,
            timeout=timeout,
        )
        logger.debug(
            "Validation server returned %d message(s)",
            len(result.validation_messages),
        )
        return result
