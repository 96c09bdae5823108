"""
JSON-over-HTTP helpers.

This module holds the whole request pipeline used by both the free functions
(`get_json`, `post_json`, `put_json`, `delete_json`, which take a full URL) and the
`JsonClient` handle:

- build the URL (query parameters appended, `%20` for spaces),
- merge headers into a fresh mapping and force the two JSON headers,
- serialize the body,
- perform one round trip inside a scoped `httpx.Client`,
- decode the JSON body, optionally validating it into a caller-supplied type.

Expected failures are returned as values (`JsonResult.error`) paired with
`STATUS_UNAVAILABLE`; nothing here exits the process.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

import httpx
from pydantic import TypeAdapter, ValidationError

from jsonfetch.config.settings import get_settings
from jsonfetch.core.errors import (
    STATUS_UNAVAILABLE,
    DecodeError,
    EncodeError,
    JsonFetchError,
    RequestBuildError,
    RequestTimeoutError,
    TransportError,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# Always sent, whatever the caller supplied for the same names.
FORCED_HEADERS: dict[str, str] = {"Content-Type": JSON_CONTENT_TYPE, "Accept": JSON_CONTENT_TYPE}

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


@dataclass(frozen=True)
class JsonResult:
    """Outcome of one round trip.

    `status_code` is the HTTP status on success and `STATUS_UNAVAILABLE` on any
    failure. Non-2xx responses are not failures: their JSON body is decoded and
    returned with the real status.
    """

    status_code: int
    data: Any = None
    error: JsonFetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> "JsonResult":
        """Raise the carried error, if any; otherwise return `self` for chaining."""
        if self.error is not None:
            raise self.error
        return self


def merge_headers(
    defaults: Mapping[str, Any] | None,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """Return a new header mapping: defaults, then overrides, then the forced JSON headers.

    Names compare case-insensitively; the spelling of the winning entry is kept.
    Neither input mapping is mutated.
    """
    merged: dict[str, tuple[str, str]] = {}
    for source in (defaults or {}, overrides or {}, FORCED_HEADERS):
        for name, value in source.items():
            merged[str(name).lower()] = (str(name), str(value))
    return {name: value for name, value in merged.values()}


def build_url(url: str, params: Mapping[str, Any] | None = None) -> str:
    """Append URL-encoded `params` to `url`, keeping any existing query and fragment.

    `None` values are skipped; other values are rendered with `str()`.

    Raises:
        ValueError: If `url` cannot be split (e.g. a malformed IPv6 host).
    """
    parts = urlsplit(url)
    if not params:
        return url

    pairs = [(str(k), str(v)) for k, v in params.items() if v is not None]
    if not pairs:
        return url
    query = urlencode(pairs, quote_via=quote)
    if parts.query:
        query = f"{parts.query}&{query}"
    return urlunsplit(parts._replace(query=query))


def _validate_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise RequestBuildError(f"invalid URL {url!r}: {exc}", context={"url": url}) from exc
    if parsed.scheme not in ("http", "https"):
        raise RequestBuildError(
            f"invalid URL {url!r}: scheme must be http or https", context={"url": url}
        )
    if not parsed.host:
        raise RequestBuildError(f"invalid URL {url!r}: missing host", context={"url": url})


def _build_headers(headers: Mapping[str, str]) -> httpx.Headers:
    # Header values go on the wire as ASCII; anything else cannot be sent.
    try:
        return httpx.Headers(headers)
    except (UnicodeEncodeError, TypeError) as exc:
        raise RequestBuildError(f"invalid header value: {exc}") from exc


def _encode_body(body: Any) -> bytes | None:
    if body is None:
        return None
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"request body is not JSON-serializable: {exc}") from exc


def _decode_body(response: httpx.Response, into: Any) -> Any:
    context = {"status_code": response.status_code}
    if not response.content:
        return None

    try:
        payload = response.json()
    except ValueError as exc:
        raise DecodeError(f"response body is not valid JSON: {exc}", context=context) from exc

    if into is None:
        return payload
    try:
        return TypeAdapter(into).validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(
            f"response JSON does not match {getattr(into, '__name__', into)!s}: {exc}",
            context=context,
        ) from exc


def _round_trip(
    method: str,
    url: str,
    *,
    params: Mapping[str, Any] | None,
    body: Any,
    headers: Mapping[str, Any] | None,
    into: Any,
    timeout_seconds: float | None,
    transport: httpx.BaseTransport | None,
) -> tuple[int, Any]:
    if method not in SUPPORTED_METHODS:
        raise RequestBuildError(f"unsupported method {method!r}")

    try:
        full_url = build_url(url, params)
    except ValueError as exc:
        raise RequestBuildError(f"invalid URL {url!r}: {exc}") from exc
    _validate_url(full_url)

    content = _encode_body(body)

    settings = get_settings()
    request_headers = _build_headers(merge_headers({"User-Agent": settings.http.user_agent}, headers))
    timeout = settings.http.timeout_seconds if timeout_seconds is None else timeout_seconds

    logger.debug("%s %s", method, full_url)
    try:
        with httpx.Client(timeout=timeout, transport=transport, follow_redirects=True) as client:
            response = client.request(method, full_url, content=content, headers=request_headers)
            return response.status_code, _decode_body(response, into)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
        raise RequestBuildError(f"invalid URL {full_url!r}: {exc}") from exc
    except httpx.TimeoutException as exc:
        raise RequestTimeoutError(f"{method} {full_url} timed out after {timeout}s: {exc}") from exc
    except httpx.RequestError as exc:
        raise TransportError(f"{method} {full_url} failed: {exc}") from exc


def request_json(
    method: str,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    body: Any = None,
    headers: Mapping[str, Any] | None = None,
    into: Any = None,
    timeout_seconds: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> JsonResult:
    """Perform one JSON round trip and return its outcome.

    Args:
        method: GET, POST, PUT or DELETE (case-insensitive).
        url: Absolute http(s) URL.
        params: Query parameters appended to `url`.
        body: JSON-serializable request body, or None for no body.
        headers: Extra headers; `Content-Type`/`Accept` are always `application/json`.
        into: Optional type the decoded JSON is validated into (Pydantic model,
            dataclass, typing construct). Without it the raw decoded value is returned.
        timeout_seconds: Per-request timeout; defaults to `settings.http.timeout_seconds`.
        transport: Optional httpx transport (e.g. `httpx.MockTransport`).
    """
    method = method.upper()
    try:
        status_code, data = _round_trip(
            method,
            url,
            params=params,
            body=body,
            headers=headers,
            into=into,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )
    except JsonFetchError as exc:
        exc.context.setdefault("method", method)
        exc.context.setdefault("url", url)
        logger.warning("%s %s failed (%s): %s", method, url, type(exc).__name__, str(exc))
        return JsonResult(status_code=STATUS_UNAVAILABLE, error=exc)
    return JsonResult(status_code=status_code, data=data)


def get_json(
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, Any] | None = None,
    into: Any = None,
    timeout_seconds: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> JsonResult:
    """GET `url` (with `params` in the query string) and decode the JSON response."""
    return request_json(
        "GET",
        url,
        params=params,
        headers=headers,
        into=into,
        timeout_seconds=timeout_seconds,
        transport=transport,
    )


def post_json(
    url: str,
    *,
    body: Mapping[str, Any] | None = None,
    headers: Mapping[str, Any] | None = None,
    into: Any = None,
    timeout_seconds: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> JsonResult:
    """POST `body` as JSON to `url` and decode the JSON response."""
    return request_json(
        "POST",
        url,
        body=body,
        headers=headers,
        into=into,
        timeout_seconds=timeout_seconds,
        transport=transport,
    )


def put_json(
    url: str,
    *,
    body: Mapping[str, Any] | None = None,
    headers: Mapping[str, Any] | None = None,
    into: Any = None,
    timeout_seconds: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> JsonResult:
    """PUT `body` as JSON to `url` and decode the JSON response."""
    return request_json(
        "PUT",
        url,
        body=body,
        headers=headers,
        into=into,
        timeout_seconds=timeout_seconds,
        transport=transport,
    )


def delete_json(
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, Any] | None = None,
    into: Any = None,
    timeout_seconds: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> JsonResult:
    """DELETE `url` (with `params` in the query string) and decode the JSON response."""
    return request_json(
        "DELETE",
        url,
        params=params,
        headers=headers,
        into=into,
        timeout_seconds=timeout_seconds,
        transport=transport,
    )
