"""
Reusable JSON client handle.

A `JsonClient` binds a base URL, default headers and a timeout for one target
service. It holds no mutable state: every call merges headers into a fresh
mapping and builds its own URL, so a single handle can be shared across threads.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from jsonfetch.config.settings import Settings, get_settings
from jsonfetch.core.errors import ConfigurationError
from jsonfetch.core.http import JsonResult, merge_headers, request_json


class JsonClient:
    """JSON HTTP client bound to one base URL."""

    def __init__(
        self,
        base_url: str,
        default_headers: Mapping[str, Any] | None = None,
        timeout_seconds: float | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigurationError('parameter "base_url" is required')
        if timeout_seconds is None:
            timeout_seconds = get_settings().http.timeout_seconds
        # Also rejects NaN, which compares false against everything.
        if not timeout_seconds > 0:
            raise ConfigurationError(
                "timeout_seconds must be > 0", context={"timeout_seconds": timeout_seconds}
            )

        self._base_url = base_url
        # Private copy: later changes to the caller's mapping do not leak in.
        self._default_headers = {str(k): str(v) for k, v in (default_headers or {}).items()}
        self._timeout_seconds = float(timeout_seconds)
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        base_url: str,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> "JsonClient":
        """Build a handle whose default headers and timeout come from settings."""
        settings = settings or get_settings()
        headers = {"User-Agent": settings.http.user_agent, **settings.http.default_headers}
        return cls(
            base_url,
            headers,
            settings.http.timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._default_headers)

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def url_for(self, path: str) -> str:
        """Return base URL + path (plain concatenation; callers own the slashes)."""
        return self._base_url + path

    def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        into: Any = None,
    ) -> JsonResult:
        return self._send("GET", path, params=params, headers=headers, into=into)

    def post_json(
        self,
        path: str,
        *,
        body: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        into: Any = None,
    ) -> JsonResult:
        return self._send("POST", path, body=body, headers=headers, into=into)

    def put_json(
        self,
        path: str,
        *,
        body: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        into: Any = None,
    ) -> JsonResult:
        return self._send("PUT", path, body=body, headers=headers, into=into)

    def delete_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        into: Any = None,
    ) -> JsonResult:
        return self._send("DELETE", path, params=params, headers=headers, into=into)

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, Any] | None = None,
        into: Any = None,
    ) -> JsonResult:
        return request_json(
            method,
            self.url_for(path),
            params=params,
            body=body,
            headers=merge_headers(self._default_headers, headers),
            into=into,
            timeout_seconds=self._timeout_seconds,
            transport=self._transport,
        )

    def __repr__(self) -> str:
        return f"JsonClient(base_url={self._base_url!r}, timeout_seconds={self._timeout_seconds})"
