"""
jsonfetch: JSON-over-HTTP client helpers.

- `JsonClient` binds a base URL, default headers and a timeout for one service.
- `get_json` / `post_json` / `put_json` / `delete_json` do the same against a full URL.

Every request returns a `JsonResult`; failures come back as `result.error` with
`STATUS_UNAVAILABLE` instead of being raised.
"""

from __future__ import annotations

from jsonfetch.client import JsonClient
from jsonfetch.config.settings import Settings, get_settings
from jsonfetch.core.errors import (
    STATUS_UNAVAILABLE,
    ConfigurationError,
    DecodeError,
    EncodeError,
    JsonFetchError,
    RequestBuildError,
    RequestTimeoutError,
    TransportError,
)
from jsonfetch.core.http import (
    JsonResult,
    build_url,
    delete_json,
    get_json,
    merge_headers,
    post_json,
    put_json,
    request_json,
)
from jsonfetch.core.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "JsonClient",
    "JsonResult",
    # Free functions
    "get_json",
    "post_json",
    "put_json",
    "delete_json",
    "request_json",
    "merge_headers",
    "build_url",
    # Errors
    "STATUS_UNAVAILABLE",
    "JsonFetchError",
    "ConfigurationError",
    "RequestBuildError",
    "EncodeError",
    "TransportError",
    "RequestTimeoutError",
    "DecodeError",
    # Config
    "Settings",
    "get_settings",
    "configure_logging",
]
