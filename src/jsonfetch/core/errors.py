"""
Error types returned (not raised) by request operations.

Request helpers never let expected failures escape: they wrap them in one of the
classes below and hand them back inside a `JsonResult` paired with
`STATUS_UNAVAILABLE`. Only construction (`JsonClient(...)`) raises.
"""

from __future__ import annotations

from typing import Any, Optional

# Status code reported whenever a round trip did not produce a usable response.
STATUS_UNAVAILABLE = -1


class JsonFetchError(Exception):
    """Base error for jsonfetch."""

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:  # noqa: D401
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(JsonFetchError):
    """Client handle or settings are invalid (e.g. missing base URL)."""


class RequestBuildError(JsonFetchError):
    """Request could not be built: malformed URL, unsupported scheme, bad method."""


class EncodeError(JsonFetchError):
    """Request body is not JSON-serializable."""


class TransportError(JsonFetchError):
    """Network failure: connection refused, DNS failure, protocol error."""


class RequestTimeoutError(TransportError):
    """The configured timeout elapsed before the round trip completed."""


class DecodeError(JsonFetchError):
    """Response body is not valid JSON or does not fit the decode target."""
