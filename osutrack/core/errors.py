"""Error taxonomy shared by the upstream client, the store and the API."""

from __future__ import annotations

from typing import Any, Dict, Optional


class OsuTrackError(Exception):
    """Base class for failures surfaced to the caller.

    ``status_code`` is what the HTTP layer answers with and ``code`` is a
    short stable identifier placed in the error body.
    """

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.code, "detail": self.message}
        if self.details:
            body["context"] = self.details
        return body


class UpstreamUnavailable(OsuTrackError):
    """The upstream API could not be reached or answered with an error status."""

    status_code = 502
    code = "upstream_unavailable"


class UpstreamParseError(OsuTrackError):
    """The upstream answered, but not with the shape we expect."""

    status_code = 502
    code = "upstream_parse_error"


class StoreUnavailable(OsuTrackError):
    """Connection pool exhausted or a query failed."""

    status_code = 503
    code = "store_unavailable"


class BadInput(OsuTrackError):
    status_code = 400
    code = "bad_input"


__all__ = [
    "BadInput",
    "OsuTrackError",
    "StoreUnavailable",
    "UpstreamParseError",
    "UpstreamUnavailable",
]
