"""Error taxonomy for the catalog service.

Domain code raises these; the HTTP layer renders them as
``{"error": code, "message": message}`` with ``status_code``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base exception for catalog errors.

    Attributes:
        message: Short human-readable message, safe to return to callers.
        context: Extra details for logs only; never serialized to clients.
    """

    code = "internal_error"
    status_code = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class InvalidArgument(CatalogError):
    """Bad or missing caller input."""

    code = "invalid_argument"
    status_code = 400


class OutOfRange(InvalidArgument):
    """Offset points past the end of the sequence being paginated."""

    code = "out_of_range"


class NotFound(CatalogError):
    code = "not_found"
    status_code = 404


class StorageError(CatalogError):
    code = "storage_error"
    status_code = 500


class UpstreamFailure(CatalogError):
    """Base for failures of the external song info lookup."""

    code = "upstream_failure"
    status_code = 500


class UpstreamUnavailable(UpstreamFailure):
    """Transport failure or timeout talking to the lookup."""

    code = "upstream_unavailable"


class UpstreamError(UpstreamFailure):
    """Lookup answered with a non-success status."""

    code = "upstream_error"

    def __init__(self, message: str, status: Optional[int] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
        self.status = status


class UpstreamBadResponse(UpstreamFailure):
    """Lookup body could not be decoded into the expected shape."""

    code = "upstream_bad_response"


class UpstreamIncomplete(UpstreamFailure):
    """Lookup succeeded but left releaseDate, text or link empty."""

    code = "upstream_incomplete"


__all__ = [
    "CatalogError",
    "InvalidArgument",
    "OutOfRange",
    "NotFound",
    "StorageError",
    "UpstreamFailure",
    "UpstreamUnavailable",
    "UpstreamError",
    "UpstreamBadResponse",
    "UpstreamIncomplete",
]
