"""Stencil exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Only upstream failures are allowed to abort an ingestion call; per-field
anomalies are absorbed by coercion fallbacks and never raised.
"""

from __future__ import annotations


class StencilError(Exception):
    """Base exception for all Stencil failures."""


class StencilConfigError(StencilError):
    """Raised for invalid runtime configuration."""


class StencilFieldMapError(StencilError):
    """Raised for unreadable or invalid field-map override files."""


class StencilUpstreamError(StencilError):
    """Raised when the remote source answers a page request unsuccessfully.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
            request never produced a response.
        body: Raw response body or transport error text.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
