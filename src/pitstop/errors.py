"""Exception hierarchy raised by the discovery and pricing core.

Each class carries the HTTP status the enclosing request layer should map it
to, so routers can translate failures without inspecting messages.
"""

from __future__ import annotations


class PitstopError(Exception):
    """Base class for all errors raised by the core."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PitstopError, ValueError):
    """Unparseable vehicle/service type or malformed address input."""

    status_code = 400


class NotFoundError(PitstopError, LookupError):
    """Account, provider, address or pricing rule does not exist."""

    status_code = 404


class ConflictError(PitstopError):
    """Duplicate entry or a provider capability mismatch."""

    status_code = 409


class ExternalServiceError(PitstopError, ConnectionError):
    """Forward geocoding failed; coordinates could not be obtained."""

    status_code = 502

    def __init__(self, message: str, *, address_text: str | None = None) -> None:
        super().__init__(message)
        self.address_text = address_text


class DiscoveryError(PitstopError):
    """Generic wrapper for any failure raised while searching workshops."""

    status_code = 500
