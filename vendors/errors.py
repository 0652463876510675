"""
Error types raised by the vendor proxy handlers.

Every error carries the HTTP status the gateway answers with and a message
that is safe to show to the caller. Credentials never end up in either.
"""

from typing import Any, Optional


class VendorError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidRequest(VendorError):
    status_code = 400


class ConfigurationError(VendorError):
    """Required credentials or endpoints are missing from the environment."""

    status_code = 500


class VendorResponseError(VendorError):
    """The vendor answered with a non-success status."""


class VendorUnavailable(VendorError):
    """Transport failure or an unparseable vendor payload."""

    status_code = 500
