"""
Custom Exception Classes

This module defines the error taxonomy for channelframe. Every lookup failure
carries a structured ErrorKind and, where one exists, the upstream HTTP status,
so callers classify errors by type rather than by message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    AUTH_FAILURE = "auth_failure"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_SERVER_ERROR = "upstream_server_error"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    INTERNAL_ERROR = "internal_error"


class ChannelFrameError(Exception):
    """Base exception for the channelframe application."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class ChannelLookupError(ChannelFrameError):
    """Raised when resolving an address to its most active channel fails."""

    kind: ErrorKind = ErrorKind.UPSTREAM_UNAVAILABLE

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        address: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.address = address
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        details = self.message
        if self.status_code is not None:
            details = f"{details} (status {self.status_code})"
        if self.address:
            details = f"{details} for address {self.address}"
        if self.original_error is not None:
            details = f"{details}: {self.original_error}"
        return details


class InvalidAddressError(ChannelLookupError):
    """Raised when the address is missing or not a 0x-prefixed hex address."""

    kind = ErrorKind.INVALID_INPUT


class NeynarAuthError(ChannelLookupError):
    """Neynar rejected the API key (401)."""

    kind = ErrorKind.AUTH_FAILURE


class NeynarForbiddenError(ChannelLookupError):
    """Neynar refused access to the resource (403)."""

    kind = ErrorKind.FORBIDDEN


class NeynarNotFoundError(ChannelLookupError):
    """Neynar has no such resource (404). Resolved as an empty result, not a failure."""

    kind = ErrorKind.NOT_FOUND


class NeynarRateLimitError(ChannelLookupError):
    """Rate limit exceeded (429)."""

    kind = ErrorKind.RATE_LIMITED


class NeynarServerError(ChannelLookupError):
    """Neynar answered with a 5xx status."""

    kind = ErrorKind.UPSTREAM_SERVER_ERROR


class NeynarUnavailableError(ChannelLookupError):
    """Network, timeout or parse failure, or any other unexpected upstream answer."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class ImageLoadError(ChannelFrameError):
    """Raised when a template, artwork or placeholder image cannot be loaded."""

    def __init__(self, source: str, original_error: Optional[BaseException] = None):
        self.source = source
        self.original_error = original_error
        details = f"Failed to load image from {source}"
        if original_error is not None:
            details = f"{details}: {original_error}"
        super().__init__(details)
