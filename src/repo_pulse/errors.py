"""Exception hierarchy for failed repository analyses."""

from __future__ import annotations

from datetime import datetime


class FetchError(Exception):
    """Base exception for a failed fetch or aggregation.

    ``kind`` names the failure category shown to the user.
    """

    kind = "Unknown"
    status_code: int | None = None


class NotFoundError(FetchError):
    """Raised when the repository doesn't exist or isn't accessible."""

    kind = "NotFound"


class RateLimitedError(FetchError):
    """Raised when the upstream API quota is exhausted."""

    kind = "RateLimited"

    def __init__(self, message: str, reset_at: datetime | None = None):
        super().__init__(message)
        self.reset_at = reset_at


class AuthenticationError(FetchError):
    """Raised when the token is rejected."""

    kind = "Authentication"


class TransportError(FetchError):
    """Raised on connection failures, timeouts and upstream 5xx responses."""

    kind = "Transport"


class InvalidResponseShapeError(FetchError):
    """Raised when a payload can't be parsed into the data model."""

    kind = "InvalidResponseShape"


class InvalidInputError(FetchError):
    """Raised for a malformed owner/repo identity or repository URL."""

    kind = "InvalidInput"
