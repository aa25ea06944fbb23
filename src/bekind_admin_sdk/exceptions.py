from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class AuthError(ApiError):
    """401: bad credentials on login, or an expired/rejected session."""


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400/422 business or validation failure reported by the server."""


class ConflictError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class InvalidLoginResponseError(ApiError):
    """Login answered 2xx but carried no usable token."""
