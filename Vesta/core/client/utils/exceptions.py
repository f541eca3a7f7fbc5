"""
Custom exceptions for the Vesta client.
"""

from typing import Any, Dict, List, Optional


class ClientError(Exception):
    """Base exception for client errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class NetworkError(ClientError):
    """The request was sent but no response arrived."""
    pass


class ApiError(ClientError):
    """The server answered with an error status."""

    def __init__(self, status: int, message: str, payload: Any = None, url: str = ""):
        super().__init__(message, {"status": status, "url": url} if url else {"status": status})
        self.status = status
        self.payload = payload
        self.url = url


class UnauthorizedError(ApiError):
    """401 - credentials rejected or session no longer valid."""
    pass


class ForbiddenError(ApiError):
    """403 - authenticated but not allowed."""
    pass


class NotFoundError(ApiError):
    """404 - resource does not exist."""
    pass


class ValidationError(ApiError):
    """422 - request body failed validation."""

    @property
    def field_errors(self) -> Dict[str, List[str]]:
        if isinstance(self.payload, dict) and isinstance(self.payload.get("errors"), dict):
            errors = {}
            for name, value in self.payload["errors"].items():
                errors[name] = value if isinstance(value, list) else [value]
            return errors
        return {}


class ServerError(ApiError):
    """5xx - the backend failed."""
    pass


class WsConnectionError(ClientError):
    """Exception raised for WebSocket connection-related errors."""
    pass


class StompError(WsConnectionError):
    """The broker answered with an ERROR frame or broke the handshake."""

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None, body: str = ""):
        super().__init__(message, dict(headers or {}))
        self.headers = dict(headers or {})
        self.body = body


class ResponseFormatError(ClientError):
    """A response body does not have the shape the endpoint documents."""
    pass


class FrameParseError(ClientError):
    """Raw transport data could not be decoded into a STOMP frame."""
    pass


_STATUS_ERRORS = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    422: ValidationError,
}


def error_for_status(status: int, message: str, payload: Any = None, url: str = "") -> ApiError:
    """Build the ApiError subclass matching an HTTP status."""
    if status >= 500:
        return ServerError(status, message, payload, url)
    cls = _STATUS_ERRORS.get(status, ApiError)
    return cls(status, message, payload, url)
