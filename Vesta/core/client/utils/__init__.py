"""
Utility functions and shared components for the Vesta client.
"""

from .constants import (
    TOKEN_KEY,
    USER_KEY,
    DEFAULT_PAGE_SIZE,
    MAX_TOAST_HISTORY,
)
from .exceptions import (
    ClientError,
    NetworkError,
    ApiError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    ServerError,
    WsConnectionError,
    StompError,
    FrameParseError,
    ResponseFormatError,
    error_for_status,
)

__all__ = [
    'ClientError',
    'NetworkError',
    'ApiError',
    'UnauthorizedError',
    'ForbiddenError',
    'NotFoundError',
    'ValidationError',
    'ServerError',
    'WsConnectionError',
    'StompError',
    'FrameParseError',
    'ResponseFormatError',
    'error_for_status',
    'TOKEN_KEY',
    'USER_KEY',
    'DEFAULT_PAGE_SIZE',
    'MAX_TOAST_HISTORY',
]
