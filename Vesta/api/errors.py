"""
Central handling of failed REST calls.

Every failure passes through ErrorHandler.handle() before it is raised to the
call site: the user gets a fixed toast for the status, and an invalid session
clears the persisted token and user.
"""

from typing import Any, Callable, List, Optional

from Vesta.core.client.services.persistence_service import LocalStorage
from Vesta.core.client.services.toast_service import ToastService
from Vesta.core.client.utils.constants import JWT_SIGNATURE_ERROR, LOGIN_PATH
from Vesta.core.client.utils.exceptions import (
    ApiError,
    ClientError,
    NetworkError,
    ValidationError,
)
from Vesta.core.logging import get_logger

logger = get_logger(__name__)

MSG_INVALID_SESSION = "Your session information is invalid. Please log in again."
MSG_SESSION_EXPIRED = "Your session has expired. Please log in again."
MSG_FORBIDDEN = "You are not authorized to perform this action."
MSG_NOT_FOUND = "The requested resource was not found."
MSG_VALIDATION = "The information you entered contains errors."
MSG_SERVER_ERROR = "A server error occurred. Please try again later."
MSG_GENERIC = "An error occurred."
MSG_NETWORK = "Could not connect to the server. Check your internet connection."
MSG_UNEXPECTED = "An unexpected error occurred."

SessionExpiredListener = Callable[[], None]


def payload_message(payload: Any) -> Optional[str]:
    """Pull the human-readable message out of an error body."""
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        return str(message) if message else None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def is_jwt_signature_error(payload: Any) -> bool:
    if isinstance(payload, dict):
        return any(JWT_SIGNATURE_ERROR in str(payload.get(key) or "") for key in ("message", "error"))
    return isinstance(payload, str) and JWT_SIGNATURE_ERROR in payload


class ErrorHandler:
    """Maps request failures to toasts and forced logout."""

    def __init__(self, storage: LocalStorage, toasts: Optional[ToastService] = None):
        self.storage = storage
        self.toasts = toasts or ToastService()
        self._session_listeners: List[SessionExpiredListener] = []

    def add_session_expired_listener(self, listener: SessionExpiredListener) -> Callable[[], None]:
        """Register a listener fired after a forced logout (the login redirect)."""
        self._session_listeners.append(listener)

        def remove() -> None:
            if listener in self._session_listeners:
                self._session_listeners.remove(listener)

        return remove

    def handle(self, error: ClientError) -> None:
        """Surface a failure to the user. Never raises."""
        if isinstance(error, ApiError):
            self._handle_api_error(error)
        elif isinstance(error, NetworkError):
            logger.error("Network error: %s", error)
            self.toasts.error(MSG_NETWORK)
        else:
            logger.error("Request error: %s", error)
            self.toasts.error(MSG_UNEXPECTED)

    def _handle_api_error(self, error: ApiError) -> None:
        logger.warning("API error %s on %s: %s", error.status, error.url or "?", error.message)
        is_login_call = LOGIN_PATH in (error.url or "")

        if is_jwt_signature_error(error.payload):
            logger.warning("Invalid JWT signature detected - clearing auth data")
            self.storage.clear_session()
            if not is_login_call:
                self._expire_session()
                self.toasts.error(MSG_INVALID_SESSION)
            return

        status = error.status
        if status == 401:
            # A rejected login keeps its own "wrong credentials" message
            if not is_login_call:
                self.storage.clear_session()
                self._expire_session()
                self.toasts.error(MSG_SESSION_EXPIRED)
        elif status == 403:
            self.toasts.error(MSG_FORBIDDEN)
        elif status == 404:
            self.toasts.error(MSG_NOT_FOUND)
        elif status == 422:
            field_errors = error.field_errors if isinstance(error, ValidationError) else {}
            if field_errors:
                for messages in field_errors.values():
                    for message in messages:
                        self.toasts.error(str(message))
            else:
                self.toasts.error(payload_message(error.payload) or MSG_VALIDATION)
        elif status == 500:
            self.toasts.error(MSG_SERVER_ERROR)
        else:
            self.toasts.error(payload_message(error.payload) or MSG_GENERIC)

    def _expire_session(self) -> None:
        for listener in list(self._session_listeners):
            try:
                listener()
            except Exception:
                logger.exception("Session-expired listener failed")
