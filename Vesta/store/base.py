"""
Slice plumbing shared by every store slice.
"""

from typing import Any, Awaitable, Callable, Optional, TypeVar

from Vesta.core.client.services.toast_service import ToastService
from Vesta.core.client.utils.exceptions import ClientError
from Vesta.core.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")


class Slice:
    """
    One part of the client state.

    Async operations record failures in ``error`` and return None instead
    of raising. The API client has already shown a toast for them.
    """

    name = "slice"

    def __init__(self, toasts: Optional[ToastService] = None):
        self.toasts = toasts
        self.is_loading = False
        self.error: Optional[str] = None
        self._on_change: Optional[Callable[[str], None]] = None

    def bind(self, on_change: Callable[[str], None]) -> None:
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.name)

    def clear_error(self) -> None:
        self.error = None
        self._changed()

    def _success(self, message: str) -> None:
        if self.toasts is not None:
            self.toasts.success(message)

    async def _run(self, operation: Callable[[], Awaitable[R]], failure: str) -> Optional[R]:
        """
        Run one request with the loading flag set.

        Args:
            operation: zero-argument coroutine function doing the request
            failure: error text used when the server gave no message
        """
        self.is_loading = True
        self.error = None
        self._changed()
        try:
            result = await operation()
        except ClientError as e:
            logger.warning("%s: %s", failure, e)
            self.error = e.message or failure
            return None
        finally:
            self.is_loading = False
            self._changed()
        return result

    def snapshot(self) -> Any:
        raise NotImplementedError
