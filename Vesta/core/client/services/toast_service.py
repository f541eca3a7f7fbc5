"""
Transient user-facing notices ("toasts").
Keeps a bounded history and forwards every toast to registered listeners.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

from Vesta.core.client.utils.constants import MAX_TOAST_HISTORY
from Vesta.core.logging import get_logger

logger = get_logger(__name__)


class ToastLevel(Enum):
    """Severity of a toast."""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Toast:
    """A single notice shown to the user."""
    level: ToastLevel
    message: str
    created_at: float = field(default_factory=time.time)

    def format(self) -> str:
        return f"[{self.level.value}] {self.message}"


ToastListener = Callable[[Toast], None]


class ToastService:
    """
    Collects toasts for whatever front end is attached.

    A listener failure is logged and never reaches the caller that raised
    the toast.
    """

    def __init__(self, max_history: int = MAX_TOAST_HISTORY):
        self._history: List[Toast] = []
        self._listeners: List[ToastListener] = []
        self._max_history = max_history

    @property
    def history(self) -> List[Toast]:
        return self._history.copy()

    def add_listener(self, listener: ToastListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def show(self, level: ToastLevel, message: str) -> Toast:
        toast = Toast(level, message)
        self._history.append(toast)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        for listener in list(self._listeners):
            try:
                listener(toast)
            except Exception:
                logger.exception("Toast listener failed")
        return toast

    def success(self, message: str) -> Toast:
        return self.show(ToastLevel.SUCCESS, message)

    def info(self, message: str) -> Toast:
        return self.show(ToastLevel.INFO, message)

    def warning(self, message: str) -> Toast:
        return self.show(ToastLevel.WARNING, message)

    def error(self, message: str) -> Toast:
        return self.show(ToastLevel.ERROR, message)

    def clear(self) -> None:
        self._history.clear()
