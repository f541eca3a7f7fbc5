"""
Base for client-side state fed by one real-time topic.
"""

from typing import Any, Callable, List, Optional

from Vesta.core.logging import get_logger
from Vesta.core.realtime.websocket_service import Subscription, WebSocketService, websocket_service

logger = get_logger(__name__)

ChangeListener = Callable[[], None]


class TopicFeed:
    """
    Keeps one topic subscription alive across reconnects and tells
    listeners when local state changed.

    Subclasses implement handle_push().
    """

    def __init__(self, realtime: Optional[WebSocketService] = None):
        self._realtime = realtime or websocket_service
        self._destination: Optional[str] = None
        self._remove_connect_listener: Optional[Callable[[], None]] = None
        self._listeners: List[ChangeListener] = []

    @property
    def destination(self) -> Optional[str]:
        return self._destination

    def attach(self, destination: str) -> Optional[Subscription]:
        """
        Subscribe handle_push to a destination and re-subscribe after every
        reconnect.

        Returns:
            Subscription: handle when connected, None when queued
        """
        self.detach()
        self._destination = destination
        self._remove_connect_listener = self._realtime.add_connect_listener(self._resubscribe)
        return self._realtime.subscribe(destination, self.handle_push)

    def detach(self) -> None:
        if self._remove_connect_listener is not None:
            self._remove_connect_listener()
            self._remove_connect_listener = None
        if self._destination is not None:
            self._realtime.unsubscribe(self._destination)
            self._destination = None

    def _resubscribe(self) -> None:
        # Queued subscriptions are already live when connect listeners run
        if self._destination and self._destination not in self._realtime.destinations:
            logger.info("Re-subscribing to %s after reconnect", self._destination)
            self._realtime.subscribe(self._destination, self.handle_push)

    def add_listener(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("State listener failed")

    def handle_push(self, payload: Any) -> Any:
        raise NotImplementedError
