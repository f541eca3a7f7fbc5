"""
STOMP-over-WebSocket subscription manager.

Presents a synchronous-looking ``subscribe(destination, callback)`` /
``unsubscribe(destination)`` API over a reconnecting transport, so feature
code never needs to know whether the socket is currently connected.

Subscriptions requested before the handshake completes are queued and
established in arrival order as soon as the broker answers CONNECTED.
After a transport drop the connection is retried indefinitely with a fixed
delay; live subscriptions are not restored, callers re-subscribe from a
connect listener.
"""

import asyncio
import inspect
import itertools
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse

import websockets
from websockets.exceptions import WebSocketException

from Vesta.config import config
from Vesta.core.client.utils.exceptions import FrameParseError, StompError, WsConnectionError
from Vesta.core.logging import get_logger
from Vesta.core.logging.utils import RequestLogger
from Vesta.core.network.protocol import EOL, Command, Frame, FrameParser, negotiate_heartbeat

logger = get_logger(__name__)

MessageCallback = Callable[[Any], Union[None, Awaitable[None]]]
ConnectListener = Callable[[], Any]

_TRANSPORT_ERRORS = (OSError, WebSocketException, WsConnectionError, asyncio.TimeoutError)


class Subscription:
    """Handle for a live subscription."""

    def __init__(self, sub_id: str, destination: str, callback: MessageCallback,
                 service: 'WebSocketService'):
        self.id = sub_id
        self.destination = destination
        self.callback = callback
        self.active = True
        self._service = service

    def unsubscribe(self) -> None:
        """Release this registration. No-op if it was already released."""
        self._service._release(self)

    def __repr__(self) -> str:
        return f"Subscription(id={self.id!r}, destination={self.destination!r}, active={self.active})"


class WebSocketService:
    """
    Single STOMP client multiplexing topic subscriptions.

    Every destination maps to exactly one callback; subscribing again to the
    same destination releases the previous registration first.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        reconnect_delay: Optional[float] = None,
        heartbeat_outgoing: Optional[float] = None,
        heartbeat_incoming: Optional[float] = None,
        connect_headers: Optional[Dict[str, str]] = None,
        connector: Optional[Callable[..., Any]] = None,
        open_timeout: float = 10.0,
    ):
        """
        Initialize the service. Nothing is opened until connect() is called.

        Args:
            url (str): WebSocket endpoint of the STOMP broker
            reconnect_delay (float): Fixed delay between connection attempts in seconds
            heartbeat_outgoing (float): Interval the client can send heart-beats at, in seconds
            heartbeat_incoming (float): Interval the client wants heart-beats at, in seconds
            connect_headers (dict): Extra CONNECT headers, e.g. Authorization
            connector: Callable returning an async context manager for the socket;
                defaults to websockets.connect
            open_timeout (float): Timeout for the socket opening handshake
        """
        self.url = url or config.WS_URL
        self.reconnect_delay = config.RECONNECT_DELAY_SECONDS if reconnect_delay is None else reconnect_delay
        outgoing = config.HEARTBEAT_OUTGOING_SECONDS if heartbeat_outgoing is None else heartbeat_outgoing
        incoming = config.HEARTBEAT_INCOMING_SECONDS if heartbeat_incoming is None else heartbeat_incoming
        self._heartbeat: Tuple[int, int] = (int(outgoing * 1000), int(incoming * 1000))
        self.connect_headers: Dict[str, str] = dict(connect_headers or {})
        self.open_timeout = open_timeout
        self._connector = connector or websockets.connect

        self._subscriptions: Dict[str, Subscription] = {}
        self._by_id: Dict[str, Subscription] = {}
        self._pending: List[Tuple[str, MessageCallback]] = []
        self._connect_listeners: List[ConnectListener] = []
        self._ids = itertools.count()

        self._connected = False
        self._closing = False
        self._task: Optional[asyncio.Task] = None
        self._ws = None
        self._outbox: Optional[asyncio.Queue] = None
        self._connected_event: Optional[asyncio.Event] = None
        self._request_logger = RequestLogger(logger)

    @property
    def is_connected(self) -> bool:
        """True only between CONNECTED and the next drop or disconnect."""
        return self._connected

    @property
    def active(self) -> bool:
        """True while the connection loop is running, connected or not."""
        return self._task is not None and not self._task.done()

    @property
    def destinations(self) -> List[str]:
        """Destinations with a live subscription."""
        return list(self._subscriptions)

    @property
    def pending_destinations(self) -> List[str]:
        """Destinations waiting for the handshake, in arrival order."""
        return [destination for destination, _ in self._pending]

    def connect(self) -> None:
        """
        Start the connection loop. Calling it while active is a no-op.

        Must be called from a running event loop.
        """
        if self.active:
            return
        loop = asyncio.get_running_loop()
        self._closing = False
        self._connected_event = asyncio.Event()
        self._task = loop.create_task(self._run())
        self._task.add_done_callback(self._on_task_done)
        logger.debug("WebSocket connection loop started for %s", self.url)

    async def wait_until_connected(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the next successful handshake.

        Returns:
            bool: True if connected, False on timeout or when not active
        """
        if self._connected:
            return True
        if self._connected_event is None or not self.active:
            return False
        try:
            await asyncio.wait_for(self._connected_event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return self._connected

    def subscribe(self, destination: str, callback: MessageCallback) -> Optional[Subscription]:
        """
        Subscribe a callback to a destination.

        Args:
            destination (str): Topic destination, e.g. /topic/notifications/7
            callback: Called with the JSON-decoded body of every MESSAGE;
                may be a coroutine function

        Returns:
            Subscription: handle when connected, None when the request was queued
        """
        if not self._connected:
            logger.info("WebSocket not connected yet, queuing subscription: %s", destination)
            self._pending.append((destination, callback))
            return None
        return self._do_subscribe(destination, callback)

    def unsubscribe(self, destination: str) -> None:
        """Release the live subscription for a destination, if any."""
        subscription = self._subscriptions.get(destination)
        if subscription is None:
            return
        self._release(subscription)
        logger.info("Unsubscribed from %s", destination)

    def add_connect_listener(self, listener: ConnectListener) -> Callable[[], None]:
        """
        Register a listener called after every successful handshake.

        Returns:
            callable: removes the listener
        """
        self._connect_listeners.append(listener)

        def remove() -> None:
            if listener in self._connect_listeners:
                self._connect_listeners.remove(listener)

        return remove

    async def disconnect(self) -> None:
        """
        Release every subscription, drop queued requests and tear down the
        transport. Safe to call repeatedly.
        """
        for subscription in list(self._subscriptions.values()):
            self._release(subscription)
        self._subscriptions.clear()
        self._by_id.clear()
        self._pending = []
        self._closing = True

        task, self._task = self._task, None
        ws = self._ws
        if ws is not None and self._connected:
            try:
                await ws.send(Frame.disconnect().serialize())
            except _TRANSPORT_ERRORS as e:
                logger.debug("DISCONNECT frame not delivered: %s", e)
        self._connected = False

        if task is not None and not task.done():
            task.cancel()
            if task is not asyncio.current_task():
                await asyncio.gather(task, return_exceptions=True)
        logger.info("WebSocket disconnected")

    def _do_subscribe(self, destination: str, callback: MessageCallback) -> Optional[Subscription]:
        if not self.active:
            return None
        existing = self._subscriptions.get(destination)
        if existing is not None:
            self._release(existing)

        subscription = Subscription(f"sub-{next(self._ids)}", destination, callback, self)
        self._subscriptions[destination] = subscription
        self._by_id[subscription.id] = subscription
        self._enqueue(Frame.subscribe(subscription.id, destination))
        self._request_logger.log_realtime_event("subscribe", destination)
        return subscription

    def _release(self, subscription: Subscription) -> None:
        if not subscription.active:
            return
        subscription.active = False
        if self._subscriptions.get(subscription.destination) is subscription:
            del self._subscriptions[subscription.destination]
        self._by_id.pop(subscription.id, None)
        if self._connected:
            self._enqueue(Frame.unsubscribe(subscription.id))

    def _enqueue(self, frame: Frame) -> None:
        if self._outbox is None:
            logger.debug("No open transport, dropping %s frame", frame.command.value)
            return
        self._outbox.put_nowait(frame.serialize())

    async def _run(self) -> None:
        while not self._closing:
            try:
                await self._session()
            except _TRANSPORT_ERRORS as e:
                self._request_logger.log_realtime_event("error", self.url, {"error": str(e)})
            finally:
                self._transport_down()

            if self._closing:
                break
            logger.info("Reconnecting to %s in %.1f seconds...", self.url, self.reconnect_delay)
            await asyncio.sleep(self.reconnect_delay)

    async def _session(self) -> None:
        host = urlparse(self.url).hostname or "localhost"
        async with self._connector(self.url, open_timeout=self.open_timeout, ping_interval=None) as ws:
            self._ws = ws
            parser = FrameParser()
            await ws.send(Frame.connect(host, self._heartbeat, self.connect_headers).serialize())
            connected, leftover = await self._await_connected(ws, parser)

            outgoing_ms, incoming_ms = negotiate_heartbeat(self._heartbeat, connected.headers.get("heart-beat"))
            logger.debug("Heart-beat negotiated: outgoing=%dms incoming=%dms", outgoing_ms, incoming_ms)

            outbox: asyncio.Queue = asyncio.Queue()
            self._outbox = outbox
            self._on_connected()
            for frame in leftover:
                await self._dispatch(frame)

            writer = asyncio.ensure_future(self._writer(ws, outbox, outgoing_ms / 1000.0))
            try:
                await self._reader(ws, parser, incoming_ms / 1000.0)
            finally:
                writer.cancel()
                await asyncio.gather(writer, return_exceptions=True)

    async def _await_connected(self, ws, parser: FrameParser) -> Tuple[Frame, List[Frame]]:
        while True:
            raw = await asyncio.wait_for(ws.recv(), self.open_timeout)
            try:
                frames = parser.feed(raw)
            except FrameParseError as e:
                raise WsConnectionError(f"Broken STOMP handshake: {e}")
            for index, frame in enumerate(frames):
                if frame.command == Command.CONNECTED:
                    return frame, frames[index + 1:]
                if frame.command == Command.ERROR:
                    raise StompError(frame.headers.get("message", "STOMP handshake rejected"),
                                     frame.headers, frame.body)

    def _on_connected(self) -> None:
        self._connected = True
        if self._connected_event is not None:
            self._connected_event.set()
        self._request_logger.log_realtime_event("connect", self.url)

        pending, self._pending = self._pending, []
        for destination, callback in pending:
            self._do_subscribe(destination, callback)

        for listener in list(self._connect_listeners):
            try:
                result = listener()
                if inspect.isawaitable(result):
                    asyncio.ensure_future(result)
            except Exception:
                logger.exception("Connect listener failed")

    def _transport_down(self) -> None:
        was_connected = self._connected
        self._connected = False
        self._ws = None
        self._outbox = None
        if self._connected_event is not None:
            self._connected_event.clear()

        if self._subscriptions:
            logger.warning("Transport lost, %d subscription(s) not restored: %s",
                           len(self._subscriptions), ", ".join(self._subscriptions))
            for subscription in self._subscriptions.values():
                subscription.active = False
            self._subscriptions.clear()
            self._by_id.clear()
        if was_connected:
            self._request_logger.log_realtime_event("disconnect", self.url)

    async def _reader(self, ws, parser: FrameParser, incoming: float) -> None:
        # Broker silence for twice the negotiated interval means a dead link
        timeout = incoming * 2 if incoming else None
        while True:
            try:
                raw = await asyncio.wait_for(ws.recv(), timeout)
            except asyncio.TimeoutError:
                raise WsConnectionError(f"No heart-beat from broker within {timeout:.1f}s")

            try:
                frames = parser.feed(raw)
            except FrameParseError as e:
                logger.error("Dropping unparseable transport data: %s", e)
                continue
            for frame in frames:
                await self._dispatch(frame)

    @staticmethod
    async def _writer(ws, outbox: asyncio.Queue, outgoing: float) -> None:
        while True:
            try:
                data = await asyncio.wait_for(outbox.get(), outgoing or None)
            except asyncio.TimeoutError:
                data = EOL
            await ws.send(data)

    async def _dispatch(self, frame: Frame) -> None:
        if frame.command == Command.MESSAGE:
            subscription = self._by_id.get(frame.headers.get("subscription", ""))
            if subscription is None:
                subscription = self._subscriptions.get(frame.headers.get("destination", ""))
            if subscription is None or not subscription.active:
                logger.debug("Dropping message for released subscription: %s",
                             frame.headers.get("destination"))
                return
            await self._deliver(subscription, frame)
        elif frame.command == Command.ERROR:
            self._request_logger.log_realtime_event(
                "error", frame.headers.get("destination"),
                {"message": frame.headers.get("message", ""), "body": frame.body},
            )
        else:
            logger.debug("Ignoring %s frame", frame.command.value)

    @staticmethod
    async def _deliver(subscription: Subscription, frame: Frame) -> None:
        try:
            data = json.loads(frame.body)
        except ValueError as e:
            logger.error("Error parsing WebSocket message on %s: %s", subscription.destination, e)
            return

        try:
            result = subscription.callback(data)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Subscriber for %s failed", subscription.destination)

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("WebSocket connection loop stopped: %r", error)


websocket_service = WebSocketService()

__all__ = [
    'WebSocketService',
    'Subscription',
    'websocket_service',
]
