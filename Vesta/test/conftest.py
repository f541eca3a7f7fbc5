"""
Test configuration and fixtures for Vesta client tests.

Provides:
- An in-memory STOMP broker standing in for the WebSocket endpoint
- A fake REST backend served by aiohttp's test server
- Local storage, API client and service fixtures
"""

import asyncio
import itertools
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from websockets.exceptions import ConnectionClosedOK

from Vesta.api.client import VestaAPIClient
from Vesta.api.errors import ErrorHandler
from Vesta.core.client.services.persistence_service import LocalStorage
from Vesta.core.client.services.toast_service import ToastService
from Vesta.core.network.protocol import Command, Frame, FrameParser
from Vesta.core.realtime.websocket_service import WebSocketService
from Vesta.services import Services

WS_URL = "ws://broker.test:8080/ws/websocket"

_CLOSE = object()


async def eventually(predicate: Callable[[], bool], timeout: float = 2.0, interval: float = 0.01) -> bool:
    """Poll until predicate() is true or the timeout expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(interval)
    return predicate()


class FakeSocket:
    """Client side of one broker connection."""

    def __init__(self, broker: 'FakeBroker'):
        self.broker = broker
        self.incoming: asyncio.Queue = asyncio.Queue()
        self.sent: List[str] = []
        self.closed = False
        self._parser = FrameParser()

    async def send(self, data: str) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(data)
        for frame in self._parser.feed(data):
            self.broker.handle(self, frame)

    async def recv(self) -> str:
        item = await self.incoming.get()
        if item is _CLOSE:
            raise ConnectionClosedOK(None, None)
        return item

    def push(self, raw: Union[str, bytes]) -> None:
        self.incoming.put_nowait(raw)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.incoming.put_nowait(_CLOSE)


class _Connection:
    def __init__(self, socket: FakeSocket):
        self.socket = socket

    async def __aenter__(self) -> FakeSocket:
        return self.socket

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.socket.close()


class FakeBroker:
    """
    In-memory STOMP broker.

    Answers CONNECT with CONNECTED (or ERROR when rejecting), tracks
    SUBSCRIBE/UNSUBSCRIBE per socket and publishes MESSAGE frames.
    """

    def __init__(self, heartbeat: str = "0,0"):
        self.heartbeat = heartbeat
        self.reject_connect = False
        self.refuse_connections = 0
        self.sockets: List[FakeSocket] = []
        self.frames: List[Frame] = []
        self.connect_kwargs: List[Dict[str, Any]] = []
        # subscription id -> (socket, destination)
        self.subscriptions: Dict[str, Tuple[FakeSocket, str]] = {}
        self.released: Dict[str, Tuple[FakeSocket, str]] = {}
        self._message_ids = itertools.count()

    def connector(self, url: str, **kwargs) -> _Connection:
        self.connect_kwargs.append(dict(kwargs, url=url))
        if self.refuse_connections > 0:
            self.refuse_connections -= 1
            raise OSError("Connection refused")
        socket = FakeSocket(self)
        self.sockets.append(socket)
        return _Connection(socket)

    @property
    def socket(self) -> Optional[FakeSocket]:
        return self.sockets[-1] if self.sockets else None

    def frames_of(self, command: Command) -> List[Frame]:
        return [frame for frame in self.frames if frame.command == command]

    def subscribed(self, destination: str) -> bool:
        return any(dest == destination and not socket.closed
                   for socket, dest in self.subscriptions.values())

    def handle(self, socket: FakeSocket, frame: Frame) -> None:
        self.frames.append(frame)
        if frame.command == Command.CONNECT:
            if self.reject_connect:
                reply = Frame(Command.ERROR, {"message": "Access denied"}, "Bad credentials")
            else:
                reply = Frame(Command.CONNECTED, {"version": "1.2", "heart-beat": self.heartbeat})
            socket.push(reply.serialize())
        elif frame.command == Command.SUBSCRIBE:
            self.subscriptions[frame.headers["id"]] = (socket, frame.headers["destination"])
        elif frame.command == Command.UNSUBSCRIBE:
            entry = self.subscriptions.pop(frame.headers["id"], None)
            if entry is not None:
                self.released[frame.headers["id"]] = entry

    def publish(self, destination: str, body: Any, include_released: bool = False) -> int:
        """Deliver a MESSAGE to every subscriber of a destination. Returns the number of deliveries."""
        raw = body if isinstance(body, str) else json.dumps(body)
        targets = dict(self.subscriptions)
        if include_released:
            targets.update(self.released)
        delivered = 0
        for sub_id, (socket, dest) in targets.items():
            if dest != destination or socket.closed:
                continue
            headers = {
                "subscription": sub_id,
                "destination": dest,
                "message-id": f"m-{next(self._message_ids)}",
                "content-type": "application/json",
            }
            socket.push(Frame(Command.MESSAGE, headers, raw).serialize())
            delivered += 1
        return delivered

    async def drop(self) -> None:
        """Close the current connection from the broker side."""
        socket = self.socket
        if socket is None:
            return
        await socket.close()
        for sub_id, (owner, _) in list(self.subscriptions.items()):
            if owner is socket:
                del self.subscriptions[sub_id]


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: Dict[str, str]
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)


class FakeBackend:
    """Canned REST responses keyed by (method, path below /api)."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[RecordedRequest] = []
        self.base_url = ""

    def reply(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def calls(self, method: str, path: str) -> List[RecordedRequest]:
        return [r for r in self.requests if r.method == method.upper() and r.path == path]

    async def handle(self, request: web.Request) -> web.StreamResponse:
        path = "/" + request.match_info["tail"]
        body = None
        if request.can_read_body:
            text = await request.text()
            try:
                body = json.loads(text) if text else None
            except ValueError:
                body = text
        self.requests.append(RecordedRequest(request.method, path, dict(request.query), body,
                                             dict(request.headers)))

        status, payload = self.routes.get((request.method, path), (404, {"message": "Not found"}))
        if callable(payload):
            payload = payload(request)
        if payload is None:
            return web.Response(status=status)
        if isinstance(payload, str):
            return web.Response(status=status, text=payload)
        return web.json_response(payload, status=status)


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest_asyncio.fixture
async def realtime(broker: FakeBroker):
    """WebSocket service wired to the fake broker with a short retry delay."""
    service = WebSocketService(WS_URL, reconnect_delay=0.05, connector=broker.connector)
    yield service
    await service.disconnect()


@pytest_asyncio.fixture
async def backend():
    fake = FakeBackend()
    app = web.Application()
    app.router.add_route("*", "/api/{tail:.*}", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("/api"))
    yield fake
    await server.close()


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(str(tmp_path))


@pytest.fixture
def toasts() -> ToastService:
    return ToastService()


@pytest_asyncio.fixture
async def api(backend: FakeBackend, storage: LocalStorage, toasts: ToastService):
    client = VestaAPIClient(backend.base_url, storage, ErrorHandler(storage, toasts))
    yield client
    await client.close()


@pytest.fixture
def services(api: VestaAPIClient) -> Services:
    return Services(api)


def user_payload(user_id: int = 7, username: str = "ayse") -> Dict[str, Any]:
    return {"id": user_id, "username": username, "email": f"{username}@example.com", "roles": ["ROLE_USER"]}


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
