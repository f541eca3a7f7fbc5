"""
STOMP frame protocol used on the real-time channel.
Defines frame commands, frame structure and a streaming frame parser.

Frames follow STOMP 1.2:

    COMMAND
    header1:value1
    header2:value2

    body^@

A bare EOL between frames is a heart-beat.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from Vesta.core.client.utils.exceptions import FrameParseError

NULL = "\x00"
EOL = "\n"

SUPPORTED_VERSIONS = "1.2,1.1,1.0"

_HEADER_END_RE = re.compile(rb"\r?\n\r?\n")


class Command(str, Enum):
    """
    STOMP commands understood by the client.
    """
    # client -> broker
    CONNECT = "CONNECT"
    STOMP = "STOMP"
    SEND = "SEND"
    SUBSCRIBE = "SUBSCRIBE"
    UNSUBSCRIBE = "UNSUBSCRIBE"
    DISCONNECT = "DISCONNECT"
    # broker -> client
    CONNECTED = "CONNECTED"
    MESSAGE = "MESSAGE"
    RECEIPT = "RECEIPT"
    ERROR = "ERROR"


# CONNECT and CONNECTED headers are never escaped
_RAW_HEADER_COMMANDS = (Command.CONNECT, Command.CONNECTED, Command.STOMP)

_COMMAND_NAMES = frozenset(command.value.encode("ascii") for command in Command)

_ESCAPES = (("\\", "\\\\"), ("\r", "\\r"), ("\n", "\\n"), (":", "\\c"))
_UNESCAPES = {"\\\\": "\\", "\\r": "\r", "\\n": "\n", "\\c": ":"}
_UNESCAPE_RE = re.compile(r"\\[\\rnc]")


def escape_header(value: str) -> str:
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def unescape_header(value: str) -> str:
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(0)], value)


@dataclass
class Frame:
    """
    A single STOMP frame.

    Attributes:
        command (Command): Frame command
        headers (dict): Frame headers (first occurrence wins when parsing)
        body (str): Frame body, UTF-8 text
    """
    command: Command
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def serialize(self) -> str:
        """
        Serialize the frame to its wire representation.

        Returns:
            str: Frame text terminated by NULL
        """
        headers = dict(self.headers)
        if self.body and "content-length" not in headers:
            headers["content-length"] = str(len(self.body.encode("utf-8")))

        raw = self.command in _RAW_HEADER_COMMANDS
        lines = [self.command.value]
        for key, value in headers.items():
            if raw:
                lines.append(f"{key}:{value}")
            else:
                lines.append(f"{escape_header(key)}:{escape_header(str(value))}")
        return EOL.join(lines) + EOL + EOL + self.body + NULL

    @classmethod
    def connect(cls, host: str, heartbeat: Tuple[int, int],
                headers: Optional[Dict[str, str]] = None) -> 'Frame':
        """Build a CONNECT frame announcing heart-beat intervals in milliseconds."""
        frame_headers = {
            "accept-version": SUPPORTED_VERSIONS,
            "host": host,
            "heart-beat": f"{heartbeat[0]},{heartbeat[1]}",
        }
        frame_headers.update(headers or {})
        return cls(Command.CONNECT, frame_headers)

    @classmethod
    def subscribe(cls, sub_id: str, destination: str) -> 'Frame':
        return cls(Command.SUBSCRIBE, {"id": sub_id, "destination": destination, "ack": "auto"})

    @classmethod
    def unsubscribe(cls, sub_id: str) -> 'Frame':
        return cls(Command.UNSUBSCRIBE, {"id": sub_id})

    @classmethod
    def disconnect(cls, receipt: Optional[str] = None) -> 'Frame':
        return cls(Command.DISCONNECT, {"receipt": receipt} if receipt else {})


class FrameParser:
    """
    Incremental parser turning transport messages into frames.

    A transport message may carry several frames, a partial frame or only
    heart-beat EOLs. Partial data is buffered until the frame completes.
    """

    def __init__(self):
        self._buffer = b""
        self.heartbeats = 0

    def feed(self, data: Union[str, bytes]) -> List[Frame]:
        """
        Feed raw transport data and return every complete frame.

        Raises:
            FrameParseError: if the data cannot be a STOMP frame. The buffer
                is reset so the next message starts clean.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._buffer += data

        frames = []
        while True:
            self._skip_heartbeats()
            if not self._buffer:
                break
            frame = self._next_frame()
            if frame is None:
                break
            frames.append(frame)
        return frames

    def reset(self) -> None:
        self._buffer = b""

    def _skip_heartbeats(self) -> None:
        while True:
            if self._buffer.startswith(b"\r\n"):
                self._buffer = self._buffer[2:]
            elif self._buffer.startswith(b"\n"):
                self._buffer = self._buffer[1:]
            else:
                return
            self.heartbeats += 1

    def _check_command_line(self) -> None:
        newline = self._buffer.find(b"\n")
        if newline == -1:
            if not any(name.startswith(self._buffer.rstrip(b"\r")) for name in _COMMAND_NAMES):
                self.reset()
                raise FrameParseError("Transport data does not start with a STOMP command")
        elif self._buffer[:newline].rstrip(b"\r") not in _COMMAND_NAMES:
            first = self._buffer[:newline].decode("utf-8", "replace")
            self.reset()
            raise FrameParseError(f"Unknown STOMP command: {first!r}")

    def _next_frame(self) -> Optional[Frame]:
        self._check_command_line()
        match = _HEADER_END_RE.search(self._buffer)
        if match is None:
            return None

        try:
            head = self._buffer[:match.start()].decode("utf-8")
        except UnicodeDecodeError as e:
            self.reset()
            raise FrameParseError(f"Frame headers are not valid UTF-8: {e}") from e
        lines = [line.rstrip("\r") for line in head.split("\n")]
        try:
            command = Command(lines[0])
        except ValueError:
            self.reset()
            raise FrameParseError(f"Unknown STOMP command: {lines[0]!r}")

        raw = command in _RAW_HEADER_COMMANDS
        headers: Dict[str, str] = {}
        for line in lines[1:]:
            if not line:
                continue
            key, sep, value = line.partition(":")
            if not sep:
                self.reset()
                raise FrameParseError(f"Malformed header line: {line!r}")
            if not raw:
                key, value = unescape_header(key), unescape_header(value)
            headers.setdefault(key, value)

        body_start = match.end()
        if "content-length" in headers:
            try:
                length = int(headers["content-length"])
            except ValueError:
                self.reset()
                raise FrameParseError(f"Bad content-length: {headers['content-length']!r}")
            end = body_start + length
            if len(self._buffer) < end + 1:
                return None
            if self._buffer[end:end + 1] != b"\x00":
                self.reset()
                raise FrameParseError("Frame body is not NULL terminated")
        else:
            end = self._buffer.find(b"\x00", body_start)
            if end == -1:
                return None

        try:
            body = self._buffer[body_start:end].decode("utf-8")
        except UnicodeDecodeError as e:
            self.reset()
            raise FrameParseError(f"Frame body is not valid UTF-8: {e}") from e
        self._buffer = self._buffer[end + 1:]
        return Frame(command, headers, body)


def negotiate_heartbeat(client: Tuple[int, int], server_header: Optional[str]) -> Tuple[int, int]:
    """
    Negotiate heart-beat intervals.

    Args:
        client: (cx, cy) announced by the client in milliseconds:
            cx = how often the client can send, cy = how often it wants to receive
        server_header: value of the CONNECTED ``heart-beat`` header ("sx,sy")

    Returns:
        tuple: (outgoing_ms, incoming_ms); 0 disables that direction
    """
    cx, cy = client
    try:
        sx, sy = (int(part) for part in (server_header or "0,0").split(","))
    except ValueError:
        sx, sy = 0, 0

    outgoing = 0 if cx == 0 or sy == 0 else max(cx, sy)
    incoming = 0 if cy == 0 or sx == 0 else max(cy, sx)
    return outgoing, incoming


__all__ = [
    'Command',
    'Frame',
    'FrameParser',
    'negotiate_heartbeat',
    'escape_header',
    'unescape_header',
    'SUPPORTED_VERSIONS',
]
