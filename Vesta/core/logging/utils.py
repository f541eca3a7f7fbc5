"""
Helpers for the two kinds of traffic the client logs: REST calls and
STOMP transport events.
"""

import logging
from typing import Any, Dict, Optional

from Vesta.core.logging import get_logger

_EVENT_LEVELS = {
    "connect": logging.INFO,
    "disconnect": logging.INFO,
    "error": logging.ERROR,
}


class RequestLogger:
    """Picks the level from the outcome; details go to ``extra_data`` for the JSON file handler."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(__name__)

    def log_request(self, method: str, path: str, status_code: Optional[int], duration: float,
                    extra: Optional[Dict[str, Any]] = None) -> None:
        """
        Log one REST call.

        Args:
            status_code: None when no response arrived
            duration: seconds
        """
        if status_code is None:
            level, status = logging.ERROR, "no response"
        elif status_code >= 400:
            level, status = logging.WARNING, str(status_code)
        else:
            level, status = logging.DEBUG, str(status_code)
        self.logger.log(level, "%s %s -> %s in %.0fms", method, path, status, duration * 1000,
                        extra={"extra_data": extra} if extra else None)

    def log_realtime_event(self, event_type: str, destination: Optional[str] = None,
                           data: Optional[Dict[str, Any]] = None) -> None:
        level = _EVENT_LEVELS.get(event_type, logging.DEBUG)
        if destination:
            self.logger.log(level, "STOMP %s %s", event_type, destination,
                            extra={"extra_data": data} if data else None)
        else:
            self.logger.log(level, "STOMP %s", event_type, extra={"extra_data": data} if data else None)


__all__ = [
    'RequestLogger',
]
