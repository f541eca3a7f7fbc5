"""
Configuration module for the Vesta client.
Stores endpoint addresses, timing settings and the local state location.
"""

import os
from typing import Dict, Any


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return float(value)


class Config:
    """Client configuration class."""

    # REST API
    API_BASE_URL = os.environ.get("VESTA_API_URL", "http://localhost:8080/api")
    REQUEST_TIMEOUT_SECONDS = _env_float("VESTA_REQUEST_TIMEOUT", 10.0)

    # Real-time transport (raw WebSocket leg of the SockJS endpoint)
    WS_URL = os.environ.get("VESTA_WS_URL", "ws://localhost:8080/ws/websocket")
    RECONNECT_DELAY_SECONDS = _env_float("VESTA_RECONNECT_DELAY", 5.0)
    HEARTBEAT_INCOMING_SECONDS = 4.0
    HEARTBEAT_OUTGOING_SECONDS = 4.0

    # Local storage (bearer token and serialized user)
    STATE_DIR = os.environ.get("VESTA_STATE_DIR", os.path.join(os.path.expanduser("~"), ".vesta"))
    STATE_FILE = "local_storage.json"

    # Comparison
    MAX_COMPARE_SELECTIONS = 3

    @classmethod
    def get_config(cls) -> Dict[str, Any]:
        """Get all configuration values as a dictionary."""
        return {
            "API_BASE_URL": cls.API_BASE_URL,
            "REQUEST_TIMEOUT_SECONDS": cls.REQUEST_TIMEOUT_SECONDS,
            "WS_URL": cls.WS_URL,
            "RECONNECT_DELAY_SECONDS": cls.RECONNECT_DELAY_SECONDS,
            "HEARTBEAT_INCOMING_SECONDS": cls.HEARTBEAT_INCOMING_SECONDS,
            "HEARTBEAT_OUTGOING_SECONDS": cls.HEARTBEAT_OUTGOING_SECONDS,
            "STATE_DIR": cls.STATE_DIR,
            "STATE_FILE": cls.STATE_FILE,
            "MAX_COMPARE_SELECTIONS": cls.MAX_COMPARE_SELECTIONS,
        }


# Create config instance
config = Config()
