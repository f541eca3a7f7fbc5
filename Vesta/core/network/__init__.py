"""
STOMP 1.2 wire protocol used by the real-time layer.
"""

from .protocol import Command, Frame, FrameParser, negotiate_heartbeat

__all__ = ['Command', 'Frame', 'FrameParser', 'negotiate_heartbeat']
