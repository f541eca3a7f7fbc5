"""
Real-time layer: one STOMP connection multiplexing topic subscriptions.
"""

from . import topics
from .websocket_service import Subscription, WebSocketService, websocket_service

__all__ = ['topics', 'Subscription', 'WebSocketService', 'websocket_service']
