"""
Feature controllers built on the services and the real-time layer.
"""

from .conversation_manager import ConversationManager
from .favorite_counter import FavoriteCounter
from .notification_center import NotificationCenter
from .realtime_feed import TopicFeed

__all__ = ['TopicFeed', 'NotificationCenter', 'ConversationManager', 'FavoriteCounter']
