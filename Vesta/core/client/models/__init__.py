"""
Data models for the Vesta client.
"""

from .data import STATUS_FAILED, STATUS_SENDING, STATUS_SENT, Conversation, MessageItem
from .wire import (
    AuthResponse,
    BaseListing,
    Category,
    ConversationSummary,
    FavoriteCountUpdate,
    Land,
    ListingType,
    MessageDetail,
    Notification,
    Page,
    RealEstate,
    User,
    Vehicle,
    VestaModel,
    Workplace,
)

__all__ = [
    'STATUS_SENDING', 'STATUS_SENT', 'STATUS_FAILED',
    'MessageItem', 'Conversation',
    'VestaModel', 'Page', 'User', 'AuthResponse', 'Category', 'ListingType',
    'BaseListing', 'RealEstate', 'Vehicle', 'Land', 'Workplace',
    'Notification', 'MessageDetail', 'ConversationSummary', 'FavoriteCountUpdate',
]
