"""
Client module for Vesta.
Provides client-side models, local storage, toasts and shared utilities.
"""

from .models import Conversation, MessageItem
from .services import LocalStorage, ToastService

__all__ = [
    'Conversation', 'MessageItem',
    'LocalStorage', 'ToastService'
]
