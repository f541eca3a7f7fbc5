"""
Client-side services: local storage and toasts.
"""

from .persistence_service import LocalStorage
from .toast_service import Toast, ToastLevel, ToastService

__all__ = ['LocalStorage', 'Toast', 'ToastLevel', 'ToastService']
