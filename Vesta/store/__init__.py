"""
Normalized client-side state, one slice per entity.
"""

from .auth_slice import AuthSlice
from .base import Slice
from .comparison_slice import MAX_SELECTIONS, ComparisonSlice
from .entity_slice import CategorySlice, EntitySlice, ListingSlice
from .store import Store

__all__ = [
    'Store',
    'Slice',
    'AuthSlice',
    'EntitySlice',
    'CategorySlice',
    'ListingSlice',
    'ComparisonSlice',
    'MAX_SELECTIONS',
]
