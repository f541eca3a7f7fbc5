"""
REST access to the Vesta backend.
"""

from .client import SessionManager, VestaAPIClient, build_page_params, build_query_string
from .errors import ErrorHandler

__all__ = [
    'VestaAPIClient', 'SessionManager', 'ErrorHandler',
    'build_query_string', 'build_page_params'
]
