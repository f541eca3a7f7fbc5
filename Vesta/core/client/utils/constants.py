"""
Constants shared by the Vesta client.
"""

# Local storage keys
TOKEN_KEY = "token"
USER_KEY = "user"

# Paging defaults
DEFAULT_PAGE_SIZE = 20
DEFAULT_ACTIVITY_LIMIT = 20
DEFAULT_GROWTH_MONTHS = 6

# Search
MIN_SUGGESTION_QUERY_LENGTH = 2
DEFAULT_NEARBY_RADIUS_KM = 5

# Toast history kept in memory
MAX_TOAST_HISTORY = 100

# Preview length in the conversation list
CONVERSATION_PREVIEW_LENGTH = 28

# Substring the backend uses when a token was signed with another secret
JWT_SIGNATURE_ERROR = "JWT signature does not match"

# The login call is excluded from forced logout on 401
LOGIN_PATH = "/auth/login"
