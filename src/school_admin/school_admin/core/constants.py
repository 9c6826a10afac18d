"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_PENDING_LIMIT = 200
DEFAULT_PROFILE_LIMIT = 500
MIN_PASSWORD_LENGTH = 6
GENERATED_PASSWORD_BYTES = 12
SUPABASE_USERS_PAGE_SIZE = 1000
