"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EVENT_ID = "default-event"
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
MIN_PASSWORD_LENGTH = 6
RECENT_SCAN_HOURS = 24
RECENT_REGISTRATION_DAYS = 7
DEFAULT_TOKEN_HOURS = 24
QR_MISMATCH_NOTE = "QR code mismatch"
