"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LATE_GRACE_MINUTES = 15
PING_HISTORY_PAGE_SIZE = 10
MIN_PASSWORD_LENGTH = 6

UNASSIGNED_SECTION = "Unassigned"
UNASSIGNED_FACULTY = "N/A"
UNKNOWN_STUDENT = "Unknown Student"
