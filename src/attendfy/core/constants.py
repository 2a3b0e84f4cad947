"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_HOURS = 24
DEFAULT_PASSWORD_CHECK_TIMEOUT = 5.0
DEFAULT_LOGIN_RATE_LIMIT = "5 per 15 minutes"

MIN_PASSWORD_LENGTH = 6
MIN_ADMIN_PASSWORD_LENGTH = 8

# Check-ins at or after this local hour count as late on dashboards.
LATE_CUTOFF_HOUR = 9

DEFAULT_COORDINATES = (0.0, 0.0)
DEFAULT_REPORT_DAYS = 7
RECENT_ACTIVITY_LIMIT = 5
