"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
AUTOSAVE_DEBOUNCE_SECONDS = 0.5
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
STATS_WEEK_DAYS = 7
JOB_SUMMARY_MAX_LENGTH = 500
