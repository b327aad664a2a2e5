"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_DESCRIPTION_LENGTH = 1000
MAX_REVIEW_NOTES_LENGTH = 500

AMOUNT_MAX_INTEGER_DIGITS = 8
AMOUNT_MAX_FRACTION_DIGITS = 2

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

DEFAULT_SESSION_DAYS = 7
