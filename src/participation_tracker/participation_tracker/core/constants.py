"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_DAYCODE_LENGTH = 5
DAYCODE_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
MAX_SMALLGROUP_NAME_LENGTH = 100
