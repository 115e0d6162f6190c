"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Default open-play area, provisioned lazily on first check-in.
SCHULHOF_ROOM_NAME = "Schulhof"
SCHULHOF_ACTIVITY_NAME = "Schulhof"
SCHULHOF_CATEGORY_NAME = "Schulhof"
SCHULHOF_CATEGORY_DESCRIPTION = "Freies Spiel im Schulhof"
SCHULHOF_COLOR = "#7ED321"
SCHULHOF_ROOM_CAPACITY = 100
SCHULHOF_MAX_PARTICIPANTS = 100

DEFAULT_DAILY_CHECKOUT_TIME = "15:00"
DEFAULT_DEVICE_ONLINE_MINUTES = 5
