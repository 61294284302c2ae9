"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GEOFENCE_RADIUS_METERS = 100.0
EARTH_RADIUS_METERS = 6371e3

DEFAULT_LATE_GRACE_MINUTES = 15
DEFAULT_LATE_PENALTY_PER_MINUTE = 500
DEFAULT_EARLY_LEAVE_PENALTY_PER_MINUTE = 500
DEFAULT_OVERTIME_BONUS_PER_MINUTE = 750
DEFAULT_NO_SHOW_PENALTY = 0

DEFAULT_CHILD_PAYMENT_AMOUNT = 40000
DEFAULT_GENERATOR_MAX_WORKERS = 1

MINUTES_PER_DAY = 24 * 60
MONTH_LABEL_FORMAT = "%Y-%m"
AUTO_GENERATED_COMMENT = "Generated automatically"
