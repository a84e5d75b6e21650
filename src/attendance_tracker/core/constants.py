"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ATTENDANCE_THRESHOLD = 75

PROFILES_TABLE = "profiles"
SUBJECTS_TABLE = "subjects"
TIMETABLE_TABLE = "timetable_entries"

# Index in this tuple is the stored day_of_week.
DAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
TIME_SLOTS = tuple(f"{hour:02d}:00" for hour in range(24))
