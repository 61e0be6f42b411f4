from models.teacher import Teacher
from models.schedule import (
    EMPTY_SUBJECT,
    LUNCH,
    NO_SUBSTITUTE,
    NO_TEACHER,
    PRAYER,
    EntryKind,
    Schedule,
    ScheduleEntry,
)
from models.school_data import SchoolData, FeasibilityReport

__all__ = [
    "Teacher",
    "EntryKind",
    "ScheduleEntry",
    "Schedule",
    "SchoolData",
    "FeasibilityReport",
    "EMPTY_SUBJECT",
    "PRAYER",
    "LUNCH",
    "NO_TEACHER",
    "NO_SUBSTITUTE",
]
