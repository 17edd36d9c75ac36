from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for access control."""

    ADMIN = "admin"
    FACULTY = "faculty"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Per-period attendance classification."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"


class LogType(str, Enum):
    """Direction of a scanner-simulator attendance log."""

    TIME_IN = "time-in"
    TIME_OUT = "time-out"
