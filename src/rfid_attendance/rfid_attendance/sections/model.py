from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_hhmm
from ..common.validators import require_hhmm, require_non_empty


@dataclass(frozen=True)
class Section:
    section_id: str
    name: str
    adviser_id: Optional[str] = None
    adviser_name: Optional[str] = None


@dataclass(frozen=True)
class ScheduledPeriod:
    """One subject's meeting window for a section (time of day, no date)."""

    period_id: str
    subject: str
    start_time: time
    end_time: time
    faculty_id: Optional[str] = None
    section_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ScheduledPeriod":
        """Coerce a raw schedule record.

        Accepts both the document shape ({id, subject, startTime, endTime, facultyId})
        and the table shape (schedule_id, start_time, ...). Raises ValidationError.
        """

        def pick(*keys: str) -> Any:
            for key in keys:
                if record.get(key) is not None:
                    return record[key]
            return None

        start = pick("startTime", "start_time")
        end = pick("endTime", "end_time")
        faculty_id = pick("facultyId", "faculty_id")
        section_id = pick("sectionId", "section_id")
        return cls(
            period_id=str(pick("id", "schedule_id", "period_id") or ""),
            subject=require_non_empty(str(pick("subject") or ""), "Subject"),
            start_time=start if isinstance(start, time) else require_hhmm(str(start or ""), "Start time"),
            end_time=end if isinstance(end, time) else require_hhmm(str(end or ""), "End time"),
            faculty_id=str(faculty_id) if faculty_id is not None else None,
            section_id=str(section_id) if section_id is not None else None,
        )

    def overlaps(self, other: "ScheduledPeriod") -> bool:
        return self.start_time < other.end_time and other.start_time < self.end_time

    def label(self) -> str:
        return f"{self.subject} ({format_hhmm(self.start_time)} - {format_hhmm(self.end_time)})"
