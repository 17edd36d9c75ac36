from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ParsedScheduleEntry:
    subject: str
    start_time: str
    end_time: str


@dataclass(frozen=True)
class ParsedSchedule:
    """Rows extracted from a photographed timetable for one day of the week."""

    day_of_week: str
    entries: List[ParsedScheduleEntry] = field(default_factory=list)
