from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union

from ..common.validators import normalize_credential
from ..core.enums import AttendanceStatus, LogType
from ..sections.model import ScheduledPeriod

RawTimestamp = Union[str, int, float, datetime]


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


@dataclass(frozen=True)
class ScanEvent:
    """One observed tap/ping of a credential, as recorded by the scan log.

    ``occurred_at`` keeps the stored representation; comparisons go through
    ``common.datetime_utils.parse_scan_time``.
    """

    credential_id: str
    occurred_at: RawTimestamp
    schedule_ref: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ScanEvent":
        """Build from an API payload (camelCase) or a scan-log row (column names)."""

        credential = _first(record, "credentialId", "uid", "credential_id")
        occurred_at = _first(record, "occurredAt", "time", "occurred_at")
        schedule_ref = _first(record, "scheduleRef", "classScheduleId", "class_schedule_id", "schedule_ref")
        return cls(
            credential_id=normalize_credential(credential) or "",
            occurred_at=occurred_at,
            schedule_ref=str(schedule_ref) if schedule_ref not in (None, "") else None,
        )


@dataclass(frozen=True)
class AttendanceOutcome:
    """Reconciled status of one scheduled period on one day."""

    period: ScheduledPeriod
    status: AttendanceStatus
    matched_scan_time: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceLog:
    """Time-in / time-out entry written by the scanner simulator."""

    log_id: int
    student_id: str
    log_type: LogType
    timestamp: datetime


@dataclass(frozen=True)
class DailyAttendance:
    """Read-model for the student dashboard history table."""

    day: date
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    status: AttendanceStatus
