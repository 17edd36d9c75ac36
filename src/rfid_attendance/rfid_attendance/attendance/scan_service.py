from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time
from typing import List, Optional

from ..common.datetime_utils import parse_scan_time
from ..common.validators import normalize_credential
from ..core.constants import PING_HISTORY_PAGE_SIZE, UNKNOWN_STUDENT
from ..core.enums import LogType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..sections.repository import SectionRepository
from ..students.repository import StudentRepository
from ..users.model import CurrentUser, require_role
from .repository import AttendanceLogRepository, ScanRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    student_id: str
    student_name: str
    rfid: str
    log_type: LogType
    scanned_at: datetime
    schedule_ref: Optional[str] = None


@dataclass(frozen=True)
class PingPage:
    rows: List[dict]
    page: int
    total_pages: int


class ScanService:
    """Scanner simulator and scan-log views (admin)."""

    def __init__(
        self,
        students: StudentRepository,
        sections: SectionRepository,
        scans: ScanRepository,
        logs: AttendanceLogRepository,
    ):
        self._students = students
        self._sections = sections
        self._scans = scans
        self._logs = logs

    def _current_period_id(self, section_id: Optional[str], now: datetime) -> Optional[str]:
        if not section_id:
            return None
        for period in self._sections.list_schedules(section_id):
            if period.start_time <= now.time() <= period.end_time:
                return period.period_id
        return None

    def record_rfid_scan(
        self,
        current_user: CurrentUser,
        rfid: str,
        *,
        now: datetime,
        schedule_ref: Optional[str] = None,
    ) -> ScanResult:
        """Record a tap of ``rfid``: append to the scan log and toggle time-in/time-out."""

        require_role(current_user, Role.ADMIN)
        rfid = normalize_credential(rfid)
        if not rfid:
            raise ValidationError("RFID is required")

        student = self._students.get_by_rfid(rfid)
        if not student:
            raise NotFoundError("No student found with this RFID.")

        start_of_day = datetime.combine(now.date(), time.min)
        end_of_day = datetime.combine(now.date(), time.max)
        last = self._logs.get_last_between(student.student_id, start=start_of_day, end=end_of_day)
        log_type = LogType.TIME_OUT if last and last.log_type == LogType.TIME_IN else LogType.TIME_IN

        schedule_ref = schedule_ref or self._current_period_id(student.section_id, now)
        self._scans.add_rfid_scan(credential_id=rfid, occurred_at=now, schedule_ref=schedule_ref)
        self._logs.create(student_id=student.student_id, log_type=log_type, timestamp=now)
        logger.info("Recorded %s for student %s (rfid=%s, period=%s)", log_type.value, student.student_id, rfid, schedule_ref)

        return ScanResult(
            student_id=student.student_id,
            student_name=student.full_name,
            rfid=rfid,
            log_type=log_type,
            scanned_at=now,
            schedule_ref=schedule_ref,
        )

    def ping_history(self, current_user: CurrentUser, *, page: int = 1, page_size: int = PING_HISTORY_PAGE_SIZE) -> PingPage:
        """MAC pings, newest first, with the owning student's name."""

        require_role(current_user, Role.ADMIN)
        names = {
            st.mac_address.upper(): st.full_name
            for st in self._students.list_all()
            if st.mac_address
        }

        rows = []
        for ping in self._scans.list_pings():
            at = parse_scan_time(ping.occurred_at)
            rows.append(
                {
                    "student_name": names.get(ping.credential_id.upper(), UNKNOWN_STUDENT),
                    "mac_address": ping.credential_id,
                    "time": at.strftime("%Y-%m-%d %H:%M:%S") if at else "Invalid Date",
                    "_sort": at or datetime.min,
                }
            )
        rows.sort(key=lambda r: r["_sort"], reverse=True)
        for r in rows:
            del r["_sort"]

        total_pages = max(1, -(-len(rows) // page_size))
        page = min(max(1, int(page)), total_pages)
        start = (page - 1) * page_size
        return PingPage(rows=rows[start:start + page_size], page=page, total_pages=total_pages)
