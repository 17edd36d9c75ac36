from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import day_window, days_in_month, format_hhmm, month_window
from ..core.enums import AttendanceStatus, LogType, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..sections.model import ScheduledPeriod
from ..sections.repository import SectionRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.model import CurrentUser, require_role
from .model import AttendanceOutcome, DailyAttendance, ScanEvent
from .reconciler import AttendanceReconciler, attended_days, scans_for_credentials, scans_on_day, timed_scans
from .repository import AttendanceLogRepository, ScanRepository


@dataclass(frozen=True)
class SectionGrid:
    """Month view of one period's attendance for every student of a section."""

    section_id: str
    period: ScheduledPeriod
    days: List[date]
    rows: List[dict]


class AttendanceService:
    """Presentation-facing attendance views built on the reconciler."""

    def __init__(
        self,
        students: StudentRepository,
        sections: SectionRepository,
        scans: ScanRepository,
        logs: AttendanceLogRepository,
        *,
        reconciler: Optional[AttendanceReconciler] = None,
    ):
        self._students = students
        self._sections = sections
        self._scans = scans
        self._logs = logs
        self._reconciler = reconciler or AttendanceReconciler()

    def _student(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student profile not found.")
        return student

    def _check_student_access(self, current_user: CurrentUser, student_id: str) -> None:
        if current_user.role == Role.STUDENT and current_user.user_id != student_id:
            raise AuthorizationError("You can only view your own attendance")

    def _scans_for(self, credentials: Sequence[str], day: date) -> List[ScanEvent]:
        creds = [c.upper() for c in credentials]
        if not creds:
            return []
        start, end = day_window(day)
        events = list(self._scans.list_rfid_scans(credentials=creds, start=start, end=end))
        events.extend(self._scans.list_pings(credentials=creds, start=start, end=end))
        return scans_for_credentials(events, creds)

    def student_day_report(self, current_user: CurrentUser, student_id: str, day: date) -> List[AttendanceOutcome]:
        """Per-period Present/Late/Absent for one student on one day.

        Empty when the student has no section or no registered credential.
        """

        self._check_student_access(current_user, student_id)
        student = self._student(student_id)
        if not student.section_id or not student.credentials():
            return []

        periods = self._sections.list_schedules(student.section_id)
        if not periods:
            return []
        day_scans = scans_on_day(self._scans_for(student.credentials(), day), day)
        return self._reconciler.reconcile(periods, day_scans, day)

    def attended_days(self, current_user: CurrentUser, student_id: str) -> List[date]:
        """Days with at least one scan of the student's RFID (calendar highlighting)."""

        self._check_student_access(current_user, student_id)
        student = self._student(student_id)
        if not student.rfid:
            return []
        return attended_days(self._scans.list_rfid_scans(credentials=[student.rfid.upper()]))

    def section_month_grid(
        self,
        current_user: CurrentUser,
        section_id: str,
        period_id: str,
        month: date,
    ) -> SectionGrid:
        require_role(current_user, Role.ADMIN, Role.FACULTY)
        if not self._sections.get_by_id(section_id):
            raise NotFoundError("Section not found")

        period = next((p for p in self._sections.list_schedules(section_id) if p.period_id == period_id), None)
        if not period:
            raise NotFoundError("Schedule not found")
        if current_user.role == Role.FACULTY and period.faculty_id != current_user.user_id:
            raise AuthorizationError("You can only view attendance for subjects you handle")

        students = sorted(self._students.list_by_section(section_id), key=lambda s: s.sort_name)
        rfids = [s.rfid.upper() for s in students if s.rfid]
        start, end = month_window(month)
        all_scans = list(self._scans.list_rfid_scans(credentials=rfids, start=start, end=end)) if rfids else []

        days = days_in_month(month)
        rows: List[dict] = []
        for student in students:
            mine = scans_for_credentials(all_scans, [student.rfid])
            by_day: Dict[date, List[ScanEvent]] = {}
            for at, scan in timed_scans(mine):
                by_day.setdefault(at.date(), []).append(scan)

            statuses: Dict[str, str] = {}
            for day in days:
                (outcome,) = self._reconciler.reconcile([period], by_day.get(day, []), day)
                statuses[day.strftime("%Y-%m-%d")] = outcome.status.value

            rows.append(
                {
                    "student_id": student.student_id,
                    "student_name": student.sort_name,
                    "attendance": statuses,
                }
            )

        return SectionGrid(section_id=section_id, period=period, days=days, rows=rows)

    def faculty_today(self, current_user: CurrentUser, now: datetime) -> List[dict]:
        """Every student marked Present (first RFID scan today) or Absent."""

        require_role(current_user, Role.FACULTY, Role.ADMIN)
        start, end = day_window(now.date())
        first_scan: Dict[str, datetime] = {}
        for at, scan in timed_scans(self._scans.list_rfid_scans(start=start, end=end)):
            if at.date() != now.date():
                continue
            key = scan.credential_id.upper()
            if key not in first_scan or at < first_scan[key]:
                first_scan[key] = at

        out: List[dict] = []
        for student in self._students.list_all():
            at = first_scan.get(student.rfid.upper()) if student.rfid else None
            out.append(
                {
                    "student_id": student.student_id,
                    "student_name": student.full_name,
                    "status": (AttendanceStatus.PRESENT if at else AttendanceStatus.ABSENT).value,
                    "time_in": format_hhmm(at.time()) if at else None,
                }
            )
        return out

    def student_daily_logs(self, current_user: CurrentUser, student_id: str) -> List[DailyAttendance]:
        """Earliest time-in and latest time-out per day, newest day first."""

        self._check_student_access(current_user, student_id)
        by_day: Dict[date, Dict[LogType, datetime]] = {}
        for log in self._logs.list_for_student(student_id):
            slot = by_day.setdefault(log.timestamp.date(), {})
            current = slot.get(log.log_type)
            if log.log_type == LogType.TIME_IN:
                if current is None or log.timestamp < current:
                    slot[LogType.TIME_IN] = log.timestamp
            elif current is None or log.timestamp > current:
                slot[LogType.TIME_OUT] = log.timestamp

        records = [
            DailyAttendance(
                day=day,
                time_in=slot.get(LogType.TIME_IN),
                time_out=slot.get(LogType.TIME_OUT),
                status=AttendanceStatus.PRESENT if slot.get(LogType.TIME_IN) else AttendanceStatus.ABSENT,
            )
            for day, slot in by_day.items()
        ]
        records.sort(key=lambda r: r.day, reverse=True)
        return records
