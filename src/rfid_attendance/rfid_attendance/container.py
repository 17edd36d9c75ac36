from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_scan_repository import MySQLAttendanceLogRepository, MySQLScanRepository
from .attendance.reconciler import AttendanceReconciler
from .attendance.repository import AttendanceLogRepository, ScanRepository
from .attendance.scan_service import ScanService
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .database.connection import DatabaseConnection, DBConfig
from .faculty.mysql_faculty_repository import MySQLFacultyRepository
from .faculty.repository import FacultyRepository
from .faculty.service import FacultyService
from .scanners.mysql_scanner_repository import MySQLScannerRepository
from .scanners.repository import ScannerRepository
from .scanners.service import ScannerService
from .schedule_parser.client import HttpScheduleParser, ScheduleParser
from .sections.mysql_section_repository import MySQLSectionRepository
from .sections.repository import SectionRepository
from .sections.service import SectionService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_account_repository import MySQLAccountRepository
from .users.repository import AccountRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    accounts_repo: AccountRepository
    students_repo: StudentRepository
    faculty_repo: FacultyRepository
    sections_repo: SectionRepository
    scanners_repo: ScannerRepository
    scans_repo: ScanRepository
    logs_repo: AttendanceLogRepository

    auth_service: AuthService
    student_service: StudentService
    faculty_service: FacultyService
    section_service: SectionService
    scanner_service: ScannerService
    attendance_service: AttendanceService
    scan_service: ScanService

    clock: Callable[[], datetime] = now_local
    conn: Optional[DatabaseConnection] = None


def wire_container(
    *,
    accounts: AccountRepository,
    students: StudentRepository,
    faculty: FacultyRepository,
    sections: SectionRepository,
    scanners: ScannerRepository,
    scans: ScanRepository,
    logs: AttendanceLogRepository,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    allow_unattributed: bool = False,
    schedule_parser: Optional[ScheduleParser] = None,
    clock: Callable[[], datetime] = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations."""

    reconciler = AttendanceReconciler(
        grace_minutes=grace_minutes,
        strategy_factory=AttendanceStrategyFactory(),
        allow_unattributed=allow_unattributed,
    )

    return Container(
        accounts_repo=accounts,
        students_repo=students,
        faculty_repo=faculty,
        sections_repo=sections,
        scanners_repo=scanners,
        scans_repo=scans,
        logs_repo=logs,
        auth_service=AuthService(accounts, faculty, students),
        student_service=StudentService(students, sections, logs),
        faculty_service=FacultyService(faculty, accounts),
        section_service=SectionService(sections, faculty, schedule_parser=schedule_parser),
        scanner_service=ScannerService(scanners, sections),
        attendance_service=AttendanceService(students, sections, scans, logs, reconciler=reconciler),
        scan_service=ScanService(students, sections, scans, logs),
        clock=clock,
        conn=conn,
    )


def build_container(*, settings: Any) -> Container:
    """MySQL-backed container configured from a settings module."""

    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(getattr(settings, "DB_CONFIG")))

    parser_url = getattr(settings, "SCHEDULE_PARSER_URL", "") or ""
    schedule_parser = (
        HttpScheduleParser(
            parser_url,
            api_key=getattr(settings, "SCHEDULE_PARSER_API_KEY", None) or None,
            timeout=float(getattr(settings, "SCHEDULE_PARSER_TIMEOUT", 60)),
        )
        if parser_url
        else None
    )

    return wire_container(
        accounts=MySQLAccountRepository(conn),
        students=MySQLStudentRepository(conn),
        faculty=MySQLFacultyRepository(conn),
        sections=MySQLSectionRepository(conn),
        scanners=MySQLScannerRepository(conn),
        scans=MySQLScanRepository(conn),
        logs=MySQLAttendanceLogRepository(conn),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        allow_unattributed=bool(getattr(settings, "ALLOW_UNATTRIBUTED_SCANS", False)),
        schedule_parser=schedule_parser,
        conn=conn,
    )
