from __future__ import annotations

import io
from dataclasses import dataclass, field, replace
from datetime import datetime, time
from itertools import count
from typing import Dict, Iterable, List, Optional, Set

import pytest
from PIL import Image
from werkzeug.security import generate_password_hash

from src.rfid_attendance.rfid_attendance.attendance.model import AttendanceLog, ScanEvent
from src.rfid_attendance.rfid_attendance.common.datetime_utils import parse_scan_time
from src.rfid_attendance.rfid_attendance.container import Container, wire_container
from src.rfid_attendance.rfid_attendance.core.enums import LogType, Role
from src.rfid_attendance.rfid_attendance.faculty.model import Faculty
from src.rfid_attendance.rfid_attendance.scanners.model import Scanner
from src.rfid_attendance.rfid_attendance.sections.model import ScheduledPeriod, Section
from src.rfid_attendance.rfid_attendance.students.model import Student
from src.rfid_attendance.rfid_attendance.users.model import Account, CurrentUser


class InMemoryAccounts:
    def __init__(self):
        self.by_id: Dict[str, Account] = {}
        self.admins: Set[str] = set()
        self._ids = count(1)

    def add(self, account_id: str, email: str, password: str, *, admin: bool = False) -> Account:
        account = Account(account_id=account_id, email=email, password_hash=generate_password_hash(password))
        self.by_id[account_id] = account
        if admin:
            self.admins.add(account_id)
        return account

    def get_by_id(self, account_id: str) -> Optional[Account]:
        return self.by_id.get(account_id)

    def get_by_email(self, email: str) -> Optional[Account]:
        return next((a for a in self.by_id.values() if a.email == email), None)

    def create_account(self, *, email: str, password_hash: str) -> str:
        account_id = f"acc-{next(self._ids)}"
        self.by_id[account_id] = Account(account_id=account_id, email=email, password_hash=password_hash)
        return account_id

    def delete_by_id(self, account_id: str) -> bool:
        self.admins.discard(account_id)
        return self.by_id.pop(account_id, None) is not None

    def is_admin(self, account_id: str) -> bool:
        return account_id in self.admins


class InMemoryStudents:
    def __init__(self):
        self.by_id: Dict[str, Student] = {}

    def add(self, student: Student) -> Student:
        self.by_id[student.student_id] = student
        return student

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self.by_id.get(student_id)

    def get_by_rfid(self, rfid: str) -> Optional[Student]:
        return next((s for s in self.by_id.values() if s.rfid and s.rfid.upper() == rfid.upper()), None)

    def get_by_mac(self, mac_address: str) -> Optional[Student]:
        return next(
            (s for s in self.by_id.values() if s.mac_address and s.mac_address.upper() == mac_address.upper()),
            None,
        )

    def list_all(self) -> List[Student]:
        return list(self.by_id.values())

    def list_by_section(self, section_id: str) -> List[Student]:
        return [s for s in self.by_id.values() if s.section_id == section_id]

    def update_credentials(self, student_id: str, *, rfid: Optional[str], mac_address: Optional[str]) -> bool:
        if student_id not in self.by_id:
            return False
        self.by_id[student_id] = replace(self.by_id[student_id], rfid=rfid, mac_address=mac_address)
        return True

    def update_profile(self, student_id, *, first_name, last_name, address, section_id) -> bool:
        if student_id not in self.by_id:
            return False
        self.by_id[student_id] = replace(
            self.by_id[student_id],
            first_name=first_name,
            last_name=last_name,
            address=address,
            section_id=section_id,
        )
        return True

    def delete_by_id(self, student_id: str) -> bool:
        return self.by_id.pop(student_id, None) is not None


class InMemoryFaculty:
    def __init__(self):
        self.by_id: Dict[str, Faculty] = {}

    def add(self, faculty: Faculty) -> Faculty:
        self.by_id[faculty.faculty_id] = faculty
        return faculty

    def get_by_id(self, faculty_id: str) -> Optional[Faculty]:
        return self.by_id.get(faculty_id)

    def list_all(self) -> List[Faculty]:
        return list(self.by_id.values())

    def create(self, *, faculty_id: str, name: str, email: str, department: str) -> str:
        self.by_id[faculty_id] = Faculty(faculty_id=faculty_id, name=name, email=email, department=department)
        return faculty_id

    def update(self, faculty_id: str, *, name: str, department: str) -> bool:
        self.by_id[faculty_id] = replace(self.by_id[faculty_id], name=name, department=department)
        return True

    def delete_by_id(self, faculty_id: str) -> bool:
        return self.by_id.pop(faculty_id, None) is not None


class InMemorySections:
    def __init__(self):
        self.sections: Dict[str, Section] = {}
        self.schedules: Dict[str, ScheduledPeriod] = {}
        self._ids = count(1)

    def add_section(self, section: Section) -> Section:
        self.sections[section.section_id] = section
        return section

    def add_period(self, period: ScheduledPeriod) -> ScheduledPeriod:
        self.schedules[period.period_id] = period
        return period

    def get_by_id(self, section_id: str) -> Optional[Section]:
        return self.sections.get(section_id)

    def list_all(self) -> List[Section]:
        return list(self.sections.values())

    def list_for_faculty(self, faculty_id: str) -> List[Section]:
        teaching = {p.section_id for p in self.schedules.values() if p.faculty_id == faculty_id}
        return [s for s in self.sections.values() if s.adviser_id == faculty_id or s.section_id in teaching]

    def create(self, *, name: str, adviser_id: str, adviser_name: str) -> str:
        section_id = f"sec-{next(self._ids)}"
        self.sections[section_id] = Section(section_id, name, adviser_id, adviser_name)
        return section_id

    def update(self, section_id: str, *, name: str, adviser_id: str, adviser_name: str) -> bool:
        self.sections[section_id] = Section(section_id, name, adviser_id, adviser_name)
        return True

    def delete_by_id(self, section_id: str) -> bool:
        self.schedules = {k: p for k, p in self.schedules.items() if p.section_id != section_id}
        return self.sections.pop(section_id, None) is not None

    def list_schedules(self, section_id: str) -> List[ScheduledPeriod]:
        return [p for p in self.schedules.values() if p.section_id == section_id]

    def get_schedule(self, schedule_id: str) -> Optional[ScheduledPeriod]:
        return self.schedules.get(schedule_id)

    def add_schedules(self, section_id: str, periods: Iterable[ScheduledPeriod]) -> List[str]:
        ids = []
        for period in periods:
            schedule_id = f"sch-{next(self._ids)}"
            self.schedules[schedule_id] = replace(period, period_id=schedule_id, section_id=section_id)
            ids.append(schedule_id)
        return ids

    def update_schedule(self, period: ScheduledPeriod) -> bool:
        self.schedules[period.period_id] = period
        return True

    def delete_schedule(self, schedule_id: str) -> bool:
        return self.schedules.pop(schedule_id, None) is not None


class InMemoryScanners:
    def __init__(self):
        self.by_id: Dict[str, Scanner] = {}
        self._ids = count(1)

    def get_by_id(self, scanner_id: str) -> Optional[Scanner]:
        return self.by_id.get(scanner_id)

    def get_by_device_id(self, device_id: str) -> Optional[Scanner]:
        return next((s for s in self.by_id.values() if s.device_id == device_id), None)

    def list_all(self) -> List[Scanner]:
        return list(self.by_id.values())

    def create(self, *, device_id: str, section_id: str) -> str:
        scanner_id = f"scn-{next(self._ids)}"
        self.by_id[scanner_id] = Scanner(scanner_id, device_id, section_id)
        return scanner_id

    def update(self, scanner_id: str, *, device_id: str, section_id: str) -> bool:
        self.by_id[scanner_id] = Scanner(scanner_id, device_id, section_id)
        return True

    def delete_by_id(self, scanner_id: str) -> bool:
        return self.by_id.pop(scanner_id, None) is not None


class InMemoryScans:
    def __init__(self):
        self.rfid: List[ScanEvent] = []
        self.pings: List[ScanEvent] = []

    @staticmethod
    def _filter(events: List[ScanEvent], credentials, start, end) -> List[ScanEvent]:
        out = list(events)
        if credentials is not None:
            wanted = {c.upper() for c in credentials}
            out = [e for e in out if e.credential_id.upper() in wanted]
        if start is not None or end is not None:
            low, high = start or datetime.min, end or datetime.max
            out = [e for e in out if low <= (parse_scan_time(e.occurred_at) or datetime.max) < high]
        return out

    def list_rfid_scans(self, *, credentials=None, start=None, end=None) -> List[ScanEvent]:
        return self._filter(self.rfid, credentials, start, end)

    def list_pings(self, *, credentials=None, start=None, end=None) -> List[ScanEvent]:
        return self._filter(self.pings, credentials, start, end)

    def add_rfid_scan(self, *, credential_id: str, occurred_at: datetime, schedule_ref: Optional[str] = None) -> int:
        self.rfid.append(ScanEvent(credential_id, occurred_at.strftime("%Y-%m-%d %H:%M:%S"), schedule_ref))
        return len(self.rfid)


class InMemoryLogs:
    def __init__(self):
        self.logs: List[AttendanceLog] = []

    def get_last_between(self, student_id: str, *, start: datetime, end: datetime) -> Optional[AttendanceLog]:
        mine = [l for l in self.logs if l.student_id == student_id and start <= l.timestamp <= end]
        return max(mine, key=lambda l: (l.timestamp, l.log_id)) if mine else None

    def list_for_student(self, student_id: str) -> List[AttendanceLog]:
        return [l for l in self.logs if l.student_id == student_id]

    def create(self, *, student_id: str, log_type: LogType, timestamp: datetime) -> int:
        log_id = len(self.logs) + 1
        self.logs.append(AttendanceLog(log_id, student_id, log_type, timestamp))
        return log_id

    def delete_for_student(self, student_id: str) -> int:
        before = len(self.logs)
        self.logs = [l for l in self.logs if l.student_id != student_id]
        return before - len(self.logs)


@dataclass
class Repos:
    accounts: InMemoryAccounts = field(default_factory=InMemoryAccounts)
    students: InMemoryStudents = field(default_factory=InMemoryStudents)
    faculty: InMemoryFaculty = field(default_factory=InMemoryFaculty)
    sections: InMemorySections = field(default_factory=InMemorySections)
    scanners: InMemoryScanners = field(default_factory=InMemoryScanners)
    scans: InMemoryScans = field(default_factory=InMemoryScans)
    logs: InMemoryLogs = field(default_factory=InMemoryLogs)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 1, 9, 10, 0)


@pytest.fixture
def repos() -> Repos:
    """One section (Math 09:00-10:00, Literature 10:30-12:00), two students, one adviser."""

    r = Repos()
    r.accounts.add("admin-1", "admin@campus.local", "admin123", admin=True)
    r.accounts.add("fac-vance", "eleanor.v@example.com", "secret1")
    r.accounts.add("S001", "alice@example.com", "secret1")

    r.faculty.add(Faculty("fac-vance", "Dr. Eleanor Vance", "eleanor.v@example.com", "Physics"))
    r.faculty.add(Faculty("fac-crain", "Dr. Theodora Crain", "theo.c@example.com", "Literature"))

    r.sections.add_section(Section("sec-a", "BSCS 1-A", "fac-vance", "Dr. Eleanor Vance"))
    r.sections.add_period(ScheduledPeriod("sch-math", "Math", time(9, 0), time(10, 0), "fac-vance", "sec-a"))
    r.sections.add_period(ScheduledPeriod("sch-lit", "Literature", time(10, 30), time(12, 0), "fac-crain", "sec-a"))

    r.students.add(Student("S001", "Alice", "Johnson", rfid="A1B2C3D4", section_id="sec-a"))
    r.students.add(Student("S003", "Charlie", "Brown", rfid="E5F6G7H8", section_id="sec-a"))
    return r


@pytest.fixture
def container(repos: Repos, fixed_now: datetime) -> Container:
    return wire_container(
        accounts=repos.accounts,
        students=repos.students,
        faculty=repos.faculty,
        sections=repos.sections,
        scanners=repos.scanners,
        scans=repos.scans,
        logs=repos.logs,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def admin() -> CurrentUser:
    return CurrentUser("admin-1", Role.ADMIN, "admin@campus.local")


@pytest.fixture
def adviser() -> CurrentUser:
    return CurrentUser("fac-vance", Role.FACULTY, "Dr. Eleanor Vance")


@pytest.fixture
def alice() -> CurrentUser:
    return CurrentUser("S001", Role.STUDENT, "Alice Johnson")


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), "white").save(buf, format="PNG")
    return buf.getvalue()
