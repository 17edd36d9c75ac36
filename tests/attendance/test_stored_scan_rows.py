"""Scan-log rows as MySQL returns them, read back through the repository."""

from datetime import date, datetime

from src.rfid_attendance.rfid_attendance.attendance.mysql_scan_repository import MySQLScanRepository
from src.rfid_attendance.rfid_attendance.attendance.reconciler import AttendanceReconciler
from src.rfid_attendance.rfid_attendance.attendance.service import AttendanceService
from src.rfid_attendance.rfid_attendance.core.enums import AttendanceStatus

DAY = date(2024, 3, 1)


class TableCursor:
    """Answers each SELECT with the rows of the table it names."""

    def __init__(self, tables):
        self.tables = tables
        self.executed = []
        self._rows = []

    def __call__(self, dictionary=True):
        # The factory doubles as the connection, so conn.cursor(...) lands here.
        return self

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))
        self._rows = next((rows for name, rows in self.tables.items() if name in sql), [])

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class TableConnectionFactory:
    def __init__(self, tables):
        self.cursor = TableCursor(tables)

    def connect(self, *, with_database=True):
        return self

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


def build_service(repos, tables, **reconciler_kwargs):
    factory = TableConnectionFactory(tables)
    service = AttendanceService(
        repos.students,
        repos.sections,
        MySQLScanRepository(factory),
        repos.logs,
        reconciler=AttendanceReconciler(**reconciler_kwargs),
    )
    return service, factory.cursor


def test_rfid_rows_keep_their_period_and_classify(repos, alice):
    service, cursor = build_service(
        repos,
        {
            "rfid_history": [
                {"uid": "a1b2c3d4", "time": "2024-03-01 09:05:00", "class_schedule_id": "sch-math"},
                {"uid": "A1B2C3D4", "time": "2024-03-01 10:50:00", "class_schedule_id": "sch-lit"},
            ],
        },
    )

    outcomes = service.student_day_report(alice, "S001", DAY)

    assert [o.status for o in outcomes] == [AttendanceStatus.PRESENT, AttendanceStatus.LATE]
    assert outcomes[0].matched_scan_time == datetime(2024, 3, 1, 9, 5)
    sql, params = cursor.executed[0]
    assert "FROM rfid_history" in sql
    assert params[-2:] == ("2024-03-01 00:00:00", "2024-03-02 00:00:00")


def test_ping_rows_are_unattributed(repos, alice):
    repos.students.update_credentials("S001", rfid="A1B2C3D4", mac_address="00:1A:2B:3C:4D:5E")
    tables = {
        "rfid_history": [{"uid": "A1B2C3D4", "time": "2024-03-01 09:05:00", "class_schedule_id": "sch-math"}],
        "ping_history": [{"uid": "00:1a:2b:3c:4d:5e", "time": "2024-03-01 10:50:00"}],
    }

    strict, _ = build_service(repos, tables)
    relaxed, _ = build_service(repos, tables, allow_unattributed=True)

    assert [o.status for o in strict.student_day_report(alice, "S001", DAY)] == [
        AttendanceStatus.PRESENT,
        AttendanceStatus.ABSENT,
    ]
    assert [o.status for o in relaxed.student_day_report(alice, "S001", DAY)] == [
        AttendanceStatus.PRESENT,
        AttendanceStatus.LATE,
    ]


def test_month_grid_reads_only_that_month(repos, adviser):
    service, cursor = build_service(
        repos,
        {"rfid_history": [{"uid": "A1B2C3D4", "time": "2024-02-29 09:30:00", "class_schedule_id": "sch-math"}]},
    )

    grid = service.section_month_grid(adviser, "sec-a", "sch-math", date(2024, 2, 1))

    assert grid.rows[1]["attendance"]["2024-02-29"] == "Late"
    _, params = cursor.executed[0]
    assert params[-2:] == ("2024-02-01 00:00:00", "2024-03-01 00:00:00")


def test_faculty_today_queries_one_day(repos, adviser):
    service, cursor = build_service(
        repos,
        {"rfid_history": [{"uid": "e5f6g7h8", "time": "2024-03-01 07:40:00", "class_schedule_id": None}]},
    )

    rows = {r["student_id"]: r for r in service.faculty_today(adviser, datetime(2024, 3, 1, 9, 10))}

    assert rows["S003"]["time_in"] == "07:40"
    assert rows["S001"]["status"] == "Absent"
    assert cursor.executed[0] == (
        "SELECT uid, time, class_schedule_id FROM rfid_history WHERE time >= %s AND time < %s",
        ("2024-03-01 00:00:00", "2024-03-02 00:00:00"),
    )
