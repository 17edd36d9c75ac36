from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from ..core.enums import LogType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceLog, ScanEvent
from .repository import AttendanceLogRepository, ScanRepository

SCAN_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class MySQLScanRepository(ScanRepository):
    """rfid_history and ping_history tables. ``time`` is returned as stored.

    ``time`` is a VARCHAR in SCAN_TIME_FORMAT, so window bounds compare as strings.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _list(
        self,
        sql: str,
        column: str,
        credentials: Optional[Iterable[str]],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> Sequence[ScanEvent]:
        where: List[str] = []
        params: list = []
        if credentials is not None:
            creds = [c.upper() for c in credentials]
            if not creds:
                return []
            clause, in_params = in_clause(creds)
            where.append(f"UPPER({column}) {clause}")
            params.extend(in_params)
        if start is not None:
            where.append("time >= %s")
            params.append(start.strftime(SCAN_TIME_FORMAT))
        if end is not None:
            where.append("time < %s")
            params.append(end.strftime(SCAN_TIME_FORMAT))
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [ScanEvent.from_record(r) for r in fetchall(cur)]

    def list_rfid_scans(
        self,
        *,
        credentials: Optional[Iterable[str]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ScanEvent]:
        return self._list("SELECT uid, time, class_schedule_id FROM rfid_history", "uid", credentials, start, end)

    def list_pings(
        self,
        *,
        credentials: Optional[Iterable[str]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ScanEvent]:
        return self._list("SELECT mac_address AS uid, time FROM ping_history", "mac_address", credentials, start, end)

    def add_rfid_scan(self, *, credential_id: str, occurred_at: datetime, schedule_ref: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO rfid_history(uid, time, class_schedule_id) VALUES(%s,%s,%s)",
                (credential_id, occurred_at.strftime(SCAN_TIME_FORMAT), schedule_ref),
            )
            return int(cur.lastrowid)


def _to_log(row: dict) -> AttendanceLog:
    return AttendanceLog(
        log_id=int(row["log_id"]),
        student_id=str(row["student_id"]),
        log_type=LogType(row["log_type"]),
        timestamp=row["timestamp"],
    )


class MySQLAttendanceLogRepository(AttendanceLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_last_between(self, student_id: str, *, start: datetime, end: datetime) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, student_id, log_type, timestamp
                FROM attendance_logs
                WHERE student_id=%s AND timestamp BETWEEN %s AND %s
                ORDER BY timestamp DESC, log_id DESC
                LIMIT 1
                """,
                (student_id, start, end),
            )
            row = fetchone(cur)
            return _to_log(row) if row else None

    def list_for_student(self, student_id: str) -> Sequence[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, student_id, log_type, timestamp
                FROM attendance_logs
                WHERE student_id=%s
                ORDER BY timestamp DESC
                """,
                (student_id,),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def create(self, *, student_id: str, log_type: LogType, timestamp: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance_logs(student_id, log_type, timestamp) VALUES(%s,%s,%s)",
                (student_id, log_type.value, timestamp),
            )
            return int(cur.lastrowid)

    def delete_for_student(self, student_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_logs WHERE student_id=%s", (student_id,))
            return int(cur.rowcount)
