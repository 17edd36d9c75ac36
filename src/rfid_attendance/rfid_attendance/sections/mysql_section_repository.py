from __future__ import annotations

from typing import List, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id, normalize_mysql_time
from .model import ScheduledPeriod, Section
from .repository import SectionRepository

_SCHEDULE_COLUMNS = "schedule_id, section_id, subject, start_time, end_time, faculty_id"


def _to_section(row: dict) -> Section:
    return Section(
        section_id=str(row["section_id"]),
        name=row["name"],
        adviser_id=row.get("adviser_id"),
        adviser_name=row.get("adviser_name"),
    )


def _to_period(row: dict) -> ScheduledPeriod:
    return ScheduledPeriod(
        period_id=str(row["schedule_id"]),
        subject=row["subject"],
        start_time=normalize_mysql_time(row["start_time"]),
        end_time=normalize_mysql_time(row["end_time"]),
        faculty_id=row.get("faculty_id"),
        section_id=str(row["section_id"]),
    )


class MySQLSectionRepository(SectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, section_id: str) -> Optional[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT section_id, name, adviser_id, adviser_name FROM sections WHERE section_id=%s",
                (section_id,),
            )
            row = fetchone(cur)
            return _to_section(row) if row else None

    def list_all(self) -> Sequence[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT section_id, name, adviser_id, adviser_name FROM sections ORDER BY name ASC")
            return [_to_section(r) for r in fetchall(cur)]

    def list_for_faculty(self, faculty_id: str) -> Sequence[Section]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT s.section_id, s.name, s.adviser_id, s.adviser_name
                FROM sections s
                LEFT JOIN class_schedules cs ON cs.section_id = s.section_id
                WHERE s.adviser_id=%s OR cs.faculty_id=%s
                ORDER BY s.name ASC
                """,
                (faculty_id, faculty_id),
            )
            return [_to_section(r) for r in fetchall(cur)]

    def create(self, *, name: str, adviser_id: str, adviser_name: str) -> str:
        section_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO sections(section_id, name, adviser_id, adviser_name) VALUES(%s,%s,%s,%s)",
                (section_id, name, adviser_id, adviser_name),
            )
        return section_id

    def update(self, section_id: str, *, name: str, adviser_id: str, adviser_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE sections SET name=%s, adviser_id=%s, adviser_name=%s WHERE section_id=%s",
                (name, adviser_id, adviser_name, section_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, section_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # class_schedules has ON DELETE CASCADE; delete explicitly for engines without FK support.
            cur.execute("DELETE FROM class_schedules WHERE section_id=%s", (section_id,))
            cur.execute("DELETE FROM sections WHERE section_id=%s", (section_id,))
            return cur.rowcount > 0

    def list_schedules(self, section_id: str) -> Sequence[ScheduledPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SCHEDULE_COLUMNS} FROM class_schedules WHERE section_id=%s ORDER BY start_time ASC",
                (section_id,),
            )
            return [_to_period(r) for r in fetchall(cur)]

    def get_schedule(self, schedule_id: str) -> Optional[ScheduledPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SCHEDULE_COLUMNS} FROM class_schedules WHERE schedule_id=%s", (schedule_id,))
            row = fetchone(cur)
            return _to_period(row) if row else None

    def add_schedules(self, section_id: str, periods: Sequence[ScheduledPeriod]) -> Sequence[str]:
        ids: List[str] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for period in periods:
                schedule_id = new_id()
                cur.execute(
                    f"INSERT INTO class_schedules({_SCHEDULE_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s)",
                    (schedule_id, section_id, period.subject, period.start_time, period.end_time, period.faculty_id),
                )
                ids.append(schedule_id)
        return ids

    def update_schedule(self, period: ScheduledPeriod) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE class_schedules
                SET subject=%s, start_time=%s, end_time=%s, faculty_id=%s
                WHERE schedule_id=%s
                """,
                (period.subject, period.start_time, period.end_time, period.faculty_id, period.period_id),
            )
            return cur.rowcount > 0

    def delete_schedule(self, schedule_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM class_schedules WHERE schedule_id=%s", (schedule_id,))
            return cur.rowcount > 0
