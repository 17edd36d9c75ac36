from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Faculty
from .repository import FacultyRepository


def _to_faculty(row: dict) -> Faculty:
    return Faculty(
        faculty_id=str(row["faculty_id"]),
        name=row["name"],
        email=row["email"],
        department=row["department"],
    )


class MySQLFacultyRepository(FacultyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, faculty_id: str) -> Optional[Faculty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT faculty_id, name, email, department FROM faculty WHERE faculty_id=%s",
                (faculty_id,),
            )
            row = fetchone(cur)
            return _to_faculty(row) if row else None

    def list_all(self) -> Sequence[Faculty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT faculty_id, name, email, department FROM faculty ORDER BY name ASC")
            return [_to_faculty(r) for r in fetchall(cur)]

    def create(self, *, faculty_id: str, name: str, email: str, department: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO faculty(faculty_id, name, email, department) VALUES(%s,%s,%s,%s)",
                (faculty_id, name, email, department),
            )
        return faculty_id

    def update(self, faculty_id: str, *, name: str, department: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE faculty SET name=%s, department=%s WHERE faculty_id=%s",
                (name, department, faculty_id),
            )
            # Keep the denormalized adviser name on sections in sync.
            cur.execute("UPDATE sections SET adviser_name=%s WHERE adviser_id=%s", (name, faculty_id))
            return True

    def delete_by_id(self, faculty_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM faculty WHERE faculty_id=%s", (faculty_id,))
            return cur.rowcount > 0
