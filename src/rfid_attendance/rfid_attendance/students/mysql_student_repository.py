from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, first_name, middle_name, last_name, email, address, rfid, mac_address, section_id"


def _to_student(row: dict) -> Student:
    return Student(
        student_id=str(row["student_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        middle_name=row.get("middle_name"),
        email=row.get("email"),
        address=row.get("address"),
        rfid=row.get("rfid"),
        mac_address=row.get("mac_address"),
        section_id=str(row["section_id"]) if row.get("section_id") is not None else None,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, value: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._one("student_id", student_id)

    def get_by_rfid(self, rfid: str) -> Optional[Student]:
        return self._one("UPPER(rfid)", rfid.upper())

    def get_by_mac(self, mac_address: str) -> Optional[Student]:
        return self._one("UPPER(mac_address)", mac_address.upper())

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY last_name ASC, first_name ASC")
            return [_to_student(r) for r in fetchall(cur)]

    def list_by_section(self, section_id: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE section_id=%s ORDER BY last_name ASC, first_name ASC",
                (section_id,),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def update_credentials(self, student_id: str, *, rfid: Optional[str], mac_address: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET rfid=%s, mac_address=%s WHERE student_id=%s",
                (rfid, mac_address, student_id),
            )
            return cur.rowcount > 0

    def update_profile(
        self,
        student_id: str,
        *,
        first_name: str,
        last_name: str,
        address: Optional[str],
        section_id: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET first_name=%s, last_name=%s, address=%s, section_id=%s
                WHERE student_id=%s
                """,
                (first_name, last_name, address, section_id, student_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0
