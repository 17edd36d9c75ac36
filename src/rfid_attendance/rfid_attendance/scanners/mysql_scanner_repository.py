from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Scanner
from .repository import ScannerRepository


def _to_scanner(row: dict) -> Scanner:
    return Scanner(
        scanner_id=str(row["scanner_id"]),
        device_id=row["device_id"],
        section_id=str(row["section_id"]),
    )


class MySQLScannerRepository(ScannerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, scanner_id: str) -> Optional[Scanner]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT scanner_id, device_id, section_id FROM scanners WHERE scanner_id=%s", (scanner_id,))
            row = fetchone(cur)
            return _to_scanner(row) if row else None

    def get_by_device_id(self, device_id: str) -> Optional[Scanner]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT scanner_id, device_id, section_id FROM scanners WHERE device_id=%s", (device_id,))
            row = fetchone(cur)
            return _to_scanner(row) if row else None

    def list_all(self) -> Sequence[Scanner]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT scanner_id, device_id, section_id FROM scanners ORDER BY device_id ASC")
            return [_to_scanner(r) for r in fetchall(cur)]

    def create(self, *, device_id: str, section_id: str) -> str:
        scanner_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO scanners(scanner_id, device_id, section_id) VALUES(%s,%s,%s)",
                (scanner_id, device_id, section_id),
            )
        return scanner_id

    def update(self, scanner_id: str, *, device_id: str, section_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE scanners SET device_id=%s, section_id=%s WHERE scanner_id=%s",
                (device_id, section_id, scanner_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, scanner_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM scanners WHERE scanner_id=%s", (scanner_id,))
            return cur.rowcount > 0
