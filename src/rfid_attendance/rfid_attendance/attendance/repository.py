from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import LogType
from .model import AttendanceLog, ScanEvent


class ScanRepository(Protocol):
    """Read/append access to the raw scan log (rfid_history, ping_history)."""

    def list_rfid_scans(
        self,
        *,
        credentials: Optional[Iterable[str]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ScanEvent]:
        """RFID scans, optionally narrowed to ``credentials`` and to ``start <= time < end``."""

        raise NotImplementedError

    def list_pings(
        self,
        *,
        credentials: Optional[Iterable[str]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ScanEvent]:
        raise NotImplementedError

    def add_rfid_scan(self, *, credential_id: str, occurred_at: datetime, schedule_ref: Optional[str] = None) -> int:
        raise NotImplementedError


class AttendanceLogRepository(Protocol):
    def get_last_between(self, student_id: str, *, start: datetime, end: datetime) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[AttendanceLog]:
        raise NotImplementedError

    def create(self, *, student_id: str, log_type: LogType, timestamp: datetime) -> int:
        raise NotImplementedError

    def delete_for_student(self, student_id: str) -> int:
        raise NotImplementedError
