from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """No usable scan, or the scan came after the period ended."""

    def decide(self, *, scan_time: Optional[datetime]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)
