from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Scanned in on time (at or before start + grace)."""

    def decide(self, *, scan_time: Optional[datetime]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, matched_scan_time=scan_time)
