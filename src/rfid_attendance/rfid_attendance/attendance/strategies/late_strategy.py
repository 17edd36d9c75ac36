from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Scanned in after the grace period but before the period ended."""

    def decide(self, *, scan_time: Optional[datetime]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, matched_scan_time=scan_time)
