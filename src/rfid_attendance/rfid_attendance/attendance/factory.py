from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..sections.model import ScheduledPeriod
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_scan(
        self,
        *,
        scan_time: Optional[datetime],
        day: date,
        period: ScheduledPeriod,
        grace_minutes: int,
    ) -> AttendanceStrategy:
        if scan_time is None:
            return AbsentStrategy()

        period_start = datetime.combine(day, period.start_time)
        period_end = datetime.combine(day, period.end_time)
        if scan_time > period_end:
            return AbsentStrategy()
        if scan_time > period_start + timedelta(minutes=grace_minutes):
            return LateStrategy()
        return PresentStrategy()
