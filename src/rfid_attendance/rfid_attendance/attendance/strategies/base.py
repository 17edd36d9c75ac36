from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    matched_scan_time: Optional[datetime] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we turn a candidate scan into a status."""

    @abstractmethod
    def decide(self, *, scan_time: Optional[datetime]) -> StatusDecision:
        raise NotImplementedError
