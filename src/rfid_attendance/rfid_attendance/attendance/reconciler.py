"""Attendance reconciliation.

Matches a student's scan events for one day against the scheduled periods of
their section and classifies every period as Present, Late or Absent.

Pure functions over in-memory data: no I/O, no shared state. Scans whose
timestamp cannot be parsed are logged and skipped.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..common.datetime_utils import parse_scan_time
from ..common.validators import normalize_credential
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..sections.model import ScheduledPeriod
from .factory import AttendanceStrategyFactory
from .model import AttendanceOutcome, ScanEvent

logger = logging.getLogger(__name__)

TimedScan = Tuple[datetime, ScanEvent]


def timed_scans(scans: Iterable[ScanEvent]) -> List[TimedScan]:
    """Pair each scan with its normalized instant, dropping unparseable ones."""

    out: List[TimedScan] = []
    for scan in scans:
        at = parse_scan_time(scan.occurred_at)
        if at is None:
            logger.warning(
                "Skipping scan with unparseable timestamp %r (credential=%s)",
                scan.occurred_at,
                scan.credential_id,
            )
            continue
        out.append((at, scan))
    return out


def scans_for_credentials(scans: Iterable[ScanEvent], credentials: Iterable[Optional[str]]) -> List[ScanEvent]:
    """Keep the scans whose credential matches any of ``credentials`` (case-insensitive)."""

    wanted: Set[str] = {c for c in (normalize_credential(x) for x in credentials) if c}
    if not wanted:
        return []
    return [s for s in scans if normalize_credential(s.credential_id) in wanted]


def scans_on_day(scans: Iterable[ScanEvent], day: date) -> List[ScanEvent]:
    """Keep the scans that happened on ``day`` (local midnight to midnight)."""

    return [scan for at, scan in timed_scans(scans) if at.date() == day]


def classify_day(scans: Sequence[ScanEvent]) -> bool:
    """A day counts as attended when it has at least one parseable scan."""

    return len(timed_scans(scans)) > 0


def attended_days(scans: Iterable[ScanEvent]) -> List[date]:
    """Distinct days with at least one parseable scan, ascending."""

    return sorted({at.date() for at, _ in timed_scans(scans)})


class AttendanceReconciler:
    def __init__(
        self,
        *,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        allow_unattributed: bool = False,
    ):
        self._grace_minutes = int(grace_minutes)
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._allow_unattributed = allow_unattributed

    @property
    def grace_minutes(self) -> int:
        return self._grace_minutes

    def _candidate(self, period: ScheduledPeriod, scans: Sequence[TimedScan]) -> Optional[datetime]:
        matches = [
            at
            for at, scan in scans
            if scan.schedule_ref == period.period_id
            or (self._allow_unattributed and scan.schedule_ref is None)
        ]
        return min(matches) if matches else None

    def reconcile(
        self,
        periods: Iterable[ScheduledPeriod],
        scans_for_day: Iterable[ScanEvent],
        day: date,
    ) -> List[AttendanceOutcome]:
        ordered = sorted(periods, key=lambda p: p.start_time)
        scans = timed_scans(scans_for_day)

        outcomes: List[AttendanceOutcome] = []
        for period in ordered:
            scan_time = self._candidate(period, scans)
            strategy = self._factory.for_scan(
                scan_time=scan_time,
                day=day,
                period=period,
                grace_minutes=self._grace_minutes,
            )
            decision = strategy.decide(scan_time=scan_time)
            outcomes.append(
                AttendanceOutcome(
                    period=period,
                    status=decision.status,
                    matched_scan_time=decision.matched_scan_time,
                )
            )
        return outcomes


def reconcile(
    periods: Iterable[ScheduledPeriod],
    scans_for_day: Iterable[ScanEvent],
    day: date,
    grace_period_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    *,
    allow_unattributed: bool = False,
) -> List[AttendanceOutcome]:
    """Classify every scheduled period of ``day``; see ``AttendanceReconciler``."""

    reconciler = AttendanceReconciler(grace_minutes=grace_period_minutes, allow_unattributed=allow_unattributed)
    return reconciler.reconcile(periods, scans_for_day, day)
