from datetime import date, datetime, time

from src.rfid_attendance.rfid_attendance.attendance.factory import AttendanceStrategyFactory
from src.rfid_attendance.rfid_attendance.attendance.strategies.absent_strategy import AbsentStrategy
from src.rfid_attendance.rfid_attendance.attendance.strategies.late_strategy import LateStrategy
from src.rfid_attendance.rfid_attendance.attendance.strategies.present_strategy import PresentStrategy
from src.rfid_attendance.rfid_attendance.core.enums import AttendanceStatus
from src.rfid_attendance.rfid_attendance.sections.model import ScheduledPeriod

PERIOD = ScheduledPeriod("p1", "Math", time(8, 0), time(9, 0))
DAY = date(2025, 1, 1)


def test_factory_scan_within_grace_is_present():
    scan = datetime(2025, 1, 1, 8, 4, 59)

    strategy = AttendanceStrategyFactory().for_scan(scan_time=scan, day=DAY, period=PERIOD, grace_minutes=5)

    assert isinstance(strategy, PresentStrategy)
    assert strategy.decide(scan_time=scan).matched_scan_time == scan


def test_factory_scan_after_grace_is_late():
    scan = datetime(2025, 1, 1, 8, 6, 0)

    strategy = AttendanceStrategyFactory().for_scan(scan_time=scan, day=DAY, period=PERIOD, grace_minutes=5)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide(scan_time=scan).status == AttendanceStatus.LATE


def test_factory_without_scan_is_absent():
    strategy = AttendanceStrategyFactory().for_scan(scan_time=None, day=DAY, period=PERIOD, grace_minutes=5)

    assert isinstance(strategy, AbsentStrategy)
    assert strategy.decide(scan_time=None).matched_scan_time is None


def test_factory_scan_after_end_is_absent_and_drops_time():
    scan = datetime(2025, 1, 1, 9, 0, 1)

    strategy = AttendanceStrategyFactory().for_scan(scan_time=scan, day=DAY, period=PERIOD, grace_minutes=5)

    assert isinstance(strategy, AbsentStrategy)
    assert strategy.decide(scan_time=scan).matched_scan_time is None
