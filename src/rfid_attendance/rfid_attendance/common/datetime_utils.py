from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional, Tuple

_SCAN_TIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> date:
    """Parse YYYY-MM into the first day of that month."""
    return datetime.strptime(value, "%Y-%m").date()


def parse_hhmm(value: str) -> time:
    """Parse a 24-hour HH:mm time of day."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def days_in_month(month: date) -> List[date]:
    last = calendar.monthrange(month.year, month.month)[1]
    return [date(month.year, month.month, d) for d in range(1, last + 1)]


def day_window(day: date) -> Tuple[datetime, datetime]:
    """Half-open [midnight, next midnight) bounds of ``day``."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_window(month: date) -> Tuple[datetime, datetime]:
    """Half-open bounds of the calendar month containing ``month``."""
    days = days_in_month(month)
    return datetime.combine(days[0], time.min), datetime.combine(days[-1], time.min) + timedelta(days=1)


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_scan_time(value: Any) -> Optional[datetime]:
    """Normalize a raw scan timestamp into a naive local datetime.

    Accepted representations:
    - datetime (aware values are converted to local time)
    - Unix epoch seconds, as int/float or a numeric string
    - "YYYY-MM-DD HH:MM:SS" (space separated)
    - ISO 8601, with or without offset ("Z" is accepted)

    Returns None when the value cannot be interpreted.
    """

    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _to_local_naive(value)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        return parse_scan_time(seconds)

    for fmt in _SCAN_TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            pass

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        return None
