"""
Daily puzzle keys and numbering.

Everything here works on UTC calendar fields so that two clients in
different timezones agree on which puzzle is "today".
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

EPOCH = date(2024, 1, 1)


def _utc_now(now: Optional[datetime] = None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        # Naive datetimes are taken to already be in UTC
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def daily_seed(now: Optional[datetime] = None) -> str:
    """Return the UTC date as "YYYY-M-D" (month and day not zero-padded)."""
    utc = _utc_now(now)
    return f"{utc.year}-{utc.month}-{utc.day}"


def daily_number(now: Optional[datetime] = None) -> int:
    """Return the 1-based puzzle number counted from 2024-01-01 UTC."""
    return (_utc_now(now).date() - EPOCH).days + 1


def seconds_to_next_puzzle(now: Optional[datetime] = None) -> int:
    """Whole seconds left until the next UTC midnight."""
    utc = _utc_now(now)
    tomorrow = datetime(utc.year, utc.month, utc.day, tzinfo=timezone.utc) + timedelta(days=1)
    return int((tomorrow - utc).total_seconds())


def time_to_next_puzzle(now: Optional[datetime] = None) -> str:
    """Countdown to the next puzzle, e.g. "5h 3m 12s"."""
    remaining = seconds_to_next_puzzle(now)
    hours, rest = divmod(remaining, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes}m {seconds}s"


def format_time(seconds: int) -> str:
    """Format elapsed seconds as MM:SS."""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"
