"""Time utilities (KST)."""

from datetime import date, datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

KST = ZoneInfo("Asia/Seoul")


def now_kst() -> datetime:
    """Current time in KST, timezone-aware."""
    return datetime.now(KST)


def to_kst(dt: datetime, naive_assumed_tz: tzinfo = timezone.utc) -> datetime:
    """Convert datetime to KST timezone-aware value."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=naive_assumed_tz)
    return dt.astimezone(KST)


def kst_date(dt: Optional[datetime] = None) -> date:
    """Calendar date in Seoul for the given instant (default: now)."""
    return to_kst(dt or now_kst()).date()


def kst_hour_start(dt: Optional[datetime] = None) -> datetime:
    """
    Start of the KST hour containing dt.

    Hourly pools are keyed by this value.
    """
    return to_kst(dt or now_kst()).replace(minute=0, second=0, microsecond=0)
