# render/formatters.py
"""
Human-readable labels for rendered image timestamps.

Output format: "<Weekday>, <Day> <Month> <Year> <HH>:<MM> WIB", with
Indonesian weekday and month names. WIB is fixed at UTC+7.
"""
from __future__ import annotations
from datetime import datetime, timedelta, timezone

# Sunday-first, to match the original index order
DAYS = ["Minggu", "Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu"]
MONTHS = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

WIB = timezone(timedelta(hours=7), "WIB")


def _sunday_first(dt: datetime) -> int:
    # datetime.weekday(): Monday == 0
    return (dt.weekday() + 1) % 7


def format_timestamp(ms: int, legacy: bool = False) -> str:
    """Format a Unix millisecond timestamp as a WIB label.

    ``legacy=True`` reproduces the old label byte for byte: the calendar
    fields stay in UTC and 7 is added to the hour without rolling the date,
    so late-evening UTC times print as e.g. "25:04".
    """
    utc = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    if legacy:
        dt, hours = utc, utc.hour + 7
    else:
        dt = utc.astimezone(WIB)
        hours = dt.hour
    return (
        f"{DAYS[_sunday_first(dt)]}, {dt.day} {MONTHS[dt.month - 1]} {dt.year} "
        f"{hours:02d}:{dt.minute:02d} WIB"
    )
