"""Calendar-day helpers.

Every date comparison in commitstreak uses the local calendar day of one
``tzinfo`` (the system local zone when ``tz`` is None): "today", event dates,
repository recency and the per-repository query window all agree.
"""

from __future__ import annotations

from datetime import UTC
from datetime import date
from datetime import datetime
from datetime import time
from datetime import timedelta
from datetime import tzinfo


def today(tz: tzinfo | None = None) -> date:
    """Today's date in ``tz``."""
    return datetime.now(tz).date() if tz else datetime.now().astimezone().date()


def local_date(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of an aware datetime in ``tz``."""
    return moment.astimezone(tz).date()


def _start_of_day(day: date, tz: tzinfo | None) -> datetime:
    if tz is None:
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def day_window_utc(day: date, tz: tzinfo | None = None) -> tuple[str, str]:
    """Bounds of ``day`` in ``tz`` as UTC ISO-8601 strings.

    Returns ``(since, until)`` covering 00:00:00 to 23:59:59 local time,
    e.g. ``("2024-01-10T00:00:00Z", "2024-01-10T23:59:59Z")`` for UTC.
    """
    start = _start_of_day(day, tz)
    end = _start_of_day(day + timedelta(days=1), tz) - timedelta(seconds=1)
    fmt = "%Y-%m-%dT%H:%M:%SZ"
    return start.astimezone(UTC).strftime(fmt), end.astimezone(UTC).strftime(fmt)
