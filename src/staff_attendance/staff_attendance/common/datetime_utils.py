from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Union

from ..core.exceptions import ValidationError

WALL_CLOCK_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}. Use YYYY-MM-DD")


def parse_wall_clock(value: Union[str, time], field_name: str = "Time") -> time:
    """Parse a 24-hour ``HH:mm`` string into a minute-resolution ``time``."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)

    match = WALL_CLOCK_PATTERN.match((value or "").strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError(f"Invalid {field_name.lower()} format. Use HH:mm (24-hour)")
    return time(hour=int(match.group(1)), minute=int(match.group(2)))


def format_wall_clock(value: time) -> str:
    return value.strftime("%H:%M")


def now_utc() -> datetime:
    """Current instant as an aware UTC datetime.

    Note: Wrapped so services can take ``now=`` in tests instead of patching.
    """
    return datetime.now(timezone.utc)


def as_utc(instant: datetime) -> datetime:
    """Treat naive datetimes as UTC, convert aware ones to UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


@dataclass(frozen=True)
class CivilOffset:
    """A fixed civil timezone expressed as minutes east of UTC.

    Wall-clock values (shift start times, calendar days) live in this civil
    time while instants are stored in UTC; the process timezone is never used.
    """

    minutes: int = 0

    @property
    def delta(self) -> timedelta:
        return timedelta(minutes=self.minutes)

    def to_civil(self, instant: datetime) -> datetime:
        """Absolute instant -> naive civil wall-clock datetime."""
        return as_utc(instant).replace(tzinfo=None) + self.delta

    def to_instant(self, civil: datetime) -> datetime:
        """Naive civil wall-clock datetime -> aware UTC instant."""
        return (civil - self.delta).replace(tzinfo=timezone.utc)

    def today(self, now: datetime | None = None) -> date:
        return self.to_civil(now or now_utc()).date()


def normalize_work_date(value: Union[date, datetime], offset: CivilOffset | None = None) -> date:
    """Reduce a date-like value to a calendar day (no time-of-day component).

    Aware datetimes are read in civil time so a late-evening UTC instant maps
    to the civil day it actually falls on.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return (offset or CivilOffset()).to_civil(value).date()
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError("Invalid date")


def date_range(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
