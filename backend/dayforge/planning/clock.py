"""Minute arithmetic for one civil timezone.

All placement happens in integer minutes since local midnight of the
planned date. Timestamps only appear at the boundary, through
:class:`ClockModel`. Which UTC offset applies on a date is a policy object
(:class:`OffsetForDate`) so another zone can be substituted without
touching placement code.
"""
from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol, Tuple
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60


class OffsetForDate(Protocol):
    def __call__(self, day: date) -> int:
        """Return the UTC offset in minutes in force on ``day``."""


def _last_sunday(year: int, month: int) -> date:
    last_day = date(year, month, calendar.monthrange(year, month)[1])
    return last_day - timedelta(days=(last_day.weekday() - calendar.SUNDAY) % 7)


class CentralEuropeanSeasonRule:
    """Fixed two-offset season rule (CET/CEST style).

    Summer offset applies from the last Sunday of March up to, but not
    including, the last Sunday of October. The switch is evaluated per
    calendar date, not at 01:00 UTC.
    """

    def __init__(self, standard_minutes: int = 60, summer_minutes: int = 120) -> None:
        self.standard_minutes = standard_minutes
        self.summer_minutes = summer_minutes

    def __call__(self, day: date) -> int:
        summer_start = _last_sunday(day.year, 3)
        summer_end = _last_sunday(day.year, 10)
        if summer_start <= day < summer_end:
            return self.summer_minutes
        return self.standard_minutes

    def __repr__(self) -> str:
        return f"CentralEuropeanSeasonRule({self.standard_minutes}, {self.summer_minutes})"


class ZoneInfoOffsetRule:
    """Offset taken from the IANA tz database at local noon of each date."""

    def __init__(self, zone_name: str) -> None:
        self.zone = ZoneInfo(zone_name)

    def __call__(self, day: date) -> int:
        offset = datetime.combine(day, time(hour=12), tzinfo=self.zone).utcoffset()
        return int(offset.total_seconds() // 60) if offset else 0

    def __repr__(self) -> str:
        return f"ZoneInfoOffsetRule({self.zone.key!r})"


class ClockModel:
    def __init__(self, offset_rule: OffsetForDate | None = None) -> None:
        self.offset_rule = offset_rule or CentralEuropeanSeasonRule()

    def offset_minutes(self, day: date) -> int:
        return self.offset_rule(day)

    def to_absolute(self, day: date, minute: int) -> datetime:
        """Convert a minute offset from local midnight of ``day`` to UTC.

        Minutes past 24:00 land on the following date(s) and use that
        date's offset.
        """
        days, minute_of_day = divmod(minute, MINUTES_PER_DAY)
        local_day = day + timedelta(days=days)
        midnight_utc = datetime.combine(local_day, time.min, tzinfo=timezone.utc)
        return midnight_utc + timedelta(minutes=minute_of_day - self.offset_minutes(local_day))

    def minutes_since_midnight(self, day: date, moment: datetime) -> float:
        if moment.tzinfo is None:
            raise ValueError("moment must be timezone-aware")
        delta = moment.astimezone(timezone.utc) - self.to_absolute(day, 0)
        return delta.total_seconds() / 60

    def floor_minutes(self, day: date, moment: datetime) -> int:
        return math.floor(self.minutes_since_midnight(day, moment))

    def ceil_minutes(self, day: date, moment: datetime) -> int:
        return math.ceil(self.minutes_since_midnight(day, moment))

    def day_bounds(self, day: date) -> Tuple[datetime, datetime]:
        """UTC instants of local midnight of ``day`` and of the next day."""
        return self.to_absolute(day, 0), self.to_absolute(day + timedelta(days=1), 0)

    def local_date(self, moment: datetime) -> date:
        utc_moment = moment.astimezone(timezone.utc)
        candidate = utc_moment.date()
        shifted = utc_moment + timedelta(minutes=self.offset_minutes(candidate))
        return shifted.date()


def format_minute(minute: int) -> str:
    """Render a minute offset as HH:MM (hours may exceed 23)."""
    hours, minutes = divmod(minute, 60)
    return f"{hours:02d}:{minutes:02d}"
