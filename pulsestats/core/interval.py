"""
Bucket grid arithmetic

A TimeInterval combined with an anchor date defines bucket k as
[anchor + k*interval, anchor + (k+1)*interval). Minute and hour steps are
absolute elapsed time; day, week, month and year steps move the wall clock
in the anchor's time zone, so a "day" bucket spans 23 or 25 hours across a
DST change. Month and year steps clamp the day of month.
"""

import calendar
import math
import re
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .constants import IntervalUnit
from .exceptions import InvalidParameterError

_NOMINAL_SECONDS = {
    IntervalUnit.MINUTE: 60,
    IntervalUnit.HOUR: 3600,
    IntervalUnit.DAY: 86400,
    IntervalUnit.WEEK: 7 * 86400,
    IntervalUnit.MONTH: 2629746,  # Mean Gregorian month
    IntervalUnit.YEAR: 31556952,
}

_INTERVAL_PATTERN = re.compile(r"^\s*(\d+)?\s*([a-zA-Z]+?)s?\s*$")


def _attach(wall: datetime, tz: Optional[tzinfo]) -> datetime:
    """Give a wall-clock time the anchor's zone (pytz zones need localize)"""
    if tz is None:
        return wall
    localize = getattr(tz, "localize", None)
    if localize is not None:
        return localize(wall)
    return wall.replace(tzinfo=tz)


def _normalize(value: datetime) -> datetime:
    normalize = getattr(value.tzinfo, "normalize", None)
    return normalize(value) if normalize is not None else value


def _add_months(wall: datetime, months: int) -> datetime:
    total = wall.month - 1 + months
    year = wall.year + total // 12
    month = total % 12 + 1
    day = min(wall.day, calendar.monthrange(year, month)[1])
    return wall.replace(year=year, month=month, day=day)


class TimeInterval(BaseModel):
    """Calendar-relative bucket size, e.g. 1 day or 15 minutes"""

    model_config = ConfigDict(frozen=True)

    unit: IntervalUnit = Field(default=IntervalUnit.DAY, description="Calendar component")
    count: int = Field(default=1, ge=1, description="Number of components per bucket")

    @classmethod
    def parse(cls, text: str) -> "TimeInterval":
        """
        Parse "day", "hour", "2 hours", "15minutes" style strings

        Raises:
            InvalidParameterError: If the text names no known interval
        """
        match = _INTERVAL_PATTERN.match(text or "")
        if not match:
            raise InvalidParameterError(f"Invalid interval: {text!r}")

        count, name = match.groups()
        try:
            unit = IntervalUnit(name.lower())
        except ValueError:
            raise InvalidParameterError(f"Invalid interval: {text!r}") from None

        count = int(count) if count else 1
        if count < 1:
            raise InvalidParameterError(f"Invalid interval: {text!r}")
        return cls(unit=unit, count=count)

    @property
    def nominal_seconds(self) -> float:
        return _NOMINAL_SECONDS[self.unit] * self.count

    def shift(self, anchor: datetime, k: int) -> datetime:
        """Start of bucket k on the grid anchored at `anchor`"""
        steps = self.count * k

        if self.unit == IntervalUnit.MINUTE:
            return _normalize(anchor + timedelta(minutes=steps))
        if self.unit == IntervalUnit.HOUR:
            return _normalize(anchor + timedelta(hours=steps))

        wall = anchor.replace(tzinfo=None)
        if self.unit == IntervalUnit.DAY:
            wall = wall + timedelta(days=steps)
        elif self.unit == IntervalUnit.WEEK:
            wall = wall + timedelta(weeks=steps)
        elif self.unit == IntervalUnit.MONTH:
            wall = _add_months(wall, steps)
        else:
            wall = _add_months(wall, 12 * steps)

        return _attach(wall, anchor.tzinfo)

    def bucket_index(self, anchor: datetime, instant: datetime) -> int:
        """Index k of the bucket containing `instant` (negative before the anchor)"""
        k = math.floor((instant - anchor).total_seconds() / self.nominal_seconds)

        # The nominal length is only an estimate for calendar units.
        while self.shift(anchor, k) > instant:
            k -= 1
        while self.shift(anchor, k + 1) <= instant:
            k += 1
        return k

    def bucket_bounds(self, anchor: datetime, k: int) -> Tuple[datetime, datetime]:
        return self.shift(anchor, k), self.shift(anchor, k + 1)

    def __str__(self) -> str:
        return f"{self.count} {self.unit.value}"
