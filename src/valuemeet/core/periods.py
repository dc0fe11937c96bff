"""Calendar period windows for list filtering - no I/O dependencies."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta

SUNDAY = calendar.SUNDAY

# Inclusive windows end one millisecond before the next period starts.
_RESOLUTION = timedelta(milliseconds=1)


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class PeriodWindow:
    """An inclusive [start, end] calendar range."""

    start: datetime
    end: datetime
    granularity: Granularity

    def contains_date(self, d: date) -> bool:
        """Membership by calendar date only, ignoring time of day."""
        return self.start.date() <= d <= self.end.date()

    def format(self) -> str:
        if self.granularity is Granularity.DAY:
            return self.start.strftime("%Y-%m-%d")
        if self.granularity is Granularity.MONTH:
            return self.start.strftime("%Y-%m")
        return f"{self.start:%Y-%m-%d} - {self.end:%Y-%m-%d}"


def _as_datetime(reference: date | datetime) -> datetime:
    if isinstance(reference, datetime):
        return reference
    return datetime.combine(reference, time.min)


def _unit(granularity: Granularity) -> timedelta | relativedelta:
    match granularity:
        case Granularity.DAY:
            return timedelta(days=1)
        case Granularity.WEEK:
            return timedelta(weeks=1)
        case Granularity.MONTH:
            return relativedelta(months=1)


def period_window(
    reference: date | datetime,
    granularity: Granularity,
    first_weekday: int = SUNDAY,
) -> PeriodWindow:
    """
    Compute the period containing a reference instant.

    Pure function - no I/O.

    Args:
        reference: Any instant (or date) inside the wanted period
        granularity: Day, week or month
        first_weekday: First day of the week, using calendar.MONDAY..SUNDAY

    Returns:
        PeriodWindow whose end is one millisecond before the next period
    """
    ref = _as_datetime(reference)
    midnight = datetime.combine(ref.date(), time.min, tzinfo=ref.tzinfo)

    match granularity:
        case Granularity.DAY:
            start = midnight
        case Granularity.WEEK:
            start = midnight - timedelta(days=(ref.weekday() - first_weekday) % 7)
        case Granularity.MONTH:
            start = midnight.replace(day=1)

    end = start + _unit(granularity) - _RESOLUTION
    return PeriodWindow(start=start, end=end, granularity=Granularity(granularity))


def shift_period(
    reference: date | datetime,
    granularity: Granularity,
    steps: int = 1,
) -> datetime:
    """
    Move a reference instant by whole periods, keeping the time of day.

    Negative steps move backwards. Month shifts clamp the day of month
    (Jan 31 + 1 month = Feb 28/29).
    """
    ref = _as_datetime(reference)
    match granularity:
        case Granularity.DAY:
            return ref + timedelta(days=steps)
        case Granularity.WEEK:
            return ref + timedelta(weeks=steps)
        case Granularity.MONTH:
            return ref + relativedelta(months=steps)
