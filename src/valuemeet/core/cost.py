"""Meeting cost estimation - no I/O dependencies."""

from datetime import datetime

# Currency units per participant per hour.
UNIT_RATE = 5000

# Times of day are compared on this arbitrary common date.
_BASE_DATE = "2000-01-01"


def _parse_time(value: str) -> datetime:
    return datetime.strptime(f"{_BASE_DATE} {value.strip()}", "%Y-%m-%d %H:%M")


def meeting_duration_hours(start_time: str | None, end_time: str | None) -> float:
    """Hours between two HH:MM times of day, 0 if either is missing."""
    if not start_time or not end_time:
        return 0.0
    delta = _parse_time(end_time) - _parse_time(start_time)
    return delta.total_seconds() / 3600


def estimate_meeting_cost(
    participant_count: int,
    start_time: str | None,
    end_time: str | None,
    unit_rate: float = UNIT_RATE,
) -> float:
    """
    Estimate what a meeting costs in attendee time.

    Pure function - no I/O. No rounding is applied.

    Returns 0 when either time is missing, nobody attends, or the end time is
    not after the start time.
    """
    if not start_time or not end_time or participant_count == 0:
        return 0
    hours = meeting_duration_hours(start_time, end_time)
    if hours <= 0:
        return 0
    return participant_count * unit_rate * hours


def format_cost(amount: float, currency: str = "¥") -> str:
    """Round for display only."""
    return f"{currency}{round(amount):,}"
