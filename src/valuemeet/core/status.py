"""Effective meeting status - no I/O dependencies."""

from datetime import datetime, timedelta

from .vocabulary import EffectiveStatus, PersistedStatus

# A scheduled meeting is shown as ended this long after it starts, whatever
# its declared end time.
SCHEDULED_WINDOW = timedelta(hours=1)

STATUS_LABELS = {
    EffectiveStatus.SCHEDULED: "Scheduled",
    EffectiveStatus.MEETING_ENDED: "Meeting ended",
    EffectiveStatus.COMPLETED: "Completed",
    EffectiveStatus.DRAFT: "Draft",
}

# List sort ordinal.
STATUS_ORDER = {
    EffectiveStatus.SCHEDULED: 0,
    EffectiveStatus.MEETING_ENDED: 1,
    EffectiveStatus.COMPLETED: 2,
    EffectiveStatus.DRAFT: 3,
}


def resolve_status(status: PersistedStatus, start: datetime, now: datetime) -> EffectiveStatus:
    """
    Derive the display status of a meeting at instant `now`.

    Pure function - no I/O, no clock access. Drafts and completed meetings
    ignore `now`.
    """
    match status:
        case PersistedStatus.DRAFT:
            return EffectiveStatus.DRAFT
        case PersistedStatus.COMPLETED:
            return EffectiveStatus.COMPLETED
        case PersistedStatus.SCHEDULED:
            if now < start + SCHEDULED_WINDOW:
                return EffectiveStatus.SCHEDULED
            return EffectiveStatus.MEETING_ENDED
    raise ValueError(f"Unknown status: {status!r}")


def status_label(status: EffectiveStatus) -> str:
    return STATUS_LABELS[status]
