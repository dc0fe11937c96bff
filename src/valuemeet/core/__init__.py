"""Functional core - pure business logic with no I/O."""

from .vocabulary import (
    DisplayMeeting,
    EffectiveStatus,
    MeetingMode,
    MeetingType,
    Member,
    Participant,
    PersistedStatus,
    Priority,
    Recommendation,
    Role,
)
from .periods import Granularity, PeriodWindow, period_window, shift_period
from .cost import UNIT_RATE, estimate_meeting_cost
from .rules import RuleViolation, check_meeting_rules
from .status import SCHEDULED_WINDOW, resolve_status
from .listing import ListFilters, MeetingCache, MeetingListProjector, Scope, SortKey, project_meetings
from .scheduling import MeetingForm, SubmissionOutcome, SubmissionResult, SubmitAction, ValidationError

__all__ = [
    # Vocabulary
    "DisplayMeeting",
    "EffectiveStatus",
    "MeetingMode",
    "MeetingType",
    "Member",
    "Participant",
    "PersistedStatus",
    "Priority",
    "Recommendation",
    "Role",
    # Periods
    "Granularity",
    "PeriodWindow",
    "period_window",
    "shift_period",
    # Cost
    "UNIT_RATE",
    "estimate_meeting_cost",
    # Rules
    "RuleViolation",
    "check_meeting_rules",
    # Status
    "SCHEDULED_WINDOW",
    "resolve_status",
    # Listing
    "ListFilters",
    "MeetingCache",
    "MeetingListProjector",
    "Scope",
    "SortKey",
    "project_meetings",
    # Scheduling
    "MeetingForm",
    "SubmissionOutcome",
    "SubmissionResult",
    "SubmitAction",
    "ValidationError",
]
