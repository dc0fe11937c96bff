"""Pure scheduling form logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .cost import UNIT_RATE, estimate_meeting_cost
from .rules import RuleViolation, role_from_past_role
from .vocabulary import (
    MeetingMode,
    MeetingType,
    Member,
    Participant,
    PersistedStatus,
    Priority,
    Role,
)


class ValidationError(Exception):
    """Raised when required form fields are missing."""

    pass


class SubmitAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    SAVE_DRAFT = "save-draft"


class SchedulingState(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    BLOCKED_BY_RULES = "blocked-by-rules"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class SubmissionOutcome(str, Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"  # meeting saved, some secondary writes failed
    BLOCKED = "blocked"
    FAILED = "failed"


@dataclass
class MeetingForm:
    """In-progress create/edit form state."""

    title: str = ""
    description: str = ""
    meeting_type: MeetingType | None = None
    meeting_mode: MeetingMode | None = None
    priority: Priority | None = None
    meeting_date: date | None = None
    start_time: str = ""
    end_time: str = ""
    purposes: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    participants: list[Participant] = field(default_factory=list)
    # Only honoured by updates; creates are always draft or scheduled.
    status: PersistedStatus | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "MeetingForm":
        """Create a form from a JSON-style dict (CLI input files)."""
        meeting_date = data.get("date")
        status = data.get("status")
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            meeting_type=MeetingType.parse(data["type"]) if data.get("type") else None,
            meeting_mode=MeetingMode.parse(data["mode"]) if data.get("mode") else None,
            priority=Priority.parse(data["priority"]) if data.get("priority") else None,
            meeting_date=date.fromisoformat(meeting_date) if meeting_date else None,
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            purposes=list(data.get("purposes", [])),
            topics=list(data.get("topics", [])),
            tags=list(data.get("tags", [])),
            participants=[Participant.from_api(p) for p in data.get("participants", [])],
            status=PersistedStatus.parse(status) if status else None,
        )

    def has_participant(self, user_id: str) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def add_participant(self, member: Member, role: Role = Role.ORGANIZER) -> bool:
        """Add a member to the roster. Returns False if already present."""
        if self.has_participant(member.user_id):
            return False
        self.participants.append(
            Participant(
                user_id=member.user_id,
                name=member.name,
                organization_name=member.organization_name,
                role=role,
            )
        )
        return True

    def add_recommended(self, member: Member, past_role: str | None = None) -> bool:
        """Add a recommended member, deriving the role from their past role."""
        return self.add_participant(member, role_from_past_role(past_role))

    def remove_participant(self, index: int) -> Participant:
        return self.participants.pop(index)

    def set_role(self, index: int, role: Role) -> None:
        self.participants[index].role = Role.parse(role)

    def estimated_cost(self, unit_rate: float = UNIT_RATE) -> float:
        """Cost of the meeting with the creator counted as an attendee."""
        if not self.participants:
            return 0
        return estimate_meeting_cost(len(self.participants) + 1, self.start_time, self.end_time, unit_rate)


def validate_required(form: MeetingForm) -> None:
    """Raise ValidationError unless title, date and start time are set."""
    missing = [
        name
        for name, value in (("title", form.title.strip()), ("date", form.meeting_date), ("start time", form.start_time))
        if not value
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def requires_rule_check(form: MeetingForm, action: SubmitAction) -> bool:
    """Only committed submissions with a type and a roster are rule-checked."""
    return (
        action is not SubmitAction.SAVE_DRAFT
        and form.meeting_type is not None
        and len(form.participants) > 0
    )


@dataclass
class MeetingPayload:
    """Data handed to the store, one attribute per logical write."""

    header: dict
    purposes: list[str]
    topics: list[str]
    tags: list[str]
    participants: list[dict]

    @property
    def has_agenda(self) -> bool:
        return bool(self.purposes or self.topics)


def _non_empty(values: list[str]) -> list[str]:
    return [v for v in values if v.strip()]


def build_payload(
    form: MeetingForm,
    creator_id: str,
    action: SubmitAction,
    override: bool = False,
) -> MeetingPayload:
    """Assemble the store writes for a validated form."""
    is_draft = action is SubmitAction.SAVE_DRAFT
    status = PersistedStatus.DRAFT if is_draft else PersistedStatus.SCHEDULED
    if action is SubmitAction.UPDATE and form.status is not None:
        status = PersistedStatus.parse(form.status)
    header = {
        "title": form.title,
        "description": form.description,
        "meeting_type": form.meeting_type.wire if form.meeting_type else None,
        "meeting_mode": form.meeting_mode.wire if form.meeting_mode else None,
        "priority": form.priority.value if form.priority else None,
        "date_time": f"{form.meeting_date.isoformat()}T{form.start_time}:00",
        "end_time": form.end_time or None,
        "created_by": creator_id,
        "status": status.value,
        "rule_violation": override and not is_draft,
    }
    return MeetingPayload(
        header=header,
        purposes=_non_empty(form.purposes),
        topics=_non_empty(form.topics),
        tags=[] if is_draft else _non_empty(form.tags),
        participants=[{"user_id": p.user_id, "role_type": Role.parse(p.role).wire} for p in form.participants],
    )


@dataclass
class SubmissionResult:
    outcome: SubmissionOutcome
    meeting_id: str | None = None
    violations: list[RuleViolation] = field(default_factory=list)
    failed_writes: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """True when the meeting row exists, even if degraded."""
        return self.outcome in (SubmissionOutcome.SUCCESS, SubmissionOutcome.DEGRADED)
