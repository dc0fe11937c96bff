"""Meeting vocabulary and records - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum

from dateutil.parser import isoparse


class _Vocabulary(str, Enum):
    """
    Closed vocabulary.

    Values are the canonical identifiers. Some members are stored by the
    meeting service under a display label instead (see WIRE_LABELS); `parse`
    accepts either form and `wire` gives the form the service stores.
    """

    @classmethod
    def parse(cls, value: "str | _Vocabulary"):
        """Parse an identifier or wire label (case and underscore tolerant)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if WIRE_LABELS.get(member) == text:
                return member
        normalized = text.lower().replace("_", "-")
        for member in cls:
            if member.value == normalized or member.name.lower().replace("_", "-") == normalized:
                return member
        raise ValueError(f"Unknown {cls.__name__}: {value!r}")

    @property
    def wire(self) -> str:
        return WIRE_LABELS.get(self, self.value)


class MeetingType(_Vocabulary):
    DECISION_MAKING = "decision-making"
    INFORMATION_SHARING = "information-sharing"
    ISSUE_RESOLUTION = "issue-resolution"
    PLANNING_CONCEPT = "planning-concept"
    DEVELOPMENT_EVALUATION = "development-evaluation"
    OTHER = "other"


class MeetingMode(_Vocabulary):
    IN_PERSON = "in-person"
    ONLINE = "online"
    HYBRID = "hybrid"
    CHAT = "chat"


class Priority(_Vocabulary):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Role(_Vocabulary):
    """Governance role of a participant within one meeting."""

    ORGANIZER = "organizer"
    EXECUTIVE_OWNER = "executive-owner"
    ACCOUNTABLE_EXPLAINER = "accountable-explainer"
    EXPERT_ADVISOR = "expert-advisor"
    REPORT_RECIPIENT = "report-recipient"


class PersistedStatus(_Vocabulary):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class EffectiveStatus(_Vocabulary):
    """Display status derived from the persisted status and the clock."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    MEETING_ENDED = "meeting-ended"
    COMPLETED = "completed"


# Labels the meeting service stores for types, modes and roles. Priority and
# status are stored as their identifiers.
WIRE_LABELS = {
    MeetingType.DECISION_MAKING: "意思決定会議",
    MeetingType.INFORMATION_SHARING: "情報共有型会議",
    MeetingType.ISSUE_RESOLUTION: "課題解決会議",
    MeetingType.PLANNING_CONCEPT: "企画構想型会議",
    MeetingType.DEVELOPMENT_EVALUATION: "育成評価型会議",
    MeetingType.OTHER: "その他",
    MeetingMode.IN_PERSON: "対面会議（オフライン会議）",
    MeetingMode.ONLINE: "Web会議（オンライン会議）",
    MeetingMode.HYBRID: "ハイブリット会議（複合型会議）",
    MeetingMode.CHAT: "チャット会議（非同期会議）",
    Role.ORGANIZER: "会議主催者",
    Role.EXECUTIVE_OWNER: "実行責任者",
    Role.ACCOUNTABLE_EXPLAINER: "説明責任者",
    Role.EXPERT_ADVISOR: "有識相談者",
    Role.REPORT_RECIPIENT: "報告先",
}


@dataclass
class Participant:
    """A person on a meeting roster."""

    user_id: str
    name: str
    organization_name: str
    role: Role = Role.ORGANIZER
    email: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Participant":
        return cls(
            user_id=str(data["user_id"]),
            name=data.get("name", ""),
            organization_name=data.get("organization_name", "") or "",
            role=Role.parse(data.get("role_type") or data.get("role") or Role.ORGANIZER),
            email=data.get("email"),
        )


@dataclass(frozen=True)
class Member:
    """A department member, as returned by user lookup."""

    user_id: str
    name: str
    organization_name: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Member":
        return cls(
            user_id=str(data["user_id"]),
            name=data.get("name", ""),
            organization_name=data.get("organization_name", "") or "",
        )


@dataclass(frozen=True)
class Recommendation:
    """A suggested participant with the role they held in past meetings."""

    member: Member
    past_role: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Recommendation":
        return cls(member=Member.from_api(data), past_role=data.get("past_role"))


def _as_local(dt: datetime) -> datetime:
    """Offset-aware timestamps become naive local time, comparable with now()."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


@dataclass
class DisplayMeeting:
    """Denormalized meeting row used by the list view. Never written back."""

    id: str
    title: str
    start: datetime
    end_time: time | None = None
    meeting_type: MeetingType = MeetingType.OTHER
    meeting_mode: MeetingMode | None = None
    purpose: str = ""
    participant_count: int = 0
    status: PersistedStatus = PersistedStatus.SCHEDULED
    created_by: str | None = None
    facilitator_id: str | None = None
    facilitator_name: str = ""
    facilitator_org: str = ""
    rule_violation: bool = False

    def duration_minutes(self) -> int | None:
        """Declared duration in minutes, or None if no end time."""
        if self.end_time is None:
            return None
        end = datetime.combine(self.start.date(), self.end_time)
        return int((end - self.start).total_seconds() / 60)

    @classmethod
    def from_api(cls, data: dict) -> "DisplayMeeting":
        """Create a DisplayMeeting from a meeting list API item."""
        end_time = None
        if data.get("end_time"):
            end_time = time.fromisoformat(data["end_time"])
        mode = data.get("meeting_mode")
        created_by = data.get("created_by")
        facilitator_id = data.get("facilitator_id")
        return cls(
            id=str(data["meeting_id"] if "meeting_id" in data else data["id"]),
            title=data["title"],
            start=_as_local(isoparse(data["date_time"])),
            end_time=end_time,
            meeting_type=MeetingType.parse(data.get("meeting_type") or MeetingType.OTHER),
            meeting_mode=MeetingMode.parse(mode) if mode else None,
            purpose=data.get("purpose", "") or "",
            participant_count=data.get("participant_count", 0) or 0,
            status=PersistedStatus.parse(data.get("status") or PersistedStatus.SCHEDULED),
            created_by=str(created_by) if created_by is not None else None,
            facilitator_id=str(facilitator_id) if facilitator_id is not None else None,
            facilitator_name=data.get("facilitator_name", "") or "",
            facilitator_org=data.get("facilitator_org", "") or "",
            rule_violation=bool(data.get("rule_violation", False)),
        )
