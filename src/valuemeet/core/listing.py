"""Meeting list projection - no I/O dependencies.

Turns the session's cached meeting datasets plus the current filter state into
the list to display. Nothing here fetches; the cache is loaded by the workflow
layer and passed in.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum

from .periods import SUNDAY, Granularity, PeriodWindow, period_window, shift_period
from .status import STATUS_ORDER, resolve_status
from .vocabulary import DisplayMeeting, EffectiveStatus, MeetingType, Member


class Scope(str, Enum):
    SELF = "self"
    DEPARTMENT = "department"
    MEMBER = "member"


class SortKey(str, Enum):
    DATE = "date"
    STATUS = "status"
    FACILITATOR = "facilitator"
    TITLE = "title"


@dataclass
class MeetingCache:
    """
    Raw meeting datasets for one browsing session.

    Loaded once; scope switches read from here. Invalidated only by an
    explicit reload or a local deletion.
    """

    own: list[DisplayMeeting] = field(default_factory=list)
    department: list[DisplayMeeting] = field(default_factory=list)
    members: list[Member] = field(default_factory=list)
    load_count: int = 0

    def reload(
        self,
        own: list[DisplayMeeting],
        department: list[DisplayMeeting],
        members: list[Member],
    ) -> None:
        """Swap in freshly fetched datasets."""
        self.own = list(own)
        self.department = list(department)
        self.members = list(members)
        self.load_count += 1

    def remove(self, meeting_id: str) -> None:
        """Drop a deleted meeting from every dataset."""
        self.own = [m for m in self.own if m.id != meeting_id]
        self.department = [m for m in self.department if m.id != meeting_id]

    def find_member(self, member_id: str) -> Member | None:
        return next((m for m in self.members if m.user_id == member_id), None)

    def member_meetings(self, member_id: str) -> list[DisplayMeeting]:
        """Department meetings the member created or facilitates."""
        member = self.find_member(member_id)
        name = member.name if member else None
        return [
            m
            for m in self.department
            if m.created_by == member_id
            or m.facilitator_id == member_id
            or (name and m.facilitator_name == name)
        ]

    def dataset(self, scope: Scope, member_id: str | None = None) -> list[DisplayMeeting]:
        match scope:
            case Scope.SELF:
                return list(self.own)
            case Scope.DEPARTMENT:
                return list(self.department)
            case Scope.MEMBER:
                if not member_id:
                    return []
                return self.member_meetings(member_id)
        raise ValueError(f"Unknown scope: {scope!r}")


@dataclass(frozen=True)
class ListFilters:
    """Filter state of the meeting list. ListFilters() is the reset state."""

    scope: Scope = Scope.SELF
    member_id: str | None = None
    search: str = ""
    meeting_type: MeetingType | None = None
    period: PeriodWindow | None = None
    sort: SortKey = SortKey.DATE


@dataclass
class StatusCounts:
    """Tally of resolved statuses. `total` leaves drafts out."""

    scheduled: int = 0
    meeting_ended: int = 0
    completed: int = 0
    draft: int = 0

    @property
    def total(self) -> int:
        return self.scheduled + self.meeting_ended + self.completed


@dataclass
class ListedMeeting:
    meeting: DisplayMeeting
    status: EffectiveStatus


@dataclass
class MeetingListView:
    meetings: list[ListedMeeting]
    counts: StatusCounts


def matches_search(meeting: DisplayMeeting, query: str) -> bool:
    """Case-insensitive substring match over the searchable text fields."""
    query = query.strip().lower()
    if not query:
        return True
    haystack = (
        meeting.title,
        meeting.purpose,
        meeting.facilitator_name,
        meeting.facilitator_org,
    )
    return any(query in (text or "").lower() for text in haystack)


def filter_by_period(meetings: list[DisplayMeeting], window: PeriodWindow) -> list[DisplayMeeting]:
    return [m for m in meetings if window.contains_date(m.start.date())]


def filter_by_type(
    meetings: list[DisplayMeeting],
    meeting_type: MeetingType | None,
) -> list[DisplayMeeting]:
    if meeting_type is None:
        return meetings
    return [m for m in meetings if m.meeting_type == meeting_type]


def sort_meetings(listed: list[ListedMeeting], key: SortKey) -> list[ListedMeeting]:
    """Stable sort by the chosen key."""
    match key:
        case SortKey.DATE:
            return sorted(listed, key=lambda lm: lm.meeting.start)
        case SortKey.STATUS:
            return sorted(listed, key=lambda lm: STATUS_ORDER[lm.status])
        case SortKey.FACILITATOR:
            return sorted(listed, key=lambda lm: lm.meeting.facilitator_name)
        case SortKey.TITLE:
            return sorted(listed, key=lambda lm: lm.meeting.title)
    raise ValueError(f"Unknown sort key: {key!r}")


def count_statuses(listed: list[ListedMeeting]) -> StatusCounts:
    counts = StatusCounts()
    for lm in listed:
        match lm.status:
            case EffectiveStatus.SCHEDULED:
                counts.scheduled += 1
            case EffectiveStatus.MEETING_ENDED:
                counts.meeting_ended += 1
            case EffectiveStatus.COMPLETED:
                counts.completed += 1
            case EffectiveStatus.DRAFT:
                counts.draft += 1
    return counts


def project_meetings(cache: MeetingCache, filters: ListFilters, now: datetime) -> MeetingListView:
    """
    Produce the displayed meeting list.

    Pure function - no I/O. Applies scope, period, search and type filters,
    resolves each status at `now`, sorts, then counts.
    """
    meetings = cache.dataset(filters.scope, filters.member_id)
    if filters.period is not None:
        meetings = filter_by_period(meetings, filters.period)
    meetings = [m for m in meetings if matches_search(m, filters.search)]
    meetings = filter_by_type(meetings, filters.meeting_type)

    listed = [ListedMeeting(m, resolve_status(m.status, m.start, now)) for m in meetings]
    listed = sort_meetings(listed, filters.sort)
    return MeetingListView(meetings=listed, counts=count_statuses(listed))


class MeetingListProjector:
    """
    Stateful list view over a session cache.

    Holds the filter state between UI events. Never fetches: the cache is
    shared by reference with the workflow that loads it.
    """

    def __init__(self, cache: MeetingCache, first_weekday: int = SUNDAY):
        self.cache = cache
        self.first_weekday = first_weekday
        self.filters = ListFilters()
        self.reference: date | datetime | None = None

    def select_scope(self, scope: Scope, member_id: str | None = None) -> None:
        scope = Scope(scope)
        if scope is not Scope.MEMBER:
            member_id = None
        self.filters = replace(self.filters, scope=scope, member_id=member_id)

    def set_search(self, query: str) -> None:
        self.filters = replace(self.filters, search=query)

    def set_type(self, meeting_type: MeetingType | None) -> None:
        self.filters = replace(self.filters, meeting_type=meeting_type)

    def set_sort(self, key: SortKey) -> None:
        self.filters = replace(self.filters, sort=SortKey(key))

    def set_period(self, reference: date | datetime, granularity: Granularity) -> PeriodWindow:
        window = period_window(reference, granularity, self.first_weekday)
        self.reference = reference
        self.filters = replace(self.filters, period=window)
        return window

    def next_period(self) -> PeriodWindow:
        return self._step(1)

    def previous_period(self) -> PeriodWindow:
        return self._step(-1)

    def _step(self, steps: int) -> PeriodWindow:
        if self.filters.period is None or self.reference is None:
            raise ValueError("No period selected")
        granularity = self.filters.period.granularity
        return self.set_period(shift_period(self.reference, granularity, steps), granularity)

    def clear_period(self) -> None:
        self.reference = None
        self.filters = replace(self.filters, period=None)

    def reset(self) -> None:
        self.reference = None
        self.filters = ListFilters()

    def remove(self, meeting_id: str) -> None:
        self.cache.remove(meeting_id)

    def view(self, now: datetime) -> MeetingListView:
        return project_meetings(self.cache, self.filters, now)
