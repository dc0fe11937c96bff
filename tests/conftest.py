"""Shared fixtures."""

from collections import Counter
from datetime import datetime

import pytest

from valuemeet.adapters.meeting_api import StoreError
from valuemeet.core.vocabulary import DisplayMeeting, Member, MeetingType, PersistedStatus


class FakeMeetingStore:
    """In-memory MeetingStore that records every call."""

    def __init__(self, own=None, department=None, members=None, fail_on=()):
        self.own = list(own or [])
        self.department = list(department or [])
        self.members = list(members or [])
        self.fail_on = set(fail_on)
        self.calls: list[str] = []
        self.counts: Counter = Counter()
        self.headers: list[dict] = []
        self.writes: dict[str, object] = {}
        self.detail: dict = {}
        self.generated_tags: list[str] = []
        self.recommendations: list = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        self.counts[name] += 1
        if name in self.fail_on:
            raise StoreError(f"{name} failed")

    def create_meeting(self, header):
        self._record("create_meeting")
        self.headers.append(header)
        return "m-new"

    def update_meeting(self, meeting_id, header):
        self._record("update_meeting")
        self.headers.append(header)

    def register_agenda(self, meeting_id, purposes, topics):
        self._record("register_agenda")
        self.writes["agenda"] = (meeting_id, purposes, topics)

    def register_tags(self, meeting_id, tags):
        self._record("register_tags")
        self.writes["tags"] = (meeting_id, tags)

    def register_participants(self, meeting_id, participants):
        self._record("register_participants")
        self.writes["participants"] = (meeting_id, participants)

    def delete_meeting(self, meeting_id):
        self._record("delete_meeting")

    def fetch_own_meetings(self, user_id):
        self._record("fetch_own_meetings")
        return list(self.own)

    def fetch_department_meetings(self, department_id):
        self._record("fetch_department_meetings")
        return list(self.department)

    def fetch_department_members(self, department_id):
        self._record("fetch_department_members")
        return list(self.members)

    def fetch_meeting(self, meeting_id):
        self._record("fetch_meeting")
        return self.detail["meeting"]

    def fetch_participants(self, meeting_id):
        self._record("fetch_participants")
        return self.detail.get("participants", [])

    def fetch_agenda(self, meeting_id):
        self._record("fetch_agenda")
        return self.detail.get("agenda", {})

    def search_users(self, name):
        self._record("search_users")
        return [m for m in self.members if name.lower() in m.name.lower()]

    def generate_tags(self, topics):
        self._record("generate_tags")
        self.writes["tag_topics"] = list(topics)
        return list(self.generated_tags)

    def recommend_participants(self, tags, top_k=10):
        self._record("recommend_participants")
        self.writes["recommend"] = (list(tags), top_k)
        return self.recommendations[:top_k]


@pytest.fixture
def make_meeting():
    """Factory for creating list meetings."""
    def _make(
        id: str,
        title: str,
        start: datetime,
        status: PersistedStatus = PersistedStatus.SCHEDULED,
        meeting_type: MeetingType = MeetingType.OTHER,
        created_by: str | None = "u1",
        facilitator_name: str = "",
        facilitator_org: str = "",
        purpose: str = "",
        facilitator_id: str | None = None,
    ) -> DisplayMeeting:
        return DisplayMeeting(
            id=id,
            title=title,
            start=start,
            meeting_type=meeting_type,
            status=status,
            created_by=created_by,
            facilitator_id=facilitator_id,
            facilitator_name=facilitator_name,
            facilitator_org=facilitator_org,
            purpose=purpose,
        )
    return _make


@pytest.fixture
def department_meetings(make_meeting):
    """Own meetings are a and b; c and d belong to colleagues."""
    return [
        make_meeting("a", "Budget review", datetime(2025, 1, 15, 10, 0),
                     meeting_type=MeetingType.DECISION_MAKING, facilitator_name="Tanaka",
                     facilitator_org="Finance", purpose="Approve Q1 budget"),
        make_meeting("b", "Weekly sync", datetime(2025, 1, 13, 9, 0),
                     status=PersistedStatus.DRAFT, meeting_type=MeetingType.INFORMATION_SHARING,
                     facilitator_name="Tanaka", facilitator_org="Finance"),
        make_meeting("c", "Incident postmortem", datetime(2025, 1, 20, 14, 0),
                     meeting_type=MeetingType.ISSUE_RESOLUTION, created_by="u2",
                     facilitator_name="Sato", facilitator_org="Platform"),
        make_meeting("d", "Roadmap planning", datetime(2025, 1, 8, 16, 0),
                     status=PersistedStatus.COMPLETED, meeting_type=MeetingType.PLANNING_CONCEPT,
                     created_by="u3", facilitator_name="Sato", facilitator_org="Platform"),
    ]


@pytest.fixture
def members():
    return [
        Member("u1", "Tanaka", "Finance"),
        Member("u2", "Sato", "Platform"),
        Member("u3", "Suzuki", "Platform"),
        Member("u4", "Ito", "Sales"),
    ]


@pytest.fixture
def store(department_meetings, members):
    own = [m for m in department_meetings if m.created_by == "u1"]
    return FakeMeetingStore(own=own, department=department_meetings, members=members)


@pytest.fixture
def make_store():
    """Factory for an empty or failing FakeMeetingStore."""
    return FakeMeetingStore
