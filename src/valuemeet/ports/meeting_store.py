"""Meeting store interface."""

from typing import Protocol

from valuemeet.core.vocabulary import DisplayMeeting, Member, Participant, Recommendation


class MeetingStore(Protocol):
    """Interface for the meeting persistence service."""

    def create_meeting(self, header: dict) -> str:
        """Create the meeting row. Returns the new meeting id."""
        ...

    def update_meeting(self, meeting_id: str, header: dict) -> None:
        """Overwrite the meeting row."""
        ...

    def register_agenda(self, meeting_id: str, purposes: list[str], topics: list[str]) -> None:
        """Store agenda purposes and topics for a meeting."""
        ...

    def register_tags(self, meeting_id: str, tags: list[str]) -> None:
        """Attach tags to a meeting."""
        ...

    def register_participants(self, meeting_id: str, participants: list[dict]) -> None:
        """Store the roster as (user_id, role_type) pairs."""
        ...

    def delete_meeting(self, meeting_id: str) -> None:
        ...

    def fetch_own_meetings(self, user_id: str) -> list[DisplayMeeting]:
        """Meetings created by a user."""
        ...

    def fetch_department_meetings(self, department_id: str) -> list[DisplayMeeting]:
        """All meetings in a department."""
        ...

    def fetch_department_members(self, department_id: str) -> list[Member]:
        ...

    def fetch_meeting(self, meeting_id: str) -> DisplayMeeting:
        ...

    def fetch_participants(self, meeting_id: str) -> list[Participant]:
        ...

    def fetch_agenda(self, meeting_id: str) -> dict:
        """Agenda as {"purposes": [...], "topics": [...]}."""
        ...

    def search_users(self, name: str) -> list[Member]:
        ...

    def generate_tags(self, topics: list[str]) -> list[str]:
        """Suggest tags for a set of agenda topics."""
        ...

    def recommend_participants(self, tags: list[str], top_k: int = 10) -> list[Recommendation]:
        """Suggest up to top_k participants for the given tags."""
        ...
