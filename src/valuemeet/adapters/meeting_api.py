"""Meeting API adapter - HTTP client for the meeting persistence service."""

import requests

from valuemeet.config import Config, load_config
from valuemeet.core.vocabulary import DisplayMeeting, Member, Participant, Recommendation


class StoreError(Exception):
    """Raised when the meeting service cannot be reached or rejects a call."""

    pass


class MeetingApiAdapter:
    """
    REST meeting service adapter.

    Implements MeetingStore protocol. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        return f"{self.config.api_base_url.rstrip('/')}{endpoint}"

    def _request(self, method: str, endpoint: str, **kwargs) -> dict | list | None:
        """Make an API request, raising StoreError on any failure."""
        try:
            resp = self._session.request(
                method,
                self._url(endpoint),
                timeout=self.config.api_timeout,
                **kwargs,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise StoreError(f"{method} {endpoint} failed: {e}") from e

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise StoreError(f"{method} {endpoint} returned invalid JSON") from e

    # ============== Writes ==============

    def create_meeting(self, header: dict) -> str:
        data = self._request("POST", "/meeting", json=header)
        if not data or "meeting_id" not in data:
            raise StoreError("POST /meeting returned no meeting_id")
        return str(data["meeting_id"])

    def update_meeting(self, meeting_id: str, header: dict) -> None:
        self._request("PUT", f"/meeting/{meeting_id}", json=header)

    def register_agenda(self, meeting_id: str, purposes: list[str], topics: list[str]) -> None:
        self._request(
            "POST",
            "/agenda",
            json={"meeting_id": meeting_id, "purposes": purposes, "topics": topics},
        )

    def register_tags(self, meeting_id: str, tags: list[str]) -> None:
        self._request("POST", "/tags_register_batch", json={"meeting_id": meeting_id, "tags": tags})

    def register_participants(self, meeting_id: str, participants: list[dict]) -> None:
        self._request(
            "POST",
            "/attend_batch",
            json={"meeting_id": meeting_id, "participants": participants},
        )

    def delete_meeting(self, meeting_id: str) -> None:
        self._request("DELETE", f"/meeting/{meeting_id}")

    # ============== Reads ==============

    def _record(self, endpoint: str, parse, data):
        """Build one record, raising StoreError if the service sent a malformed one."""
        try:
            return parse(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreError(f"{endpoint} returned a malformed record: {e}") from e

    def _records(self, endpoint: str, parse, data) -> list:
        if not isinstance(data, list):
            raise StoreError(f"{endpoint} returned {type(data).__name__}, expected a list")
        return [self._record(endpoint, parse, item) for item in data]

    def fetch_own_meetings(self, user_id: str) -> list[DisplayMeeting]:
        data = self._request("GET", "/meetings", params={"created_by": user_id}) or []
        return self._records("/meetings", DisplayMeeting.from_api, data)

    def fetch_department_meetings(self, department_id: str) -> list[DisplayMeeting]:
        data = self._request("GET", "/meetings", params={"department_id": department_id}) or []
        return self._records("/meetings", DisplayMeeting.from_api, data)

    def fetch_department_members(self, department_id: str) -> list[Member]:
        data = self._request("GET", "/department_members", params={"department_id": department_id}) or []
        return self._records("/department_members", Member.from_api, data)

    def fetch_meeting(self, meeting_id: str) -> DisplayMeeting:
        data = self._request("GET", f"/meeting/{meeting_id}")
        if not data:
            raise StoreError(f"Meeting {meeting_id} not found")
        return self._record(f"/meeting/{meeting_id}", DisplayMeeting.from_api, data)

    def fetch_participants(self, meeting_id: str) -> list[Participant]:
        data = self._request("GET", "/attend", params={"meeting_id": meeting_id}) or []
        return self._records("/attend", Participant.from_api, data)

    def fetch_agenda(self, meeting_id: str) -> dict:
        data = self._request("GET", "/agenda", params={"meeting_id": meeting_id}) or {}
        return self._record(
            "/agenda",
            lambda d: {"purposes": list(d.get("purposes", [])), "topics": list(d.get("topics", []))},
            data,
        )

    def search_users(self, name: str) -> list[Member]:
        data = self._request("GET", "/name_search", params={"name": name}) or []
        return self._records("/name_search", Member.from_api, data)

    # ============== Suggestions ==============

    def generate_tags(self, topics: list[str]) -> list[str]:
        data = self._request("GET", "/tag_generate", params={"topic": " ".join(topics)}) or {}
        return self._record("/tag_generate", lambda d: [str(t) for t in d.get("tags", [])], data)

    def recommend_participants(self, tags: list[str], top_k: int = 10) -> list[Recommendation]:
        data = self._request("GET", "/recommend", params={"tag": " ".join(tags), "top_k": top_k}) or []
        return self._records("/recommend", Recommendation.from_api, data)
