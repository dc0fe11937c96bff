"""Shared workflow layer between the CLI and the meeting store.

Everything here coordinates the pure core with a MeetingStore; the decisions
themselves live in valuemeet.core.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

from .adapters.meeting_api import StoreError
from .core.cost import UNIT_RATE, estimate_meeting_cost
from .core.listing import MeetingCache
from .core.rules import RuleViolation, check_meeting_rules
from .core.scheduling import (
    MeetingForm,
    SchedulingState,
    SubmissionOutcome,
    SubmissionResult,
    SubmitAction,
    ValidationError,
    build_payload,
    requires_rule_check,
    validate_required,
)
from .core.vocabulary import DisplayMeeting, Participant
from .ports.meeting_store import MeetingStore

logger = logging.getLogger(__name__)


class NotLoggedInError(Exception):
    """Raised when a workflow needs a logged-in user and there is none."""

    pass


# ============== Meeting list session ==============


def load_meeting_cache(
    store: MeetingStore,
    user_id: str,
    department_id: str,
    cache: MeetingCache | None = None,
) -> MeetingCache:
    """Fetch the three list datasets once and store them in a session cache."""
    if not user_id:
        raise NotLoggedInError("No user is logged in. Set USER_ID in valuemeet.conf.")

    cache = cache if cache is not None else MeetingCache()
    own = store.fetch_own_meetings(user_id)
    department = store.fetch_department_meetings(department_id) if department_id else []
    members = store.fetch_department_members(department_id) if department_id else []
    cache.reload(own, department, members)
    logger.info(f"Loaded {len(own)} own and {len(department)} department meetings")
    return cache


def refresh_meeting_cache(
    store: MeetingStore,
    cache: MeetingCache,
    user_id: str,
    department_id: str,
) -> MeetingCache:
    """Explicitly reload a session cache in place."""
    return load_meeting_cache(store, user_id, department_id, cache=cache)


def delete_meeting(store: MeetingStore, cache: MeetingCache | None, meeting_id: str) -> None:
    """Delete a meeting, then drop it from the session cache (if any) without reloading."""
    store.delete_meeting(meeting_id)
    if cache is not None:
        cache.remove(meeting_id)
    logger.info(f"Deleted meeting {meeting_id}")


# ============== Meeting detail ==============


@dataclass
class MeetingDetail:
    meeting: DisplayMeeting
    participants: list[Participant] = field(default_factory=list)
    purposes: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)

    def estimated_cost(self, unit_rate: float = UNIT_RATE) -> float:
        end = self.meeting.end_time.strftime("%H:%M") if self.meeting.end_time else None
        return estimate_meeting_cost(
            len(self.participants),
            self.meeting.start.strftime("%H:%M"),
            end,
            unit_rate,
        )


def fetch_meeting_detail(store: MeetingStore, meeting_id: str) -> MeetingDetail:
    """
    Fetch a meeting with its roster and agenda.

    The three requests run together. The meeting itself is required; roster or
    agenda failures fall back to empty values.
    """
    with ThreadPoolExecutor(max_workers=3) as pool:
        meeting_future = pool.submit(store.fetch_meeting, meeting_id)
        participants_future = pool.submit(store.fetch_participants, meeting_id)
        agenda_future = pool.submit(store.fetch_agenda, meeting_id)

        meeting = meeting_future.result()

        try:
            participants = participants_future.result()
        except StoreError as e:
            logger.warning(f"Failed to fetch participants for meeting {meeting_id}: {e}")
            participants = []

        try:
            agenda = agenda_future.result()
        except StoreError as e:
            logger.warning(f"Failed to fetch agenda for meeting {meeting_id}: {e}")
            agenda = {}

    return MeetingDetail(
        meeting=meeting,
        participants=participants,
        purposes=agenda.get("purposes", []),
        topics=agenda.get("topics", []),
    )


# ============== Participant suggestions ==============


def generate_form_tags(store: MeetingStore, form: MeetingForm) -> list[str]:
    """Replace the form tags with tags generated from its agenda topics."""
    topics = [t for t in form.topics if t.strip()]
    if not topics:
        raise ValidationError("Enter at least one topic to generate tags")
    form.tags = store.generate_tags(topics)
    logger.info(f"Generated {len(form.tags)} tags from {len(topics)} topics")
    return form.tags


def add_recommended_participants(store: MeetingStore, form: MeetingForm, top_k: int = 10) -> list[Participant]:
    """
    Add recommended people to the form roster.

    Tags are generated first when the form has none. Roles come from each
    person's past role; people already on the roster are skipped.

    Returns:
        The participants that were added
    """
    if not form.tags:
        generate_form_tags(store, form)
    added = []
    for rec in store.recommend_participants(form.tags, top_k):
        if form.add_recommended(rec.member, rec.past_role):
            added.append(form.participants[-1])
    logger.info(f"Added {len(added)} recommended participants")
    return added


# ============== Scheduling ==============


class SchedulingOrchestrator:
    """
    Create/edit flow: validate, gate on governance rules, then write.

    editing -> validating -> (blocked-by-rules | submitting) -> (success | failed)
    """

    def __init__(self, store: MeetingStore, creator_id: str):
        if not creator_id:
            raise NotLoggedInError("No user is logged in.")
        self.store = store
        self.creator_id = creator_id
        self.state = SchedulingState.EDITING
        self.violations: list[RuleViolation] = []
        self.override = False
        self._pending: tuple[MeetingForm, SubmitAction, str | None] | None = None

    def submit(
        self,
        form: MeetingForm,
        action: SubmitAction = SubmitAction.CREATE,
        meeting_id: str | None = None,
    ) -> SubmissionResult:
        """
        Submit the form.

        Raises ValidationError before any I/O when required fields are
        missing. Returns a BLOCKED result when rules fail and no override
        has been acknowledged.
        """
        action = SubmitAction(action)
        if action is SubmitAction.UPDATE and not meeting_id:
            raise ValueError("meeting_id is required for an update")

        validate_required(form)

        violations: list[RuleViolation] = []
        if requires_rule_check(form, action):
            self.state = SchedulingState.VALIDATING
            violations = check_meeting_rules(form.meeting_type, form.participants)
            self.violations = violations
            if violations and not self.override:
                self.state = SchedulingState.BLOCKED_BY_RULES
                self._pending = (form, action, meeting_id)
                logger.info(f"Submission blocked by {len(violations)} rule violation(s)")
                return SubmissionResult(
                    outcome=SubmissionOutcome.BLOCKED,
                    meeting_id=meeting_id,
                    violations=violations,
                )

        try:
            return self._write(form, action, meeting_id, violations)
        finally:
            self.override = False
            self._pending = None

    def acknowledge(self) -> SubmissionResult:
        """Accept the reported violations and resubmit with the override flag."""
        if self.state is not SchedulingState.BLOCKED_BY_RULES or self._pending is None:
            raise RuntimeError("No blocked submission to acknowledge")
        form, action, meeting_id = self._pending
        self.override = True
        return self.submit(form, action, meeting_id)

    def cancel(self) -> None:
        """Return to editing after a block without submitting."""
        self.state = SchedulingState.EDITING
        self.override = False
        self._pending = None

    def _write(
        self,
        form: MeetingForm,
        action: SubmitAction,
        meeting_id: str | None,
        violations: list[RuleViolation],
    ) -> SubmissionResult:
        self.state = SchedulingState.SUBMITTING
        payload = build_payload(
            form,
            self.creator_id,
            action,
            override=self.override and bool(violations),
        )

        try:
            if meeting_id is not None and action is not SubmitAction.CREATE:
                self.store.update_meeting(meeting_id, payload.header)
            else:
                meeting_id = self.store.create_meeting(payload.header)
        except StoreError as e:
            logger.error(f"Meeting write failed: {e}")
            self.state = SchedulingState.FAILED
            return SubmissionResult(
                outcome=SubmissionOutcome.FAILED,
                meeting_id=meeting_id,
                violations=violations,
                error=str(e),
            )

        writes: list[tuple[str, Callable[[], None]]] = []
        if payload.has_agenda:
            writes.append(("agenda", lambda: self.store.register_agenda(meeting_id, payload.purposes, payload.topics)))
        if payload.tags:
            writes.append(("tags", lambda: self.store.register_tags(meeting_id, payload.tags)))
        if payload.participants:
            writes.append(("participants", lambda: self.store.register_participants(meeting_id, payload.participants)))

        failed = []
        for name, write in writes:
            try:
                write()
            except StoreError as e:
                logger.warning(f"Meeting {meeting_id} saved but {name} write failed: {e}")
                failed.append(name)

        self.state = SchedulingState.SUCCESS
        return SubmissionResult(
            outcome=SubmissionOutcome.DEGRADED if failed else SubmissionOutcome.SUCCESS,
            meeting_id=meeting_id,
            violations=violations,
            failed_writes=failed,
        )
