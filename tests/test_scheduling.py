"""Tests for scheduling form logic."""

from datetime import date

import pytest

from valuemeet.core.scheduling import (
    MeetingForm,
    SubmissionOutcome,
    SubmissionResult,
    SubmitAction,
    ValidationError,
    build_payload,
    requires_rule_check,
    validate_required,
)
from valuemeet.core.vocabulary import (
    MeetingMode,
    MeetingType,
    Member,
    Participant,
    PersistedStatus,
    Priority,
    Role,
)


@pytest.fixture
def form():
    return MeetingForm(
        title="Budget review",
        description="Quarterly numbers",
        meeting_type=MeetingType.DECISION_MAKING,
        meeting_mode=MeetingMode.ONLINE,
        priority=Priority.HIGH,
        meeting_date=date(2025, 1, 15),
        start_time="10:00",
        end_time="11:30",
        purposes=["Approve Q1 budget", "  "],
        topics=["Headcount", ""],
        tags=["finance", ""],
        participants=[
            Participant("u2", "Sato", "Platform", Role.EXECUTIVE_OWNER),
            Participant("u3", "Suzuki", "Platform", Role.ACCOUNTABLE_EXPLAINER),
        ],
    )


class TestMeetingForm:
    def test_from_dict(self):
        form = MeetingForm.from_dict(
            {
                "title": "Incident review",
                "type": "issue-resolution",
                "mode": "hybrid",
                "priority": "low",
                "date": "2025-01-20",
                "start_time": "14:00",
                "end_time": "15:00",
                "purposes": ["Find root cause"],
                "participants": [
                    {"user_id": "u2", "name": "Sato", "organization_name": "Platform", "role_type": "expert-advisor"},
                ],
            }
        )
        assert form.meeting_type is MeetingType.ISSUE_RESOLUTION
        assert form.meeting_mode is MeetingMode.HYBRID
        assert form.priority is Priority.LOW
        assert form.meeting_date == date(2025, 1, 20)
        assert form.participants[0].role is Role.EXPERT_ADVISOR
        assert form.status is None

    def test_from_dict_minimal(self):
        form = MeetingForm.from_dict({"title": "Chat"})
        assert form.meeting_type is None
        assert form.meeting_date is None
        assert form.participants == []

    def test_add_participant_defaults_to_organizer(self):
        form = MeetingForm()
        assert form.add_participant(Member("u1", "Tanaka", "Finance"))
        assert form.participants[0].role is Role.ORGANIZER

    def test_add_participant_rejects_duplicates(self):
        form = MeetingForm()
        member = Member("u1", "Tanaka", "Finance")
        form.add_participant(member)
        assert not form.add_participant(member, Role.EXECUTIVE_OWNER)
        assert len(form.participants) == 1

    def test_add_recommended_maps_past_role(self):
        form = MeetingForm()
        form.add_recommended(Member("u4", "Ito", "Sales"), "presenter")
        assert form.participants[0].role is Role.ACCOUNTABLE_EXPLAINER

    def test_set_role_and_remove(self, form):
        form.set_role(0, "report-recipient")
        assert form.participants[0].role is Role.REPORT_RECIPIENT
        removed = form.remove_participant(0)
        assert removed.user_id == "u2"
        assert [p.user_id for p in form.participants] == ["u3"]

    def test_estimated_cost_counts_creator(self, form):
        # 2 participants + creator, 1.5 hours
        assert form.estimated_cost(5000) == 22500

    def test_estimated_cost_empty_roster(self, form):
        form.participants = []
        assert form.estimated_cost() == 0


class TestValidateRequired:
    def test_complete_form_passes(self, form):
        validate_required(form)

    @pytest.mark.parametrize(
        "field,value,missing",
        [
            ("title", "   ", "title"),
            ("meeting_date", None, "date"),
            ("start_time", "", "start time"),
        ],
    )
    def test_missing_field(self, form, field, value, missing):
        setattr(form, field, value)
        with pytest.raises(ValidationError, match=missing):
            validate_required(form)

    def test_reports_every_missing_field(self):
        with pytest.raises(ValidationError, match="title, date, start time"):
            validate_required(MeetingForm())


class TestRequiresRuleCheck:
    def test_create_with_type_and_roster(self, form):
        assert requires_rule_check(form, SubmitAction.CREATE)
        assert requires_rule_check(form, SubmitAction.UPDATE)

    def test_draft_skips_rules(self, form):
        assert not requires_rule_check(form, SubmitAction.SAVE_DRAFT)

    def test_no_type_skips_rules(self, form):
        form.meeting_type = None
        assert not requires_rule_check(form, SubmitAction.CREATE)

    def test_empty_roster_skips_rules(self, form):
        form.participants = []
        assert not requires_rule_check(form, SubmitAction.CREATE)


class TestBuildPayload:
    def test_header(self, form):
        payload = build_payload(form, "u1", SubmitAction.CREATE)
        assert payload.header == {
            "title": "Budget review",
            "description": "Quarterly numbers",
            "meeting_type": "意思決定会議",
            "meeting_mode": "Web会議（オンライン会議）",
            "priority": "high",
            "date_time": "2025-01-15T10:00:00",
            "end_time": "11:30",
            "created_by": "u1",
            "status": "scheduled",
            "rule_violation": False,
        }

    def test_drops_blank_agenda_and_tags(self, form):
        payload = build_payload(form, "u1", SubmitAction.CREATE)
        assert payload.purposes == ["Approve Q1 budget"]
        assert payload.topics == ["Headcount"]
        assert payload.tags == ["finance"]
        assert payload.has_agenda

    def test_participants_use_wire_roles(self, form):
        payload = build_payload(form, "u1", SubmitAction.CREATE)
        assert payload.participants == [
            {"user_id": "u2", "role_type": "実行責任者"},
            {"user_id": "u3", "role_type": "説明責任者"},
        ]

    def test_draft_has_no_tags_and_no_violation_flag(self, form):
        payload = build_payload(form, "u1", SubmitAction.SAVE_DRAFT, override=True)
        assert payload.header["status"] == "draft"
        assert payload.header["rule_violation"] is False
        assert payload.tags == []

    def test_override_sets_violation_flag(self, form):
        payload = build_payload(form, "u1", SubmitAction.CREATE, override=True)
        assert payload.header["rule_violation"] is True

    def test_update_keeps_requested_status(self, form):
        form.status = PersistedStatus.COMPLETED
        assert build_payload(form, "u1", SubmitAction.UPDATE).header["status"] == "completed"
        assert build_payload(form, "u1", SubmitAction.CREATE).header["status"] == "scheduled"

    def test_no_end_time(self, form):
        form.end_time = ""
        assert build_payload(form, "u1", SubmitAction.CREATE).header["end_time"] is None

    def test_empty_agenda(self, form):
        form.purposes = [""]
        form.topics = []
        assert not build_payload(form, "u1", SubmitAction.CREATE).has_agenda


@pytest.mark.parametrize(
    "outcome,succeeded",
    [
        (SubmissionOutcome.SUCCESS, True),
        (SubmissionOutcome.DEGRADED, True),
        (SubmissionOutcome.BLOCKED, False),
        (SubmissionOutcome.FAILED, False),
    ],
)
def test_submission_result_succeeded(outcome, succeeded):
    assert SubmissionResult(outcome=outcome).succeeded is succeeded
