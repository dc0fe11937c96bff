"""Meeting governance rules - no I/O dependencies."""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from .vocabulary import MeetingType, Participant, Role

EXPERT_ADVISOR_REQUIRED = "expert-advisor-required"
EXECUTIVE_OWNER_REQUIRED = "executive-owner-required"
REPORT_RECIPIENT_CAP = "report-recipient-cap"
ACCOUNTABLE_EXPLAINER_EXACTLY_ONE = "accountable-explainer-exactly-one"

MAX_REPORT_RECIPIENTS = 3

EXECUTIVE_OWNER_TYPES = frozenset(
    {
        MeetingType.DECISION_MAKING,
        MeetingType.ISSUE_RESOLUTION,
        MeetingType.PLANNING_CONCEPT,
    }
)


@dataclass(frozen=True)
class RuleViolation:
    """A failed governance rule. Computed on demand, never stored."""

    rule: str
    message: str


def count_roles(participants: Iterable[Participant]) -> Counter:
    """Count participants per governance role."""
    counts: Counter = Counter({role: 0 for role in Role})
    for p in participants:
        counts[Role.parse(p.role)] += 1
    return counts


def check_meeting_rules(
    meeting_type: MeetingType,
    participants: list[Participant],
) -> list[RuleViolation]:
    """
    Check a proposed roster against the meeting governance policy.

    Pure function - no I/O. Every rule is evaluated, in a fixed order,
    regardless of earlier failures.

    Returns:
        Violations in rule order; empty means compliant
    """
    meeting_type = MeetingType.parse(meeting_type)
    counts = count_roles(participants)
    violations = []

    if meeting_type is MeetingType.ISSUE_RESOLUTION and counts[Role.EXPERT_ADVISOR] == 0:
        violations.append(
            RuleViolation(
                rule=EXPERT_ADVISOR_REQUIRED,
                message=f'A {meeting_type.value} meeting needs at least one "expert-advisor".',
            )
        )

    if meeting_type in EXECUTIVE_OWNER_TYPES and counts[Role.EXECUTIVE_OWNER] == 0:
        violations.append(
            RuleViolation(
                rule=EXECUTIVE_OWNER_REQUIRED,
                message=f'A {meeting_type.value} meeting needs at least one "executive-owner".',
            )
        )

    if counts[Role.REPORT_RECIPIENT] > MAX_REPORT_RECIPIENTS:
        violations.append(
            RuleViolation(
                rule=REPORT_RECIPIENT_CAP,
                message=f'At most {MAX_REPORT_RECIPIENTS} "report-recipient" participants are allowed.',
            )
        )

    if counts[Role.ACCOUNTABLE_EXPLAINER] != 1:
        violations.append(
            RuleViolation(
                rule=ACCOUNTABLE_EXPLAINER_EXACTLY_ONE,
                message='Exactly one "accountable-explainer" is required.',
            )
        )

    return violations


_PAST_ROLES = {
    "host": Role.ORGANIZER,
    "presenter": Role.ACCOUNTABLE_EXPLAINER,
    "participant": Role.EXPERT_ADVISOR,
    "observer": Role.REPORT_RECIPIENT,
}


def role_from_past_role(past_role: str | None) -> Role:
    """Map a recommendation's historical role onto a governance role."""
    if not past_role:
        return Role.ORGANIZER
    return _PAST_ROLES.get(past_role.lower(), Role.ORGANIZER)
