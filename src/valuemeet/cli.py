"""ValueMeet CLI - meeting governance and lifecycle."""

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click

from .adapters.meeting_api import MeetingApiAdapter, StoreError
from .config import load_config
from .core.cost import estimate_meeting_cost, format_cost
from .core.listing import ListedMeeting, MeetingListProjector, Scope, SortKey
from .core.periods import Granularity
from .core.rules import check_meeting_rules
from .core.scheduling import MeetingForm, SubmissionOutcome, SubmitAction, ValidationError
from .core.status import status_label
from .core.vocabulary import MeetingType, Participant
from .workflows import (
    NotLoggedInError,
    SchedulingOrchestrator,
    add_recommended_participants,
    delete_meeting,
    fetch_meeting_detail,
    generate_form_tags,
    load_meeting_cache,
)


@click.group()
@click.version_option(package_name="valuemeet")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """ValueMeet - meeting governance CLI."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _load_json(path: Path):
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        _fail(f"{path} is not valid JSON: {e}")


def _show_meetings(listed: list[ListedMeeting], as_json: bool, counts) -> None:
    """Shared meeting list display logic."""
    if as_json:
        click.echo(
            json.dumps(
                {
                    "meetings": [
                        {
                            "id": lm.meeting.id,
                            "title": lm.meeting.title,
                            "start": lm.meeting.start.isoformat(),
                            "end_time": lm.meeting.end_time.strftime("%H:%M") if lm.meeting.end_time else None,
                            "type": lm.meeting.meeting_type.value,
                            "status": lm.status.value,
                            "facilitator": lm.meeting.facilitator_name,
                            "rule_violation": lm.meeting.rule_violation,
                        }
                        for lm in listed
                    ],
                    "counts": {
                        "scheduled": counts.scheduled,
                        "meeting_ended": counts.meeting_ended,
                        "completed": counts.completed,
                        "draft": counts.draft,
                        "total": counts.total,
                    },
                },
                indent=2,
            )
        )
        return

    if not listed:
        click.echo("No meetings.")
    for lm in listed:
        m = lm.meeting
        warning = " [!]" if m.rule_violation else ""
        facilitator = f" ({m.facilitator_name})" if m.facilitator_name else ""
        click.echo(f"{m.start:%Y-%m-%d %H:%M}  {status_label(lm.status):13} {m.title}{facilitator}{warning}")

    click.echo(
        f"\nTotal {counts.total}: {counts.scheduled} scheduled, {counts.meeting_ended} ended, "
        f"{counts.completed} completed ({counts.draft} drafts)"
    )


@main.command("list")
@click.option("--scope", type=click.Choice([s.value for s in Scope]), default=Scope.SELF.value)
@click.option("--member", "member_id", default=None, help="Member id for --scope member")
@click.option("--search", default="", help="Search title, purpose and facilitator")
@click.option("--type", "meeting_type", type=click.Choice([t.value for t in MeetingType]), default=None)
@click.option("--sort", type=click.Choice([k.value for k in SortKey]), default=SortKey.DATE.value)
@click.option("--period", type=click.Choice([g.value for g in Granularity]), default=None, help="Period filter (defaults to DEFAULT_PERIOD with --date or --offset)")
@click.option("--date", "-d", "ref_date", default=None, help="Reference date (YYYY-MM-DD) for --period")
@click.option("--offset", default=0, help="Periods to move from the reference date")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_meetings(scope, member_id, search, meeting_type, sort, period, ref_date, offset, as_json):
    """List meetings with their effective status."""
    config = load_config()
    if scope == Scope.MEMBER.value and not member_id:
        _fail("--member is required with --scope member")

    try:
        cache = load_meeting_cache(MeetingApiAdapter(config), config.user_id, config.department_id)
    except (NotLoggedInError, StoreError) as e:
        _fail(str(e))

    projector = MeetingListProjector(cache, first_weekday=config.first_weekday)
    projector.select_scope(Scope(scope), member_id)
    projector.set_search(search)
    projector.set_type(MeetingType(meeting_type) if meeting_type else None)
    projector.set_sort(SortKey(sort))
    if period is None and (ref_date or offset):
        period = config.granularity.value
    if period:
        reference = date.fromisoformat(ref_date) if ref_date else date.today()
        projector.set_period(reference, Granularity(period))
        for _ in range(abs(offset)):
            if offset > 0:
                projector.next_period()
            else:
                projector.previous_period()
        if not as_json:
            click.echo(f"### {projector.filters.period.format()}\n")

    view = projector.view(datetime.now())
    _show_meetings(view.meetings, as_json, view.counts)


@main.command()
@click.argument("participants", type=int)
@click.argument("start_time")
@click.argument("end_time")
def cost(participants: int, start_time: str, end_time: str):
    """Estimate meeting cost from head count and HH:MM times."""
    config = load_config()
    try:
        amount = estimate_meeting_cost(participants, start_time, end_time, config.unit_rate)
    except ValueError as e:
        _fail(f"Invalid time: {e}")
    click.echo(format_cost(amount))


@main.command()
@click.argument("meeting_type", type=click.Choice([t.value for t in MeetingType]))
@click.argument("roster", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(meeting_type: str, roster: Path):
    """Check a roster JSON file against the governance rules."""
    try:
        participants = [Participant.from_api(p) for p in _load_json(roster)]
    except (KeyError, TypeError, ValueError) as e:
        _fail(f"Invalid roster: {e}")
    violations = check_meeting_rules(MeetingType(meeting_type), participants)
    if not violations:
        click.echo("No rule violations.")
        return
    for v in violations:
        click.echo(f"✗ {v.rule}: {v.message}")
    sys.exit(1)


@main.command()
@click.argument("form_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--draft", is_flag=True, help="Save as draft (skips rule checks)")
@click.option("--override", is_flag=True, help="Register despite rule violations")
@click.option("--update", "meeting_id", default=None, help="Update this meeting instead of creating one")
@click.option("--generate-tags", is_flag=True, help="Replace the form tags with tags generated from its topics")
@click.option("--recommend", is_flag=True, help="Add recommended participants before saving")
@click.option("--top-k", default=10, help="Number of recommendations to request")
def create(
    form_file: Path,
    draft: bool,
    override: bool,
    meeting_id: str | None,
    generate_tags: bool,
    recommend: bool,
    top_k: int,
):
    """Create or update a meeting from a JSON form file."""
    config = load_config()
    try:
        form = MeetingForm.from_dict(_load_json(form_file))
    except (KeyError, ValueError) as e:
        _fail(f"Invalid form: {e}")

    if generate_tags or recommend:
        store = MeetingApiAdapter(config)
        try:
            if generate_tags:
                click.echo(f"Tags: {', '.join(generate_form_tags(store, form)) or '(none)'}")
            if recommend:
                for p in add_recommended_participants(store, form, top_k):
                    click.echo(f"+ {p.name}: {p.role.value}")
        except (StoreError, ValidationError) as e:
            _fail(str(e))

    if draft:
        action = SubmitAction.SAVE_DRAFT
    elif meeting_id:
        action = SubmitAction.UPDATE
    else:
        action = SubmitAction.CREATE

    if form.participants:
        click.echo(f"Estimated cost: {format_cost(form.estimated_cost(config.unit_rate))}")

    try:
        orchestrator = SchedulingOrchestrator(MeetingApiAdapter(config), config.user_id)
        result = orchestrator.submit(form, action, meeting_id)
        if result.outcome is SubmissionOutcome.BLOCKED:
            for v in result.violations:
                click.echo(f"✗ {v.rule}: {v.message}", err=True)
            if not override:
                _fail("Meeting violates governance rules. Re-run with --override to register anyway.")
            result = orchestrator.acknowledge()
    except (NotLoggedInError, ValidationError) as e:
        _fail(str(e))

    if result.outcome is SubmissionOutcome.FAILED:
        _fail(f"Failed to save meeting: {result.error}")
    if result.outcome is SubmissionOutcome.DEGRADED:
        click.echo(f"Warning: meeting saved but {', '.join(result.failed_writes)} could not be registered", err=True)

    verb = "Saved draft" if draft else ("Updated" if meeting_id else "Created")
    click.echo(f"✓ {verb} meeting {result.meeting_id}")


@main.command()
@click.argument("meeting_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(meeting_id: str, as_json: bool):
    """Show a meeting with its roster and agenda."""
    config = load_config()
    try:
        detail = fetch_meeting_detail(MeetingApiAdapter(config), meeting_id)
    except StoreError as e:
        _fail(str(e))

    m = detail.meeting
    amount = detail.estimated_cost(config.unit_rate)
    if as_json:
        click.echo(
            json.dumps(
                {
                    "id": m.id,
                    "title": m.title,
                    "start": m.start.isoformat(),
                    "type": m.meeting_type.value,
                    "status": m.status.value,
                    "participants": [
                        {"user_id": p.user_id, "name": p.name, "role": p.role.value}
                        for p in detail.participants
                    ],
                    "purposes": detail.purposes,
                    "topics": detail.topics,
                    "estimated_cost": amount,
                },
                indent=2,
            )
        )
        return

    end = f" - {m.end_time:%H:%M} ({m.duration_minutes()} min)" if m.end_time else ""
    click.echo(f"### {m.title}\n")
    click.echo(f"{m.start:%Y-%m-%d %H:%M}{end}  {m.meeting_type.value}")
    if m.rule_violation:
        click.echo("Registered despite governance rule violations")
    if detail.purposes:
        click.echo("\nPurposes:")
        for purpose in detail.purposes:
            click.echo(f"- {purpose}")
    if detail.topics:
        click.echo("\nTopics:")
        for topic in detail.topics:
            click.echo(f"- {topic}")
    click.echo("\nParticipants:")
    if not detail.participants:
        click.echo("(none)")
    for p in detail.participants:
        org = f" ({p.organization_name})" if p.organization_name else ""
        click.echo(f"- {p.name}{org}: {p.role.value}")
    click.echo(f"\nEstimated cost: {format_cost(amount)}")


@main.command()
@click.argument("name")
def search(name: str):
    """Look up users by name."""
    config = load_config()
    try:
        members = MeetingApiAdapter(config).search_users(name)
    except StoreError as e:
        _fail(str(e))
    if not members:
        click.echo("No users found.")
    for member in members:
        org = f" ({member.organization_name})" if member.organization_name else ""
        click.echo(f"{member.user_id}  {member.name}{org}")


@main.command()
@click.argument("meeting_id")
def delete(meeting_id: str):
    """Delete a meeting."""
    config = load_config()
    if not config.user_id:
        _fail("No user is logged in. Set USER_ID in valuemeet.conf.")
    try:
        delete_meeting(MeetingApiAdapter(config), None, meeting_id)
    except StoreError as e:
        _fail(str(e))
    click.echo(f"✓ Deleted meeting {meeting_id}")


if __name__ == "__main__":
    main()
