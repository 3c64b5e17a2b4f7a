"""LexDocket CLI application with Typer."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import click
import typer

from lexdocket import __version__
from lexdocket.bootstrap import bootstrap_application
from lexdocket.config import get_settings, set_settings
from lexdocket.domain import (
    AutomaticDeadlineConfig,
    CourtDescriptor,
    Deadline,
    Hearing,
    Opponent,
    Recurrence,
    ReminderScheduler,
)
from lexdocket.domain.models import DISCUSSION_ROUNDS
from lexdocket.errors import LexDocketError, ValidationError
from lexdocket.utils.cli_output import json_response
from lexdocket.utils.dates import format_greek, parse_date

if TYPE_CHECKING:
    from lexdocket.bootstrap import ApplicationContainer
    from lexdocket.domain import Transition

app = typer.Typer(
    name="lexdocket",
    help="Court hearing and procedural deadline docket for Greek legal practice",
    add_completion=True,
    no_args_is_help=True,
)

PRIORITIES = click.Choice(["low", "medium", "high", "urgent"])
CATEGORIES = click.Choice(
    [
        "filing",
        "addition_rebuttal",
        "legal_remedy",
        "administrative",
        "contractual",
        "judicial",
        "other",
    ]
)
CHANNELS = click.Choice(["email", "sms", "notification", "all"])
RESULTS = click.Choice(["won", "lost", "partially_won", "settlement", "withdrawn", "pending"])
ROUNDS = click.Choice([*DISCUSSION_ROUNDS, "other"])
PATTERNS = click.Choice(["daily", "weekly", "monthly", "yearly"])
LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"])

PRIORITY_COLORS = {
    "low": typer.colors.WHITE,
    "medium": typer.colors.CYAN,
    "high": typer.colors.YELLOW,
    "urgent": typer.colors.RED,
}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"LexDocket version {__version__}")
        raise typer.Exit()


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Report domain errors in red and exit with status 1."""
    try:
        yield
    except LexDocketError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _parse_date_option(value: str) -> date:
    try:
        return parse_date(value)
    except ValidationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _parse_auto_configs(raw: list[str]) -> list[AutomaticDeadlineConfig]:
    """Parse ``NAME:DAYS`` pairs into automatic deadline configs."""
    configs: list[AutomaticDeadlineConfig] = []
    for item in raw:
        name, sep, days = item.rpartition(":")
        if not sep or not name.strip():
            raise ValidationError(f"Expected NAME:DAYS, got '{item}'")
        try:
            days_before = int(days)
        except ValueError as exc:
            raise ValidationError(f"Days must be an integer in '{item}'") from exc
        if days_before < 0:
            raise ValidationError(f"Days must be zero or positive in '{item}'")
        configs.append(AutomaticDeadlineConfig(name=name.strip(), days_before=days_before))
    return configs


def _deadline_line(deadline: Deadline, now: datetime) -> str:
    status = deadline.effective_status(now)
    due = format_greek(deadline.due_date)
    if deadline.due_time:
        due = f"{due} {deadline.due_time}"
    return f"{deadline.id}  {due}  [{deadline.priority}/{status}]  {deadline.name}"


def _hearing_line(hearing: Hearing) -> str:
    when = format_greek(hearing.hearing_date)
    if hearing.hearing_time:
        when = f"{when} {hearing.hearing_time}"
    return (
        f"{hearing.id}  {when}  {hearing.discussion_round}  [{hearing.status}]  "
        f"{hearing.case_title} @ {hearing.court_full_name}"
    )


def _echo_deadlines(deadlines: list[Deadline], now: datetime, empty: str) -> None:
    if not deadlines:
        typer.secho(empty, fg=typer.colors.YELLOW)
        return
    for deadline in deadlines:
        typer.secho(
            f"  {_deadline_line(deadline, now)}",
            fg=PRIORITY_COLORS.get(deadline.priority, typer.colors.WHITE),
        )


def _report_transition(transition: "Transition", message: str, json_output: bool) -> None:
    if json_output:
        typer.echo(
            json_response(
                "transition",
                1,
                operation=transition.operation,
                primary=transition.primary.model_dump(mode="json"),
                creates=[record.model_dump(mode="json") for record in transition.creates],
            )
        )
        return

    typer.secho(f"✓ {message}", fg=typer.colors.GREEN)
    for record in transition.creates:
        if isinstance(record, Deadline):
            typer.echo(
                f"  + deadline {record.id}: {record.name} due {format_greek(record.due_date)}"
            )
        else:
            typer.echo(
                f"  + hearing {record.id}: {record.discussion_round} on "
                f"{format_greek(record.hearing_date)}"
            )


def _container() -> "ApplicationContainer":
    with _handle_errors():
        return bootstrap_application()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Override data directory"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", click_type=LOG_LEVELS, help="Logging level"),
    ] = None,
) -> None:
    """LexDocket - hearing and deadline docket."""
    settings = get_settings()
    if data_dir:
        settings.data_dir = data_dir
    if log_level:
        settings.log_level = log_level  # type: ignore[assignment]
    set_settings(settings)

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Calendar subcommand
# ---------------------------------------------------------------------------

calendar_app = typer.Typer(help="Greek court working-day calendar")
app.add_typer(calendar_app, name="calendar")


@calendar_app.command("easter")
def calendar_easter(
    year: Annotated[int, typer.Argument(help="Year")],
) -> None:
    """Show Orthodox Easter Sunday for YEAR."""
    container = _container()
    with _handle_errors():
        easter = container.calendar.easter(year)
    typer.echo(f"{easter.isoformat()} ({format_greek(easter)})")


@calendar_app.command("holidays")
def calendar_holidays(
    year: Annotated[int, typer.Argument(help="Year")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the public holidays of YEAR."""
    container = _container()
    with _handle_errors():
        holidays = container.calendar.holidays(year)

    if json_output:
        typer.echo(
            json_response(
                "holidays",
                1,
                year=year,
                holidays=[
                    {"date": h.date.isoformat(), "name": h.name, "kind": h.kind}
                    for h in holidays
                ],
            )
        )
        return

    typer.secho(f"\n📅 Public holidays {year}", fg=typer.colors.BLUE, bold=True)
    for holiday in holidays:
        typer.echo(f"  {format_greek(holiday.date)}  {holiday.date:%a}  {holiday.name}")


@calendar_app.command("check")
def calendar_check(
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD or DD/MM/YYYY)")],
) -> None:
    """Show whether a date is a working day."""
    container = _container()
    target = _parse_date_option(day)
    calendar = container.calendar
    with _handle_errors():
        holiday = calendar.holiday_name(target)
        working = calendar.is_working_day(target)
    typer.echo(f"{format_greek(target)} ({target:%A})")
    typer.echo(f"  Working day:  {'yes' if working else 'no'}")
    if holiday:
        typer.echo(f"  Holiday:      {holiday}")
    if calendar.is_weekend(target):
        typer.echo("  Weekend")
    if calendar.is_court_recess(target):
        typer.echo("  Court recess")


@calendar_app.command("add")
def calendar_add(
    start: Annotated[str, typer.Argument(help="Start date")],
    days: Annotated[int, typer.Argument(help="Working days to move")],
    backwards: Annotated[
        bool, typer.Option("--backwards", "-b", help="Count backwards from the start date")
    ] = False,
) -> None:
    """Move DAYS working days from START."""
    container = _container()
    base = _parse_date_option(start)
    with _handle_errors():
        if backwards:
            result = container.calendar.subtract_working_days(base, days)
        else:
            result = container.calendar.add_working_days(base, days)
    typer.echo(f"{result.isoformat()} ({format_greek(result)}, {result:%A})")


@calendar_app.command("count")
def calendar_count(
    start: Annotated[str, typer.Argument(help="Start date (excluded)")],
    end: Annotated[str, typer.Argument(help="End date (included)")],
) -> None:
    """Count working days after START up to and including END."""
    container = _container()
    count = container.calendar.count_working_days(
        _parse_date_option(start), _parse_date_option(end)
    )
    typer.echo(str(count))


@calendar_app.command("next-court-date")
def calendar_next_court_date(
    day: Annotated[str, typer.Argument(help="Earliest acceptable date")],
) -> None:
    """First working day on or after DAY outside the August recess."""
    container = _container()
    with _handle_errors():
        result = container.calendar.next_court_date(_parse_date_option(day))
    typer.echo(f"{result.isoformat()} ({format_greek(result)}, {result:%A})")


# ---------------------------------------------------------------------------
# Rules subcommand
# ---------------------------------------------------------------------------

rules_app = typer.Typer(help="Procedural deadline calculations")
app.add_typer(rules_app, name="rules")


@rules_app.command("calc")
def rules_calc(
    event: Annotated[
        str,
        typer.Option("--event", "-e", help="Triggering event (e.g. 'judgment_served')"),
    ],
    day: Annotated[
        str,
        typer.Option("--date", "-d", help="Base date (YYYY-MM-DD or DD/MM/YYYY)"),
    ],
    explain: Annotated[
        bool,
        typer.Option("--explain", help="Show calculation trace"),
    ] = False,
    ics_output: Annotated[
        Path | None,
        typer.Option("--ics", help="Export deadlines to an ICS calendar file"),
    ] = None,
    client: Annotated[
        str | None,
        typer.Option("--client", help="Register the computed deadlines for this client"),
    ] = None,
    hearing: Annotated[
        str | None,
        typer.Option("--hearing", help="Hearing the registered deadlines belong to"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Calculate procedural deadlines triggered by EVENT."""
    container = _container()
    base_date = _parse_date_option(day)

    with _handle_errors():
        deadlines = container.rules_engine.calculate_deadline(
            event=event, base_date=base_date, explain=explain
        )

    if json_output:
        typer.echo(json_response("rules_calc", 1, calculation=deadlines))
    else:
        typer.secho(f"\n📅 {event}", fg=typer.colors.BLUE, bold=True)
        typer.secho(f"   Base date: {format_greek(base_date)}\n", fg=typer.colors.CYAN)

        deadline_items = deadlines.get("deadlines", {})
        if not deadline_items:
            typer.secho("No deadlines defined for this event.", fg=typer.colors.YELLOW)
        for name, info in deadline_items.items():
            due = date.fromisoformat(info["date"])
            typer.secho(f"  ✓ {name}", fg=typer.colors.GREEN, bold=True)
            typer.echo(f"    Date:   {format_greek(due)} ({due:%A})")
            if info.get("cite"):
                typer.echo(f"    Rule:   {info['cite']}")
            if explain and info.get("trace"):
                typer.echo(f"    Calc:   {info['trace']}")
            if info.get("notes"):
                typer.echo(f"    Notes:  {info['notes']}")
            typer.echo()

    if client is not None:
        with _handle_errors():
            records = container.rules_engine.build_deadlines(
                event,
                base_date,
                client,
                hearing_id=hearing,
                reminder_rules=container.reminder_rules,
            )
            for record in records:
                container.docket_service.register_deadline(record)
        if not json_output:
            typer.secho(f"✓ Registered {len(records)} deadline(s)", fg=typer.colors.GREEN)

    if ics_output is not None:
        from lexdocket.rules.export import export_deadlines_to_ics

        output_path = ics_output.resolve()
        export_deadlines_to_ics(deadlines, output_path)
        if not json_output:
            typer.secho(f"✓ Calendar exported: {output_path}", fg=typer.colors.GREEN)


# ---------------------------------------------------------------------------
# Hearing subcommand
# ---------------------------------------------------------------------------

hearing_app = typer.Typer(help="Court hearings")
app.add_typer(hearing_app, name="hearing")


@hearing_app.command("add")
def hearing_add(
    client: Annotated[str, typer.Option("--client", help="Client id")],
    degree: Annotated[str, typer.Option("--court", help="Court degree, e.g. Πρωτοδικείο")],
    composition: Annotated[str, typer.Option("--composition", help="e.g. Μονομελές")],
    city: Annotated[str, typer.Option("--city", help="Court seat")],
    case_type: Annotated[str, typer.Option("--case-type", help="Type of case")],
    day: Annotated[str, typer.Option("--date", "-d", help="Hearing date")],
    opponent: Annotated[str, typer.Option("--opponent", help="Opposing party")],
    case_number: Annotated[str | None, typer.Option("--case-number")] = None,
    hearing_time: Annotated[str | None, typer.Option("--time", help="HH:MM")] = None,
    discussion_round: Annotated[
        str, typer.Option("--round", click_type=ROUNDS, help="Discussion round")
    ] = DISCUSSION_ROUNDS[0],
    auto: Annotated[
        list[str] | None,
        typer.Option("--auto", help="Automatic deadline NAME:DAYS_BEFORE (repeatable)"),
    ] = None,
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Register a new pending hearing."""
    container = _container()
    hearing_date = _parse_date_option(day)

    with _handle_errors():
        configs = _parse_auto_configs(auto or [])
        try:
            hearing = Hearing(
                client_id=client,
                court=CourtDescriptor(degree=degree, composition=composition, city=city),
                case_type=case_type,
                case_number=case_number,
                hearing_date=hearing_date,
                hearing_time=hearing_time,
                discussion_round=discussion_round,  # type: ignore[arg-type]
                opponent=Opponent(name=opponent),
                created_by=by,
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        container.docket_service.register_hearing(hearing)
        transition = None
        if configs:
            transition = container.docket_service.create_automatic_deadlines(
                hearing.id, configs, by
            )

    if json_output:
        created = [] if transition is None else list(transition.creates)
        typer.echo(
            json_response(
                "hearing",
                1,
                hearing=(transition.primary if transition else hearing).model_dump(mode="json"),
                creates=[record.model_dump(mode="json") for record in created],
            )
        )
        return

    typer.secho(f"✓ Hearing {hearing.id} registered", fg=typer.colors.GREEN)
    typer.echo(f"  {_hearing_line(hearing)}")
    if transition is not None:
        for record in transition.creates:
            if isinstance(record, Deadline):
                typer.echo(
                    f"  + deadline {record.id}: {record.name} due "
                    f"{format_greek(record.due_date)}"
                )


@hearing_app.command("list")
def hearing_list(
    days: Annotated[int, typer.Option("--days", help="Look-ahead window in days")] = 30,
) -> None:
    """List pending hearings within the next DAYS days."""
    container = _container()
    with _handle_errors():
        hearings = container.docket_service.upcoming_hearings(days)
    if not hearings:
        typer.secho("No upcoming hearings", fg=typer.colors.YELLOW)
        return
    for hearing in hearings:
        typer.echo(f"  {_hearing_line(hearing)}")


@hearing_app.command("discuss")
def hearing_discuss(
    hearing_id: Annotated[str, typer.Argument(help="Hearing id")],
    result: Annotated[
        str | None, typer.Option("--result", click_type=RESULTS, help="Outcome")
    ] = None,
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Mark a hearing as discussed."""
    container = _container()
    with _handle_errors():
        transition = container.docket_service.discuss_hearing(
            hearing_id, by, result=result  # type: ignore[arg-type]
        )
    _report_transition(transition, f"Hearing {hearing_id} discussed", json_output)


@hearing_app.command("postpone")
def hearing_postpone(
    hearing_id: Annotated[str, typer.Argument(help="Hearing id")],
    day: Annotated[str, typer.Option("--date", "-d", help="New hearing date")],
    reason: Annotated[str, typer.Option("--reason", "-r", help="Postponement reason")],
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Postpone a hearing to a new date."""
    container = _container()
    new_date = _parse_date_option(day)
    with _handle_errors():
        transition = container.docket_service.postpone_hearing(hearing_id, new_date, reason, by)
    _report_transition(transition, f"Hearing {hearing_id} postponed", json_output)


@hearing_app.command("cancel")
def hearing_cancel(
    hearing_id: Annotated[str, typer.Argument(help="Hearing id")],
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Cancel a hearing."""
    container = _container()
    with _handle_errors():
        transition = container.docket_service.cancel_hearing(hearing_id, by)
    _report_transition(transition, f"Hearing {hearing_id} cancelled", json_output)


@hearing_app.command("auto-deadlines")
def hearing_auto_deadlines(
    hearing_id: Annotated[str, typer.Argument(help="Hearing id")],
    deadline: Annotated[
        list[str],
        typer.Option("--deadline", help="NAME:DAYS_BEFORE (repeatable)"),
    ],
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Create deadlines a number of days before the hearing."""
    container = _container()
    with _handle_errors():
        configs = _parse_auto_configs(deadline)
        transition = container.docket_service.create_automatic_deadlines(
            hearing_id, configs, by
        )
    _report_transition(
        transition,
        f"{len(transition.creates)} automatic deadline(s) for hearing {hearing_id}",
        json_output,
    )


@hearing_app.command("chain")
def hearing_chain(
    hearing_id: Annotated[str, typer.Argument(help="Any hearing id of the chain")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show every hearing of a postponement chain, oldest first."""
    container = _container()
    with _handle_errors():
        chain = container.docket_service.hearing_chain(hearing_id)

    if json_output:
        typer.echo(
            json_response(
                "hearing_chain", 1, hearings=[h.model_dump(mode="json") for h in chain]
            )
        )
        return

    for hearing in chain:
        typer.echo(f"  {_hearing_line(hearing)}")
        if hearing.postponement_reason:
            typer.echo(f"      postponed: {hearing.postponement_reason}")


# ---------------------------------------------------------------------------
# Deadline subcommand
# ---------------------------------------------------------------------------

deadline_app = typer.Typer(help="Procedural deadlines")
app.add_typer(deadline_app, name="deadline")


@deadline_app.command("add")
def deadline_add(
    client: Annotated[str, typer.Option("--client", help="Client id")],
    name: Annotated[str, typer.Option("--name", help="Deadline name")],
    due: Annotated[str, typer.Option("--due", help="Due date")],
    due_time: Annotated[str | None, typer.Option("--time", help="HH:MM")] = None,
    priority: Annotated[
        str, typer.Option("--priority", click_type=PRIORITIES, help="Priority")
    ] = "medium",
    category: Annotated[
        str, typer.Option("--category", click_type=CATEGORIES, help="Category")
    ] = "other",
    hearing: Annotated[str | None, typer.Option("--hearing", help="Related hearing id")] = None,
    assign: Annotated[
        list[str] | None, typer.Option("--assign", help="Assignee (repeatable)")
    ] = None,
    calendar_days: Annotated[
        bool, typer.Option("--calendar-days", help="Count calendar rather than working days")
    ] = False,
    recur: Annotated[
        str | None, typer.Option("--recur", click_type=PATTERNS, help="Recurrence pattern")
    ] = None,
    interval: Annotated[int, typer.Option("--interval", min=1, help="Recurrence step")] = 1,
    occurrences: Annotated[
        int | None, typer.Option("--occurrences", help="Further occurrences to create")
    ] = None,
    until: Annotated[str | None, typer.Option("--until", help="Recurrence end date")] = None,
    no_reminders: Annotated[
        bool, typer.Option("--no-reminders", help="Skip the default reminders")
    ] = False,
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Register a new deadline."""
    container = _container()
    due_date = _parse_date_option(due)
    end_date = _parse_date_option(until) if until else None

    with _handle_errors():
        rules = [] if no_reminders else container.reminder_rules
        try:
            deadline = Deadline(
                client_id=client,
                hearing_id=hearing,
                name=name,
                due_date=due_date,
                due_time=due_time,
                priority=priority,  # type: ignore[arg-type]
                category=category,  # type: ignore[arg-type]
                working_days_only=not calendar_days,
                assigned_to=list(assign or []),
                reminders=ReminderScheduler().schedule(due_date, rules),
                recurrence=Recurrence(
                    enabled=recur is not None,
                    pattern=recur,  # type: ignore[arg-type]
                    interval=interval,
                    end_date=end_date,
                    occurrences_remaining=occurrences,
                ),
                created_by=by,
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        container.docket_service.register_deadline(deadline)

    if json_output:
        typer.echo(json_response("deadline", 1, deadline=deadline.model_dump(mode="json")))
        return
    typer.secho(f"✓ Deadline {deadline.id} registered", fg=typer.colors.GREEN)
    typer.echo(f"  {_deadline_line(deadline, container.clock())}")


@deadline_app.command("complete")
def deadline_complete(
    deadline_id: Annotated[str, typer.Argument(help="Deadline id")],
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Mark a deadline as completed."""
    container = _container()
    with _handle_errors():
        transition = container.docket_service.complete_deadline(deadline_id, by)
    _report_transition(transition, f"Deadline {deadline_id} completed", json_output)


@deadline_app.command("extend")
def deadline_extend(
    deadline_id: Annotated[str, typer.Argument(help="Deadline id")],
    day: Annotated[str, typer.Option("--date", "-d", help="New due date")],
    reason: Annotated[str, typer.Option("--reason", "-r", help="Extension reason")],
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Move a deadline's due date."""
    container = _container()
    new_date = _parse_date_option(day)
    with _handle_errors():
        transition = container.docket_service.extend_deadline(deadline_id, new_date, reason, by)
    _report_transition(
        transition, f"Deadline {deadline_id} extended to {format_greek(new_date)}", json_output
    )


@deadline_app.command("cancel")
def deadline_cancel(
    deadline_id: Annotated[str, typer.Argument(help="Deadline id")],
    reason: Annotated[str | None, typer.Option("--reason", "-r")] = None,
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Cancel a deadline."""
    container = _container()
    with _handle_errors():
        transition = container.docket_service.cancel_deadline(deadline_id, by, reason)
    _report_transition(transition, f"Deadline {deadline_id} cancelled", json_output)


@deadline_app.command("remind")
def deadline_remind(
    deadline_id: Annotated[str, typer.Argument(help="Deadline id")],
    offset: Annotated[int, typer.Option("--offset", help="Days before the due date")],
    channel: Annotated[
        str, typer.Option("--channel", click_type=CHANNELS, help="Delivery channel")
    ] = "notification",
    by: Annotated[str | None, typer.Option("--by", help="Acting user")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Add a reminder to a deadline."""
    container = _container()
    with _handle_errors():
        transition = container.docket_service.add_reminder(
            deadline_id, offset, channel, by  # type: ignore[arg-type]
        )
    _report_transition(transition, f"Reminder added to deadline {deadline_id}", json_output)


@deadline_app.command("upcoming")
def deadline_upcoming(
    days: Annotated[int, typer.Option("--days", help="Look-ahead window in days")] = 7,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Open deadlines due within the next DAYS days, most urgent first."""
    container = _container()
    with _handle_errors():
        deadlines = container.docket_service.upcoming_deadlines(days)
    if json_output:
        typer.echo(
            json_response(
                "deadline_list",
                1,
                days=days,
                deadlines=[d.model_dump(mode="json") for d in deadlines],
            )
        )
        return
    _echo_deadlines(deadlines, container.clock(), f"No deadlines in the next {days} days")


@deadline_app.command("overdue")
def deadline_overdue(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Pending deadlines whose due moment has passed."""
    container = _container()
    with _handle_errors():
        deadlines = container.docket_service.overdue_deadlines()
    if json_output:
        typer.echo(
            json_response(
                "deadline_list", 1, deadlines=[d.model_dump(mode="json") for d in deadlines]
            )
        )
        return
    _echo_deadlines(deadlines, container.clock(), "No overdue deadlines")


@deadline_app.command("stats")
def deadline_stats(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Deadline counts by status, priority and category."""
    container = _container()
    with _handle_errors():
        stats = container.docket_service.deadline_stats()
    if json_output:
        typer.echo(json_response("deadline_stats", 1, **stats))
        return

    typer.secho(f"Total deadlines: {stats['total']}", bold=True)
    for section in ("by_status", "by_priority", "by_category"):
        counts: dict[str, Any] = stats[section]
        if not counts:
            continue
        typer.secho(section.replace("_", " ").capitalize(), fg=typer.colors.CYAN)
        for key, value in sorted(counts.items()):
            typer.echo(f"  {key:<20} {value}")


@deadline_app.command("export")
def deadline_export(
    output: Annotated[Path, typer.Argument(help="ICS file to write")],
) -> None:
    """Export open deadlines to an ICS calendar."""
    from lexdocket.rules.export import export_records_to_ics

    container = _container()
    with _handle_errors():
        count = export_records_to_ics(container.store.list_deadlines(), output.resolve())
    typer.secho(f"✓ Exported {count} deadline(s) to {output.resolve()}", fg=typer.colors.GREEN)


# ---------------------------------------------------------------------------
# Reminders subcommand
# ---------------------------------------------------------------------------

reminders_app = typer.Typer(help="Reminder dispatch")
app.add_typer(reminders_app, name="reminders")


@reminders_app.command("sweep")
def reminders_sweep(
    day: Annotated[
        str | None, typer.Option("--date", "-d", help="Sweep as of this date")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Send every reminder that has come due."""
    container = _container()
    now = container.clock()
    if day is not None:
        now = datetime.combine(_parse_date_option(day), time(12, 0), tzinfo=now.tzinfo)

    with _handle_errors():
        report = container.reminder_service.sweep(now)

    if json_output:
        typer.echo(
            json_response(
                "reminder_sweep",
                1,
                date=now.date().isoformat(),
                sent=report.sent,
                failed=report.failed,
                deadline_ids=report.deadline_ids,
                unrecorded=report.unrecorded,
            )
        )
        return

    color = typer.colors.GREEN if report.failed == 0 else typer.colors.YELLOW
    typer.secho(f"Sent {report.sent} reminder(s), {report.failed} failed", fg=color)


# ---------------------------------------------------------------------------
# Audit subcommand
# ---------------------------------------------------------------------------

audit_app = typer.Typer(help="Audit ledger management")
app.add_typer(audit_app, name="audit")


@audit_app.command("show")
def audit_show(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    tail: Annotated[
        int | None,
        typer.Option("--tail", "-n", help="Show last N entries"),
    ] = None,
    record: Annotated[
        str | None,
        typer.Option("--record", help="Only entries touching this record id"),
    ] = None,
) -> None:
    """Show audit ledger entries."""
    container = _container()

    if not container.audit_service.is_enabled():
        typer.secho("Audit ledger is disabled", fg=typer.colors.YELLOW)
        return

    with _handle_errors():
        if record:
            entries = container.audit_service.history(record)
        else:
            entries = container.audit_service.get_entries()

    if not entries:
        typer.secho("No audit ledger entries found", fg=typer.colors.YELLOW)
        return

    if tail:
        entries = entries[-tail:]

    if json_output:
        typer.echo(
            json_response(
                "audit_log",
                1,
                total_entries=len(entries),
                entries=[e.model_dump(mode="json") for e in entries],
            )
        )
    else:
        for entry in entries:
            typer.echo(
                f"{entry.timestamp} | {entry.operation} | {entry.inputs} -> {entry.outputs}"
            )


@audit_app.command("verify")
def audit_verify() -> None:
    """Verify audit ledger integrity."""
    container = _container()

    if not container.audit_service.is_enabled():
        typer.secho("Audit ledger is disabled", fg=typer.colors.YELLOW)
        return

    valid, error = container.audit_service.verify()

    if valid:
        typer.secho("Audit ledger is valid", fg=typer.colors.GREEN)
        return

    message = error or "Audit ledger integrity check failed"
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
