"""CLI commands for enabling grading, writing grades and reading the sheet."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy.orm import Session

import gradepad.lib.cli as click
from gradepad.core import di
from gradepad.core.config import GradingSettings
from gradepad.grading import activate, load_sheet, Policy, sync_grades
from gradepad.grading.policy import RosterPolicy
from gradepad.model import ActivityID, GradeEntry, PersonID, SheetMode, SubjectID

console = Console()

CallerOption = click.option(
    "--as", "caller_id", type=int, required=True, help="Person ID of the grader acting on the activity"
)


@click.group("grading")
def grading():
    """Work with an activity's ad-hoc grades."""
    ...


@grading.command("activate")
@click.argument("activity_id", type=int)
@CallerOption
@di.inject
def grading_activate(
    activity_id: int,
    caller_id: int,
    session: Session = di.Provide["storage.persistent.session"],
    settings: GradingSettings = di.Provide["grading.settings"],
) -> None:
    """Enable ad-hoc grading for ACTIVITY_ID."""
    with session.begin():
        policy: Policy = RosterPolicy(session)
        resource = activate(
            ActivityID(activity_id), caller_id=PersonID(caller_id), policy=policy, settings=settings, session=session
        )
    click.echo(f"resource {resource.resource_id}: {resource.label} [{resource.min_value:g}, {resource.max_value:g}]")


@grading.command("sync")
@click.argument("activity_id", type=int)
@click.argument("grades", nargs=-1, required=True, type=click.GradeAssignmentType())
@CallerOption
@di.inject
def grading_sync(
    activity_id: int,
    grades: tuple[tuple[int, float], ...],
    caller_id: int,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Write GRADES (SUBJECT=VALUE ...) for ACTIVITY_ID, in order, stopping at the first bad one."""
    entries = [GradeEntry(subject_id=SubjectID(s), value=v) for s, v in grades]
    with session.begin():
        result = sync_grades(
            ActivityID(activity_id),
            entries,
            caller_id=PersonID(caller_id),
            policy=RosterPolicy(session),
            session=session,
        )

    click.echo(f"updated {result.updated_count} of {len(entries)}")
    if result.error is not None:
        if result.applied:
            click.echo(f"applied: {', '.join(str(s) for s in result.applied)}")
        raise result.error


@grading.command("sheet")
@click.argument("activity_id", type=int)
@click.option("--filter", "-f", "query", default="", help="Only show people whose name contains this")
@CallerOption
@di.inject
def grading_sheet(
    activity_id: int,
    query: str,
    caller_id: int,
    session: Session = di.Provide["storage.persistent.session"],
    settings: GradingSettings = di.Provide["grading.settings"],
) -> None:
    """Show the grading sheet of ACTIVITY_ID."""
    with session.begin():
        sheet = load_sheet(
            ActivityID(activity_id),
            caller_id=PersonID(caller_id),
            policy=RosterPolicy(session),
            settings=settings,
            session=session,
        )

    match sheet.mode:
        case SheetMode.Unavailable:
            console.print(f"[yellow]{escape(sheet.activity_name)}[/yellow] has its own grade")
        case SheetMode.Setup:
            name = escape(sheet.activity_name)
            console.print(f"[yellow]{name}[/yellow]: not enabled, run `grading activate {activity_id}`")
        case SheetMode.Active:
            assert sheet.resource is not None
            resource = sheet.resource
            table = Table(
                title=f"{escape(resource.label)} [{resource.min_value:g}, {resource.max_value:g}]",
                show_header=True,
                header_style="bold magenta",
                box=None,
            )
            table.add_column("Subject", style="blue", justify="right")
            table.add_column("Name", style="cyan")
            table.add_column("Grade", justify="right")
            needle = query.casefold()
            for row in sheet.rows:
                if needle in row.full_name.casefold():
                    table.add_row(str(row.subject_id), escape(row.full_name), row.grade or "[dim]-[/dim]")
            console.print(table)
