"""CLI commands for the local roster: activities, people and enrollments."""

from __future__ import annotations

from sqlalchemy.orm import Session

import gradepad.lib.cli as click
from gradepad.core import di
from gradepad.model import ActivityID, CourseID, EnrollmentRole, PersonID
from gradepad.storage import roster as roster_store


@click.group("roster")
def roster():
    """Manage activities, people and enrollments."""
    ...


@roster.command("activity")
@click.argument("activity_id", type=int)
@click.argument("course_id", type=int)
@click.argument("name")
@click.option("--native", is_flag=True, default=False, help="The activity keeps its own grade record")
@di.inject
def roster_activity(
    activity_id: int,
    course_id: int,
    name: str,
    native: bool,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Register an activity belonging to a course."""
    with session.begin():
        if roster_store.get_activity(ActivityID(activity_id), session=session) is not None:
            raise click.ClickException(f"activity {activity_id} already exists")
        activity = roster_store.create_activity(
            activity_id=ActivityID(activity_id),
            course_id=CourseID(course_id),
            name=name,
            natively_graded=native,
            session=session,
        )
    click.echo(f"activity {activity.activity_id}: {activity.name} (course {activity.course_id})")


@roster.command("person")
@click.argument("person_id", type=int)
@click.argument("full_name")
@di.inject
def roster_person(
    person_id: int,
    full_name: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    with session.begin():
        if roster_store.get_person(PersonID(person_id), session=session) is not None:
            raise click.ClickException(f"person {person_id} already exists")
        person = roster_store.create_person(person_id=PersonID(person_id), full_name=full_name, session=session)
    click.echo(f"person {person.person_id}: {person.full_name}")


@roster.command("enroll")
@click.argument("course_id", type=int)
@click.argument("person_id", type=int)
@click.argument("role", type=click.EnumType(EnrollmentRole))
@di.inject
def roster_enroll(
    course_id: int,
    person_id: int,
    role: EnrollmentRole,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Enroll PERSON_ID in COURSE_ID as a grader or a student."""
    with session.begin():
        if roster_store.get_person(PersonID(person_id), session=session) is None:
            raise click.ClickException(f"no person {person_id}")
        roster_store.enroll(course_id=CourseID(course_id), person_id=PersonID(person_id), role=role, session=session)
    click.echo(f"enrolled {person_id} in course {course_id} as {role.value}")
