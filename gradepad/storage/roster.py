"""Local copy of the course roster: activities, people and their enrollments."""

from __future__ import annotations

import sqlalchemy as sqla

from gradepad.core import di
from gradepad.model import Activity, ActivityID, CourseID, Enrollment, EnrollmentRole, Person, PersonID

from . import Session
from .table import activities, enrollments, people


def get_activity(
    activity_id: ActivityID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Activity | None:
    stmt = sqla.select(activities.__table__).where(activities.activity_id == activity_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Activity(**row) if row is not None else None


def create_activity(
    *,
    activity_id: ActivityID,
    course_id: CourseID,
    name: str,
    natively_graded: bool = False,
    session: Session = di.Provide["storage.persistent.session"],
) -> Activity:
    session.add(
        activities(activity_id=activity_id, course_id=course_id, name=name, natively_graded=natively_graded)
    )
    session.flush()
    return get_activity(activity_id, session=session)  # type: ignore[return-value]


def get_person(
    person_id: PersonID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Person | None:
    stmt = sqla.select(people.__table__).where(people.person_id == person_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Person(**row) if row is not None else None


def create_person(
    *,
    person_id: PersonID,
    full_name: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> Person:
    session.add(people(person_id=person_id, full_name=full_name))
    session.flush()
    return get_person(person_id, session=session)  # type: ignore[return-value]


def enroll(
    *,
    course_id: CourseID,
    person_id: PersonID,
    role: EnrollmentRole,
    session: Session = di.Provide["storage.persistent.session"],
) -> Enrollment:
    """Enroll a person in a course, replacing any role they already had there."""
    stmt = (
        sqla.update(enrollments)
        .where(enrollments.course_id == course_id, enrollments.person_id == person_id)
        .values(role=role.value)
    )
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        session.add(enrollments(course_id=course_id, person_id=person_id, role=role.value))
    session.flush()
    return Enrollment(course_id=course_id, person_id=person_id, role=role)


def unenroll(
    *,
    course_id: CourseID,
    person_id: PersonID,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    stmt = sqla.delete(enrollments).where(enrollments.course_id == course_id, enrollments.person_id == person_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportAttributeAccessIssue]


def get_role(
    *,
    course_id: CourseID,
    person_id: PersonID,
    session: Session = di.Provide["storage.persistent.session"],
) -> EnrollmentRole | None:
    stmt = sqla.select(enrollments.role).where(enrollments.course_id == course_id, enrollments.person_id == person_id)
    role = session.execute(stmt).scalar_one_or_none()
    return EnrollmentRole(role) if role is not None else None


def find_people(
    *,
    course_id: CourseID,
    role: EnrollmentRole | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Person, ...]:
    """People enrolled in a course, ordered by name."""
    stmt = (
        sqla.select(people.__table__)
        .join(enrollments, people.person_id == enrollments.person_id)
        .where(enrollments.course_id == course_id)
        .order_by(people.full_name, people.person_id)
    )
    if role is not None:
        stmt = stmt.where(enrollments.role == role.value)
    rows = session.execute(stmt).mappings().all()
    return tuple(Person(**row) for row in rows)
