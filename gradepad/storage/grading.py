"""Grade resources and the links binding them to activities."""

from __future__ import annotations

import sqlalchemy as sqla

from gradepad.core import di
from gradepad.grading.errors import InvalidBounds
from gradepad.model import ActivityID, GradeResource, GradingLink, ResourceID

from . import Session
from .table import grade_resources, grading_links


def get_resource(
    resource_id: ResourceID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> GradeResource | None:
    stmt = sqla.select(grade_resources.__table__).where(grade_resources.resource_id == resource_id)
    row = session.execute(stmt).mappings().one_or_none()
    return GradeResource(**row) if row is not None else None


def create_resource(
    *,
    label: str,
    min_value: float,
    max_value: float,
    session: Session = di.Provide["storage.persistent.session"],
) -> GradeResource:
    if min_value > max_value:
        raise InvalidBounds(min_value, max_value)
    resource = grade_resources(label=label, min_value=min_value, max_value=max_value)
    session.add(resource)
    session.flush()
    return get_resource(resource.resource_id, session=session)  # type: ignore[return-value]


def delete_resource(
    resource_id: ResourceID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a resource and, through the cascade, its records. Links are left alone."""
    stmt = sqla.delete(grade_resources).where(grade_resources.resource_id == resource_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportAttributeAccessIssue]


def get_link(
    activity_id: ActivityID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> GradingLink | None:
    stmt = sqla.select(grading_links.__table__).where(grading_links.activity_id == activity_id)
    row = session.execute(stmt).mappings().one_or_none()
    return GradingLink(**row) if row is not None else None


def create_link(
    *,
    activity_id: ActivityID,
    resource_id: ResourceID,
    session: Session = di.Provide["storage.persistent.session"],
) -> GradingLink:
    """Insert the link for an activity.

    Raises:
        sqlalchemy.exc.IntegrityError: if the activity already has a link
    """
    link = grading_links(activity_id=activity_id, resource_id=resource_id)
    session.add(link)
    session.flush()
    return get_link(activity_id, session=session)  # type: ignore[return-value]


def delete_link(
    activity_id: ActivityID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    stmt = sqla.delete(grading_links).where(grading_links.activity_id == activity_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportAttributeAccessIssue]


def count_links(
    activity_id: ActivityID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> int:
    stmt = sqla.select(sqla.func.count()).select_from(grading_links).where(grading_links.activity_id == activity_id)
    return session.execute(stmt).scalar_one()


def count_resources(
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> int:
    stmt = sqla.select(sqla.func.count()).select_from(grade_resources)
    return session.execute(stmt).scalar_one()
