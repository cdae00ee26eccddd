"""The grade record store: one optional value per (resource, subject)."""

from __future__ import annotations

import typing as t

import sqlalchemy as sqla
from sqlalchemy.dialects import postgresql, sqlite

from gradepad.core import di
from gradepad.model import GradeRecord, ResourceID, SubjectID

from . import Session
from .table import grade_records


def get(
    resource_id: ResourceID,
    subject_id: SubjectID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> GradeRecord | None:
    stmt = sqla.select(grade_records.__table__).where(
        grade_records.resource_id == resource_id,
        grade_records.subject_id == subject_id,
    )
    row = session.execute(stmt).mappings().one_or_none()
    return GradeRecord(**row) if row is not None else None


def find(
    resource_id: ResourceID,
    *,
    subject_ids: t.Collection[SubjectID] | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> dict[SubjectID, GradeRecord]:
    stmt = sqla.select(grade_records.__table__).where(grade_records.resource_id == resource_id)
    if subject_ids is not None:
        stmt = stmt.where(grade_records.subject_id.in_(subject_ids))
    rows = session.execute(stmt).mappings().all()
    return {row["subject_id"]: GradeRecord(**row) for row in rows}


def upsert(
    resource_id: ResourceID,
    subject_id: SubjectID,
    value: float | None,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Write a single record atomically, replacing any previous value (last write wins)."""
    match session.get_bind().dialect.name:
        case "postgresql":
            insert = postgresql.insert
        case "sqlite":
            insert = sqlite.insert
        case name:
            raise NotImplementedError(f"no upsert for dialect {name}")

    stmt = insert(grade_records).values(resource_id=resource_id, subject_id=subject_id, value=value)
    stmt = stmt.on_conflict_do_update(
        index_elements=["resource_id", "subject_id"],
        set_={"value": stmt.excluded.value, "update_time": sqla.func.now()},
    )
    session.execute(stmt)
