"""Writing a batch of grades against an activity's grade resource.

Entries are validated and applied one at a time, in the order given. The
first entry that fails validation stops the batch; entries applied before it
stay applied. ``SyncResult`` reports both what was applied and what stopped
the batch, so the partial write is visible to the caller.
"""

from __future__ import annotations

import logging
import typing as t

import gradepad.storage.grading as grading_store
import gradepad.storage.record as record_store
from gradepad.model import ActivityID, GradeEntry, GradeResource, PersonID, ResourceID, SubjectID
from gradepad.storage import Session

from .errors import GradingError, NotActivated, NotEligible, OrphanedLink, OutOfRange, Unauthorized, \
    UnknownActivity
from .policy import Policy

logger = logging.getLogger(__name__)


class SyncResult(t.NamedTuple):
    resource_id: ResourceID | None
    applied: tuple[SubjectID, ...] = ()
    error: GradingError | None = None

    @property
    def updated_count(self) -> int:
        return len(self.applied)

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_resource(activity_id: ActivityID, *, session: Session) -> GradeResource:
    """Find the resource an activity is linked to, repairing a dangling link.

    Raises:
        NotActivated: there is no link, or the link pointed at a missing
            resource and has just been deleted (the cause is then an
            ``OrphanedLink``)
    """
    link = grading_store.get_link(activity_id, session=session)
    if link is None:
        raise NotActivated()

    resource = grading_store.get_resource(link.resource_id, session=session)
    if resource is None:
        orphan = OrphanedLink(activity_id, link.resource_id)
        grading_store.delete_link(activity_id, session=session)
        logger.warning(
            "deleted orphaned grading link",
            extra={"activity_id": activity_id, "resource_id": link.resource_id},
        )
        raise NotActivated() from orphan
    return resource


def check_entry(
    activity_id: ActivityID, entry: GradeEntry, *, resource: GradeResource, policy: Policy
) -> GradingError | None:
    if not resource.contains(entry.value):
        return OutOfRange(entry.subject_id, entry.value, resource.min_value, resource.max_value)
    if not policy.is_eligible(activity_id, entry.subject_id):
        return NotEligible(entry.subject_id)
    return None


def sync_grades(
    activity_id: ActivityID,
    entries: t.Sequence[GradeEntry],
    *,
    caller_id: PersonID,
    policy: Policy,
    session: Session,
) -> SyncResult:
    """Apply ``entries`` to the activity's grade resource.

    Runs inside a transaction owned by the caller, which must commit it even
    when the result carries an error: applied entries and link repairs are
    meant to stick.

    Raises:
        UnknownActivity: no such activity
        Unauthorized: the caller may not grade the activity
    """
    activity = policy.get_activity(activity_id)
    if activity is None:
        raise UnknownActivity(activity_id)
    if not policy.is_authorized(activity_id, caller_id):
        raise Unauthorized()

    try:
        resource = resolve_resource(activity_id, session=session)
    except NotActivated as exc:
        return SyncResult(resource_id=None, error=exc)

    applied: list[SubjectID] = []
    for entry in entries:
        if (error := check_entry(activity_id, entry, resource=resource, policy=policy)) is not None:
            logger.info(
                "grade batch stopped",
                extra={
                    "activity_id": activity_id,
                    "resource_id": resource.resource_id,
                    "code": error.code,
                    "applied": len(applied),
                    "remaining": len(entries) - len(applied),
                },
            )
            return SyncResult(resource_id=resource.resource_id, applied=tuple(applied), error=error)
        record_store.upsert(resource.resource_id, entry.subject_id, entry.value, session=session)
        applied.append(entry.subject_id)

    logger.info(
        "synced grades",
        extra={"activity_id": activity_id, "resource_id": resource.resource_id, "updated": len(applied)},
    )
    return SyncResult(resource_id=resource.resource_id, applied=tuple(applied))
