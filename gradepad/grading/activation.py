"""Enabling ad-hoc grading for an activity.

Activation creates a grade resource and the link binding it to the activity,
exactly once per activity. The unique constraint on the link's activity is
what decides between concurrent callers: the loser's insert fails, its whole
transaction is rolled back and it is told ``AlreadyActivated``.
"""

from __future__ import annotations

import logging

import sqlalchemy.exc

import gradepad.storage.grading as grading_store
from gradepad.core.config import GradingSettings
from gradepad.model import ActivityID, GradeResource, PersonID
from gradepad.storage import Session

from .errors import AlreadyActivated, NativelyGraded, Unauthorized, UnknownActivity
from .policy import Policy

logger = logging.getLogger(__name__)


def resource_label(activity_name: str, settings: GradingSettings) -> str:
    return f"{activity_name}{settings.label_suffix}"


def activate(
    activity_id: ActivityID,
    *,
    caller_id: PersonID,
    policy: Policy,
    settings: GradingSettings,
    session: Session,
) -> GradeResource:
    """Create the grade resource and link for ``activity_id``.

    Must run inside a transaction owned by the caller; raising out of it rolls
    back everything done here.

    Raises:
        UnknownActivity: no such activity
        Unauthorized: the caller may not grade the activity
        NativelyGraded: the activity has its own grade record
        AlreadyActivated: a link already exists, nothing was changed
    """
    activity = policy.get_activity(activity_id)
    if activity is None:
        raise UnknownActivity(activity_id)
    if not policy.is_authorized(activity_id, caller_id):
        raise Unauthorized()
    if activity.natively_graded:
        raise NativelyGraded()

    if grading_store.get_link(activity_id, session=session) is not None:
        logger.debug("activity already activated", extra={"activity_id": activity_id})
        raise AlreadyActivated()

    try:
        resource = grading_store.create_resource(
            label=resource_label(activity.name, settings),
            min_value=settings.default_min,
            max_value=settings.default_max,
            session=session,
        )
        grading_store.create_link(activity_id=activity_id, resource_id=resource.resource_id, session=session)
    except sqlalchemy.exc.IntegrityError as exc:
        # a concurrent activation committed its link between our check and insert
        logger.debug("lost activation race", extra={"activity_id": activity_id})
        raise AlreadyActivated() from exc

    logger.info(
        "activated grading",
        extra={"activity_id": activity_id, "resource_id": resource.resource_id, "caller_id": caller_id},
    )
    return resource
