from __future__ import annotations

import gradepad.storage.record as record_store
from gradepad.core.config import GradingSettings
from gradepad.model import ActivityID, GradingSheet, PersonID, SheetMode, SheetRow, SubjectID
from gradepad.storage import Session

from .errors import NotActivated, Unauthorized, UnknownActivity
from .policy import Policy
from .sync import resolve_resource


def format_grade(value: float | None, precision: int) -> str:
    return "" if value is None else f"{value:.{precision}f}"


def load_sheet(
    activity_id: ActivityID,
    *,
    caller_id: PersonID,
    policy: Policy,
    settings: GradingSettings,
    session: Session,
) -> GradingSheet:
    """Current grading state of an activity, as the editor opens it.

    A dangling link is repaired on the way, in which case the sheet comes back
    in setup mode; the caller's transaction must be committed for the repair to
    stick.
    """
    activity = policy.get_activity(activity_id)
    if activity is None:
        raise UnknownActivity(activity_id)
    if not policy.is_authorized(activity_id, caller_id):
        raise Unauthorized()

    sheet = GradingSheet(activity_id=activity_id, activity_name=activity.name, mode=SheetMode.Setup)
    if activity.natively_graded:
        return sheet.model_copy(update={"mode": SheetMode.Unavailable})

    try:
        resource = resolve_resource(activity_id, session=session)
    except NotActivated:
        return sheet.model_copy(update={"enable_label": f"Enable Grading for {activity.name}"})

    names = {SubjectID(s.person_id): s.full_name for s in policy.find_subjects(activity_id)}
    subject_ids = list(names)
    records = record_store.find(resource.resource_id, subject_ids=subject_ids, session=session)
    rows: list[SheetRow] = []
    for subject_id in subject_ids:
        record = records.get(subject_id)
        grade = format_grade(record.value if record else None, settings.display_precision)
        rows.append(SheetRow(subject_id=subject_id, full_name=names[subject_id], grade=grade))
    return sheet.model_copy(update={"mode": SheetMode.Active, "resource": resource, "rows": tuple(rows)})
