"""Ad-hoc grading routes: enable grading, save grades, read the sheet."""

import typing as t

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gradepad.auth import CallerContext, get_current_caller
from gradepad.core.config import GradingSettings
from gradepad.grading import activate, load_sheet, Policy, sync_grades
from gradepad.grading.errors import AuthorizationError, GradingError, StateError, UnknownActivity, ValidationError
from gradepad.model import ActivityID, SubjectID

from ..dependencies import get_grading_settings, get_policy, get_session
from ..view.grading import ActivateResponse, GradingSheetResponse, SyncGradesRequest, SyncGradesResponse

router = APIRouter(prefix="/api/activities", tags=["grading"])

ErrorStatus: tuple[tuple[type[GradingError], int], ...] = (
    (StateError, status.HTTP_409_CONFLICT),
    (ValidationError, 422),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (UnknownActivity, status.HTTP_404_NOT_FOUND),
)


def http_error(exc: GradingError, applied: t.Sequence[SubjectID] | None = None) -> HTTPException:
    status_code = next(
        (code for cls, code in ErrorStatus if isinstance(exc, cls)), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    detail = exc.detail()
    if applied is not None:
        detail["appliedSubjects"] = list(applied)
    return HTTPException(status_code=status_code, detail=detail)


@router.post("/{activity_id}/grading/activate", operation_id="activate_grading")
def activate_grading(
    activity_id: int,
    caller: CallerContext = Depends(get_current_caller),
    session: Session = Depends(get_session),
    policy: Policy = Depends(get_policy),
    settings: GradingSettings = Depends(get_grading_settings),
) -> ActivateResponse:
    """Create the grade resource for an activity.

    A second activation, including one that loses a race with a concurrent
    request, is answered with 409 ``AlreadyActivated``.
    """
    try:
        with session.begin():
            resource = activate(
                ActivityID(activity_id), caller_id=caller.caller_id, policy=policy, settings=settings, session=session
            )
    except GradingError as exc:
        raise http_error(exc) from exc
    return ActivateResponse(resource_id=resource.resource_id)


@router.post("/{activity_id}/grades", operation_id="sync_grades")
def sync_activity_grades(
    activity_id: int,
    request: SyncGradesRequest,
    caller: CallerContext = Depends(get_current_caller),
    session: Session = Depends(get_session),
    policy: Policy = Depends(get_policy),
) -> SyncGradesResponse:
    """Write a batch of grades in order, stopping at the first bad entry.

    Entries before the bad one stay written; the error detail lists them
    under ``appliedSubjects``.
    """
    if request.activity_id is not None and request.activity_id != activity_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "InvalidInput", "message": "activityId does not match the URL"},
        )

    try:
        with session.begin():
            result = sync_grades(
                ActivityID(activity_id),
                [e.to_entry() for e in request.entries],
                caller_id=caller.caller_id,
                policy=policy,
                session=session,
            )
    except GradingError as exc:
        raise http_error(exc) from exc

    if result.error is not None:
        raise http_error(result.error, applied=result.applied) from result.error
    return SyncGradesResponse(updated_count=result.updated_count, applied_subjects=list(result.applied))


@router.get("/{activity_id}/grading", operation_id="get_grading_sheet")
def get_grading_sheet(
    activity_id: int,
    caller: CallerContext = Depends(get_current_caller),
    session: Session = Depends(get_session),
    policy: Policy = Depends(get_policy),
    settings: GradingSettings = Depends(get_grading_settings),
) -> GradingSheetResponse:
    try:
        with session.begin():
            sheet = load_sheet(
                ActivityID(activity_id), caller_id=caller.caller_id, policy=policy, settings=settings, session=session
            )
    except GradingError as exc:
        raise http_error(exc) from exc
    return GradingSheetResponse.from_model(sheet)
