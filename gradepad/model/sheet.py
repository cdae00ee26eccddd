from .base import BaseModel
from .enum import SheetMode
from .grading import GradeResource
from .id import ActivityID, SubjectID


class SheetRow(BaseModel):
    subject_id: SubjectID
    full_name: str
    # display form: fixed precision, or "" when no grade is recorded
    grade: str = ""


class GradingSheet(BaseModel):
    activity_id: ActivityID
    activity_name: str
    mode: SheetMode
    enable_label: str | None = None
    resource: GradeResource | None = None
    rows: tuple[SheetRow, ...] = ()
