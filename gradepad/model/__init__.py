__all__ = [
    # Base
    "BaseModel",
    "WithCtime",
    "WithMtime",
    # Enums
    "DeploymentEnvironment",
    "EnrollmentRole",
    "SheetMode",
    # ID Types
    "ActivityID",
    "CourseID",
    "LinkID",
    "PersonID",
    "ResourceID",
    "SubjectID",
    # Roster
    "Activity",
    "Enrollment",
    "Person",
    # Grading
    "GradeEntry",
    "GradeRecord",
    "GradeResource",
    "GradingLink",
    # Sheet
    "GradingSheet",
    "SheetRow",
]

from .base import BaseModel, WithCtime, WithMtime
from .enum import DeploymentEnvironment, EnrollmentRole, SheetMode
from .grading import GradeEntry, GradeRecord, GradeResource, GradingLink
from .id import ActivityID, CourseID, LinkID, PersonID, ResourceID, SubjectID
from .roster import Activity, Enrollment, Person
from .sheet import GradingSheet, SheetRow
