from .base import BaseModel
from .enum import EnrollmentRole
from .id import ActivityID, CourseID, PersonID


class Activity(BaseModel):
    activity_id: ActivityID
    course_id: CourseID
    name: str
    natively_graded: bool = False


class Person(BaseModel):
    person_id: PersonID
    full_name: str


class Enrollment(BaseModel):
    course_id: CourseID
    person_id: PersonID
    role: EnrollmentRole
