"""Who may grade an activity, and who may be graded for it."""

from __future__ import annotations

import typing as t

import gradepad.storage.roster as roster_store
from gradepad.model import Activity, ActivityID, EnrollmentRole, Person, PersonID, SubjectID
from gradepad.storage import Session


class GradingPolicy(t.Protocol):
    def is_authorized(self, activity_id: ActivityID, caller_id: PersonID) -> bool: ...

    def is_eligible(self, activity_id: ActivityID, subject_id: SubjectID) -> bool: ...


class ActivityCatalog(t.Protocol):
    def get_activity(self, activity_id: ActivityID) -> Activity | None: ...

    def find_subjects(self, activity_id: ActivityID) -> tuple[Person, ...]: ...


class RosterPolicy(object):
    """Policy and catalog backed by the local roster tables.

    A caller may grade an activity when enrolled as a grader in the
    activity's course; a subject is eligible when enrolled there as a
    student. Lookups run on the session the caller is already using, so
    they see the same transaction.
    """

    def __init__(self, session: Session):
        self.session = session
        self._activities: dict[ActivityID, Activity | None] = {}

    def get_activity(self, activity_id: ActivityID) -> Activity | None:
        if activity_id not in self._activities:
            self._activities[activity_id] = roster_store.get_activity(activity_id, session=self.session)
        return self._activities[activity_id]

    def _role(self, activity_id: ActivityID, person_id: PersonID) -> EnrollmentRole | None:
        activity = self.get_activity(activity_id)
        if activity is None:
            return None
        return roster_store.get_role(course_id=activity.course_id, person_id=person_id, session=self.session)

    def is_authorized(self, activity_id: ActivityID, caller_id: PersonID) -> bool:
        return self._role(activity_id, caller_id) is EnrollmentRole.Grader

    def is_eligible(self, activity_id: ActivityID, subject_id: SubjectID) -> bool:
        return self._role(activity_id, PersonID(subject_id)) is EnrollmentRole.Student

    def find_subjects(self, activity_id: ActivityID) -> tuple[Person, ...]:
        activity = self.get_activity(activity_id)
        if activity is None:
            return ()
        return roster_store.find_people(course_id=activity.course_id, role=EnrollmentRole.Student, session=self.session)


class Policy(GradingPolicy, ActivityCatalog, t.Protocol): ...
