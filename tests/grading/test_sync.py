"""Tests for gradepad.grading.sync module."""

from __future__ import annotations

import logging
import math
import typing as t

import pytest
from sqlalchemy.orm import Session

import gradepad.storage.grading as grading_store
import gradepad.storage.record as record_store
from gradepad.core.config import GradingSettings
from gradepad.grading import activate, RosterPolicy, sync_grades
from gradepad.grading.errors import NotActivated, NotEligible, OrphanedLink, OutOfRange, Unauthorized, \
    UnknownActivity
from gradepad.model import ActivityID, GradeEntry, GradeResource, SubjectID

if t.TYPE_CHECKING:
    from ..conftest import Roster


def entries(*pairs: tuple[int, float]) -> list[GradeEntry]:
    return [GradeEntry(subject_id=SubjectID(s), value=v) for s, v in pairs]


@pytest.fixture
def resource(
    db_session: Session, roster: Roster, policy: RosterPolicy, grading_settings: GradingSettings
) -> GradeResource:
    with db_session.begin():
        return activate(
            roster.activity.activity_id,
            caller_id=roster.grader.person_id,
            policy=policy,
            settings=grading_settings,
            session=db_session,
        )


@pytest.fixture
def sync(db_session: Session, roster: Roster, policy: RosterPolicy) -> t.Callable[..., t.Any]:
    """Run sync_grades as the grader in its own committed transaction."""

    def run(batch: list[GradeEntry], activity_id: ActivityID | None = None):
        with db_session.begin():
            return sync_grades(
                activity_id or roster.activity.activity_id,
                batch,
                caller_id=roster.grader.person_id,
                policy=policy,
                session=db_session,
            )

    return run


def stored(db_session: Session, resource: GradeResource) -> dict[int, float | None]:
    with db_session.begin():
        return {k: r.value for k, r in record_store.find(resource.resource_id, session=db_session).items()}


class TestSyncGrades(object):
    """Tests for sync_grades()."""

    def test_applies_all_entries(
        self, db_session: Session, resource: GradeResource, sync: t.Callable[..., t.Any]
    ) -> None:
        result = sync(entries((2, 91.5), (3, 78), (4, 0)))

        assert result.ok
        assert result.updated_count == 3
        assert result.applied == (2, 3, 4)
        assert result.resource_id == resource.resource_id
        assert stored(db_session, resource) == {2: 91.5, 3: 78.0, 4: 0.0}

    def test_bounds_are_inclusive(
        self, db_session: Session, resource: GradeResource, sync: t.Callable[..., t.Any]
    ) -> None:
        result = sync(entries((2, 0), (3, 100)))

        assert result.ok
        assert stored(db_session, resource) == {2: 0.0, 3: 100.0}

    @pytest.mark.parametrize("value", [-0.01, 100.01, math.inf, -math.inf, math.nan])
    def test_out_of_range(
        self, db_session: Session, resource: GradeResource, sync: t.Callable[..., t.Any], value: float
    ) -> None:
        result = sync(entries((2, value)))

        assert isinstance(result.error, OutOfRange)
        assert result.error.subject_id == 2
        assert (result.error.min_value, result.error.max_value) == (0, 100)
        assert result.applied == ()
        assert stored(db_session, resource) == {}

    def test_stops_at_first_invalid_entry(
        self, db_session: Session, resource: GradeResource, sync: t.Callable[..., t.Any]
    ) -> None:
        """Entries before the failing one stay written, entries after it are never looked at."""
        sync(entries((3, 10)))

        result = sync(entries((2, 50), (3, 999), (4, 70)))

        assert not result.ok
        assert isinstance(result.error, OutOfRange)
        assert result.error.subject_id == 3
        assert result.applied == (2,)
        assert result.updated_count == 1
        assert stored(db_session, resource) == {2: 50.0, 3: 10.0}

    def test_ineligible_subject(
        self, db_session: Session, roster: Roster, resource: GradeResource, sync: t.Callable[..., t.Any]
    ) -> None:
        result = sync(entries((2, 50), (roster.outsider.person_id, 60)))

        assert isinstance(result.error, NotEligible)
        assert result.error.subject_id == roster.outsider.person_id
        assert result.applied == (2,)

    def test_grader_is_not_a_subject(
        self, roster: Roster, resource: GradeResource, sync: t.Callable[..., t.Any]
    ) -> None:
        result = sync(entries((roster.grader.person_id, 60)))

        assert isinstance(result.error, NotEligible)

    def test_last_write_wins(
        self, db_session: Session, resource: GradeResource, sync: t.Callable[..., t.Any]
    ) -> None:
        sync(entries((2, 40)))
        sync(entries((2, 45), (2, 65)))

        assert stored(db_session, resource) == {2: 65.0}

    def test_empty_batch(self, db_session: Session, resource: GradeResource, sync: t.Callable[..., t.Any]) -> None:
        result = sync([])

        assert result.ok
        assert result.updated_count == 0

    def test_not_activated(self, roster: Roster, sync: t.Callable[..., t.Any]) -> None:
        result = sync(entries((2, 50)))

        assert isinstance(result.error, NotActivated)
        assert result.resource_id is None

    def test_unknown_activity(self, roster: Roster, sync: t.Callable[..., t.Any]) -> None:
        with pytest.raises(UnknownActivity):
            sync(entries((2, 50)), activity_id=ActivityID(999))

    def test_unauthorized(
        self, db_session: Session, roster: Roster, policy: RosterPolicy, resource: GradeResource
    ) -> None:
        with pytest.raises(Unauthorized):
            with db_session.begin():
                sync_grades(
                    roster.activity.activity_id,
                    entries((3, 100)),
                    caller_id=roster.students[0].person_id,
                    policy=policy,
                    session=db_session,
                )

        assert stored(db_session, resource) == {}


class TestOrphanedLink(object):
    def test_dangling_link_is_deleted(
        self,
        db_session: Session,
        roster: Roster,
        resource: GradeResource,
        sync: t.Callable[..., t.Any],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with db_session.begin():
            grading_store.delete_resource(resource.resource_id, session=db_session)

        with caplog.at_level(logging.WARNING, logger="gradepad.grading.sync"):
            result = sync(entries((2, 50)))

        assert isinstance(result.error, NotActivated)
        assert isinstance(result.error.__cause__, OrphanedLink)
        assert result.error.__cause__.resource_id == resource.resource_id
        assert "deleted orphaned grading link" in caplog.text

        with db_session.begin():
            assert grading_store.get_link(roster.activity.activity_id, session=db_session) is None

        # next time round it is a plain missing link
        again = sync(entries((2, 50)))
        assert isinstance(again.error, NotActivated)
        assert again.error.__cause__ is None
