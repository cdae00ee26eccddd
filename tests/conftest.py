"""Pytest fixtures for gradepad tests.

Every test gets its own SQLite database file with the schema created from the
table metadata, so tests are isolated without a database server. The
container is booted once per session in the test environment.

Usage:
    def test_sheet(client: TestClient, roster: Roster, auth_headers: dict[str, str]):
        response = client.get(f"/api/activities/{roster.activity.activity_id}/grading", headers=auth_headers)
        assert response.status_code == 200
"""

from __future__ import annotations

import typing as t
from pathlib import Path

import pydantic as p
import pytest
import sqlalchemy
import sqlalchemy.event
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from gradepad.core import GradepadContainer  # noqa: I001 - must load before gradepad.auth (import cycle)
from gradepad.auth.jwt import JWTManager
from gradepad.core.config import GradingSettings
from gradepad.core.container.storage import register_foreign_keys
from gradepad.grading import RosterPolicy
from gradepad.model import Activity, ActivityID, CourseID, DeploymentEnvironment, EnrollmentRole, Person, PersonID
from gradepad.storage import roster as roster_store
from gradepad.storage.table import metadata

ConfigRoot = Path(__file__).parent.parent / "config"
TEST_JWT_SECRET = "test-jwt-secret-for-integration-tests"


@pytest.fixture(scope="session")
def container() -> t.Generator[GradepadContainer]:
    """Boot the DI container for the test session."""
    ct = GradepadContainer()
    GradepadContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{ConfigRoot.absolute()}"),
        override=(),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture(scope="session")
def app(container: GradepadContainer) -> FastAPI:
    """Create the FastAPI application wired to the test container."""
    from gradepad.core.config.web import GradepadWebSettings
    from gradepad.web.gradepad.main import _create_app, WebModules  # pyright: ignore[reportPrivateUsage]

    container.secrets.override({"auth": {"jwt": p.Secret(TEST_JWT_SECRET)}})
    container.wire(modules=WebModules)

    return _create_app(
        config=GradepadWebSettings(**container.config.web.gradepad()),
        env=DeploymentEnvironment.Test,
    )


@pytest.fixture
def engine(tmp_path: Path) -> t.Generator[sqlalchemy.Engine]:
    """A fresh SQLite database holding the full schema."""
    eng = sqlalchemy.create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'gradepad.db'}",
        connect_args={"check_same_thread": False},
    )
    sqlalchemy.event.listen(eng, "connect", register_foreign_keys)
    metadata.create_all(eng)

    yield eng

    eng.dispose()


@pytest.fixture
def session_factory(engine: sqlalchemy.Engine) -> t.Callable[[], Session]:
    """Sessions configured like production ones: no autobegin, no expiry on commit."""

    def create_session() -> Session:
        return Session(bind=engine, autobegin=False, expire_on_commit=False, autoflush=False)

    return create_session


@pytest.fixture
def db_session(session_factory: t.Callable[[], Session]) -> t.Generator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(app: FastAPI, container: GradepadContainer, db_session: Session) -> t.Generator[TestClient]:
    """TestClient whose requests run on the test's database session."""
    container.storage().persistent().session.override(db_session)

    with TestClient(app) as test_client:
        yield test_client

    container.storage().persistent().session.reset_override()


@pytest.fixture
def grading_settings() -> GradingSettings:
    return GradingSettings(default_min=0, default_max=100, label_suffix=" G.I", display_precision=2)


@pytest.fixture
def policy(db_session: Session) -> RosterPolicy:
    return RosterPolicy(db_session)


@pytest.fixture
def activity_factory(db_session: Session) -> t.Callable[..., Activity]:
    """Factory fixture for creating activities."""
    counter = iter(range(100, 10_000))

    def create_activity(
        name: str = "Essay",
        course_id: int = 1,
        activity_id: int | None = None,
        natively_graded: bool = False,
    ) -> Activity:
        with db_session.begin():
            return roster_store.create_activity(
                activity_id=ActivityID(activity_id if activity_id is not None else next(counter)),
                course_id=CourseID(course_id),
                name=name,
                natively_graded=natively_graded,
                session=db_session,
            )

    return create_activity


@pytest.fixture
def person_factory(db_session: Session) -> t.Callable[..., Person]:
    """Factory fixture for creating people, optionally enrolled in a course."""
    counter = iter(range(1000, 100_000))

    def create_person(
        full_name: str = "Test Person",
        person_id: int | None = None,
        course_id: int | None = None,
        role: EnrollmentRole = EnrollmentRole.Student,
    ) -> Person:
        with db_session.begin():
            person = roster_store.create_person(
                person_id=PersonID(person_id if person_id is not None else next(counter)),
                full_name=full_name,
                session=db_session,
            )
            if course_id is not None:
                roster_store.enroll(
                    course_id=CourseID(course_id), person_id=person.person_id, role=role, session=db_session
                )
            return person

    return create_person


class Roster(t.NamedTuple):
    """A course with one gradable activity, one grader and three students."""

    activity: Activity
    native_activity: Activity
    grader: Person
    students: tuple[Person, ...]
    outsider: Person


@pytest.fixture
def roster(activity_factory: t.Callable[..., Activity], person_factory: t.Callable[..., Person]) -> Roster:
    activity = activity_factory(name="Essay", course_id=1, activity_id=10)
    native = activity_factory(name="Quiz", course_id=1, activity_id=11, natively_graded=True)
    grader = person_factory("Grace Hopper", person_id=1, course_id=1, role=EnrollmentRole.Grader)
    students = (
        person_factory("Ada Lovelace", person_id=2, course_id=1),
        person_factory("Charles Babbage", person_id=3, course_id=1),
        person_factory("Alan Turing", person_id=4, course_id=1),
    )
    # enrolled elsewhere
    outsider = person_factory("Edsger Dijkstra", person_id=5, course_id=2)
    return Roster(activity=activity, native_activity=native, grader=grader, students=students, outsider=outsider)


@pytest.fixture
def jwt_manager() -> JWTManager:
    return JWTManager(p.Secret(TEST_JWT_SECRET))


@pytest.fixture
def auth_headers(jwt_manager: JWTManager, roster: Roster) -> dict[str, str]:
    """Bearer headers for the roster's grader."""
    return {"Authorization": f"Bearer {jwt_manager.create_access_token(roster.grader.person_id)}"}
