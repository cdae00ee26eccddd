import datetime

from sqlalchemy import ForeignKey, func, Integer, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass

from gradepad.model import ActivityID, CourseID, LinkID, PersonID, ResourceID, SubjectID

metadata = MetaData()


class base(MappedAsDataclass, DeclarativeBase):
    metadata = metadata
    type_annotation_map = {
        CourseID: Integer(),
        ActivityID: Integer(),
        PersonID: Integer(),
        SubjectID: Integer(),
        ResourceID: Integer(),
        LinkID: Integer(),
    }


# Roster


class activities(base):
    __tablename__ = "activities"

    activity_id: Mapped[ActivityID] = mapped_column(primary_key=True, autoincrement=False)
    course_id: Mapped[CourseID] = mapped_column(index=True)
    name: Mapped[str]
    natively_graded: Mapped[bool] = mapped_column(default=False)


class people(base):
    __tablename__ = "people"

    person_id: Mapped[PersonID] = mapped_column(primary_key=True, autoincrement=False)
    full_name: Mapped[str]


class enrollments(base):
    __tablename__ = "enrollments"

    course_id: Mapped[CourseID] = mapped_column(primary_key=True)
    person_id: Mapped[PersonID] = mapped_column(ForeignKey("people.person_id", ondelete="CASCADE"), primary_key=True)
    role: Mapped[str]


# Grading


class grade_resources(base):
    __tablename__ = "grade_resources"

    resource_id: Mapped[ResourceID] = mapped_column(primary_key=True, autoincrement=True, init=False)
    label: Mapped[str]
    min_value: Mapped[float]
    max_value: Mapped[float]
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class grading_links(base):
    __tablename__ = "grading_links"

    link_id: Mapped[LinkID] = mapped_column(primary_key=True, autoincrement=True, init=False)
    # the uniqueness constraint is what serializes concurrent activations
    activity_id: Mapped[ActivityID] = mapped_column(unique=True)
    # no foreign key: a resource deleted out from under the link must leave the
    # link behind so that it can be detected and repaired
    resource_id: Mapped[ResourceID]
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class grade_records(base):
    __tablename__ = "grade_records"

    resource_id: Mapped[ResourceID] = mapped_column(
        ForeignKey("grade_resources.resource_id", ondelete="CASCADE"), primary_key=True
    )
    subject_id: Mapped[SubjectID] = mapped_column(primary_key=True)
    value: Mapped[float | None] = mapped_column(default=None)
    update_time: Mapped[datetime.datetime] = mapped_column(
        default=None, server_default=func.now(), onupdate=func.now()
    )
