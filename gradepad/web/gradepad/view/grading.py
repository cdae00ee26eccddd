"""Wire models for the grading endpoints. Field names are camelCase on the wire."""

from __future__ import annotations

import datetime
import typing as t

import pydantic as p
from pydantic.alias_generators import to_camel

from gradepad.model import ActivityID, BaseModel, GradeEntry, GradeResource, GradingSheet, ResourceID, SheetMode, \
    SheetRow, SubjectID


class WireModel(BaseModel):
    model_config = p.ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivateResponse(WireModel):
    success: t.Literal[True] = True
    resource_id: ResourceID


class GradeEntryRequest(WireModel):
    subject_id: SubjectID
    value: float

    def to_entry(self) -> GradeEntry:
        return GradeEntry(subject_id=self.subject_id, value=self.value)


class SyncGradesRequest(WireModel):
    """A batch of grades. ``activityId`` is optional; when present it must match the path."""

    activity_id: ActivityID | None = None
    entries: list[GradeEntryRequest]


class SyncGradesResponse(WireModel):
    success: t.Literal[True] = True
    updated_count: int
    applied_subjects: list[SubjectID]


class ResourceView(WireModel):
    resource_id: ResourceID
    label: str
    min: float
    max: float
    create_time: datetime.datetime

    @classmethod
    def from_model(cls, resource: GradeResource) -> ResourceView:
        return cls(
            resource_id=resource.resource_id,
            label=resource.label,
            min=resource.min_value,
            max=resource.max_value,
            create_time=resource.create_time,
        )


class SheetRowView(WireModel):
    subject_id: SubjectID
    full_name: str
    grade: str


class GradingSheetResponse(WireModel):
    activity_id: ActivityID
    activity_name: str
    mode: SheetMode
    enable_label: str | None = None
    resource: ResourceView | None = None
    rows: list[SheetRowView] = []

    @classmethod
    def from_model(cls, sheet: GradingSheet) -> GradingSheetResponse:
        return cls(
            activity_id=sheet.activity_id,
            activity_name=sheet.activity_name,
            mode=sheet.mode,
            enable_label=sheet.enable_label,
            resource=ResourceView.from_model(sheet.resource) if sheet.resource else None,
            rows=[SheetRowView(subject_id=r.subject_id, full_name=r.full_name, grade=r.grade) for r in sheet.rows],
        )

    def to_model(self) -> GradingSheet:
        resource = None
        if self.resource is not None:
            resource = GradeResource(
                resource_id=self.resource.resource_id,
                label=self.resource.label,
                min_value=self.resource.min,
                max_value=self.resource.max,
                create_time=self.resource.create_time,
            )
        return GradingSheet(
            activity_id=self.activity_id,
            activity_name=self.activity_name,
            mode=self.mode,
            enable_label=self.enable_label,
            resource=resource,
            rows=tuple(SheetRow(subject_id=r.subject_id, full_name=r.full_name, grade=r.grade) for r in self.rows),
        )
