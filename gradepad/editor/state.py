"""Editor fields and the local checks run on them before anything is sent."""

from __future__ import annotations

import dataclasses
import re

from gradepad.grading.errors import InvalidInput, OutOfRange, ValidationError
from gradepad.model import GradeEntry, GradeResource, SheetRow, SubjectID

# plain decimal literals only: no exponents, no nan or inf
NumberPattern = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)\s*$")


def format_bound(value: float) -> str:
    return f"{value:g}"


def invalid_message(resource: GradeResource) -> str:
    return (
        f"Please enter a valid number between {format_bound(resource.min_value)}"
        f" and {format_bound(resource.max_value)}."
    )


def is_blank(text: str) -> bool:
    return not text.strip()


def check_text(subject_id: SubjectID, text: str, resource: GradeResource) -> ValidationError | None:
    """Validate one field's text against the resource bounds. Blank text is always valid."""
    if is_blank(text):
        return None
    if not NumberPattern.match(text):
        return InvalidInput(subject_id, text)
    value = float(text)
    if not resource.contains(value):
        return OutOfRange(subject_id, value, resource.min_value, resource.max_value)
    return None


@dataclasses.dataclass
class Field:
    subject_id: SubjectID
    full_name: str
    # last value known to be saved on the server
    original: str
    # what is in the input right now
    current: str
    error: ValidationError | None = None

    @classmethod
    def from_row(cls, row: SheetRow) -> Field:
        return cls(subject_id=row.subject_id, full_name=row.full_name, original=row.grade, current=row.grade)

    @property
    def dirty(self) -> bool:
        # compared as text, so "50" and "50.00" differ
        return self.current != self.original

    @property
    def invalid(self) -> bool:
        return self.error is not None

    def pending(self) -> bool:
        """Whether this field belongs in the next batch: changed and not left empty."""
        return self.dirty and not is_blank(self.current)

    def validate(self, resource: GradeResource) -> ValidationError | None:
        self.error = check_text(self.subject_id, self.current, resource)
        return self.error

    def to_entry(self) -> GradeEntry:
        return GradeEntry(subject_id=self.subject_id, value=float(self.current))
