"""The grading editor: what the instructor has typed, and what the server has.

An editor opens on a grading sheet. Before the activity is activated it sits
in ``Setup``; activating moves it straight into the active states without
reopening. Once active it tracks every field's last saved text against its
current text:

    Clean --edit--> Dirty --save--> Saving --ok--> Clean
                     ^  ^             |  |
                     |  +--rejected---+  |
                     |                unreachable
                     |                   v
                     +-------edit------ Error

A rejected save leaves the originals alone, so whatever was submitted is
still dirty. An unreachable server leaves the editor in ``Error`` with save
still enabled.

Only one save is in flight at a time; asking for another while one is
pending does nothing.
"""

from __future__ import annotations

import enum
import logging
import typing as t

from gradepad.grading.errors import AlreadyActivated, GradingError, NativelyGraded, NotActivated, StateError, \
    TransportError
from gradepad.model import ActivityID, GradeEntry, GradeResource, GradingSheet, ResourceID, SheetMode, SubjectID

from .state import Field, invalid_message

logger = logging.getLogger(__name__)


class EditorState(enum.Enum):
    Setup = "setup"
    Activating = "activating"
    Clean = "clean"
    Dirty = "dirty"
    Saving = "saving"
    Error = "error"


class GradingAPI(t.Protocol):
    async def activate(self, activity_id: ActivityID) -> ResourceID: ...

    async def sync_grades(self, activity_id: ActivityID, entries: t.Sequence[GradeEntry]) -> int: ...

    async def get_sheet(self, activity_id: ActivityID) -> GradingSheet: ...


class SaveOutcome(t.NamedTuple):
    # whether a request went to the server
    sent: bool
    updated_count: int = 0
    invalid: tuple[SubjectID, ...] = ()
    message: str | None = None
    error: GradingError | None = None

    @property
    def ok(self) -> bool:
        return not self.invalid and self.error is None


class GradeEditor(object):
    def __init__(self, activity_id: ActivityID, api: GradingAPI):
        self.activity_id = activity_id
        self.api = api
        self.sheet: GradingSheet | None = None
        self.fields: dict[SubjectID, Field] = {}
        self.last_error: GradingError | None = None
        self._state = EditorState.Setup

    @classmethod
    async def open(cls, activity_id: ActivityID, api: GradingAPI) -> GradeEditor:
        editor = cls(activity_id, api)
        editor.load(await api.get_sheet(activity_id))
        return editor

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def resource(self) -> GradeResource | None:
        return self.sheet.resource if self.sheet is not None else None

    @property
    def dirty(self) -> bool:
        return any(f.dirty for f in self.fields.values())

    @property
    def can_save(self) -> bool:
        return self._state in (EditorState.Dirty, EditorState.Error) and self.dirty

    @property
    def can_activate(self) -> bool:
        return self._state is EditorState.Setup and self.sheet is not None and self.sheet.mode is SheetMode.Setup

    def load(self, sheet: GradingSheet) -> None:
        """Reset the editor to a freshly fetched sheet."""
        self.sheet = sheet
        self.last_error = None
        if sheet.mode is SheetMode.Active and sheet.resource is not None:
            self.fields = {row.subject_id: Field.from_row(row) for row in sheet.rows}
            self._state = EditorState.Clean
        else:
            self.fields = {}
            self._state = EditorState.Setup

    def _recompute(self) -> None:
        self._state = EditorState.Dirty if self.dirty else EditorState.Clean

    def _field(self, subject_id: SubjectID) -> Field:
        try:
            return self.fields[subject_id]
        except KeyError:
            raise KeyError(f"no field for subject {subject_id}") from None

    def edit(self, subject_id: SubjectID, text: str) -> None:
        field = self._field(subject_id)
        field.current = text
        # while saving, the state is settled by the save itself
        if self._state in (EditorState.Clean, EditorState.Dirty, EditorState.Error):
            self._recompute()

    def blur(self, subject_id: SubjectID) -> GradingError | None:
        """Validate a field as it loses focus. The result is also kept on the field."""
        resource = self._require_resource()
        return self._field(subject_id).validate(resource)

    def visible(self, query: str = "") -> tuple[Field, ...]:
        """Fields whose person's name contains ``query``, ignoring case."""
        needle = query.strip().casefold()
        return tuple(f for f in self.fields.values() if needle in f.full_name.casefold())

    def _require_resource(self) -> GradeResource:
        if (resource := self.resource) is None:
            raise NotActivated()
        return resource

    async def save(self) -> SaveOutcome:
        if self._state is EditorState.Saving:
            return SaveOutcome(sent=False)
        resource = self._require_resource()

        pending = [f for f in self.fields.values() if f.pending()]
        invalid = [f for f in pending if f.validate(resource) is not None]
        if invalid:
            self._recompute()
            return SaveOutcome(
                sent=False,
                invalid=tuple(f.subject_id for f in invalid),
                message=invalid_message(resource),
            )
        if not pending:
            return SaveOutcome(sent=False)

        submitted = {f.subject_id: f.current for f in pending}
        entries = [f.to_entry() for f in pending]
        self._state = EditorState.Saving
        try:
            count = await self.api.sync_grades(self.activity_id, entries)
        except TransportError as exc:
            logger.warning("grade save did not reach the server", extra={"activity_id": self.activity_id})
            self.last_error = exc
            self._state = EditorState.Error
            return SaveOutcome(sent=True, error=exc)
        except GradingError as exc:
            # rejected by the server, possibly after writing some entries
            logger.info(
                "grade save rejected",
                extra={"activity_id": self.activity_id, "code": exc.code, "submitted": len(entries)},
            )
            self.last_error = exc
            self._recompute()
            return SaveOutcome(sent=True, error=exc)
        else:
            for subject_id, text in submitted.items():
                self.fields[subject_id].original = text
            self.last_error = None
            self._recompute()
            return SaveOutcome(sent=True, updated_count=count)
        finally:
            if self._state is EditorState.Saving:
                # cancelled while waiting on the server
                self._recompute()

    async def activate(self) -> ResourceID | None:
        """Enable grading and move into the active states.

        Losing an activation race counts as success: the sheet is fetched
        again either way. Returns the resource now in use, or None if an
        activation is already in flight.
        """
        if self._state is EditorState.Activating:
            return None
        if self.sheet is not None and self.sheet.mode is SheetMode.Unavailable:
            raise NativelyGraded()
        if self._state is not EditorState.Setup:
            raise AlreadyActivated()

        self._state = EditorState.Activating
        try:
            try:
                await self.api.activate(self.activity_id)
            except AlreadyActivated:
                logger.debug("activity was activated elsewhere", extra={"activity_id": self.activity_id})
            sheet = await self.api.get_sheet(self.activity_id)
        except GradingError as exc:
            self.last_error = exc
            raise
        finally:
            if self._state is EditorState.Activating:
                self._state = EditorState.Setup

        self.load(sheet)
        if (resource := self.resource) is None:
            # the link vanished again between activating and fetching
            raise StateError("Grading could not be enabled, please try again")
        return resource.resource_id
