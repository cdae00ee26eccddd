"""Tests for gradepad.editor.editor module."""

from __future__ import annotations

import datetime
import typing as t

import anyio
import httpx
import pytest

from gradepad.editor import EditorState, GradeEditor, GradingClient, SyncFailed
from gradepad.grading.errors import AlreadyActivated, NativelyGraded, NotActivated, OutOfRange, TransportError
from gradepad.model import ActivityID, GradeEntry, GradeResource, GradingSheet, ResourceID, SheetMode, SheetRow, \
    SubjectID

ActivityId = ActivityID(10)


def make_resource(resource_id: int = 1) -> GradeResource:
    return GradeResource(
        resource_id=ResourceID(resource_id),
        label="Essay G.I",
        min_value=0,
        max_value=100,
        create_time=datetime.datetime(2026, 1, 5, 12, 0),
    )


def setup_sheet() -> GradingSheet:
    return GradingSheet(
        activity_id=ActivityId, activity_name="Essay", mode=SheetMode.Setup, enable_label="Enable Grading for Essay"
    )


def active_sheet(grades: dict[int, str] | None = None) -> GradingSheet:
    grades = grades or {}
    people = {2: "Ada Lovelace", 3: "Charles Babbage", 4: "Alan Turing"}
    return GradingSheet(
        activity_id=ActivityId,
        activity_name="Essay",
        mode=SheetMode.Active,
        resource=make_resource(),
        rows=tuple(
            SheetRow(subject_id=SubjectID(k), full_name=v, grade=grades.get(k, "")) for k, v in people.items()
        ),
    )


class FakeAPI(object):
    """In-memory stand-in for the grading client."""

    def __init__(self, sheet: GradingSheet) -> None:
        self.sheet = sheet
        self.sync_calls: list[list[GradeEntry]] = []
        self.activate_calls = 0
        self.sync_error: Exception | None = None
        self.activate_error: Exception | None = None
        # when set, sync_grades waits on it before answering
        self.gate: anyio.Event | None = None
        self.started: anyio.Event | None = None

    async def activate(self, activity_id: ActivityID) -> ResourceID:
        self.activate_calls += 1
        if self.activate_error is not None:
            raise self.activate_error
        self.sheet = active_sheet()
        assert self.sheet.resource is not None
        return self.sheet.resource.resource_id

    async def sync_grades(self, activity_id: ActivityID, entries: t.Sequence[GradeEntry]) -> int:
        self.sync_calls.append(list(entries))
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.sync_error is not None:
            raise self.sync_error
        return len(entries)

    async def get_sheet(self, activity_id: ActivityID) -> GradingSheet:
        return self.sheet


@pytest.fixture
def api() -> FakeAPI:
    return FakeAPI(active_sheet({2: "50.00"}))


@pytest.fixture
def editor(api: FakeAPI) -> GradeEditor:
    editor = GradeEditor(ActivityId, api)
    editor.load(api.sheet)
    return editor


class TestLoad(object):
    def test_active_sheet_opens_clean(self, editor: GradeEditor) -> None:
        assert editor.state is EditorState.Clean
        assert not editor.dirty
        assert not editor.can_save
        assert editor.fields[SubjectID(2)].original == "50.00"

    def test_setup_sheet(self) -> None:
        editor = GradeEditor(ActivityId, FakeAPI(setup_sheet()))
        editor.load(setup_sheet())

        assert editor.state is EditorState.Setup
        assert editor.can_activate
        assert editor.fields == {}

    @pytest.mark.anyio
    async def test_open_fetches_sheet(self, api: FakeAPI) -> None:
        editor = await GradeEditor.open(ActivityId, api)

        assert editor.state is EditorState.Clean
        assert editor.resource == make_resource()


class TestEdit(object):
    def test_edit_and_revert(self, editor: GradeEditor) -> None:
        editor.edit(SubjectID(2), "75")
        assert editor.state is EditorState.Dirty
        assert editor.can_save

        editor.edit(SubjectID(2), "50.00")
        assert editor.state is EditorState.Clean
        assert not editor.can_save

    def test_revert_one_of_two(self, editor: GradeEditor) -> None:
        editor.edit(SubjectID(3), "10")
        editor.edit(SubjectID(4), "20")

        editor.edit(SubjectID(3), "")

        assert not editor.fields[SubjectID(3)].dirty
        assert editor.fields[SubjectID(4)].dirty
        assert editor.state is EditorState.Dirty
        assert editor.can_save

    def test_equal_number_different_text(self, editor: GradeEditor) -> None:
        editor.edit(SubjectID(2), "50")

        assert editor.fields[SubjectID(2)].dirty
        assert editor.dirty
        assert editor.state is EditorState.Dirty
        assert editor.can_save

    def test_unknown_subject(self, editor: GradeEditor) -> None:
        with pytest.raises(KeyError):
            editor.edit(SubjectID(99), "1")

    def test_blur_validates(self, editor: GradeEditor) -> None:
        editor.edit(SubjectID(3), "150")

        err = editor.blur(SubjectID(3))

        assert isinstance(err, OutOfRange)
        assert editor.fields[SubjectID(3)].invalid

    def test_blur_before_activation(self) -> None:
        editor = GradeEditor(ActivityId, FakeAPI(setup_sheet()))
        editor.load(setup_sheet())

        with pytest.raises(NotActivated):
            editor.blur(SubjectID(2))

    def test_visible_filters_by_name(self, editor: GradeEditor) -> None:
        assert [f.full_name for f in editor.visible("  al ")] == ["Alan Turing"]
        assert [f.full_name for f in editor.visible("a")] == ["Ada Lovelace", "Charles Babbage", "Alan Turing"]
        assert len(editor.visible()) == 3
        assert editor.visible("zzz") == ()

    def test_filter_does_not_touch_edits(self, editor: GradeEditor) -> None:
        editor.edit(SubjectID(3), "80")
        editor.visible("ada")

        assert editor.fields[SubjectID(3)].current == "80"
        assert editor.dirty


class TestSave(object):
    @pytest.mark.anyio
    async def test_sends_only_changed_fields(self, editor: GradeEditor, api: FakeAPI) -> None:
        editor.edit(SubjectID(3), "80")
        editor.edit(SubjectID(4), " 92.5 ")

        outcome = await editor.save()

        assert outcome.ok and outcome.sent
        assert outcome.updated_count == 2
        assert [(e.subject_id, e.value) for e in api.sync_calls[0]] == [(3, 80.0), (4, 92.5)]
        assert editor.state is EditorState.Clean
        assert editor.fields[SubjectID(3)].original == "80"

    @pytest.mark.anyio
    async def test_nothing_to_send(self, editor: GradeEditor, api: FakeAPI) -> None:
        outcome = await editor.save()

        assert not outcome.sent
        assert outcome.ok
        assert api.sync_calls == []

    @pytest.mark.anyio
    async def test_cleared_fields_are_left_out(self, editor: GradeEditor, api: FakeAPI) -> None:
        editor.edit(SubjectID(2), "")
        editor.edit(SubjectID(3), "70")

        await editor.save()

        assert [e.subject_id for e in api.sync_calls[0]] == [3]
        # the cleared field still differs from what the server has
        assert editor.fields[SubjectID(2)].dirty
        assert editor.state is EditorState.Dirty

    @pytest.mark.anyio
    async def test_invalid_fields_block_the_save(self, editor: GradeEditor, api: FakeAPI) -> None:
        editor.edit(SubjectID(3), "101")
        editor.edit(SubjectID(4), "ninety")
        editor.edit(SubjectID(2), "60")

        outcome = await editor.save()

        assert not outcome.sent
        assert outcome.invalid == (3, 4)
        assert outcome.message == "Please enter a valid number between 0 and 100."
        assert api.sync_calls == []
        assert editor.state is EditorState.Dirty
        # nothing was dropped
        assert editor.fields[SubjectID(2)].current == "60"

    @pytest.mark.anyio
    async def test_single_flight(self, editor: GradeEditor, api: FakeAPI) -> None:
        api.gate, api.started = anyio.Event(), anyio.Event()
        started = api.started
        editor.edit(SubjectID(3), "80")
        outcomes = []

        async def first() -> None:
            outcomes.append(await editor.save())

        async with anyio.create_task_group() as tg:
            tg.start_soon(first)
            await started.wait()

            assert editor.state is EditorState.Saving
            assert not editor.can_save
            second = await editor.save()
            assert not second.sent

            # typed while the save was in flight
            editor.edit(SubjectID(4), "55")
            api.gate.set()

        assert len(api.sync_calls) == 1
        assert outcomes[0].updated_count == 1
        assert editor.fields[SubjectID(3)].original == "80"
        assert editor.state is EditorState.Dirty
        assert editor.fields[SubjectID(4)].dirty

    @pytest.mark.anyio
    async def test_server_rejection(self, editor: GradeEditor, api: FakeAPI) -> None:
        api.sync_error = SyncFailed(OutOfRange(SubjectID(4), 80, 0, 50), applied=(SubjectID(3),))
        editor.edit(SubjectID(3), "30")
        editor.edit(SubjectID(4), "80")

        outcome = await editor.save()

        assert outcome.sent and not outcome.ok
        assert isinstance(outcome.error, SyncFailed)
        assert editor.state is EditorState.Dirty
        assert editor.last_error is outcome.error
        assert editor.can_save
        # what was written is unknown to the fields until the sheet is fetched again
        assert editor.fields[SubjectID(3)].original == ""

    @pytest.mark.anyio
    async def test_retry_after_transport_error(self, editor: GradeEditor, api: FakeAPI) -> None:
        api.sync_error = TransportError()
        editor.edit(SubjectID(3), "30")
        await editor.save()
        assert editor.state is EditorState.Error

        api.sync_error = None
        outcome = await editor.save()

        assert outcome.ok
        assert editor.state is EditorState.Clean
        assert editor.last_error is None

    @pytest.mark.anyio
    async def test_malformed_success_reply(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>ok</html>")

        client = GradingClient("http://gradepad.test", "token-123", transport=httpx.MockTransport(handler))
        editor = GradeEditor(ActivityId, client)
        editor.load(active_sheet())
        editor.edit(SubjectID(3), "30")

        outcome = await editor.save()

        assert isinstance(outcome.error, TransportError)
        assert editor.state is EditorState.Error
        assert editor.can_save

    @pytest.mark.anyio
    async def test_save_in_setup(self) -> None:
        editor = GradeEditor(ActivityId, FakeAPI(setup_sheet()))
        editor.load(setup_sheet())

        with pytest.raises(NotActivated):
            await editor.save()


class TestActivate(object):
    @pytest.mark.anyio
    async def test_moves_into_active_states(self) -> None:
        api = FakeAPI(setup_sheet())
        editor = await GradeEditor.open(ActivityId, api)

        resource_id = await editor.activate()

        assert resource_id == 1
        assert editor.state is EditorState.Clean
        assert set(editor.fields) == {2, 3, 4}
        assert not editor.can_activate

    @pytest.mark.anyio
    async def test_lost_race_counts_as_success(self) -> None:
        api = FakeAPI(setup_sheet())
        editor = await GradeEditor.open(ActivityId, api)
        # someone else got there first
        api.sheet = active_sheet({3: "12.00"})
        api.activate_error = AlreadyActivated()

        resource_id = await editor.activate()

        assert resource_id == 1
        assert editor.state is EditorState.Clean
        assert editor.fields[SubjectID(3)].original == "12.00"

    @pytest.mark.anyio
    async def test_failure_returns_to_setup(self) -> None:
        api = FakeAPI(setup_sheet())
        api.activate_error = TransportError()
        editor = await GradeEditor.open(ActivityId, api)

        with pytest.raises(TransportError):
            await editor.activate()

        assert editor.state is EditorState.Setup
        assert isinstance(editor.last_error, TransportError)
        assert editor.can_activate

    @pytest.mark.anyio
    async def test_natively_graded(self) -> None:
        sheet = setup_sheet().model_copy(update={"mode": SheetMode.Unavailable, "enable_label": None})
        editor = await GradeEditor.open(ActivityId, FakeAPI(sheet))

        assert not editor.can_activate
        with pytest.raises(NativelyGraded):
            await editor.activate()

    @pytest.mark.anyio
    async def test_already_active(self, editor: GradeEditor, api: FakeAPI) -> None:
        with pytest.raises(AlreadyActivated):
            await editor.activate()

        assert api.activate_calls == 0
