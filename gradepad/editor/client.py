"""Async client for the grading HTTP API."""

from __future__ import annotations

import typing as t

import httpx
import pydantic as p

from gradepad.grading.errors import from_detail, GradingError, TransportError, Unauthorized
from gradepad.model import ActivityID, GradeEntry, GradingSheet, ResourceID, SubjectID
from gradepad.web.gradepad.view.grading import ActivateResponse, GradeEntryRequest, GradingSheetResponse, \
    SyncGradesRequest, SyncGradesResponse

TModel = t.TypeVar("TModel", bound=p.BaseModel)


class SyncFailed(GradingError):
    """A grade batch stopped by ``error`` after ``applied`` entries were written."""

    code = "SyncFailed"

    def __init__(self, error: GradingError, applied: tuple[SubjectID, ...]):
        self.error = error
        self.applied = applied
        super().__init__(error.message)

    def detail(self) -> dict[str, t.Any]:
        return {**self.error.detail(), "appliedSubjects": list(self.applied)}


class GradingClient(object):
    """Talks to the grading endpoints on behalf of an editor.

    Errors reported by the server are raised as the matching
    ``gradepad.grading.errors`` class; failures to get an answer at all are
    raised as ``TransportError``.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, url: str, json: t.Any | None = None) -> t.Any:
        try:
            async with self._client() as client:
                resp = await client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or None) from exc

        if not resp.is_success:
            raise self._error(resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"HTTP {resp.status_code}: response is not JSON") from exc

    @staticmethod
    def _parse(model: type[TModel], data: t.Any) -> TModel:
        try:
            return model.model_validate(data)
        except p.ValidationError as exc:
            raise TransportError(f"unexpected {model.__name__} from server") from exc

    @staticmethod
    def _error(resp: httpx.Response) -> GradingError:
        try:
            body = resp.json()
        except ValueError:
            body = None
        detail = body.get("detail") if isinstance(body, dict) else None
        if not isinstance(detail, dict):
            if resp.status_code == 401:
                return Unauthorized(detail if isinstance(detail, str) else None)
            # not one of ours, e.g. a proxy error page
            return TransportError(f"HTTP {resp.status_code}: {detail or resp.reason_phrase}")

        error = from_detail(detail)
        if "appliedSubjects" in detail:
            return SyncFailed(error, tuple(SubjectID(s) for s in detail["appliedSubjects"]))
        return error

    async def activate(self, activity_id: ActivityID) -> ResourceID:
        data = await self._request("POST", f"/api/activities/{activity_id}/grading/activate")
        return self._parse(ActivateResponse, data).resource_id

    async def sync_grades(self, activity_id: ActivityID, entries: t.Sequence[GradeEntry]) -> int:
        """Send a batch of grades, returning the number written.

        Raises:
            SyncFailed: the batch stopped early; ``error`` is the reason and
                ``applied`` lists the subjects already written
        """
        request = SyncGradesRequest(
            activity_id=activity_id,
            entries=[GradeEntryRequest(subject_id=e.subject_id, value=e.value) for e in entries],
        )
        body = request.model_dump(mode="json")
        data = await self._request("POST", f"/api/activities/{activity_id}/grades", json=body)
        return self._parse(SyncGradesResponse, data).updated_count

    async def get_sheet(self, activity_id: ActivityID) -> GradingSheet:
        data = await self._request("GET", f"/api/activities/{activity_id}/grading")
        return self._parse(GradingSheetResponse, data).to_model()
