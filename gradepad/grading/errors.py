"""Grading error taxonomy.

Every error carries a stable ``code`` (used on the wire) and a ``detail()``
payload. The class hierarchy decides how callers react:

- ``StateError``: expected, resolved by re-fetching current state
- ``ValidationError``: bad input, shown to the user with the offending value
- ``AuthorizationError``: rejected, do not retry with the same input
- ``ConsistencyError``: stored state was broken and has been repaired
- ``TransportError``: the server could not be reached, retry is up to the user
"""

from __future__ import annotations

import math
import typing as t

from gradepad.model import ActivityID, ResourceID, SubjectID


class GradingError(Exception):
    code: t.ClassVar[str] = "GradingError"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self) -> str:
        return self.code

    def payload(self) -> dict[str, t.Any]:
        return {}

    def detail(self) -> dict[str, t.Any]:
        return {"code": self.code, "message": self.message, **self.payload()}


class StateError(GradingError):
    code = "StateError"


class AlreadyActivated(StateError):
    code = "AlreadyActivated"

    def default_message(self) -> str:
        return "Grading is already enabled for this activity"


class NotActivated(StateError):
    code = "NotActivated"

    def default_message(self) -> str:
        return "Grading has not been enabled for this activity"


class NativelyGraded(StateError):
    code = "NativelyGraded"

    def default_message(self) -> str:
        return "This activity already has its own grade"


class ValidationError(GradingError):
    code = "ValidationError"


class OutOfRange(ValidationError):
    code = "OutOfRange"

    def __init__(self, subject_id: SubjectID, value: float, min_value: float, max_value: float):
        self.subject_id = subject_id
        self.value = value
        self.min_value = min_value
        self.max_value = max_value
        super().__init__()

    def default_message(self) -> str:
        return f"{self.value} is not between {self.min_value} and {self.max_value}"

    def payload(self) -> dict[str, t.Any]:
        # NaN and infinities have no JSON form
        value: float | str = self.value if math.isfinite(self.value) else str(self.value)
        return {"subjectId": self.subject_id, "value": value, "min": self.min_value, "max": self.max_value}


class InvalidInput(ValidationError):
    """Raw text that does not parse as a number."""

    code = "InvalidInput"

    def __init__(self, subject_id: SubjectID, text: str):
        self.subject_id = subject_id
        self.text = text
        super().__init__()

    def default_message(self) -> str:
        return f"{self.text!r} is not a number"

    def payload(self) -> dict[str, t.Any]:
        return {"subjectId": self.subject_id, "text": self.text}


class InvalidBounds(ValidationError):
    """A grade resource whose minimum exceeds its maximum."""

    code = "InvalidBounds"

    def __init__(self, min_value: float, max_value: float):
        self.min_value = min_value
        self.max_value = max_value
        super().__init__()

    def default_message(self) -> str:
        return f"empty range [{self.min_value}, {self.max_value}]"

    def payload(self) -> dict[str, t.Any]:
        return {"min": self.min_value, "max": self.max_value}


class AuthorizationError(GradingError):
    code = "AuthorizationError"


class Unauthorized(AuthorizationError):
    code = "Unauthorized"

    def default_message(self) -> str:
        return "You are not allowed to grade this activity"


class NotEligible(AuthorizationError):
    code = "NotEligible"

    def __init__(self, subject_id: SubjectID):
        self.subject_id = subject_id
        super().__init__()

    def default_message(self) -> str:
        return f"Person {self.subject_id} cannot be graded for this activity"

    def payload(self) -> dict[str, t.Any]:
        return {"subjectId": self.subject_id}


class ConsistencyError(GradingError):
    code = "ConsistencyError"


class OrphanedLink(ConsistencyError):
    code = "OrphanedLink"

    def __init__(self, activity_id: ActivityID, resource_id: ResourceID):
        self.activity_id = activity_id
        self.resource_id = resource_id
        super().__init__()

    def default_message(self) -> str:
        return f"activity {self.activity_id} is linked to missing resource {self.resource_id}"

    def payload(self) -> dict[str, t.Any]:
        return {"activityId": self.activity_id, "resourceId": self.resource_id}


class UnknownActivity(GradingError):
    code = "UnknownActivity"

    def __init__(self, activity_id: ActivityID):
        self.activity_id = activity_id
        super().__init__()

    def default_message(self) -> str:
        return f"No activity {self.activity_id}"

    def payload(self) -> dict[str, t.Any]:
        return {"activityId": self.activity_id}


class TransportError(GradingError):
    code = "TransportError"

    def default_message(self) -> str:
        return "Could not reach the grading service"


Errors: dict[str, type[GradingError]] = {
    cls.code: cls
    for cls in (
        AlreadyActivated,
        NotActivated,
        NativelyGraded,
        OutOfRange,
        InvalidInput,
        InvalidBounds,
        Unauthorized,
        NotEligible,
        OrphanedLink,
        UnknownActivity,
    )
}


def from_detail(detail: t.Mapping[str, t.Any]) -> GradingError:
    """Rebuild an error from its wire ``detail()``. Unknown codes become a plain GradingError."""
    code = detail.get("code")
    message = detail.get("message")
    message = message if isinstance(message, str) else None
    cls = Errors.get(code) if isinstance(code, str) else None

    err: GradingError
    if cls is None:
        err = GradingError(message)
    elif cls is OutOfRange:
        value = detail.get("value")
        err = OutOfRange(
            detail["subjectId"], float(value) if value is not None else math.nan, detail["min"], detail["max"]
        )
    elif cls is InvalidInput:
        err = InvalidInput(detail["subjectId"], detail.get("text", ""))
    elif cls is InvalidBounds:
        err = InvalidBounds(detail["min"], detail["max"])
    elif cls is NotEligible:
        err = NotEligible(detail["subjectId"])
    elif cls is OrphanedLink:
        err = OrphanedLink(detail["activityId"], detail["resourceId"])
    elif cls is UnknownActivity:
        err = UnknownActivity(detail["activityId"])
    else:
        err = cls(message)

    if message is not None:
        err.message = message
        err.args = (message,)
    return err
