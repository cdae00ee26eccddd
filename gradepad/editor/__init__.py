__all__ = [
    "EditorState",
    "Field",
    "GradeEditor",
    "GradingAPI",
    "GradingClient",
    "SaveOutcome",
    "SyncFailed",
]

from .client import GradingClient, SyncFailed
from .editor import EditorState, GradeEditor, GradingAPI, SaveOutcome
from .state import Field
