"""View models for the grading web application."""

__all__ = [
    "ActivateResponse",
    "GradeEntryRequest",
    "GradingSheetResponse",
    "ResourceView",
    "SheetRowView",
    "SyncGradesRequest",
    "SyncGradesResponse",
]

from .grading import ActivateResponse, GradeEntryRequest, GradingSheetResponse, ResourceView, SheetRowView, \
    SyncGradesRequest, SyncGradesResponse
