__all__ = [
    "ActivityCatalog",
    "GradingPolicy",
    "Policy",
    "RosterPolicy",
    "SyncResult",
    "activate",
    "errors",
    "load_sheet",
    "sync_grades",
]

from . import errors
from .activation import activate
from .policy import ActivityCatalog, GradingPolicy, Policy, RosterPolicy
from .sheet import load_sheet
from .sync import SyncResult, sync_grades
