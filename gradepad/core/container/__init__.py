__all__ = [
    "AuthContainer",
    "BootConfiguration",
    "GradepadContainer",
    "GradingContainer",
    "StorageContainer",
]

from .auth import AuthContainer
from .gradepad import BootConfiguration, GradepadContainer
from .grading import GradingContainer
from .storage import StorageContainer
