__all__ = [
    "AuthSettings",
    "GradepadWebSettings",
    "GradingSettings",
    "LoggingSettings",
    "Secrets",
    "Settings",
    "StorageSettings",
    "WebSettings",
]


from .grading import GradingSettings
from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .storage import StorageSettings
from .web import AuthSettings, GradepadWebSettings, WebSettings
