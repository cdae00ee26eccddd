__all__ = [
    "BootConfiguration",
    "di",
    "GradepadContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
    "TimestampProvider",
]


from . import di
from .config import Secrets, Settings
from .container import BootConfiguration, GradepadContainer
from .provider import LoggingProvider, TimestampProvider
