"""FastAPI dependency providers for the grading web application."""

import typing as t

from fastapi import Depends
from sqlalchemy.orm import Session

from gradepad.core import di
from gradepad.core.config import GradingSettings
from gradepad.grading import Policy

PolicyFactory = t.Callable[[Session], Policy]


@di.inject
def get_session(
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> Session:
    """Database session for the request, shared by everything that depends on it."""
    return session


@di.inject
def get_policy(
    session: Session = Depends(get_session),
    factory: PolicyFactory = Depends(di.Provide["grading.policy_factory"]),
) -> Policy:
    """Grading policy bound to the request's session."""
    return factory(session)


@di.inject
def get_grading_settings(
    settings: GradingSettings = Depends(di.Provide["grading.settings"]),
) -> GradingSettings:
    return settings
