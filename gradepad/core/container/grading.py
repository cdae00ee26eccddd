from __future__ import annotations

import typing as t

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Object, Provider, Singleton
from sqlalchemy.orm import Session

from gradepad.grading.policy import Policy, RosterPolicy

from ..config.grading import GradingSettings


class GradingContainer(DeclarativeContainer):
    config: Configuration = Configuration()

    settings: Provider[GradingSettings] = Singleton(GradingSettings, config)
    # called with the request's session; override to plug in another roster source
    policy_factory: Provider[t.Callable[[Session], Policy]] = Object(RosterPolicy)
