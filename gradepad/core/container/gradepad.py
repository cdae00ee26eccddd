from __future__ import annotations

import datetime
import os
import sys
import types
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import gradepad
from gradepad.model import BaseModel, DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady
from ..provider import LoggingProvider, TimestampProvider
from .auth import AuthContainer
from .grading import GradingContainer
from .storage import StorageContainer


class BootConfiguration(BaseModel):
    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    secrets_path: p.AnyUrl | None = None
    override: tuple[str, ...]


class GradepadContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, logging=logging, root=root
    )
    auth: Provider[AuthContainer] = Container(
        AuthContainer,
        config=config.web.gradepad.auth,
        secrets=secrets.auth,
    )
    grading: Provider[GradingContainer] = Container(GradingContainer, config=config.grading)

    utcnow: Provider[TimestampProvider] = Object(lambda: datetime.datetime.now(datetime.UTC))

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: GradepadContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        secrets_path: p.AnyUrl | None = None,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        ps = Settings(env=env, root=config_root, override=override or ())
        ct.config.from_pydantic(ps)
        ct.wire(packages=["gradepad"])
        if wiring:
            ct.wire(modules=wiring)
        if imported := [mod for name, mod in sys.modules.items() if name.startswith("gradepad.")]:
            ct.wire(modules=imported)

        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(os.path.dirname(gradepad.__file__)).parent)

        logger = ct.logging().get_logger()
        for ov in ps.override:
            k, v = ov.split("=", 1)
            logger.info(
                "overriding configuration parameter",
                extra={
                    "key": k,
                    "value": v,
                },
            )

        secrets = Secrets(env=env, root=secrets_path or config_root)
        ct.secrets.from_pydantic(secrets)

        logger.debug(
            "configuration finished",
            extra={
                "config": str(config_root),
                "env": env.value,
            },
        )
        ct._boot_config.override(
            BootConfiguration(
                debug=debug, env=env, config_root=config_root, secrets_path=secrets_path, override=override or ()
            )
        )
