"""Main entry point for the grading web application."""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import gradepad
from gradepad.core import BootConfiguration, di, GradepadContainer
from gradepad.core.config.web import GradepadWebSettings
from gradepad.model import DeploymentEnvironment

from .route import router

BootEnvVar = "__Gradepad_BOOT"

WebModules = (
    "gradepad.auth.jwt",
    "gradepad.web.gradepad.main",
    "gradepad.web.gradepad.dependencies",
    "gradepad.web.gradepad.route.grading",
)


@di.inject
def _create_app(
    config: GradepadWebSettings = di.Provide["config.web.gradepad", di.as_(GradepadWebSettings)],
    env: DeploymentEnvironment = di.Provide["env"],
) -> FastAPI:
    app = FastAPI(
        title="Gradepad",
        description="Ad-hoc per-activity grading",
        version=gradepad.__version__,
    )

    if env is DeploymentEnvironment.Local and config.frontend is not None:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                f"http://{config.frontend.host}:{config.frontend.port}",
                f"http://localhost:{config.frontend.port}",
            ],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)
    return app


def create_app() -> FastAPI:
    """Factory function for uvicorn.

    Under ``web serve`` the boot configuration arrives through the environment
    and a container is booted here; otherwise the caller has booted one already.
    """
    boot_vars = os.getenv(BootEnvVar)
    if boot_vars:
        boot_cf = BootConfiguration.model_validate_json(boot_vars)
        ct = GradepadContainer()
        GradepadContainer.boot(ct, **dict(boot_cf))
        ct.wire(modules=WebModules)
        return _create_app(config=GradepadWebSettings(**ct.config.web.gradepad()), env=boot_cf.env)
    return _create_app()

