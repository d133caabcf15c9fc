"""Stages that prepare the local environment around the database work."""

from __future__ import annotations

from typing import Any

from devrefresh.models.options import DevModeOptions
from devrefresh.stages.base import BaseStage, RunContext


class InstallDependenciesStage(BaseStage):
    """``composer install``."""

    @property
    def stage_id(self) -> str:
        return "install_dependencies"

    @property
    def display_name(self) -> str:
        return "Install Dependencies"

    def execute(self, context: RunContext) -> dict[str, Any]:
        context.services.tools.install_dependencies()
        return {"status": "passed"}


class StartEnvironmentStage(BaseStage):
    """``lando start``."""

    @property
    def stage_id(self) -> str:
        return "start_environment"

    @property
    def display_name(self) -> str:
        return "Start Environment"

    def execute(self, context: RunContext) -> dict[str, Any]:
        context.services.tools.start_environment()
        return {"status": "passed"}


class BuildFrontendAssetsStage(BaseStage):
    """Runs the project's front-end build command, if one is configured."""

    @property
    def stage_id(self) -> str:
        return "build_frontend"

    @property
    def display_name(self) -> str:
        return "Build Front-end Assets"

    def execute(self, context: RunContext) -> dict[str, Any]:
        built = context.services.tools.build_frontend_assets()
        return {"status": "passed" if built else "not_configured"}


class EnableDevModeStage(BaseStage):
    """Turns on front-end development mode without asking."""

    @property
    def stage_id(self) -> str:
        return "enable_dev_mode"

    @property
    def display_name(self) -> str:
        return "Enable Front-end Development Mode"

    def execute(self, context: RunContext) -> dict[str, Any]:
        paths = context.services.dev_mode.enable(
            context.site_id, DevModeOptions(assume_yes=True)
        )
        return {"status": "passed", "files": [str(p) for p in paths]}


class LoginLinkStage(BaseStage):
    """Resolves the site URI and asks Drush for a login link."""

    def __init__(self, use_lando: bool = True) -> None:
        self.use_lando = use_lando

    @property
    def stage_id(self) -> str:
        return "login_link"

    @property
    def display_name(self) -> str:
        return "Create Login Link"

    def execute(self, context: RunContext) -> dict[str, Any]:
        services = context.services
        if not self.use_lando:
            services.tools.login_link(context.site_id)
            return {"status": "passed", "uri": None}

        context.uri = services.uri_resolver.resolve_uri(context.site_id)
        services.tools.login_link(context.site_id, context.uri)
        return {"status": "passed", "uri": context.uri}
