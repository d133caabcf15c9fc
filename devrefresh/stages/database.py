"""Database stages: download, import, cleanup, deploy.

Together they replace the local database with the newest remote snapshot
and reconcile configuration against it.
"""

from __future__ import annotations

import logging
from typing import Any

from devrefresh.stages.base import BaseStage, RunContext

logger = logging.getLogger(__name__)


class DownloadStage(BaseStage):
    """Ensures the latest snapshot for the site is on local disk."""

    @property
    def stage_id(self) -> str:
        return "download"

    @property
    def display_name(self) -> str:
        return "Database Download"

    def execute(self, context: RunContext) -> dict[str, Any]:
        path = context.services.downloader.ensure_latest_artifact(context.site_id)
        context.artifact_path = path
        return {"status": "passed", "path": str(path)}


class ImportDatabaseStage(BaseStage):
    """``lando db-import <dump>``."""

    @property
    def stage_id(self) -> str:
        return "import_database"

    @property
    def display_name(self) -> str:
        return "Database Import"

    def execute(self, context: RunContext) -> dict[str, Any]:
        dump = context.require_artifact()
        context.services.tools.import_database(dump)
        return {"status": "passed", "path": str(dump)}


class CleanupArtifactStage(BaseStage):
    """Deletes the downloaded dump once it has been imported."""

    @property
    def stage_id(self) -> str:
        return "cleanup_artifact"

    @property
    def display_name(self) -> str:
        return "Delete Database Dump"

    def execute(self, context: RunContext) -> dict[str, Any]:
        dump = context.require_artifact()
        logger.info("Deleting %s", dump)
        dump.unlink(missing_ok=True)
        context.artifact_path = None
        return {"status": "passed", "deleted": str(dump)}


class DeployStage(BaseStage):
    """``drush deploy`` followed by a second ``drush config:import``."""

    @property
    def stage_id(self) -> str:
        return "deploy"

    @property
    def display_name(self) -> str:
        return "Drush Deploy"

    def execute(self, context: RunContext) -> dict[str, Any]:
        context.services.tools.deploy(context.site_id)
        return {"status": "passed"}
