"""Refresh pipeline — runs a fixed stage sequence for one site, fail-fast.

The pipeline is a straight line, not a graph. Each stage either passes, in
which case the next one starts, or stops the run:

- a ``DevRefreshError`` marks the stage FAILED and the run FAILED;
- ``OperationCancelled`` marks the stage CANCELLED and the run CANCELLED.

Stages after the stopping point stay NOT_STARTED. Nothing is rolled back.

``refresh_remote_sites`` is the one lenient loop: it walks every configured
site and skips (with a warning) any site whose snapshot cannot be found.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from devrefresh.core.services import RefreshServices
from devrefresh.errors import DevRefreshError, NotFoundError, OperationCancelled
from devrefresh.models.results import MultiSiteReport, PipelineReport
from devrefresh.models.sites import DEFAULT_SITE
from devrefresh.models.stages import Outcome, StageState
from devrefresh.stages import BaseStage, RunContext, build_pipeline

logger = logging.getLogger(__name__)

_REMOTE_PIPELINE = "database-refresh-remote-multi"


class RefreshPipeline:
    """Runs refresh pipelines against the collaborators in *services*.

    Parameters
    ----------
    services:
        Components built from the process settings.
    """

    def __init__(self, services: RefreshServices) -> None:
        self.services = services

    # ------------------------------------------------------------------
    # Single-site pipelines
    # ------------------------------------------------------------------

    def run(
        self,
        name: str,
        site_id: str = DEFAULT_SITE,
        stages: Sequence[BaseStage] | None = None,
    ) -> PipelineReport:
        """Run the named pipeline (or the explicit *stages*) for *site_id*."""
        stage_list = list(stages) if stages is not None else build_pipeline(name)
        context = RunContext(site_id, self.services)
        states = {stage.stage_id: StageState.NOT_STARTED for stage in stage_list}
        result: dict[str, Any] = {}

        logger.info("Starting %s for site %s", name, site_id)
        for stage in stage_list:
            states[stage.stage_id] = StageState.RUNNING
            try:
                result = stage.run_stage(context)
            except OperationCancelled as exc:
                states[stage.stage_id] = StageState.CANCELLED
                logger.warning("%s cancelled at %s: %s", name, stage.stage_id, exc.reason)
                return PipelineReport(
                    pipeline=name,
                    site_id=site_id,
                    outcome=Outcome.CANCELLED,
                    stage_states=states,
                    error=exc.reason,
                )
            except DevRefreshError as exc:
                states[stage.stage_id] = StageState.FAILED
                logger.error("%s failed: %s", name, exc)
                return PipelineReport(
                    pipeline=name,
                    site_id=site_id,
                    outcome=Outcome.FAILED,
                    stage_states=states,
                    failed_stage=stage.stage_id,
                    error=str(exc),
                )
            states[stage.stage_id] = StageState.PASSED

        return PipelineReport(
            pipeline=name,
            site_id=site_id,
            outcome=Outcome.SUCCEEDED,
            stage_states=states,
            result=result,
        )

    def dev_refresh(self, site_id: str = DEFAULT_SITE) -> PipelineReport:
        return self.run("dev-refresh", site_id)

    def database_download(self, site_id: str = DEFAULT_SITE) -> PipelineReport:
        return self.run("database-download", site_id)

    def database_refresh_local(self, site_id: str = DEFAULT_SITE) -> PipelineReport:
        return self.run("database-refresh-local", site_id)

    # ------------------------------------------------------------------
    # Every-site remote refresh
    # ------------------------------------------------------------------

    def refresh_remote_sites(self) -> MultiSiteReport:
        """Reload every configured site's database on the preview host.

        Per site: download -> recreate database -> gunzip into mysql ->
        delete dump. A site without a bucket or without any snapshot is
        skipped with a warning; every other failure stops the loop.
        """
        services = self.services
        site_states: dict[str, StageState] = {
            site_id: StageState.NOT_STARTED for site_id, _ in services.sites.enumerate_all()
        }
        warnings: list[str] = []
        result: dict[str, Any] = {}

        for site_id, site in services.sites.enumerate_all():
            site_states[site_id] = StageState.RUNNING

            if not site.remote_bucket:
                message = f"No remote bucket configured for site '{site_id}'; skipping."
                logger.warning(message)
                warnings.append(message)
                site_states[site_id] = StageState.SKIPPED
                continue

            try:
                resolution = services.downloader.fetch_latest(site_id)
            except OperationCancelled as exc:
                site_states[site_id] = StageState.CANCELLED
                return self._multi_report(
                    Outcome.CANCELLED, site_states, warnings, result, exc.reason
                )

            if not resolution.ok:
                if isinstance(resolution.error, NotFoundError):
                    message = f"Skipping site '{site_id}': {resolution.error}"
                    logger.warning(message)
                    warnings.append(message)
                    site_states[site_id] = StageState.SKIPPED
                    continue
                site_states[site_id] = StageState.FAILED
                logger.error("%s failed: %s", _REMOTE_PIPELINE, resolution.error)
                return self._multi_report(
                    Outcome.FAILED, site_states, warnings, result, str(resolution.error)
                )

            dump = resolution.unwrap()
            database = site.effective_database_name
            try:
                services.tools.recreate_database(database)
                logger.info("Importing %s into database %s", dump, database)
                services.tools.load_compressed_dump(dump, database)
            except DevRefreshError as exc:
                exc.with_context(site_id=site_id, stage="load_database")
                site_states[site_id] = StageState.FAILED
                logger.error("%s failed: %s", _REMOTE_PIPELINE, exc)
                return self._multi_report(
                    Outcome.FAILED, site_states, warnings, result, str(exc)
                )

            logger.info("Deleting %s", dump)
            dump.unlink(missing_ok=True)
            site_states[site_id] = StageState.PASSED
            result = {"status": "passed", "site_id": site_id, "database": database}

        return self._multi_report(Outcome.SUCCEEDED, site_states, warnings, result)

    @staticmethod
    def _multi_report(
        outcome: Outcome,
        site_states: dict[str, StageState],
        warnings: list[str],
        result: dict[str, Any],
        error: str | None = None,
    ) -> MultiSiteReport:
        return MultiSiteReport(
            outcome=outcome,
            site_states=site_states,
            warnings=warnings,
            error=error,
            result=result,
        )
