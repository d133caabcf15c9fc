"""Refresh pipeline stages and the fixed stage sequences built from them.

Usage::

    from devrefresh.stages import build_pipeline

    stages = build_pipeline("dev-refresh")
"""

from __future__ import annotations

from devrefresh.stages.base import BaseStage, RunContext, StageExecutionError
from devrefresh.stages.database import (
    CleanupArtifactStage,
    DeployStage,
    DownloadStage,
    ImportDatabaseStage,
)
from devrefresh.stages.environment import (
    BuildFrontendAssetsStage,
    EnableDevModeStage,
    InstallDependenciesStage,
    LoginLinkStage,
    StartEnvironmentStage,
)

# ---------------------------------------------------------------------------
# Pipeline name -> ordered stage classes
# ---------------------------------------------------------------------------

PIPELINES: dict[str, list[type[BaseStage]]] = {
    "dev-refresh": [
        InstallDependenciesStage,
        StartEnvironmentStage,
        DownloadStage,
        ImportDatabaseStage,
        CleanupArtifactStage,
        DeployStage,
        BuildFrontendAssetsStage,
        EnableDevModeStage,
        LoginLinkStage,
    ],
    "database-refresh-local": [
        DownloadStage,
        ImportDatabaseStage,
        CleanupArtifactStage,
        DeployStage,
    ],
    "database-download": [
        DownloadStage,
    ],
}


def build_pipeline(name: str) -> list[BaseStage]:
    """Instantiate the stages of the named pipeline, in order."""
    try:
        stage_classes = PIPELINES[name]
    except KeyError:
        raise KeyError(
            f"Unknown pipeline {name!r}. Available: {sorted(PIPELINES)}"
        ) from None
    return [cls() for cls in stage_classes]


__all__ = [
    "BaseStage",
    "BuildFrontendAssetsStage",
    "CleanupArtifactStage",
    "DeployStage",
    "DownloadStage",
    "EnableDevModeStage",
    "ImportDatabaseStage",
    "InstallDependenciesStage",
    "LoginLinkStage",
    "PIPELINES",
    "RunContext",
    "StageExecutionError",
    "StartEnvironmentStage",
    "build_pipeline",
]
