"""devrefresh data models — all Pydantic v2, all frozen (immutable)."""

from devrefresh.models.artifacts import RemoteArtifact
from devrefresh.models.environment import EnvironmentDescription
from devrefresh.models.options import DevModeOptions
from devrefresh.models.results import MultiSiteReport, PipelineReport, Resolution
from devrefresh.models.sites import DEFAULT_SITE, SiteConfig
from devrefresh.models.stages import Outcome, StageState

__all__ = [
    # sites
    "DEFAULT_SITE",
    "SiteConfig",
    # artifacts
    "RemoteArtifact",
    # environment
    "EnvironmentDescription",
    # options
    "DevModeOptions",
    # results
    "MultiSiteReport",
    "PipelineReport",
    "Resolution",
    # stages
    "Outcome",
    "StageState",
]
