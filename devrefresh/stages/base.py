"""Abstract base stage with an enforced lifecycle.

Every concrete stage inherits from BaseStage and implements only ``execute()``.
The ``run_stage()`` wrapper is **not overridable** — it logs the stage, tags
any ``DevRefreshError`` with the site and stage it came from, and records
the result on the run context for later stages.
"""

from __future__ import annotations

import abc
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, final

from devrefresh.errors import DevRefreshError, ErrorKind

if TYPE_CHECKING:
    from devrefresh.core.services import RefreshServices

logger = logging.getLogger(__name__)


class StageExecutionError(DevRefreshError):
    """Raised when a stage fails with a local OS-level error."""

    kind = ErrorKind.LOCAL_IO


class RunContext:
    """State shared by the stages of one pipeline pass.

    Parameters
    ----------
    site_id:
        The site being refreshed.
    services:
        Collaborators built once from ``Settings``.
    """

    def __init__(self, site_id: str, services: RefreshServices) -> None:
        self.site_id = site_id
        self.services = services
        self.artifact_path: Path | None = None
        self.uri: str | None = None
        self.stage_results: dict[str, dict[str, Any]] = {}

    def require_artifact(self) -> Path:
        if self.artifact_path is None:
            raise StageExecutionError(
                "No database dump available; the download stage has not run.",
                site_id=self.site_id,
            )
        return self.artifact_path


class BaseStage(abc.ABC):
    """Abstract base for all refresh stages.

    Subclasses **must** implement:
        * ``stage_id``     — unique identifier (e.g. ``"download"``).
        * ``display_name`` — heading shown to the operator.
        * ``execute(context)`` — the stage's work.

    Subclasses **must not** override ``run_stage()``.
    """

    @property
    @abc.abstractmethod
    def stage_id(self) -> str:
        """Unique stage identifier (e.g. ``'download'``)."""
        ...

    @property
    @abc.abstractmethod
    def display_name(self) -> str:
        """Human-readable heading."""
        ...

    @abc.abstractmethod
    def execute(self, context: RunContext) -> dict[str, Any]:
        """Do the stage's work and return a small result dict."""
        ...

    @final
    def run_stage(self, context: RunContext) -> dict[str, Any]:
        """Execute the stage and record its result.  **Do not override.**"""
        logger.info("%s [%s] site=%s", self.display_name, self.stage_id, context.site_id)

        try:
            result = self.execute(context)
        except DevRefreshError as exc:
            raise exc.with_context(site_id=context.site_id, stage=self.stage_id)
        except OSError as exc:
            raise StageExecutionError(
                f"{self.display_name} failed: {exc}",
                site_id=context.site_id,
                stage=self.stage_id,
            ) from exc

        context.stage_results[self.stage_id] = result
        logger.debug("%s [%s] result=%s", self.display_name, self.stage_id, result)
        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__} stage_id={self.stage_id!r}>"
