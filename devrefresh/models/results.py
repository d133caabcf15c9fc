"""Tagged results and pipeline reports.

Resolvers return a ``Resolution`` so callers can tell the failures that must
stop everything from the ones a batch loop is allowed to skip, without
catching exceptions to find out.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from devrefresh.errors import DevRefreshError, ErrorKind
from devrefresh.models.stages import Outcome, StageState

T = TypeVar("T")


class Resolution(BaseModel, Generic[T]):
    """Either a resolved value or the failure that prevented it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: T | None = None
    error: DevRefreshError | None = None

    @classmethod
    def success(cls, value: T) -> Resolution[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: DevRefreshError) -> Resolution[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, or raise the recorded failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class PipelineReport(BaseModel):
    """Outcome of one single-site pipeline run."""

    model_config = ConfigDict(frozen=True)

    pipeline: str
    site_id: str
    outcome: Outcome
    stage_states: dict[str, StageState] = Field(default_factory=dict)
    failed_stage: str | None = None
    error: str | None = None
    result: dict[str, Any] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.outcome == Outcome.SUCCEEDED

    @property
    def cancelled(self) -> bool:
        return self.outcome == Outcome.CANCELLED


class MultiSiteReport(BaseModel):
    """Outcome of the lenient every-site remote refresh loop."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    site_states: dict[str, StageState] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None
    result: dict[str, Any] = Field(default_factory=dict)

    @property
    def completed_sites(self) -> list[str]:
        return [
            site for site, state in self.site_states.items()
            if state == StageState.PASSED
        ]

    @property
    def skipped_sites(self) -> list[str]:
        return [
            site for site, state in self.site_states.items()
            if state == StageState.SKIPPED
        ]
