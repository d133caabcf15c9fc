"""Stage state and pipeline outcome enums."""

from __future__ import annotations

from enum import Enum


class StageState(str, Enum):
    """State of one stage within a single pipeline pass."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"


class Outcome(str, Enum):
    """Overall result of a pipeline invocation."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
