"""Typed command options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DevModeOptions(BaseModel):
    """Options for enabling or disabling front-end development mode.

    ``assume_yes`` skips the destructive-change confirmation.
    """

    model_config = ConfigDict(frozen=True)

    assume_yes: bool = False
