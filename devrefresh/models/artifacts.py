"""Remote database snapshot models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class RemoteArtifact(BaseModel):
    """One object in a snapshot bucket listing.

    ``key`` doubles as the local file name once downloaded.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    last_modified: datetime
    size: int = 0

    @classmethod
    def from_listing(cls, entry: dict[str, Any]) -> RemoteArtifact:
        """Build from one ``Contents`` entry of a ``list_objects_v2`` page."""
        return cls(
            key=entry["Key"],
            last_modified=entry["LastModified"],
            size=entry.get("Size", 0),
        )
