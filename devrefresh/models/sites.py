"""Per-site configuration records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# The site directory used when no site is given on the command line.
DEFAULT_SITE = "default"

# Database name the Tugboat preview uses for the default site.
DEFAULT_TUGBOAT_DATABASE = "tugboat"


class SiteConfig(BaseModel):
    """Configuration for one logical site of a multi-site deployment.

    Read once at startup from the project config file and never written back.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    site_id: str
    remote_bucket: str | None = Field(default=None, alias="bucket")
    database_name: str | None = Field(default=None, alias="database")

    @property
    def is_default(self) -> bool:
        return self.site_id == DEFAULT_SITE

    @property
    def effective_database_name(self) -> str:
        """Name of the database the remote refresh loop recreates."""
        if self.database_name:
            return self.database_name
        if self.is_default:
            return DEFAULT_TUGBOAT_DATABASE
        return self.site_id
