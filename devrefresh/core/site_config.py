"""Resolve a site name to its configuration record."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from devrefresh.errors import ConfigurationError, DevRefreshError, SiteNotConfiguredError
from devrefresh.models.results import Resolution
from devrefresh.models.sites import SiteConfig

logger = logging.getLogger(__name__)


class SiteConfigResolver:
    """Lookup over the immutable site mapping loaded at startup.

    Parameters
    ----------
    sites:
        Mapping of site id to ``SiteConfig``, in declared order.
    """

    def __init__(self, sites: Mapping[str, SiteConfig]) -> None:
        self._sites: dict[str, SiteConfig] = dict(sites)

    def resolve(self, site_id: str) -> SiteConfig:
        """Return the config for *site_id* or raise ``SiteNotConfiguredError``."""
        try:
            return self._sites[site_id]
        except KeyError:
            configured = ", ".join(self._sites) or "none"
            raise SiteNotConfiguredError(
                f"Site '{site_id}' is not configured (configured sites: {configured}).",
                site_id=site_id,
            ) from None

    def lookup(self, site_id: str) -> Resolution[SiteConfig]:
        try:
            return Resolution.success(self.resolve(site_id))
        except DevRefreshError as exc:
            return Resolution.failure(exc)

    def require_bucket(self, site_id: str) -> str:
        """Return the remote bucket for *site_id*; a missing value is fatal."""
        site = self.resolve(site_id)
        if not site.remote_bucket:
            raise ConfigurationError(
                f"No remote bucket configured for site '{site_id}'.",
                site_id=site_id,
            )
        return site.remote_bucket

    def enumerate_all(self) -> list[tuple[str, SiteConfig]]:
        """Every configured site, in the order the project file declares them."""
        return list(self._sites.items())

    def __contains__(self, site_id: object) -> bool:
        return site_id in self._sites

    def __len__(self) -> int:
        return len(self._sites)
