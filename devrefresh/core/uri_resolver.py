"""Derive a site's reachable URL from the Lando environment description.

Precedence, first match wins:

1. ``proxy.appserver`` — the multi-site proxy map. A site must be named, and
   exactly one proxy domain may contain it.
2. ``DRUSH_OPTIONS_URI`` in the appserver environment overrides — returned
   verbatim.
3. ``http://<name><local domain suffix>``.

The description is re-read on every call.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from devrefresh.errors import ConfigurationError, DevRefreshError, ResolutionAmbiguityError
from devrefresh.models.environment import EnvironmentDescription
from devrefresh.models.results import Resolution
from devrefresh.models.sites import DEFAULT_SITE

logger = logging.getLogger(__name__)


class EnvironmentUriResolver:
    """Resolves site URIs from ``.lando.yml``.

    Parameters
    ----------
    description_path:
        Path to the environment description document.
    local_domain_suffix:
        Appended to the environment name for the fallback URI.
    """

    def __init__(self, description_path: Path, local_domain_suffix: str = ".lndo.site") -> None:
        self.description_path = description_path
        self.local_domain_suffix = local_domain_suffix

    def load_description(self) -> EnvironmentDescription:
        """Parse the description document; absence or bad shape is fatal."""
        path = self.description_path
        try:
            document = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ConfigurationError(f"Environment description not found: {path}") from None
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Unable to parse {path}: {exc}") from exc

        try:
            return EnvironmentDescription.from_document(document)
        except (ValueError, ValidationError) as exc:
            raise ConfigurationError(f"Malformed environment description {path}: {exc}") from exc

    def resolve_uri(self, site_id: str = DEFAULT_SITE) -> str:
        description = self.load_description()
        uri = self.select_uri(description, site_id)
        logger.debug("Resolved URI for site %s: %s", site_id, uri)
        return uri

    def try_resolve(self, site_id: str = DEFAULT_SITE) -> Resolution[str]:
        try:
            return Resolution.success(self.resolve_uri(site_id))
        except DevRefreshError as exc:
            return Resolution.failure(exc.with_context(site_id=site_id))

    def select_uri(self, description: EnvironmentDescription, site_id: str) -> str:
        """Apply the precedence rules to an already-parsed description."""
        if description.proxy_domains is not None:
            return self._from_proxy_map(description.proxy_domains, site_id)

        if description.uri_override:
            return description.uri_override

        return f"http://{description.name}{self.local_domain_suffix}"

    @staticmethod
    def _from_proxy_map(domains: list[str], site_id: str) -> str:
        if not site_id or site_id == DEFAULT_SITE:
            raise ResolutionAmbiguityError(
                "Multi-site detected, but no site specified.", site_id=site_id
            )

        matches = [domain for domain in domains if site_id in domain]
        if len(matches) > 1:
            raise ResolutionAmbiguityError(
                f"More than one possible URI found: {', '.join(matches)}.",
                site_id=site_id,
            )
        if not matches:
            # TODO: confirm with the product owner whether an unmatched site
            # should fall back to DRUSH_OPTIONS_URI instead of failing.
            raise ResolutionAmbiguityError(
                f"Unable to determine URI: no proxy domain contains '{site_id}'.",
                site_id=site_id,
            )
        return f"http://{matches[0]}"
