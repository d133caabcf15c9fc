"""Front-end development mode: local settings overrides for one site.

Enabling copies Drupal core's example files into the site directory and
rewrites them; any customisation of the generated files is lost. Re-running
``enable`` always reproduces the same content from the templates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from devrefresh.config import Settings
from devrefresh.core.prompts import Prompter
from devrefresh.errors import ConfigurationError, OperationCancelled
from devrefresh.models.options import DevModeOptions

logger = logging.getLogger(__name__)

SETTINGS_TEMPLATE = "example.settings.local.php"
SERVICES_TEMPLATE = "development.services.yml"
SETTINGS_FILE = "settings.local.php"
SERVICES_FILE = "fe.development.services.yml"

TWIG_DEBUG_CONFIG: dict[str, bool] = {
    "debug": True,
    "auto_reload": True,
}


def settings_rewrite_rules(site_id: str) -> list[tuple[str, str]]:
    """Ordered (match, replacement) pairs applied to ``settings.local.php``.

    The first points ``container_yamls`` at the generated services file;
    the rest uncomment the render, dynamic page and page cache-bin overrides.
    """
    return [
        (
            f"/sites/{SERVICES_TEMPLATE}",
            f"/sites/{site_id}/{SERVICES_FILE}",
        ),
        (
            "# $settings['cache']['bins']['render']",
            "$settings['cache']['bins']['render']",
        ),
        (
            "# $settings['cache']['bins']['dynamic_page_cache'] = ",
            "$settings['cache']['bins']['dynamic_page_cache'] = ",
        ),
        (
            "# $settings['cache']['bins']['page'] = ",
            "$settings['cache']['bins']['page'] = ",
        ),
    ]


def apply_rules(text: str, rules: list[tuple[str, str]]) -> str:
    for match, replacement in rules:
        text = text.replace(match, replacement)
    return text


def enable_twig_debug(services: Any) -> dict[str, Any]:
    """Return *services* with ``parameters.twig.config`` debug flags on."""
    document: dict[str, Any] = dict(services or {})
    parameters = dict(document.get("parameters") or {})
    parameters["twig.config"] = dict(TWIG_DEBUG_CONFIG)
    document["parameters"] = parameters
    return document


class DevModeToggler:
    """Enables and disables front-end development mode for a site."""

    def __init__(self, settings: Settings, prompter: Prompter) -> None:
        self.sites_dir = settings.sites_dir
        self._prompter = prompter

    def settings_path(self, site_id: str) -> Path:
        return self.sites_dir / site_id / SETTINGS_FILE

    def services_path(self, site_id: str) -> Path:
        return self.sites_dir / site_id / SERVICES_FILE

    def enable(self, site_id: str, options: DevModeOptions | None = None) -> list[Path]:
        """Generate both override files and return their paths."""
        options = options or DevModeOptions()
        settings_path = self.settings_path(site_id)
        services_path = self.services_path(site_id)

        settings_template = self.sites_dir / SETTINGS_TEMPLATE
        services_template = self.sites_dir / SERVICES_TEMPLATE
        for template in (settings_template, services_template):
            if not template.is_file():
                raise ConfigurationError(f"Template not found: {template}", site_id=site_id)

        # Render both files before touching the site directory.
        try:
            services = yaml.safe_load(services_template.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Unable to parse {services_template}: {exc}", site_id=site_id
            ) from exc
        if services is not None and not isinstance(services, dict):
            raise ConfigurationError(
                f"{services_template} must contain a YAML mapping.", site_id=site_id
            )
        services_text = yaml.safe_dump(enable_twig_debug(services), sort_keys=False)
        settings_text = apply_rules(
            settings_template.read_text(encoding="utf-8"), settings_rewrite_rules(site_id)
        )

        self._confirm_destructive(settings_path, services_path, options)

        logger.info("Enabling front-end development mode for %s", site_id)
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings_path.write_text(settings_text, encoding="utf-8")
        services_path.write_text(services_text, encoding="utf-8")
        return [settings_path, services_path]

    def disable(self, site_id: str, options: DevModeOptions | None = None) -> list[Path]:
        """Delete both override files; return the ones that existed."""
        options = options or DevModeOptions()
        settings_path = self.settings_path(site_id)
        services_path = self.services_path(site_id)

        self._confirm_destructive(settings_path, services_path, options)

        logger.info("Disabling front-end development mode for %s", site_id)
        removed: list[Path] = []
        for path in (settings_path, services_path):
            if path.exists():
                path.unlink()
                removed.append(path)
        return removed

    def _confirm_destructive(
        self, settings_path: Path, services_path: Path, options: DevModeOptions
    ) -> None:
        if options.assume_yes:
            return
        self._prompter.warn(
            f"This command will overwrite any customizations you have made to "
            f"{settings_path} and {services_path}."
        )
        if not self._prompter.confirm("This command is destructive. Do you wish to continue?"):
            raise OperationCancelled("Front-end development mode change declined.")
