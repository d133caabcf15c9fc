"""Runtime configuration — env-driven, loaded once at startup.

Settings come from three places, highest priority first:

1. Values passed explicitly (the CLI passes the parsed project file here).
2. ``DEVREFRESH_*`` environment variables or a ``.env`` file.
3. Field defaults.

The per-site mapping lives in the project file (``devrefresh.yml`` by
default)::

    database_s3_bucket: example-prod-db     # legacy key for the default site
    sites:
      default:
        bucket: example-prod-db
      blog:
        bucket: example-blog-db
        database: blog

The resulting ``Settings`` object is handed to every component's constructor;
nothing reads configuration from global state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from devrefresh.errors import ConfigurationError
from devrefresh.models.sites import DEFAULT_SITE, SiteConfig

DEFAULT_CONFIG_FILE = Path("devrefresh.yml")


class Settings(BaseSettings):
    """Process-wide settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export DEVREFRESH_LOG_LEVEL=DEBUG
        export DEVREFRESH_DOCROOT=docroot
        export DEVREFRESH_TUGBOAT_DB_HOST=mariadb
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DEVREFRESH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Project layout
    project_root: Path = Field(default_factory=Path.cwd)
    docroot: Path = Path("web")
    environment_file: Path = Path(".lando.yml")
    download_dir: Path | None = None
    local_domain_suffix: str = ".lndo.site"

    # The operator's home directory ($HOME), used to locate ~/.aws/credentials.
    home: Path = Field(default_factory=Path.home)

    # Sites, keyed by site directory name, in declared order.
    sites: dict[str, SiteConfig] = Field(default_factory=dict)

    # External commands
    composer_command: list[str] = ["composer", "install"]
    lando_command: list[str] = ["lando"]
    drush_command: list[str] = ["../../../vendor/bin/drush"]
    frontend_build_command: list[str] = []
    frontend_build_dir: Path | None = None

    # Tugboat preview database
    tugboat_db_host: str = "mariadb"
    tugboat_db_user: str = "tugboat"
    tugboat_db_password: str = "tugboat"

    @property
    def drupal_root(self) -> Path:
        return self.project_root / self.docroot

    @property
    def sites_dir(self) -> Path:
        return self.drupal_root / "sites"

    @property
    def environment_path(self) -> Path:
        return self.project_root / self.environment_file

    @property
    def artifact_dir(self) -> Path:
        return self.download_dir if self.download_dir is not None else self.project_root

    @property
    def credentials_dir(self) -> Path:
        return self.home / ".aws"

    @property
    def credentials_path(self) -> Path:
        return self.credentials_dir / "credentials"

    def site_dir(self, site_id: str) -> Path:
        return self.sites_dir / site_id


def parse_sites(document: dict[str, Any]) -> dict[str, SiteConfig]:
    """Build the ordered site mapping from a decoded project file."""
    raw_sites = document.get("sites") or {}
    if not isinstance(raw_sites, dict):
        raise ConfigurationError("'sites' must be a mapping of site name to settings.")

    sites: dict[str, SiteConfig] = {}
    for site_id, values in raw_sites.items():
        values = values or {}
        if not isinstance(values, dict):
            raise ConfigurationError(
                f"Settings for site '{site_id}' must be a mapping.", site_id=str(site_id)
            )
        sites[str(site_id)] = SiteConfig(site_id=str(site_id), **values)

    legacy_bucket = document.get("database_s3_bucket")
    if legacy_bucket and DEFAULT_SITE not in sites:
        sites = {
            DEFAULT_SITE: SiteConfig(site_id=DEFAULT_SITE, remote_bucket=legacy_bucket),
            **sites,
        }
    return sites


def load_settings(config_file: Path | None = None, **overrides: Any) -> Settings:
    """Read the project file (if any) and build ``Settings``.

    A missing default project file is fine; a missing file the operator
    named explicitly, or one that is not valid YAML, is a configuration error.
    """
    path = config_file or DEFAULT_CONFIG_FILE
    document: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Unable to parse {path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(f"{path} must contain a YAML mapping.")
        document = loaded or {}
    elif config_file is not None:
        raise ConfigurationError(f"Config file not found: {path}")

    values: dict[str, Any] = {
        key: value
        for key, value in document.items()
        if key not in ("sites", "database_s3_bucket")
    }
    values["sites"] = parse_sites(document)
    values.update(overrides)

    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings in {path}: {exc}") from exc
