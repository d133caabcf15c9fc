"""Wires the refresh collaborators together from one ``Settings`` object."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from devrefresh.config import Settings
from devrefresh.core.credentials import CredentialStore
from devrefresh.core.dev_mode import DevModeToggler
from devrefresh.core.downloader import ArtifactDownloader, default_client_factory
from devrefresh.core.prompts import Prompter, RichPrompter
from devrefresh.core.site_config import SiteConfigResolver
from devrefresh.core.tools import CommandRunner, LocalTools
from devrefresh.core.uri_resolver import EnvironmentUriResolver


class RefreshServices:
    """Every component a pipeline stage may call, built once at startup.

    Parameters
    ----------
    settings:
        The process settings.
    prompter:
        Operator prompts. Defaults to a ``RichPrompter``.
    runner:
        Command runner for external tools.
    client_factory:
        S3 client factory for the downloader.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        prompter: Prompter | None = None,
        runner: CommandRunner | None = None,
        client_factory: Callable[[], Any] = default_client_factory,
    ) -> None:
        self.settings = settings
        self.prompter = prompter or RichPrompter()
        self.sites = SiteConfigResolver(settings.sites)
        self.credentials = CredentialStore(settings.home, self.prompter)
        self.downloader = ArtifactDownloader(
            self.sites,
            self.credentials,
            settings.artifact_dir,
            client_factory=client_factory,
        )
        self.uri_resolver = EnvironmentUriResolver(
            settings.environment_path, settings.local_domain_suffix
        )
        self.tools = LocalTools(settings, runner)
        self.dev_mode = DevModeToggler(settings, self.prompter)
