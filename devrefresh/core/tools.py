"""Thin wrappers around the external tools a refresh delegates to.

Nothing here makes decisions: each method builds one command line (or a
fixed pair of them) and runs it, turning a non-zero exit into
``ExternalToolError``.
"""

from __future__ import annotations

import gzip
import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from devrefresh.config import Settings
from devrefresh.errors import ExternalToolError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class CommandRunner:
    """Runs commands in the foreground, inheriting the terminal.

    Parameters
    ----------
    cwd:
        Default working directory for commands that don't pass one.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd

    def run(self, argv: Sequence[str], *, cwd: Path | None = None) -> int:
        """Run *argv* and return its exit code (always 0 on return)."""
        command = [str(arg) for arg in argv]
        workdir = cwd or self.cwd
        logger.info("$ %s", " ".join(command))
        try:
            completed = subprocess.run(command, cwd=workdir, check=False)
        except OSError as exc:
            raise ExternalToolError(
                f"Unable to run '{command[0]}': {exc}", command=command
            ) from exc

        if completed.returncode != 0:
            raise ExternalToolError(
                f"Command '{' '.join(command)}' exited with status {completed.returncode}.",
                command=command,
                returncode=completed.returncode,
            )
        return completed.returncode

    def pipe_gzip(self, argv: Sequence[str], source: Path, *, cwd: Path | None = None) -> int:
        """Decompress *source* and stream it into the stdin of *argv*."""
        command = [str(arg) for arg in argv]
        workdir = cwd or self.cwd
        logger.info("$ zcat %s | %s", source, " ".join(command))
        try:
            process = subprocess.Popen(command, cwd=workdir, stdin=subprocess.PIPE)
        except OSError as exc:
            raise ExternalToolError(
                f"Unable to run '{command[0]}': {exc}", command=command
            ) from exc

        try:
            with gzip.open(source, "rb") as dump:
                shutil.copyfileobj(dump, process.stdin, _CHUNK_SIZE)
        except (OSError, EOFError) as exc:
            process.kill()
            process.wait()
            raise ExternalToolError(
                f"Unable to stream {source} into '{command[0]}': {exc}", command=command
            ) from exc
        finally:
            if process.stdin and not process.stdin.closed:
                process.stdin.close()

        returncode = process.wait()
        if returncode != 0:
            raise ExternalToolError(
                f"Command '{' '.join(command)}' exited with status {returncode}.",
                command=command,
                returncode=returncode,
            )
        return returncode


class LocalTools:
    """The Composer, Lando, Drush and MySQL invocations a refresh needs."""

    def __init__(self, settings: Settings, runner: CommandRunner | None = None) -> None:
        self.settings = settings
        self.runner = runner or CommandRunner(cwd=settings.project_root)

    def _lando(self, *args: str) -> list[str]:
        return [*self.settings.lando_command, *args]

    def install_dependencies(self) -> None:
        self.runner.run(self.settings.composer_command)

    def start_environment(self) -> None:
        self.runner.run(self._lando("start"))

    def import_database(self, dump: Path) -> None:
        self.runner.run(self._lando("db-import", str(dump)))

    def deploy(self, site_id: str) -> None:
        """Run ``drush deploy`` then a second full ``config:import``.

        The second import picks up configuration of modules the deploy
        enabled or disabled (config_split).
        """
        site_dir = self.settings.site_dir(site_id)
        self.runner.run(self._lando("drush", "deploy", "--yes"), cwd=site_dir)
        self.runner.run(self._lando("drush", "config:import", "--yes"), cwd=site_dir)

    def build_frontend_assets(self) -> bool:
        """Run the configured front-end build; return False if none is set."""
        command = self.settings.frontend_build_command
        if not command:
            logger.info("No front-end build command configured; skipping.")
            return False
        workdir = self.settings.frontend_build_dir
        if workdir is not None and not workdir.is_absolute():
            workdir = self.settings.project_root / workdir
        self.runner.run(command, cwd=workdir)
        return True

    def login_link(self, site_id: str, uri: str | None = None) -> None:
        """Ask Drush for a one-time login link.

        With a *uri* the command runs through Lando; without one, Drush is
        called directly from the site directory.
        """
        site_dir = self.settings.site_dir(site_id)
        if uri is not None:
            self.runner.run(self._lando("drush", "user:login", f"--uri={uri}"), cwd=site_dir)
        else:
            self.runner.run([*self.settings.drush_command, "user:login"], cwd=site_dir)

    # ------------------------------------------------------------------
    # Tugboat preview database
    # ------------------------------------------------------------------

    def _mysql(self, *args: str) -> list[str]:
        s = self.settings
        return [
            "mysql",
            "-h", s.tugboat_db_host,
            "-u", s.tugboat_db_user,
            f"-p{s.tugboat_db_password}",
            *args,
        ]

    def recreate_database(self, name: str) -> None:
        self.runner.run(
            self._mysql("-e", f"drop database if exists `{name}`; create database `{name}`;")
        )

    def load_compressed_dump(self, dump: Path, name: str) -> None:
        self.runner.pipe_gzip(self._mysql(name), dump)
