"""AWS credential presence check and interactive bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from devrefresh.core.prompts import Prompter
from devrefresh.errors import OperationCancelled

logger = logging.getLogger(__name__)

_PROFILE = "default"


class CredentialStore:
    """Owns ``~/.aws/credentials`` for the S3 snapshot download.

    Parameters
    ----------
    home:
        The operator's home directory (``$HOME``).
    prompter:
        Used only when the credentials file has to be created.
    """

    def __init__(self, home: Path, prompter: Prompter) -> None:
        self.config_dir = home / ".aws"
        self.credentials_path = self.config_dir / "credentials"
        self._prompter = prompter

    def is_present(self) -> bool:
        return self.config_dir.is_dir() and self.credentials_path.is_file()

    def ensure(self) -> Path:
        """Return the credentials path, creating it interactively if needed.

        Raises ``OperationCancelled`` if the operator declines to configure
        credentials; nothing is written in that case.
        """
        if self.is_present():
            return self.credentials_path

        if not self._prompter.confirm(
            "AWS S3 credentials not detected. Do you wish to configure them?"
        ):
            raise OperationCancelled("AWS credential setup declined.")

        access_key_id = self._prompter.ask("AWS Access Key ID")
        secret_access_key = self._prompter.ask_secret("AWS Secret Access Key")

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_path.write_text(
            "\n".join([
                f"[{_PROFILE}]",
                f"aws_access_key_id = {access_key_id}",
                f"aws_secret_access_key = {secret_access_key}",
                "",
            ]),
            encoding="utf-8",
        )
        os.chmod(self.credentials_path, 0o600)
        logger.info("Wrote AWS credentials to %s", self.credentials_path)
        return self.credentials_path
