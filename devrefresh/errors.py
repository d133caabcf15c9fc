"""Error hierarchy for devrefresh.

Every failure raised by a component carries an ``ErrorKind`` tag and, where
known, the site and stage it happened in, so the CLI can tell the operator
exactly what broke.

``OperationCancelled`` is deliberately *not* a ``DevRefreshError``: a human
declining a confirmation prompt is a clean early stop, never a failure.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag identifying the family of a failure."""

    CONFIGURATION = "configuration"
    AMBIGUITY = "ambiguity"
    NOT_FOUND = "not_found"
    TRANSFER = "transfer"
    EXTERNAL_TOOL = "external_tool"
    LOCAL_IO = "local_io"


class DevRefreshError(RuntimeError):
    """Base class for every failure that aborts a refresh."""

    kind: ErrorKind = ErrorKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        *,
        site_id: str | None = None,
        stage: str | None = None,
    ) -> None:
        self.message = message
        self.site_id = site_id
        self.stage = stage
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.site_id is not None:
            context.append(f"site={self.site_id}")
        if self.stage is not None:
            context.append(f"stage={self.stage}")
        if not context:
            return self.message
        return f"{self.message} [{', '.join(context)}]"

    def with_context(
        self, *, site_id: str | None = None, stage: str | None = None
    ) -> DevRefreshError:
        """Fill in missing site/stage context and return ``self``."""
        if self.site_id is None and site_id is not None:
            self.site_id = site_id
        if self.stage is None and stage is not None:
            self.stage = stage
        self.args = (self._format(),)
        return self


class ConfigurationError(DevRefreshError):
    """A required setting, file or per-site value is missing or invalid."""

    kind = ErrorKind.CONFIGURATION


class NotFoundError(DevRefreshError):
    """A requested object does not exist (empty bucket, unknown site)."""

    kind = ErrorKind.NOT_FOUND


class SiteNotConfiguredError(ConfigurationError, NotFoundError):
    """The requested site has no entry in the site mapping."""

    kind = ErrorKind.CONFIGURATION


class ResolutionAmbiguityError(DevRefreshError):
    """URI resolution produced zero or more than one candidate."""

    kind = ErrorKind.AMBIGUITY


class TransferError(DevRefreshError):
    """Listing or fetching from remote object storage failed."""

    kind = ErrorKind.TRANSFER


class ExternalToolError(DevRefreshError):
    """A delegated external command exited non-zero or could not start."""

    kind = ErrorKind.EXTERNAL_TOOL

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        site_id: str | None = None,
        stage: str | None = None,
    ) -> None:
        self.command = list(command or [])
        self.returncode = returncode
        super().__init__(message, site_id=site_id, stage=stage)


class OperationCancelled(Exception):
    """Raised when the operator declines a confirmation prompt."""

    def __init__(self, reason: str = "Operation cancelled by user.") -> None:
        self.reason = reason
        super().__init__(reason)
