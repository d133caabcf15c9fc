"""Latest-snapshot download from S3.

Lifecycle of one call to ``ensure_latest_artifact``:

    ensure credentials -> resolve bucket -> list bucket (all pages)
        -> select latest -> reuse local file or stream the object

The object key doubles as the local file name. A file already on disk under
that name is trusted and reused without touching the network, so bytes are
streamed into a ``.part`` sibling and renamed only once the copy completes.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from devrefresh.core.credentials import CredentialStore
from devrefresh.core.site_config import SiteConfigResolver
from devrefresh.errors import DevRefreshError, NotFoundError, TransferError
from devrefresh.models.artifacts import RemoteArtifact
from devrefresh.models.results import Resolution

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def default_client_factory() -> Any:
    return boto3.client("s3")


def select_latest(artifacts: Iterable[RemoteArtifact]) -> RemoteArtifact:
    """Return the most recently modified artifact.

    Sorts ascending by ``last_modified`` and takes the last element, so ties
    go to whichever tied entry came last in the listing.
    """
    ordered = sorted(artifacts, key=lambda artifact: artifact.last_modified)
    if not ordered:
        raise NotFoundError("No database dump found in bucket.")
    return ordered[-1]


class ArtifactDownloader:
    """Fetches the newest database dump for a site.

    Parameters
    ----------
    sites:
        Resolves the site's bucket.
    credentials:
        Checked (and bootstrapped) before any S3 call.
    download_dir:
        Directory the dump is written into.
    client_factory:
        Zero-argument callable returning an S3 client. Defaults to
        ``boto3.client("s3")``; called lazily after credentials exist.
    on_transfer:
        Optional hook called with the artifact each time bytes are
        actually downloaded.
    """

    def __init__(
        self,
        sites: SiteConfigResolver,
        credentials: CredentialStore,
        download_dir: Path,
        *,
        client_factory: Callable[[], Any] = default_client_factory,
        on_transfer: Callable[[RemoteArtifact], None] | None = None,
    ) -> None:
        self._sites = sites
        self._credentials = credentials
        self.download_dir = download_dir
        self._client_factory = client_factory
        self._client: Any = None
        self._on_transfer = on_transfer

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ensure_latest_artifact(self, site_id: str) -> Path:
        """Make sure the latest dump for *site_id* is on disk and return its path.

        Raises ``OperationCancelled`` if credential setup is declined.
        """
        self._credentials.ensure()

        bucket = self._sites.require_bucket(site_id)
        try:
            latest = select_latest(self.list_artifacts(bucket))
        except NotFoundError as exc:
            raise NotFoundError(
                f"No database dump found in bucket '{bucket}'.", site_id=site_id
            ) from exc

        local_path = self.local_path_for(latest)
        if local_path.exists():
            logger.info("Reusing existing database dump %s", local_path)
            return local_path

        self._download(bucket, latest, local_path, site_id)
        return local_path

    def fetch_latest(self, site_id: str) -> Resolution[Path]:
        """Like ``ensure_latest_artifact`` but returns a tagged result."""
        try:
            return Resolution.success(self.ensure_latest_artifact(site_id))
        except DevRefreshError as exc:
            return Resolution.failure(exc.with_context(site_id=site_id))

    def list_artifacts(self, bucket: str) -> list[RemoteArtifact]:
        """List every object in *bucket*, exhausting pagination."""
        artifacts: list[RemoteArtifact] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket):
                for entry in page.get("Contents", []):
                    artifacts.append(RemoteArtifact.from_listing(entry))
        except (BotoCoreError, ClientError) as exc:
            raise TransferError(f"Unable to list bucket '{bucket}': {exc}") from exc
        logger.debug("Bucket %s holds %d objects", bucket, len(artifacts))
        return artifacts

    def local_path_for(self, artifact: RemoteArtifact) -> Path:
        return self.download_dir / artifact.key

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _download(
        self, bucket: str, artifact: RemoteArtifact, local_path: Path, site_id: str
    ) -> None:
        local_path.parent.mkdir(parents=True, exist_ok=True)
        # Only a completed transfer may appear under the artifact's own name.
        partial_path = local_path.with_name(local_path.name + ".part")
        logger.info("Downloading s3://%s/%s", bucket, artifact.key)
        try:
            response = self.client.get_object(Bucket=bucket, Key=artifact.key)
            with open(partial_path, "wb") as fh:
                shutil.copyfileobj(response["Body"], fh, _CHUNK_SIZE)
        except (BotoCoreError, ClientError) as exc:
            partial_path.unlink(missing_ok=True)
            raise TransferError(
                f"Unable to download s3://{bucket}/{artifact.key}: {exc}",
                site_id=site_id,
            ) from exc
        except BaseException:
            partial_path.unlink(missing_ok=True)
            raise
        partial_path.replace(local_path)

        logger.info("Database dump file downloaded >>> %s", local_path)
        if self._on_transfer is not None:
            self._on_transfer(artifact)
