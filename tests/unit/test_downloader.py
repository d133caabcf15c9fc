"""Unit tests for ArtifactDownloader — latest selection, reuse, transfer errors."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest
from botocore.exceptions import ClientError

from devrefresh.core.credentials import CredentialStore
from devrefresh.core.downloader import ArtifactDownloader, select_latest
from devrefresh.core.site_config import SiteConfigResolver
from devrefresh.errors import (
    ConfigurationError,
    ErrorKind,
    NotFoundError,
    OperationCancelled,
    SiteNotConfiguredError,
    TransferError,
)
from devrefresh.models.artifacts import RemoteArtifact
from devrefresh.models.sites import SiteConfig

from tests.conftest import BASE_TIME, FakeS3Client, ScriptedPrompter


def _artifact(key: str, days: int) -> RemoteArtifact:
    return RemoteArtifact(key=key, last_modified=BASE_TIME + timedelta(days=days))


class _DiskFullBody:
    """Yields one chunk, then fails the way a full disk does."""

    def __init__(self) -> None:
        self._sent = False

    def read(self, size: int = -1) -> bytes:
        if self._sent:
            raise OSError(28, "No space left on device")
        self._sent = True
        return b"partial"


class _DiskFullOnceS3Client(FakeS3Client):
    """The first transfer breaks off mid-stream; later ones succeed."""

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        response = super().get_object(Bucket=Bucket, Key=Key)
        if len(self.get_calls) == 1:
            return {"Body": _DiskFullBody()}
        return response


def _downloader(
    tmp_path: Path,
    s3: FakeS3Client,
    sites: dict[str, SiteConfig],
    prompter: ScriptedPrompter | None = None,
    transfers: list[RemoteArtifact] | None = None,
) -> ArtifactDownloader:
    return ArtifactDownloader(
        SiteConfigResolver(sites),
        CredentialStore(tmp_path / "home", prompter or ScriptedPrompter()),
        tmp_path / "downloads",
        client_factory=lambda: s3,
        on_transfer=transfers.append if transfers is not None else None,
    )


# ---------------------------------------------------------------------------
# Test: select_latest
# ---------------------------------------------------------------------------


class TestSelectLatest:
    """The newest object by last-modified time is the only one ever picked."""

    def test_picks_maximum_timestamp(self):
        artifacts = [_artifact("a", 1), _artifact("c", 3), _artifact("b", 2)]
        assert select_latest(artifacts).key == "c"

    def test_single_object(self):
        assert select_latest([_artifact("only", 0)]).key == "only"

    def test_tie_goes_to_last_listed(self):
        artifacts = [_artifact("first", 5), _artifact("second", 5), _artifact("old", 1)]
        assert select_latest(artifacts).key == "second"

    def test_empty_listing_is_not_found(self):
        with pytest.raises(NotFoundError):
            select_latest([])


# ---------------------------------------------------------------------------
# Test: ensure_latest_artifact
# ---------------------------------------------------------------------------


class TestEnsureLatestArtifact:

    def test_downloads_newest_object(self, tmp_path, s3, sites, aws_credentials):
        downloader = _downloader(tmp_path, s3, sites)
        path = downloader.ensure_latest_artifact("default")

        assert path == tmp_path / "downloads" / "chq-2024-01-03.sql.gz"
        assert path.read_bytes() == b"newest dump"
        assert s3.get_calls == [("chq-db", "chq-2024-01-03.sql.gz")]

    def test_uses_site_bucket(self, tmp_path, s3, sites, aws_credentials):
        downloader = _downloader(tmp_path, s3, sites)
        path = downloader.ensure_latest_artifact("blog")

        assert path.name == "blog-2024-01-05.sql.gz"
        assert s3.list_calls == ["chq-blog-db"]

    def test_second_call_reuses_local_file(self, tmp_path, s3, sites, aws_credentials):
        transfers: list[RemoteArtifact] = []
        downloader = _downloader(tmp_path, s3, sites, transfers=transfers)

        first = downloader.ensure_latest_artifact("default")
        second = downloader.ensure_latest_artifact("default")

        assert first == second
        assert len(s3.get_calls) == 1
        assert [a.key for a in transfers] == ["chq-2024-01-03.sql.gz"]

    def test_existing_file_is_trusted(self, tmp_path, s3, sites, aws_credentials):
        existing = tmp_path / "downloads" / "chq-2024-01-03.sql.gz"
        existing.parent.mkdir()
        existing.write_bytes(b"local copy")

        path = _downloader(tmp_path, s3, sites).ensure_latest_artifact("default")

        assert path.read_bytes() == b"local copy"
        assert s3.get_calls == []

    def test_pagination_is_exhausted(self, tmp_path, sites, aws_credentials):
        s3 = FakeS3Client()
        s3.add_objects(
            "chq-db",
            [(f"dump-{i}.sql.gz", BASE_TIME + timedelta(hours=i), b"x") for i in range(5)],
            per_page=2,
        )
        path = _downloader(tmp_path, s3, sites).ensure_latest_artifact("default")
        assert path.name == "dump-4.sql.gz"

    def test_empty_bucket_is_not_found(self, tmp_path, sites, aws_credentials):
        s3 = FakeS3Client()
        s3.add_objects("chq-db", [])

        with pytest.raises(NotFoundError) as exc_info:
            _downloader(tmp_path, s3, sites).ensure_latest_artifact("default")
        assert "chq-db" in str(exc_info.value)
        assert exc_info.value.site_id == "default"

    def test_missing_bucket_is_configuration_error(self, tmp_path, s3, aws_credentials):
        sites = {"default": SiteConfig(site_id="default")}
        with pytest.raises(ConfigurationError, match="No remote bucket"):
            _downloader(tmp_path, s3, sites).ensure_latest_artifact("default")

    def test_unknown_site(self, tmp_path, s3, sites, aws_credentials):
        with pytest.raises(SiteNotConfiguredError):
            _downloader(tmp_path, s3, sites).ensure_latest_artifact("nope")

    def test_listing_failure_is_transfer_error(self, tmp_path, s3, sites, aws_credentials):
        s3.list_error = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "ListObjectsV2"
        )
        with pytest.raises(TransferError, match="chq-db"):
            _downloader(tmp_path, s3, sites).ensure_latest_artifact("default")

    def test_download_failure_leaves_no_partial_file(self, tmp_path, s3, sites, aws_credentials):
        del s3.bodies[("chq-db", "chq-2024-01-03.sql.gz")]
        downloader = _downloader(tmp_path, s3, sites)

        with pytest.raises(TransferError):
            downloader.ensure_latest_artifact("default")
        assert not (tmp_path / "downloads" / "chq-2024-01-03.sql.gz").exists()

    def test_interrupted_write_is_not_reused(self, tmp_path, sites, aws_credentials):
        s3 = _DiskFullOnceS3Client()
        s3.add_objects("chq-db", [("chq.sql.gz", BASE_TIME, b"complete dump")])
        downloader = _downloader(tmp_path, s3, sites)

        with pytest.raises(OSError):
            downloader.ensure_latest_artifact("default")
        downloads = tmp_path / "downloads"
        assert not (downloads / "chq.sql.gz").exists()
        assert not (downloads / "chq.sql.gz.part").exists()

        path = downloader.ensure_latest_artifact("default")
        assert path.read_bytes() == b"complete dump"
        assert len(s3.get_calls) == 2

    def test_declined_credentials_cancel_before_listing(self, tmp_path, s3, sites):
        prompter = ScriptedPrompter(confirms=[False])
        with pytest.raises(OperationCancelled):
            _downloader(tmp_path, s3, sites, prompter=prompter).ensure_latest_artifact("default")
        assert s3.list_calls == []


class TestFetchLatest:
    """The tagged-result form reports failures instead of raising them."""

    def test_success(self, tmp_path, s3, sites, aws_credentials):
        resolution = _downloader(tmp_path, s3, sites).fetch_latest("default")
        assert resolution.ok
        assert resolution.unwrap().name == "chq-2024-01-03.sql.gz"

    def test_not_found_is_tagged(self, tmp_path, sites, aws_credentials):
        s3 = FakeS3Client()
        s3.add_objects("chq-db", [])
        resolution = _downloader(tmp_path, s3, sites).fetch_latest("default")

        assert not resolution.ok
        assert resolution.kind == ErrorKind.NOT_FOUND
        with pytest.raises(NotFoundError):
            resolution.unwrap()
