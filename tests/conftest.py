"""Shared test fixtures for devrefresh."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
from botocore.exceptions import ClientError

from devrefresh.config import Settings
from devrefresh.core.services import RefreshServices
from devrefresh.core.tools import CommandRunner
from devrefresh.errors import ExternalToolError
from devrefresh.models.sites import SiteConfig

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

SETTINGS_TEMPLATE_TEXT = """<?php
$settings['container_yamls'][] = DRUPAL_ROOT . '/sites/development.services.yml';
# $settings['cache']['bins']['render'] = 'cache.backend.null';
# $settings['cache']['bins']['dynamic_page_cache'] = 'cache.backend.null';
# $settings['cache']['bins']['page'] = 'cache.backend.null';
$settings['skip_permissions_hardening'] = TRUE;
"""

SERVICES_TEMPLATE_TEXT = """parameters:
  http.response.debug_cacheability_headers: true
services:
  cache.backend.null:
    class: Drupal\\Core\\Cache\\NullBackendFactory
"""


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakePaginator:
    def __init__(self, client: FakeS3Client) -> None:
        self._client = client

    def paginate(self, Bucket: str) -> Any:  # noqa: N803 - boto3 keyword
        self._client.list_calls.append(Bucket)
        if self._client.list_error is not None:
            raise self._client.list_error
        yield from self._client.pages.get(Bucket, [])


class FakeS3Client:
    """In-memory stand-in for the parts of an S3 client the downloader uses."""

    def __init__(self) -> None:
        self.pages: dict[str, list[dict[str, Any]]] = {}
        self.bodies: dict[tuple[str, str], bytes] = {}
        self.get_calls: list[tuple[str, str]] = []
        self.list_calls: list[str] = []
        self.list_error: Exception | None = None

    def add_objects(
        self, bucket: str, objects: Sequence[tuple[str, datetime, bytes]], per_page: int = 1000
    ) -> None:
        entries = [
            {"Key": key, "LastModified": modified, "Size": len(body)}
            for key, modified, body in objects
        ]
        pages = [
            {"Contents": entries[i:i + per_page]}
            for i in range(0, len(entries), per_page)
        ] or [{"KeyCount": 0}]
        self.pages[bucket] = pages
        for key, _, body in objects:
            self.bodies[(bucket, key)] = body

    def get_paginator(self, operation: str) -> FakePaginator:
        assert operation == "list_objects_v2"
        return FakePaginator(self)

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        self.get_calls.append((Bucket, Key))
        try:
            body = self.bodies[(Bucket, Key)]
        except KeyError:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject"
            ) from None
        return {"Body": io.BytesIO(body)}


class ScriptedPrompter:
    """Answers prompts from pre-loaded queues and records what was asked."""

    def __init__(self, confirms: Sequence[bool] = (), answers: Sequence[str] = ()) -> None:
        self.confirms = list(confirms)
        self.answers = list(answers)
        self.asked: list[str] = []
        self.warnings: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.confirms.pop(0)

    def ask(self, message: str) -> str:
        self.asked.append(message)
        return self.answers.pop(0)

    def ask_secret(self, message: str) -> str:
        self.asked.append(message)
        return self.answers.pop(0)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


class RecordingRunner(CommandRunner):
    """Records commands instead of running them.

    ``fail_when`` receives the argv and returns True to simulate a
    non-zero exit.
    """

    def __init__(self, fail_when: Callable[[list[str]], bool] | None = None) -> None:
        super().__init__()
        self.calls: list[tuple[list[str], Path | None]] = []
        self.piped: list[tuple[list[str], Path]] = []
        self._fail_when = fail_when

    def _check(self, command: list[str]) -> None:
        if self._fail_when is not None and self._fail_when(command):
            raise ExternalToolError(
                f"Command '{' '.join(command)}' exited with status 1.",
                command=command,
                returncode=1,
            )

    def run(self, argv: Sequence[str], *, cwd: Path | None = None) -> int:
        command = [str(a) for a in argv]
        self.calls.append((command, cwd))
        self._check(command)
        return 0

    def pipe_gzip(self, argv: Sequence[str], source: Path, *, cwd: Path | None = None) -> int:
        command = [str(a) for a in argv]
        self.piped.append((command, source))
        self._check(command)
        return 0

    @property
    def commands(self) -> list[list[str]]:
        return [command for command, _ in self.calls]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A project tree with Drupal's example dev-mode templates in place."""
    root = tmp_path / "project"
    sites = root / "web" / "sites"
    (sites / "default").mkdir(parents=True)
    (sites / "example.settings.local.php").write_text(SETTINGS_TEMPLATE_TEXT)
    (sites / "development.services.yml").write_text(SERVICES_TEMPLATE_TEXT)
    return root


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def aws_credentials(home_dir: Path) -> Path:
    """Pre-existing ~/.aws/credentials so no prompt is needed."""
    path = home_dir / ".aws" / "credentials"
    path.parent.mkdir()
    path.write_text("[default]\naws_access_key_id = x\naws_secret_access_key = y\n")
    return path


@pytest.fixture
def sites() -> dict[str, SiteConfig]:
    return {
        "default": SiteConfig(site_id="default", remote_bucket="chq-db"),
        "blog": SiteConfig(site_id="blog", remote_bucket="chq-blog-db", database_name="blog"),
    }


@pytest.fixture
def settings(project_root: Path, home_dir: Path, sites: dict[str, SiteConfig]) -> Settings:
    return Settings(project_root=project_root, home=home_dir, sites=sites)


@pytest.fixture
def s3() -> FakeS3Client:
    client = FakeS3Client()
    client.add_objects(
        "chq-db",
        [
            ("chq-2024-01-01.sql.gz", BASE_TIME, b"old dump"),
            ("chq-2024-01-03.sql.gz", BASE_TIME + timedelta(days=2), b"newest dump"),
            ("chq-2024-01-02.sql.gz", BASE_TIME + timedelta(days=1), b"middle dump"),
        ],
    )
    client.add_objects(
        "chq-blog-db",
        [("blog-2024-01-05.sql.gz", BASE_TIME + timedelta(days=4), b"blog dump")],
    )
    return client


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def services(
    settings: Settings,
    prompter: ScriptedPrompter,
    runner: RecordingRunner,
    s3: FakeS3Client,
) -> RefreshServices:
    """Services wired to fakes: no terminal, no network, no subprocesses."""
    return RefreshServices(
        settings,
        prompter=prompter,
        runner=runner,
        client_factory=lambda: s3,
    )


@pytest.fixture
def lando_file(project_root: Path) -> Callable[[str], Path]:
    """Factory fixture: write ``.lando.yml`` with the given YAML text."""

    def _write(text: str) -> Path:
        path = project_root / ".lando.yml"
        path.write_text(text)
        return path

    return _write
