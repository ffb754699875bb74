from __future__ import annotations

from pathlib import Path

import pytest

from shipit.core.config import PublishConfig, SentryConfig
from shipit.release import commands


def test_sync_branch_hard_resets_to_origin() -> None:
    assert commands.sync_branch("staging") == [
        ("git", "fetch"),
        ("git", "checkout", "staging"),
        ("git", "pull"),
        ("git", "reset", "--hard", "origin/staging"),
    ]


def test_tag_release() -> None:
    assert commands.tag_release("1.2.4") == [
        ("git", "tag", "-f", "v1.2.4"),
        ("git", "push", "--tags"),
    ]


def test_commit_message() -> None:
    assert commands.commit_release("1.2.4") == ("git", "commit", "-m", "Release version 1.2.4")


def test_sentry_commands_without_org() -> None:
    sentry = SentryConfig()
    assert commands.sentry_register(sentry, "1.2.4") == [
        ("sentry-cli", "releases", "new", "1.2.4"),
        ("sentry-cli", "releases", "set-commits", "--auto", "1.2.4"),
    ]
    assert commands.sentry_finalize(sentry, "1.2.4") == (
        "sentry-cli",
        "releases",
        "finalize",
        "1.2.4",
    )


def test_sentry_commands_with_org_and_project(tmp_path: Path) -> None:
    sentry = SentryConfig(org="acme", project="desktop", files=("bundles/app.js",))

    uploads = commands.sentry_upload_sources(sentry, "2.0.0", tmp_path)

    base = ("sentry-cli", "releases", "--org", "acme", "--project", "desktop")
    assert uploads == [
        (*base, "files", "2.0.0", "delete", "--all"),
        (*base, "files", "2.0.0", "upload", str(tmp_path / "bundles/app.js")),
    ]


def test_s3_upload(tmp_path: Path) -> None:
    publish = PublishConfig(bucket="cdn", prefix="/desktop/")
    path = tmp_path / "latest.yml"

    assert commands.s3_upload(publish, key="latest.yml", path=path) == (
        "aws",
        "s3",
        "cp",
        str(path),
        "s3://cdn/desktop/latest.yml",
        "--acl",
        "public-read",
    )


def test_s3_upload_requires_bucket(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        commands.s3_upload(PublishConfig(), key="x", path=tmp_path / "x")
