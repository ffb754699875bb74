"""Argv builders for the external tools the release delegates to.

Nothing here runs anything. Keeping command construction separate lets the
flow tests assert on exact command sequences.
"""

from __future__ import annotations

from pathlib import Path

from shipit.core.config import PublishConfig, SentryConfig

Command = tuple[str, ...]


# git


def stash_all() -> list[Command]:
    return [("git", "add", "-A"), ("git", "stash")]


def sync_branch(branch: str) -> list[Command]:
    """Check out ``branch`` and make it match the remote exactly."""
    return [
        ("git", "fetch"),
        ("git", "checkout", branch),
        ("git", "pull"),
        ("git", "reset", "--hard", f"origin/{branch}"),
    ]


def checkout(branch: str) -> Command:
    return ("git", "checkout", branch)


def merge(branch: str) -> Command:
    return ("git", "merge", branch)


def update_submodules() -> Command:
    return ("git", "submodule", "update", "--init", "--recursive")


def stage_all() -> Command:
    return ("git", "add", "-A")


def has_no_staged_changes() -> Command:
    # Exits 0 when the index matches HEAD.
    return ("git", "diff", "--cached", "--quiet")


def commit_release(version: str) -> Command:
    return ("git", "commit", "-m", f"Release version {version}")


def push_head() -> Command:
    return ("git", "push", "origin", "HEAD")


def tag_name(version: str) -> str:
    return f"v{version}"


def tag_release(version: str) -> list[Command]:
    return [("git", "tag", "-f", tag_name(version)), ("git", "push", "--tags")]


# sentry


def _sentry_releases(sentry: SentryConfig) -> Command:
    argv: list[str] = [sentry.cli, "releases"]
    if sentry.org:
        argv += ["--org", sentry.org]
    if sentry.project:
        argv += ["--project", sentry.project]
    return tuple(argv)


def sentry_register(sentry: SentryConfig, version: str) -> list[Command]:
    base = _sentry_releases(sentry)
    return [
        (*base, "new", version),
        (*base, "set-commits", "--auto", version),
    ]


def sentry_upload_sources(sentry: SentryConfig, version: str, root: Path) -> list[Command]:
    """Replace the release's source files with the configured bundles."""
    base = _sentry_releases(sentry)
    commands: list[Command] = [(*base, "files", version, "delete", "--all")]
    for rel in sentry.files:
        commands.append((*base, "files", version, "upload", str(root / rel)))
    return commands


def sentry_finalize(sentry: SentryConfig, version: str) -> Command:
    return (*_sentry_releases(sentry), "finalize", version)


# object storage


def s3_key(publish: PublishConfig, name: str) -> str:
    prefix = publish.prefix.strip("/")
    if prefix:
        return f"{prefix}/{name}"
    return name


def s3_upload(publish: PublishConfig, *, key: str, path: Path) -> Command:
    if not publish.bucket:
        raise ValueError("publish bucket is not configured")
    return (
        publish.cli,
        "s3",
        "cp",
        str(path),
        f"s3://{publish.bucket}/{s3_key(publish, key)}",
        "--acl",
        publish.acl,
    )
