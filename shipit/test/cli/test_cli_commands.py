from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shipit import __version__
from shipit.cli.app import app

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "desktop", "version": "1.2.3"}, indent=2) + "\n", encoding="utf-8"
    )
    return tmp_path


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_versions_lists_candidates(project: Path) -> None:
    result = runner.invoke(app, ["versions", "--root", str(project)])

    assert result.exit_code == 0
    assert "The current application version is 1.2.3" in result.output
    lines = [line.strip() for line in result.output.splitlines()]
    assert lines[-3:] == ["1.2.4", "1.3.0", "2.0.0"]


def test_versions_preview(project: Path) -> None:
    result = runner.invoke(app, ["versions", "--preview", "--root", str(project)])

    assert result.exit_code == 0
    assert "1.2.4-preview.0" in result.output
    assert "2.0.0-preview.0" in result.output


def test_versions_rejects_invalid_manifest_version(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text('{"version": "latest"}\n', encoding="utf-8")

    result = runner.invoke(app, ["versions", "--root", str(tmp_path)])

    assert result.exit_code == 1
    assert "invalid version" in result.output


def test_release_fails_fast_without_signing_env(
    project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("CSC_LINK", raising=False)
    monkeypatch.setenv("CSC_KEY_PASSWORD", "secret")
    monkeypatch.setenv("SHIPIT_S3_BUCKET", "cdn")

    result = runner.invoke(app, ["release", "--root", str(project)])

    assert result.exit_code == 1
    assert "Missing environment variable CSC_LINK" in result.output
    assert "Which type of release" not in result.output
    assert json.loads((project / "package.json").read_text())["version"] == "1.2.3"


def test_release_with_missing_explicit_config(project: Path) -> None:
    result = runner.invoke(
        app, ["release", "--root", str(project), "--config", str(project / "nope.toml")]
    )

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_root_must_be_a_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["versions", "--root", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "is not a directory" in result.output
