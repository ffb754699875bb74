from __future__ import annotations

import pytest

from shipit.core.result import Err, Ok
from shipit.release.semver import (
    IncrementKind,
    SemVer,
    compute_version_candidates,
    parse_version,
)


def _bump(version: str, kind: IncrementKind, identifier: str | None = None) -> str:
    parsed = parse_version(version)
    assert parsed is not None
    return str(parsed.bump(kind, identifier))


def _candidates(version: str, *, preview: bool) -> tuple[str, ...]:
    result = compute_version_candidates(version, is_preview=preview)
    assert isinstance(result, Ok)
    return result.value


class TestParseVersion:
    def test_plain_triple(self) -> None:
        assert parse_version("1.2.3") == SemVer(1, 2, 3)

    def test_prerelease_identifiers_are_typed(self) -> None:
        parsed = parse_version("1.2.4-preview.0")
        assert parsed is not None
        assert parsed.prerelease == ("preview", 0)

    def test_leading_v_and_build_metadata(self) -> None:
        parsed = parse_version("v1.2.3+build.5")
        assert parsed is not None
        assert parsed == SemVer(1, 2, 3)
        assert parsed.build == ("build", "5")
        assert str(parsed) == "1.2.3+build.5"

    @pytest.mark.parametrize("text", ["1.2", "01.2.3", "1.2.3-", "1.2.3-01", "latest", ""])
    def test_rejects_invalid(self, text: str) -> None:
        assert parse_version(text) is None


class TestPrecedence:
    def test_prerelease_chain_is_ordered(self) -> None:
        chain = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
            "1.0.1",
        ]
        parsed = [parse_version(v) for v in chain]
        assert all(p is not None for p in parsed)
        for lower, higher in zip(parsed, parsed[1:]):
            assert lower is not None and higher is not None
            assert lower < higher
            assert higher > lower

    def test_build_metadata_is_ignored(self) -> None:
        assert parse_version("1.2.3+a") == parse_version("1.2.3+b")


class TestIncrement:
    def test_release_increments(self) -> None:
        assert _bump("1.2.3", "patch") == "1.2.4"
        assert _bump("1.2.3", "minor") == "1.3.0"
        assert _bump("1.2.3", "major") == "2.0.0"

    def test_release_increments_drop_a_matching_prerelease(self) -> None:
        assert _bump("1.3.0-preview.2", "patch") == "1.3.0"
        assert _bump("1.3.0-preview.2", "minor") == "1.3.0"
        assert _bump("2.0.0-preview.2", "major") == "2.0.0"
        assert _bump("1.3.1-preview.2", "minor") == "1.4.0"

    def test_prerelease_continues_matching_identifier(self) -> None:
        assert _bump("1.2.4-preview.0", "prerelease", "preview") == "1.2.4-preview.1"
        assert _bump("1.2.4-preview", "prerelease", "preview") == "1.2.4-preview.0"

    def test_prerelease_switches_identifier(self) -> None:
        assert _bump("1.2.4-beta.3", "prerelease", "preview") == "1.2.4-preview.0"

    def test_pre_bumps_reset_counter(self) -> None:
        assert _bump("1.2.4-preview.3", "prepatch", "preview") == "1.2.5-preview.0"
        assert _bump("1.2.4-preview.3", "preminor", "preview") == "1.3.0-preview.0"
        assert _bump("1.2.4-preview.3", "premajor", "preview") == "2.0.0-preview.0"

    def test_build_metadata_is_dropped(self) -> None:
        assert _bump("1.2.3+sha.abc", "patch") == "1.2.4"


class TestComputeVersionCandidates:
    def test_normal_release(self) -> None:
        assert _candidates("1.2.3", preview=False) == ("1.2.4", "1.3.0", "2.0.0")

    def test_preview_release_collapses_prerelease_and_prepatch(self) -> None:
        assert _candidates("1.2.3", preview=True) == (
            "1.2.4-preview.0",
            "1.3.0-preview.0",
            "2.0.0-preview.0",
        )

    def test_preview_after_preview(self) -> None:
        assert _candidates("1.2.4-preview.0", preview=True) == (
            "1.2.4-preview.1",
            "1.2.5-preview.0",
            "1.3.0-preview.0",
            "2.0.0-preview.0",
        )

    def test_normal_release_after_preview_deduplicates(self) -> None:
        assert _candidates("1.3.0-preview.2", preview=False) == ("1.3.0", "2.0.0")
        assert _candidates("2.0.0-preview.1", preview=False) == ("2.0.0",)

    def test_candidates_never_go_backwards(self) -> None:
        # "preview" sorts before "rc", so the prerelease bump would downgrade.
        assert _candidates("1.2.4-rc.1", preview=True) == (
            "1.2.5-preview.0",
            "1.3.0-preview.0",
            "2.0.0-preview.0",
        )

    @pytest.mark.parametrize(
        "version", ["0.0.0", "1.2.3", "1.2.4-preview.7", "3.0.0-beta", "1.0.0-rc.1+b.2"]
    )
    @pytest.mark.parametrize("preview", [False, True])
    def test_every_candidate_is_greater_and_distinct(self, version: str, preview: bool) -> None:
        current = parse_version(version)
        assert current is not None

        candidates = _candidates(version, preview=preview)
        assert candidates
        assert len(set(candidates)) == len(candidates)
        for candidate in candidates:
            parsed = parse_version(candidate)
            assert parsed is not None
            assert parsed > current
            assert bool(parsed.prerelease) is preview
            assert parsed.build == ()

    def test_is_deterministic(self) -> None:
        assert _candidates("1.2.3", preview=True) == _candidates("1.2.3", preview=True)

    def test_invalid_version(self) -> None:
        result = compute_version_candidates("1.2", is_preview=False)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"
        assert result.error.exit_code == 1
