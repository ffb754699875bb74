"""Semantic versions and next-version candidates.

Increment rules match node-semver, which is what the packaging toolchain and
the update feed use to compare versions. A prerelease version bumped to a
release keeps its triple (``1.3.0-preview.2`` minor-bumps to ``1.3.0``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from shipit.core.result import Err, Ok, Result
from shipit.release.errors import ReleaseError


IncrementKind = Literal[
    "major",
    "minor",
    "patch",
    "premajor",
    "preminor",
    "prepatch",
    "prerelease",
]

PREVIEW_IDENTIFIER = "preview"

_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_VERSION_RE = re.compile(
    r"^[v=]?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)
_NUMERIC_RE = re.compile(r"^(0|[1-9]\d*)$")

Identifier = int | str


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[Identifier, ...] = ()
    build: tuple[str, ...] = field(default=(), compare=False)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(p) for p in self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def _precedence(self) -> tuple[object, ...]:
        # A release sorts after any of its prereleases; numeric identifiers
        # sort before alphanumeric ones.
        if not self.prerelease:
            pre: tuple[object, ...] = (1,)
        else:
            pre = (
                0,
                tuple((0, p, "") if isinstance(p, int) else (1, 0, p) for p in self.prerelease),
            )
        return (self.major, self.minor, self.patch, pre)

    def __lt__(self, other: SemVer) -> bool:
        return self._precedence() < other._precedence()

    def __le__(self, other: SemVer) -> bool:
        return self._precedence() <= other._precedence()

    def __gt__(self, other: SemVer) -> bool:
        return self._precedence() > other._precedence()

    def __ge__(self, other: SemVer) -> bool:
        return self._precedence() >= other._precedence()

    def bump(self, kind: IncrementKind, identifier: str | None = None) -> SemVer:
        """Return the next version for ``kind``; build metadata is dropped."""
        match kind:
            case "major":
                major = self.major
                if self.minor != 0 or self.patch != 0 or not self.prerelease:
                    major += 1
                return SemVer(major, 0, 0)
            case "minor":
                minor = self.minor
                if self.patch != 0 or not self.prerelease:
                    minor += 1
                return SemVer(self.major, minor, 0)
            case "patch":
                patch = self.patch if self.prerelease else self.patch + 1
                return SemVer(self.major, self.minor, patch)
            case "premajor":
                return SemVer(self.major + 1, 0, 0)._pre(identifier)
            case "preminor":
                return SemVer(self.major, self.minor + 1, 0)._pre(identifier)
            case "prepatch":
                return SemVer(self.major, self.minor, self.patch + 1)._pre(identifier)
            case "prerelease":
                if not self.prerelease:
                    return self.bump("prepatch", identifier)
                return self._pre(identifier)
            case _:
                raise AssertionError(f"unexpected increment kind: {kind}")

    def _pre(self, identifier: str | None) -> SemVer:
        pre = list(self.prerelease)
        if not pre:
            pre = [0]
        else:
            for i in range(len(pre) - 1, -1, -1):
                value = pre[i]
                if isinstance(value, int):
                    pre[i] = value + 1
                    break
            else:
                pre.append(0)

        if identifier:
            same_id = str(pre[0]) == identifier
            if not same_id or len(pre) < 2 or not isinstance(pre[1], int):
                pre = [identifier, 0]

        return SemVer(self.major, self.minor, self.patch, tuple(pre))


def _identifier(part: str) -> Identifier:
    if _NUMERIC_RE.match(part):
        return int(part)
    return part


def parse_version(text: str) -> SemVer | None:
    """Parse ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``, with an optional ``v``/``=``."""
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    pre = tuple(_identifier(p) for p in m.group(4).split(".")) if m.group(4) else ()
    build = tuple(m.group(5).split(".")) if m.group(5) else ()
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), pre, build)


def compute_version_candidates(
    current_version: str, *, is_preview: bool
) -> Result[tuple[str, ...], ReleaseError]:
    """Return the distinct next versions the operator may choose from.

    Order is preserved and every candidate is strictly greater than
    ``current_version``.
    """
    current = parse_version(current_version)
    if current is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid version: {current_version!r}",
                hint="Expected MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]",
            )
        )

    if is_preview:
        bumped = [
            current.bump(kind, PREVIEW_IDENTIFIER)
            for kind in ("prerelease", "prepatch", "preminor", "premajor")
        ]
    else:
        bumped = [current.bump(kind) for kind in ("patch", "minor", "major")]

    candidates = [v for v in bumped if v > current]
    return Ok(tuple(dict.fromkeys(str(v) for v in candidates)))
