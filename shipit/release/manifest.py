"""Version manifest (``package.json``) access.

Only the ``version`` field is touched. Every other field survives a rewrite
in its original order.
"""

from __future__ import annotations

import json
from pathlib import Path

from shipit.core.result import Err, Ok, Result
from shipit.core.structured import StrDict, as_str_dict, get_str
from shipit.platform.files import atomic_write_text
from shipit.release.errors import ReleaseError


def _load(path: Path) -> Result[tuple[StrDict, str], ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"invalid JSON in {path.name}: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"invalid JSON root in {path.name}",
                hint=str(path),
            )
        )
    return Ok((data, text))


def read_version(path: Path) -> Result[str, ReleaseError]:
    loaded = _load(path)
    if isinstance(loaded, Err):
        return loaded

    data, _ = loaded.value
    value = get_str(data, "version")
    if value is None:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"missing version in {path.name}",
                hint=str(path),
            )
        )
    return Ok(value)


def write_version(path: Path, version: str) -> Result[bool, ReleaseError]:
    """Set ``version`` in the manifest.

    Returns Ok(False) when the file already holds that version.
    """
    loaded = _load(path)
    if isinstance(loaded, Err):
        return loaded

    data, original = loaded.value
    if get_str(data, "version") == version:
        return Ok(False)

    data["version"] = version
    content = json.dumps(data, indent=2, ensure_ascii=False)
    if original.endswith("\n"):
        content += "\n"

    try:
        atomic_write_text(path, content, encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(True)
