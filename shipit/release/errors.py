"""Error types for the release flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from shipit.core.errors import ErrorCode
from shipit.platform.process import ProcessError

ReleaseErrorKind = Literal[
    "missing_env",
    "invalid_config",
    "invalid_version",
    "invalid_manifest",
    "invalid_descriptor",
    "artifact_missing",
    "command_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    ``exit_code`` is the status the process ends with. It is 1 for errors the
    orchestrator detects itself and the tool's own status for delegated
    command failures.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    exit_code: int = int(ErrorCode.RELEASE_ERROR)


def command_failed(error: ProcessError) -> ReleaseError:
    return ReleaseError(
        kind="command_failed",
        message=str(error),
        exit_code=error.returncode,
    )
