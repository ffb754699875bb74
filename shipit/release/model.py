from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


ReleaseType = Literal["normal", "preview"]


class ResumeMode(Enum):
    """Where a run starts.

    ``CONTINUE_FROM_PACKAGED`` resumes a run that already bumped the version
    and packaged the app: it goes straight to the deploy confirmation.
    """

    FRESH = "fresh"
    CONTINUE_FROM_PACKAGED = "continue"


class ReleaseStep(Enum):
    VALIDATE_ENV = "validate_env"
    SELECT_INTENT = "select_intent"
    SYNC_BRANCHES = "sync_branches"
    BUILD_AND_TEST = "build_and_test"
    SELECT_VERSION = "select_version"
    CONFIRM_PACKAGE = "confirm_package"
    PACKAGE = "package"
    MANUAL_VERIFY = "manual_verify"
    CONFIRM_DEPLOY = "confirm_deploy"
    PUBLISH_AND_TAG = "publish_and_tag"
    MERGE_BACK = "merge_back"


@dataclass(frozen=True, slots=True)
class ReleaseIntent:
    """What the operator asked for. Lives for one run only."""

    release_type: ReleaseType
    source_branch: str
    target_branch: str

    @property
    def is_preview(self) -> bool:
        return self.release_type == "preview"

    @property
    def needs_merge(self) -> bool:
        return self.source_branch != self.target_branch


@dataclass(frozen=True, slots=True)
class ReleaseSession:
    """State threaded through the release steps."""

    step: ReleaseStep
    resume: ResumeMode = ResumeMode.FRESH
    intent: ReleaseIntent | None = None
    current_version: str | None = None
    new_version: str | None = None
