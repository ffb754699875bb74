"""Process exit codes.

Delegated tool failures are not listed here: the run exits with whatever
status the failing tool produced.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes owned by the release orchestrator.

    - 0: Success, including a run the operator chose to abandon
    - 1: Release error (missing environment variable, bad config, invalid
      version, missing packaging output)
    """

    OK = 0
    RELEASE_ERROR = 1
