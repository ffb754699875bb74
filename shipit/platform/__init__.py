"""Platform abstraction layer."""

from .files import atomic_write_text, remove_tree
from .process import (
    CommandRunner,
    ProcessError,
    SubprocessRunner,
    run_checked,
)

__all__ = [
    # files
    "atomic_write_text",
    "remove_tree",
    # process
    "CommandRunner",
    "ProcessError",
    "SubprocessRunner",
    "run_checked",
]
