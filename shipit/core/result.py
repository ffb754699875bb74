"""Result type for explicit error propagation.

Release steps return ``Ok(value)`` or ``Err(error)`` instead of raising, so the
flow controller decides in one place how a failure ends the run.

Usage:
    def read_version(path: Path) -> Result[str, ReleaseError]:
        ...

    match read_version(manifest):
        case Ok(version):
            console.info(f"The current application version is {version}")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")

__all__ = ["Ok", "Err", "Result"]


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result carrying ``error``."""

    error: E


Result: TypeAlias = Ok[T] | Err[E]
