from __future__ import annotations

from collections.abc import Iterable, Mapping

from shipit.core.result import Err, Ok, Result
from shipit.release.errors import ReleaseError


def validate_environment(
    names: Iterable[str], *, environ: Mapping[str, str]
) -> Result[None, ReleaseError]:
    """Check that every required variable is set, stopping at the first gap.

    Values are not inspected beyond being non-empty.
    """
    for name in names:
        if not environ.get(name):
            return Err(
                ReleaseError(
                    kind="missing_env",
                    message=f"Missing environment variable {name}",
                    hint="The packager needs it to sign installers",
                )
            )
    return Ok(None)
