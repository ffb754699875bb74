"""Release channels and the artifacts the packager writes for them.

The packager emits ``<channel>.yml`` into the dist directory. Its ``path``
field names the installer, relative to the same directory. Auto-updaters
poll the descriptor, so it is uploaded after the installer it points to.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from shipit.core.config import ChannelsConfig
from shipit.core.result import Err, Ok, Result
from shipit.core.structured import as_str_dict, get_str
from shipit.release.errors import ReleaseError
from shipit.release.model import ReleaseType


@dataclass(frozen=True, slots=True)
class ChannelArtifacts:
    channel: str
    descriptor: Path
    installer: Path
    # As written in the descriptor; also the upload key.
    installer_name: str

    @property
    def descriptor_name(self) -> str:
        return self.descriptor.name


def channel_for(release_type: ReleaseType, channels: ChannelsConfig) -> str:
    if release_type == "preview":
        return channels.preview
    return channels.normal


def _not_found(path: Path) -> ReleaseError:
    return ReleaseError(
        kind="artifact_missing",
        message=f"Could not find {path.resolve()}",
        hint="Did the packaging step complete?",
    )


def discover_artifacts(*, dist_dir: Path, channel: str) -> Result[ChannelArtifacts, ReleaseError]:
    descriptor = dist_dir / f"{channel}.yml"
    if not descriptor.is_file():
        return Err(_not_found(descriptor))

    try:
        obj: object = yaml.safe_load(descriptor.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        return Err(
            ReleaseError(
                kind="invalid_descriptor",
                message=f"failed to parse {descriptor.name}: {e}",
                hint=str(descriptor),
            )
        )

    data = as_str_dict(obj)
    installer_name = get_str(data, "path") if data is not None else None
    if installer_name is None:
        return Err(
            ReleaseError(
                kind="invalid_descriptor",
                message=f"missing path in {descriptor.name}",
                hint=str(descriptor),
            )
        )

    installer = dist_dir / installer_name
    if not installer.is_file():
        return Err(_not_found(installer))

    return Ok(
        ChannelArtifacts(
            channel=channel,
            descriptor=descriptor,
            installer=installer,
            installer_name=installer_name,
        )
    )
