"""Typed configuration loading and access.

The release flow reads an optional ``release.toml`` at the project root.
Every setting has a default, so a project that follows the usual layout needs
no file at all; only the artifact bucket has no sensible default.

Example ``release.toml``::

    [publish]
    bucket = "my-app-cdn"

    [sentry]
    org = "my-org"
    project = "desktop"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "EnvConfig",
    "BranchesConfig",
    "ChannelsConfig",
    "PathsConfig",
    "PipelineConfig",
    "SentryConfig",
    "PublishConfig",
    "CONFIG_FILE_NAME",
    "BUCKET_ENV_VAR",
    "load_config",
    "load_project_config",
]

CONFIG_FILE_NAME = "release.toml"
BUCKET_ENV_VAR = "SHIPIT_S3_BUCKET"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class EnvConfig:
    """Environment variables the packager needs for code signing."""

    required: tuple[str, ...] = ("CSC_LINK", "CSC_KEY_PASSWORD")


@dataclass(frozen=True, slots=True)
class BranchesConfig:
    preview: str = "preview"
    staging: str = "staging"
    master: str = "master"


@dataclass(frozen=True, slots=True)
class ChannelsConfig:
    """Release type to publishing channel (descriptor file stem)."""

    normal: str = "latest"
    preview: str = "preview"


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Paths relative to the project root."""

    manifest: str = "package.json"
    dist: str = "dist"
    unpacked: str = "dist/win-unpacked"
    clean: tuple[str, ...] = ("node_modules",)


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Package manager invocations, as argv."""

    install: tuple[str, ...] = ("yarn", "install")
    plugins: tuple[str, ...] = ("yarn", "install-plugins")
    compile: tuple[str, ...] = ("yarn", "compile")
    test: tuple[str, ...] = ("yarn", "test")
    package: tuple[str, ...] = ("yarn", "package")


@dataclass(frozen=True, slots=True)
class SentryConfig:
    cli: str = "sentry-cli"
    org: str | None = None
    project: str | None = None
    files: tuple[str, ...] = ("bundles/renderer.js", "bundles/renderer.js.map")


@dataclass(frozen=True, slots=True)
class PublishConfig:
    bucket: str | None = None
    prefix: str = ""
    acl: str = "public-read"
    cli: str = "aws"


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    env: EnvConfig = field(default_factory=EnvConfig)
    branches: BranchesConfig = field(default_factory=BranchesConfig)
    channels: ChannelsConfig = field(default_factory=ChannelsConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    sentry: SentryConfig = field(default_factory=SentryConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a list setting is present but malformed.
        """
        env: StrDict = get_table(data, "env") or {}
        branches: StrDict = get_table(data, "branches") or {}
        channels: StrDict = get_table(data, "channels") or {}
        paths: StrDict = get_table(data, "paths") or {}
        pipeline: StrDict = get_table(data, "pipeline") or {}
        sentry: StrDict = get_table(data, "sentry") or {}
        publish: StrDict = get_table(data, "publish") or {}

        d_env = EnvConfig()
        d_branches = BranchesConfig()
        d_channels = ChannelsConfig()
        d_paths = PathsConfig()
        d_pipeline = PipelineConfig()
        d_sentry = SentryConfig()
        d_publish = PublishConfig()

        return cls(
            env=EnvConfig(required=_str_list(env, "required", d_env.required)),
            branches=BranchesConfig(
                preview=get_str(branches, "preview") or d_branches.preview,
                staging=get_str(branches, "staging") or d_branches.staging,
                master=get_str(branches, "master") or d_branches.master,
            ),
            channels=ChannelsConfig(
                normal=get_str(channels, "normal") or d_channels.normal,
                preview=get_str(channels, "preview") or d_channels.preview,
            ),
            paths=PathsConfig(
                manifest=get_str(paths, "manifest") or d_paths.manifest,
                dist=get_str(paths, "dist") or d_paths.dist,
                unpacked=get_str(paths, "unpacked") or d_paths.unpacked,
                clean=_str_list(paths, "clean", d_paths.clean),
            ),
            pipeline=PipelineConfig(
                install=_argv(pipeline, "install", d_pipeline.install),
                plugins=_argv(pipeline, "plugins", d_pipeline.plugins),
                compile=_argv(pipeline, "compile", d_pipeline.compile),
                test=_argv(pipeline, "test", d_pipeline.test),
                package=_argv(pipeline, "package", d_pipeline.package),
            ),
            sentry=SentryConfig(
                cli=get_str(sentry, "cli") or d_sentry.cli,
                org=get_str(sentry, "org"),
                project=get_str(sentry, "project"),
                files=_str_list(sentry, "files", d_sentry.files),
            ),
            publish=PublishConfig(
                bucket=get_str(publish, "bucket"),
                prefix=get_str(publish, "prefix") or d_publish.prefix,
                acl=get_str(publish, "acl") or d_publish.acl,
                cli=get_str(publish, "cli") or d_publish.cli,
            ),
        )

    def with_env_overrides(self, environ: Mapping[str, str]) -> Config:
        """Apply overrides taken from the process environment."""
        bucket = (environ.get(BUCKET_ENV_VAR) or "").strip()
        if not bucket:
            return self
        return replace(self, publish=replace(self.publish, bucket=bucket))


def _str_list(table: StrDict, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in table:
        return default
    value = get_str_list(table, key)
    if value is None:
        raise ValueError(f"'{key}' must be a list of non-empty strings")
    return value


def _argv(table: StrDict, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = _str_list(table, key, default)
    if not value:
        raise ValueError(f"'{key}' must not be an empty command")
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (UnicodeDecodeError, OSError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_project_config(
    root: Path,
    *,
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Result[Config, ConfigError]:
    """Load ``release.toml`` from ``root``, or an explicit ``path``.

    A missing default file yields the default config; a missing explicit
    path is an error.
    """
    config_path = path if path is not None else root / CONFIG_FILE_NAME
    if path is None and not config_path.exists():
        config: Config = Config()
    else:
        loaded = load_config(config_path)
        if isinstance(loaded, Err):
            return loaded
        config = loaded.value

    if environ is not None:
        config = config.with_env_overrides(environ)
    return Ok(config)
