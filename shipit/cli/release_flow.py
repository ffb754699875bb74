"""Interactive release flow.

Steps run strictly forward:

    validate env -> select intent -> sync branches -> build & test ->
    select version -> confirm package -> package -> manual verify ->
    confirm deploy -> publish & tag -> merge back (normal releases only)

Declining either confirmation, or cancelling a selection, abandons the run
without further side effects. Any delegated command that exits non-zero ends
the run with that command's status. Nothing already done is rolled back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TypeVar

from shipit.cli.prompts import Prompter
from shipit.cli.release_fsm import (
    ABORTED,
    DONE,
    StepFinish,
    StepHandler,
    StepOutcome,
    advance,
    run_state_machine,
)
from shipit.cli.selector import SelectorOption
from shipit.core.config import Config
from shipit.core.result import Err, Ok, Result
from shipit.output.console import ConsoleProtocol
from shipit.platform.files import remove_tree
from shipit.platform.process import CommandRunner, run_checked
from shipit.release import commands
from shipit.release.channel import channel_for, discover_artifacts
from shipit.release.environment import validate_environment
from shipit.release.errors import ReleaseError, command_failed
from shipit.release.manifest import read_version, write_version
from shipit.release.model import (
    ReleaseIntent,
    ReleaseSession,
    ReleaseStep,
    ResumeMode,
)
from shipit.release.semver import compute_version_candidates, parse_version

T = TypeVar("T")

BANNER = "Desktop App Interactive Release Script"
CONTINUE_HINT = "Re-run with --continue to publish without re-packaging or bumping the version"

StepResult = Result[StepOutcome[ReleaseSession], ReleaseError]


def confirm_or_abort(
    prompter: Prompter, message: str, *, then: ReleaseSession
) -> StepOutcome[ReleaseSession]:
    """Advance to ``then`` if the operator agrees, otherwise abandon the run."""
    if prompter.confirm(message):
        return advance(then)
    return ABORTED


def select_release_intent(prompter: Prompter, config: Config) -> ReleaseIntent | None:
    """Ask for the release type and, for normal releases, the source branch.

    Returns None if the operator cancelled.
    """
    branches = config.branches
    release_type = prompter.select(
        title="Which type of release would you like to do?",
        options=[
            SelectorOption(
                value="normal", label="Normal release (All users will receive this release)"
            ),
            SelectorOption(value="preview", label="Preview release"),
        ],
    )
    if release_type is None:
        return None

    if release_type == "preview":
        # Preview releases always happen from staging
        return ReleaseIntent(
            release_type="preview",
            source_branch=branches.staging,
            target_branch=branches.preview,
        )

    source = prompter.select(
        title="Which branch would you like to release from?",
        options=[
            SelectorOption(value=branches.preview, label=branches.preview),
            SelectorOption(value=branches.staging, label=branches.staging),
            SelectorOption(
                value=branches.master, label=f"{branches.master} (hotfix releases only)"
            ),
        ],
    )
    if source is None:
        return None
    return ReleaseIntent(
        release_type="normal", source_branch=source, target_branch=branches.master
    )


@dataclass(frozen=True, slots=True)
class ReleaseFlow:
    """Release Flow Controller.

    Every external effect goes through ``runner``; every question goes
    through ``prompter``.
    """

    root: Path
    config: Config
    console: ConsoleProtocol
    runner: CommandRunner
    prompter: Prompter
    environ: Mapping[str, str]

    def run(self, resume: ResumeMode = ResumeMode.FRESH) -> Result[StepFinish, ReleaseError]:
        self.console.banner(BANNER)
        return run_state_machine(
            initial_state=ReleaseSession(step=ReleaseStep.VALIDATE_ENV, resume=resume),
            get_step=lambda s: s.step,
            handlers=self._handlers(),
        )

    def _handlers(self) -> dict[ReleaseStep, StepHandler[ReleaseSession]]:
        return {
            ReleaseStep.VALIDATE_ENV: self._validate_env,
            ReleaseStep.SELECT_INTENT: self._select_intent,
            ReleaseStep.SYNC_BRANCHES: self._sync_branches,
            ReleaseStep.BUILD_AND_TEST: self._build_and_test,
            ReleaseStep.SELECT_VERSION: self._select_version,
            ReleaseStep.CONFIRM_PACKAGE: self._confirm_package,
            ReleaseStep.PACKAGE: self._package,
            ReleaseStep.MANUAL_VERIFY: self._manual_verify,
            ReleaseStep.CONFIRM_DEPLOY: self._confirm_deploy,
            ReleaseStep.PUBLISH_AND_TAG: self._publish_and_tag,
            ReleaseStep.MERGE_BACK: self._merge_back,
        }

    # -- helpers -----------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        return self.root / self.config.paths.manifest

    def _run(self, argv: Sequence[str]) -> Result[None, ReleaseError]:
        self.console.command(argv)
        result = run_checked(self.runner, argv)
        if isinstance(result, Err):
            return Err(command_failed(result.error))
        return Ok(None)

    def _run_all(self, argvs: Sequence[Sequence[str]]) -> Result[None, ReleaseError]:
        for argv in argvs:
            result = self._run(argv)
            if isinstance(result, Err):
                return result
        return Ok(None)

    @staticmethod
    def _resumable(error: ReleaseError) -> ReleaseError:
        return replace(error, hint=error.hint or CONTINUE_HINT)

    @staticmethod
    def _need(value: T | None, what: str) -> T:
        if value is None:
            raise AssertionError(f"release session is missing {what}")
        return value

    # -- steps -------------------------------------------------------------

    def _validate_env(self, session: ReleaseSession) -> StepResult:
        checked = validate_environment(self.config.env.required, environ=self.environ)
        if isinstance(checked, Err):
            return checked

        if not self.config.publish.bucket:
            return Err(
                ReleaseError(
                    kind="invalid_config",
                    message="No artifact bucket configured",
                    hint="Set [publish] bucket in release.toml or SHIPIT_S3_BUCKET",
                )
            )
        return Ok(advance(replace(session, step=ReleaseStep.SELECT_INTENT)))

    def _select_intent(self, session: ReleaseSession) -> StepResult:
        intent = select_release_intent(self.prompter, self.config)
        if intent is None:
            return Ok(ABORTED)

        if session.resume is ResumeMode.CONTINUE_FROM_PACKAGED:
            current = read_version(self.manifest_path)
            if isinstance(current, Err):
                return current
            if parse_version(current.value) is None:
                return Err(
                    ReleaseError(
                        kind="invalid_version",
                        message=f"invalid version: {current.value!r}",
                        hint="Packaged releases carry a MAJOR.MINOR.PATCH[-PRERELEASE] version",
                    )
                )
            self.console.warning(
                f"Continuing the release of {current.value}: "
                "skipping sync, build, version bump and packaging"
            )
            return Ok(
                advance(
                    replace(
                        session,
                        step=ReleaseStep.CONFIRM_DEPLOY,
                        intent=intent,
                        current_version=current.value,
                        new_version=current.value,
                    )
                )
            )

        return Ok(advance(replace(session, step=ReleaseStep.SYNC_BRANCHES, intent=intent)))

    def _sync_branches(self, session: ReleaseSession) -> StepResult:
        intent = self._need(session.intent, "intent")
        source, target = intent.source_branch, intent.target_branch

        self.console.info("Stashing all uncommitted changes...")
        r = self._run_all(commands.stash_all())
        if isinstance(r, Err):
            return r

        self.console.info(f"Syncing {source} with the origin...")
        r = self._run_all(commands.sync_branch(source))
        if isinstance(r, Err):
            return r

        if intent.needs_merge:
            self.console.info(f"Syncing {target} with the origin...")
            r = self._run_all(commands.sync_branch(target))
            if isinstance(r, Err):
                return r

            self.console.info(f"Merging {source} into {target}...")
            r = self._run(commands.merge(source))
            if isinstance(r, Err):
                return r

        return Ok(advance(replace(session, step=ReleaseStep.BUILD_AND_TEST)))

    def _build_and_test(self, session: ReleaseSession) -> StepResult:
        pipeline = self.config.pipeline

        self.console.info("Ensuring submodules are up to date...")
        r = self._run(commands.update_submodules())
        if isinstance(r, Err):
            return r

        self.console.info("Removing old packages...")
        for rel in self.config.paths.clean:
            try:
                remove_tree(self.root / rel)
            except OSError as e:
                return Err(
                    ReleaseError(
                        kind="command_failed",
                        message=f"failed to remove {rel}: {e}",
                        hint="Close any program holding files in it and run the release again",
                    )
                )

        stages = (
            ("Installing fresh packages...", pipeline.install),
            ("Installing plugins...", pipeline.plugins),
            ("Compiling assets...", pipeline.compile),
            ("Running tests...", pipeline.test),
        )
        for message, argv in stages:
            self.console.info(message)
            r = self._run(argv)
            if isinstance(r, Err):
                return r

        self.console.success("The current revision has passed testing and is ready to be")
        self.console.print("packaged and released")
        return Ok(advance(replace(session, step=ReleaseStep.SELECT_VERSION)))

    def _select_version(self, session: ReleaseSession) -> StepResult:
        intent = self._need(session.intent, "intent")

        current = read_version(self.manifest_path)
        if isinstance(current, Err):
            return current
        self.console.info(f"The current application version is {current.value}")

        candidates = compute_version_candidates(current.value, is_preview=intent.is_preview)
        if isinstance(candidates, Err):
            return candidates

        chosen = self.prompter.select(
            title="What should the new version number be?",
            subtitle=f"Current version: {current.value}",
            options=[SelectorOption(value=v, label=v) for v in candidates.value],
        )
        if chosen is None:
            return Ok(ABORTED)

        return Ok(
            advance(
                replace(
                    session,
                    step=ReleaseStep.CONFIRM_PACKAGE,
                    current_version=current.value,
                    new_version=chosen,
                )
            )
        )

    def _confirm_package(self, session: ReleaseSession) -> StepResult:
        version = self._need(session.new_version, "new version")
        return Ok(
            confirm_or_abort(
                self.prompter,
                f"Are you sure you want to package version {version}?",
                then=replace(session, step=ReleaseStep.PACKAGE),
            )
        )

    def _package(self, session: ReleaseSession) -> StepResult:
        version = self._need(session.new_version, "new version")

        self.console.info(f"Writing {version} to {self.config.paths.manifest}...")
        written = write_version(self.manifest_path, version)
        if isinstance(written, Err):
            return written

        self.console.info("Packaging the app...")
        r = self._run(self.config.pipeline.package)
        if isinstance(r, Err):
            return r

        return Ok(advance(replace(session, step=ReleaseStep.MANUAL_VERIFY)))

    def _manual_verify(self, session: ReleaseSession) -> StepResult:
        version = self._need(session.new_version, "new version")
        self.console.success(f"Version {version} is ready to be deployed.")
        self.console.print(f"You can find the packaged app at {self.config.paths.unpacked}.")
        self.console.print("Please run the packaged application now to ensure it starts up")
        self.console.print("properly. When you have confirmed the packaged app works, you")
        self.console.print("can continue with the deploy.")
        return Ok(advance(replace(session, step=ReleaseStep.CONFIRM_DEPLOY)))

    def _confirm_deploy(self, session: ReleaseSession) -> StepResult:
        return Ok(
            confirm_or_abort(
                self.prompter,
                "Are you ready to deploy?",
                then=replace(session, step=ReleaseStep.PUBLISH_AND_TAG),
            )
        )

    def _publish_and_tag(self, session: ReleaseSession) -> StepResult:
        result = self._publish(session)
        if isinstance(result, Err):
            return Err(self._resumable(result.error))
        return result

    def _publish(self, session: ReleaseSession) -> StepResult:
        intent = self._need(session.intent, "intent")
        version = self._need(session.new_version, "new version")
        sentry = self.config.sentry
        publish = self.config.publish

        self.console.info("Committing changes...")
        r = self._run(commands.stage_all())
        if isinstance(r, Err):
            return r
        argv = commands.has_no_staged_changes()
        self.console.command(argv)
        if self.runner.run(argv) != 0:
            r = self._run(commands.commit_release(version))
            if isinstance(r, Err):
                return r
        else:
            self.console.print("Nothing to commit, release commit already exists")

        self.console.info("Pushing changes...")
        r = self._run(commands.push_head())
        if isinstance(r, Err):
            return r

        self.console.info(f"Tagging version {version}...")
        r = self._run_all(commands.tag_release(version))
        if isinstance(r, Err):
            return r

        self.console.info(f"Registering {version} with sentry...")
        r = self._run_all(commands.sentry_register(sentry, version))
        if isinstance(r, Err):
            return r

        self.console.info("Uploading compiled source to sentry...")
        r = self._run_all(commands.sentry_upload_sources(sentry, version, self.root))
        if isinstance(r, Err):
            return r

        self.console.info("Discovering publishing artifacts...")
        channel = channel_for(intent.release_type, self.config.channels)
        found = discover_artifacts(dist_dir=self.root / self.config.paths.dist, channel=channel)
        if isinstance(found, Err):
            return found
        artifacts = found.value
        self.console.info(f"Discovered {artifacts.descriptor_name}")
        self.console.info(f"Discovered {artifacts.installer_name}")

        self.console.info("Uploading publishing artifacts...")
        uploads = [
            commands.s3_upload(publish, key=artifacts.installer_name, path=artifacts.installer),
            commands.s3_upload(publish, key=artifacts.descriptor_name, path=artifacts.descriptor),
        ]
        r = self._run_all(uploads)
        if isinstance(r, Err):
            return r

        self.console.info("Finalizing release with sentry...")
        r = self._run(commands.sentry_finalize(sentry, version))
        if isinstance(r, Err):
            return r

        if intent.is_preview:
            self.console.success(f"Version {version} released successfully!")
            return Ok(DONE)
        return Ok(advance(replace(session, step=ReleaseStep.MERGE_BACK)))

    def _merge_back(self, session: ReleaseSession) -> StepResult:
        version = self._need(session.new_version, "new version")
        branches = self.config.branches

        self.console.info(f"Merging {branches.master} back into {branches.staging}...")
        r = self._run_all(
            [
                commands.checkout(branches.staging),
                commands.merge(branches.master),
                commands.push_head(),
            ]
        )
        if isinstance(r, Err):
            return r

        self.console.success(f"Version {version} released successfully!")
        return Ok(DONE)
