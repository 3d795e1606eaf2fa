"""Test and build gate.

The manifest already carries the new version when the gate runs, so a failure
has to undo that change (unstage, restore ``package.json`` from HEAD) before
the release aborts.
"""

from __future__ import annotations

from enum import Enum, auto

from release_script.core.result import Err, Ok, Result
from release_script.output.console import ConsoleProtocol
from release_script.platform.process import Command
from release_script.release.errors import ReleaseError
from release_script.release.model import ReleaseContext
from release_script.services.gateway import ExecutionGateway
from release_script.services.manifest import MANIFEST_NAME, Manifest

TEST_SCRIPT = "test"
BUILD_SCRIPT = "build"
DOCS_BUILD_SCRIPT = "docs-build"


class GateState(Enum):
    NOT_STARTED = auto()
    TEST_RUNNING = auto()
    TEST_PASSED = auto()
    TEST_FAILED = auto()
    TEST_SKIPPED = auto()
    BUILD_RUNNING = auto()
    BUILD_PASSED = auto()
    BUILD_FAILED = auto()
    BUILD_SKIPPED = auto()


class BuildTestGate:
    """Runs the project's test and build scripts; reverts the bump on failure."""

    def __init__(
        self,
        *,
        gateway: ExecutionGateway,
        console: ConsoleProtocol,
        manifest: Manifest,
    ) -> None:
        self._gateway = gateway
        self._console = console
        self._manifest = manifest
        self.state = GateState.NOT_STARTED
        self.history: list[GateState] = [GateState.NOT_STARTED]

    def run(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        tested = self._test(context)
        if isinstance(tested, Err):
            return tested
        return self._build(context)

    def build_script(self, context: ReleaseContext) -> str | None:
        """Script the build stage runs, or None when it is skipped."""
        config = context.config
        if config.only_docs and self._manifest.has_script(DOCS_BUILD_SCRIPT):
            return DOCS_BUILD_SCRIPT
        if not config.skip_build and self._manifest.has_script(BUILD_SCRIPT):
            return BUILD_SCRIPT
        return None

    def _test(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        if context.config.skip_tests or not self._manifest.has_script(TEST_SCRIPT):
            self._enter(GateState.TEST_SKIPPED)
            self._console.warning("tests skipped")
            return Ok(None)

        self._enter(GateState.TEST_RUNNING)
        self._console.info("running: tests")
        return self._run_script(
            context,
            script=TEST_SCRIPT,
            passed=GateState.TEST_PASSED,
            failed=GateState.TEST_FAILED,
            label="tests",
        )

    def _build(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        script = self.build_script(context)
        if script is None:
            self._enter(GateState.BUILD_SKIPPED)
            self._console.warning("build skipped")
            return Ok(None)

        self._enter(GateState.BUILD_RUNNING)
        self._console.info(f"running: {script}")
        return self._run_script(
            context,
            script=script,
            passed=GateState.BUILD_PASSED,
            failed=GateState.BUILD_FAILED,
            label="build",
        )

    def _run_script(
        self,
        context: ReleaseContext,
        *,
        script: str,
        passed: GateState,
        failed: GateState,
        label: str,
    ) -> Result[None, ReleaseError]:
        result = self._gateway.try_run(Command.of("npm", "run", script))
        if isinstance(result, Ok):
            self._enter(passed)
            self._console.success(f"completed: {label}")
            return Ok(None)

        self._enter(failed)
        failure = ReleaseError(
            kind="gate_failed",
            message=f"{label} failed (exit {result.error.returncode})",
            output=result.error.output or None,
        )
        return Err(self._revert(context, failure))

    def _revert(self, context: ReleaseContext, failure: ReleaseError) -> ReleaseError:
        if MANIFEST_NAME not in context.staged:
            return failure

        self._console.error(f"{failure.message}, reverting version bump")
        for command in (
            Command.of("git", "reset", "HEAD", "."),
            Command.of("git", "checkout", "--", MANIFEST_NAME),
        ):
            reverted = self._gateway.run_safely(command)
            if isinstance(reverted, Err):
                self._console.error(f"revert failed: {reverted.error.message}")
                return ReleaseError(
                    kind=failure.kind,
                    message=failure.message,
                    hint=f"Restore {MANIFEST_NAME} manually: git checkout -- {MANIFEST_NAME}",
                    output=failure.output,
                )

        context.staged.clear()
        context.reverted = True
        self._console.warning("version bump reverted")
        return failure

    def _enter(self, state: GateState) -> None:
        self.state = state
        self.history.append(state)
