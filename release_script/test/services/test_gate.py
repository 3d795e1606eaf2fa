"""Tests for services/gate.py."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from release_script.core.result import Err, Ok, Result
from release_script.output.console import MockConsole
from release_script.platform.process import Command, ProcessError
from release_script.platform.process import run as run_process
from release_script.release.model import ExecutionMode, ReleaseConfig, ReleaseContext
from release_script.services.gate import BuildTestGate, GateState
from release_script.services.gateway import ExecutionGateway
from release_script.services.manifest import load_manifest

from ..fakes import FakeRunner, failure, write_manifest


def _gate(
    root: Path,
    runner: FakeRunner,
    *,
    mode: ExecutionMode = ExecutionMode.LIVE,
) -> tuple[BuildTestGate, MockConsole]:
    console = MockConsole()
    gateway = ExecutionGateway(root=root, mode=mode, console=console, runner=runner)
    manifest = load_manifest(root).unwrap()
    return BuildTestGate(gateway=gateway, console=console, manifest=manifest), console


def _staged_context(config: ReleaseConfig) -> ReleaseContext:
    context = ReleaseContext.start(config)
    context.staged.append("package.json")
    return context


class TestPassing:
    def test_runs_test_then_build(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        gate, console = _gate(tmp_path, runner)

        result = gate.run(_staged_context(ReleaseConfig(bump="patch")))

        assert result == Ok(None)
        assert runner.commands() == [("npm", "run", "test"), ("npm", "run", "build")]
        assert gate.history == [
            GateState.NOT_STARTED,
            GateState.TEST_RUNNING,
            GateState.TEST_PASSED,
            GateState.BUILD_RUNNING,
            GateState.BUILD_PASSED,
        ]
        assert "OK completed: tests" in console.messages

    def test_skip_tests(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        gate, console = _gate(tmp_path, runner)

        gate.run(_staged_context(ReleaseConfig(bump="patch", skip_tests=True)))

        assert runner.commands() == [("npm", "run", "build")]
        assert GateState.TEST_SKIPPED in gate.history
        assert "warning: tests skipped" in console.messages

    def test_missing_scripts_are_skipped(self, tmp_path: Path) -> None:
        write_manifest(tmp_path, scripts={})
        runner = FakeRunner()
        gate, _ = _gate(tmp_path, runner)

        assert gate.run(_staged_context(ReleaseConfig(bump="patch"))) == Ok(None)
        assert runner.calls == []
        assert gate.state == GateState.BUILD_SKIPPED

    def test_skip_build(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        gate, _ = _gate(tmp_path, runner)

        gate.run(_staged_context(ReleaseConfig(bump="patch", skip_build=True)))

        assert runner.commands() == [("npm", "run", "test")]
        assert gate.state == GateState.BUILD_SKIPPED

    def test_docs_release_uses_docs_build(self, tmp_path: Path) -> None:
        write_manifest(tmp_path, scripts={"build": "webpack", "docs-build": "docs"})
        runner = FakeRunner()
        gate, _ = _gate(tmp_path, runner)
        context = _staged_context(ReleaseConfig(preid="docs", only_docs=True))

        assert gate.build_script(context) == "docs-build"
        gate.run(context)
        assert runner.commands() == [("npm", "run", "docs-build")]


class TestFailing:
    def test_test_failure_reverts_version_bump(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        runner.respond(("npm", "run", "test"), failure(["npm", "run", "test"], stdout="1 failing"))
        gate, console = _gate(tmp_path, runner)
        context = _staged_context(ReleaseConfig(bump="patch"))

        result = gate.run(context)

        assert isinstance(result, Err)
        assert result.error.kind == "gate_failed"
        assert result.error.output == "1 failing"
        assert runner.commands() == [
            ("npm", "run", "test"),
            ("git", "reset", "HEAD", "."),
            ("git", "checkout", "--", "package.json"),
        ]
        assert gate.state == GateState.TEST_FAILED
        assert context.reverted is True
        assert context.staged == []
        assert "warning: version bump reverted" in console.messages

    def test_build_failure_reverts_version_bump(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        runner.respond(("npm", "run", "build"), failure(["npm", "run", "build"]))
        gate, _ = _gate(tmp_path, runner)
        context = _staged_context(ReleaseConfig(bump="patch"))

        result = gate.run(context)

        assert isinstance(result, Err)
        assert gate.state == GateState.BUILD_FAILED
        assert runner.ran("git", "checkout", "--", "package.json")
        assert context.reverted

    def test_nothing_to_revert_without_bump(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        runner.respond(("npm", "run", "test"), failure(["npm", "run", "test"]))
        gate, _ = _gate(tmp_path, runner)
        context = ReleaseContext.start(ReleaseConfig(bump="patch", skip_version_bump=True))

        result = gate.run(context)

        assert isinstance(result, Err)
        assert runner.commands() == [("npm", "run", "test")]
        assert context.reverted is False

    def test_revert_failure_adds_hint(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        runner.respond(("npm", "run", "test"), failure(["npm", "run", "test"]))
        runner.respond(("git", "reset"), failure(["git", "reset"]))
        gate, _ = _gate(tmp_path, runner)

        result = gate.run(_staged_context(ReleaseConfig(bump="patch")))

        assert isinstance(result, Err)
        assert result.error.kind == "gate_failed"
        assert result.error.hint == "Restore package.json manually: git checkout -- package.json"

    def test_dry_run_plans_revert(self, tmp_path: Path) -> None:
        write_manifest(tmp_path)
        runner = FakeRunner()
        runner.respond(("npm", "run", "test"), failure(["npm", "run", "test"]))
        gate, _ = _gate(tmp_path, runner, mode=ExecutionMode.DRY_RUN)

        result = gate.run(_staged_context(ReleaseConfig(bump="patch", dry_run=True)))

        assert isinstance(result, Err)
        assert runner.commands() == [("npm", "run", "test")]


def _git(root: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", "-c", "user.name=Release Test", "-c", "user.email=release@example.com", *args],
        cwd=root,
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_failed_gate_leaves_manifest_byte_identical(tmp_path: Path) -> None:
    manifest_path = write_manifest(tmp_path)
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "add", "package.json")
    _git(tmp_path, "commit", "-q", "-m", "initial")
    original = manifest_path.read_bytes()

    def runner(cmd: list[str], cwd: Path) -> Result[str, ProcessError]:
        if cmd[0] == "npm":
            return Err(ProcessError(command=tuple(cmd), returncode=1, stdout="", stderr="failed"))
        return run_process(cmd, cwd)

    console = MockConsole()
    gateway = ExecutionGateway(root=tmp_path, mode=ExecutionMode.LIVE, console=console, runner=runner)
    manifest = load_manifest(tmp_path).unwrap()
    bumped = manifest.with_version("1.2.4")
    assert gateway.write_safely(manifest_path, bumped.render()) == Ok(None)
    assert isinstance(gateway.run_safely(Command.of("git", "add", "package.json")), Ok)
    context = _staged_context(ReleaseConfig(bump="patch"))

    gate = BuildTestGate(gateway=gateway, console=console, manifest=bumped)
    result = gate.run(context)

    assert isinstance(result, Err)
    assert manifest_path.read_bytes() == original
    assert _git(tmp_path, "diff-index", "--name-only", "HEAD", "--") == ""
