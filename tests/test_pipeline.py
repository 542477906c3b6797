"""
End-to-end tests for the launch pipeline with every side effect injected.
"""

import os
from pathlib import Path

import pytest

from preflight.adapters.mock import MockRunner
from preflight.core.models.build import BuildMode, RunRequest
from preflight.core.services.tool_install.detection.host import probe_os_release
from preflight.core.use_cases.launch import run_launch
from tests.fs_helpers import BASE_NS, SECOND_NS, artifact_path, set_mtime, write_executable
from tests.tool_install.simulated_hosts import make_host_root

TOOLS = ("gcc", "make", "curl", "cargo")


class _Recorder:
    def __init__(self):
        self.calls: list[list[str]] = []

    def __call__(self, argv, env):
        self.calls.append(list(argv))


class Harness:
    """Bundles the injected collaborators of one pipeline run."""

    def __init__(self, tmp_path: Path, project: Path, bin_dir: Path, home: Path):
        self.project = project
        self.bin_dir = bin_dir
        self.home = home
        self.host_root = make_host_root(tmp_path, "ubuntu")
        self.runner = MockRunner()
        self.execute = _Recorder()
        self.size = (120, 40)
        self.answers: list[str] = []
        self.asked: list[str] = []

    def add_tools(self, *names: str) -> None:
        for name in names:
            write_executable(self.bin_dir / name)

    def compiler_writes_artifact(self, mode: str = "debug") -> None:
        def effect(cmd: list[str]) -> None:
            write_executable(artifact_path(self.project, mode))

        self.runner.set_effect("build", effect)

    def _confirm(self, prompt: str) -> str:
        self.asked.append(prompt)
        return self.answers.pop(0) if self.answers else "n"

    def run(self, mode: BuildMode = BuildMode.DEBUG, force: bool = False, dry_run: bool = False):
        return run_launch(
            RunRequest(mode=mode, force_rebuild=force),
            self.project,
            dry_run=dry_run,
            runner=self.runner,
            host_probes=[probe_os_release],
            host_root=self.host_root,
            home=self.home,
            search_path=str(self.bin_dir),
            is_root=False,
            size_probe=lambda settings: self.size,
            confirm=self._confirm,
            execute=self.execute,
        )


@pytest.fixture
def harness(tmp_path: Path, cargo_project: Path, bin_dir: Path, home_dir: Path) -> Harness:
    h = Harness(tmp_path, cargo_project, bin_dir, home_dir)
    h.add_tools(*TOOLS)
    return h


class TestHappyPath:
    def test_builds_and_launches(self, harness: Harness):
        harness.compiler_writes_artifact()
        result = harness.run()

        assert result.exit_code == 0
        assert result.error is None
        assert result.built
        assert result.launched
        assert harness.runner.call_log == [[str(harness.bin_dir / "cargo"), "build"]]
        assert harness.execute.calls == [[str(artifact_path(harness.project))]]

    def test_second_run_skips_build(self, harness: Harness):
        harness.compiler_writes_artifact()
        harness.run()
        harness.runner.reset()

        result = harness.run()

        assert result.exit_code == 0
        assert not result.decision.required
        assert not result.built
        assert harness.runner.call_count == 0
        assert len(harness.execute.calls) == 2

    def test_release_mode(self, harness: Harness, built_artifact: Path):
        harness.compiler_writes_artifact("release")
        result = harness.run(mode=BuildMode.RELEASE)
        assert result.built
        assert harness.runner.call_log[0][1:] == ["build", "--release"]
        assert harness.execute.calls == [[str(artifact_path(harness.project, "release"))]]

    def test_force_rebuild(self, harness: Harness, built_artifact: Path):
        harness.compiler_writes_artifact()
        result = harness.run(force=True)
        assert result.decision.forced
        assert result.built
        assert harness.runner.call_count == 1

    def test_source_edit_triggers_rebuild(self, harness: Harness, built_artifact: Path):
        set_mtime(harness.project / "src" / "main.rs", BASE_NS + 20 * SECOND_NS)
        harness.compiler_writes_artifact()
        result = harness.run()
        assert result.built
        assert not harness.run().built


class TestProvisioningStage:
    def test_noop_when_tools_present(self, harness: Harness, built_artifact: Path):
        result = harness.run()
        assert result.provisioning.status == "ok"
        assert harness.runner.call_count == 0

    def test_failure_is_not_fatal(self, harness: Harness, built_artifact: Path):
        (harness.bin_dir / "gcc").unlink()
        harness.add_tools("apt-get", "sudo")
        harness.runner.set_failure("apt-get", error="locked")

        result = harness.run()

        assert result.provisioning.status == "failed"
        assert result.exit_code == 0
        assert result.launched

    def test_unknown_host_continues(self, harness: Harness, built_artifact: Path, tmp_path: Path):
        (harness.bin_dir / "make").unlink()
        harness.host_root = make_host_root(tmp_path, "bare")

        result = harness.run()

        assert result.host.identity == "unknown"
        assert result.provisioning.status == "skipped"
        assert result.launched


class TestToolchainStage:
    def test_install_failure_is_fatal(self, harness: Harness):
        (harness.bin_dir / "cargo").unlink()
        harness.runner.set_failure("curl", error="Could not resolve host")

        result = harness.run()

        assert result.exit_code == 1
        assert "Could not resolve host" in result.error
        assert harness.execute.calls == []

    def test_installs_then_builds_with_new_path(self, harness: Harness):
        (harness.bin_dir / "cargo").unlink()
        home = harness.home

        def install(cmd: list[str]) -> None:
            write_executable(home / ".cargo" / "bin" / "cargo")
            (home / ".cargo" / "env").write_text('export PATH="$HOME/.cargo/bin:$PATH"\n')

        harness.runner.set_output("curl", "#!/bin/sh\n")
        harness.runner.set_effect("sh", install)
        harness.compiler_writes_artifact()

        result = harness.run()

        assert result.toolchain.installed
        assert result.launched
        cargo = str(home / ".cargo" / "bin" / "cargo")
        assert harness.runner.call_log[-1] == [cargo, "build"]
        assert os.environ.get("PATH", "").split(os.pathsep)[0] != str(home / ".cargo" / "bin")


class TestCommandTimeout:
    def test_applies_to_installs_not_to_build(self, harness: Harness):
        (harness.project / "preflight.yml").write_text("command_timeout: 7\n")
        (harness.bin_dir / "gcc").unlink()
        (harness.bin_dir / "cargo").unlink()
        harness.add_tools("apt-get", "sudo")
        home = harness.home

        def install(cmd: list[str]) -> None:
            write_executable(home / ".cargo" / "bin" / "cargo")
            (home / ".cargo" / "env").write_text('export PATH="$HOME/.cargo/bin:$PATH"\n')

        harness.runner.set_output("curl", "#!/bin/sh\n")
        harness.runner.set_effect("sh", install)
        harness.compiler_writes_artifact()

        result = harness.run()

        assert result.launched
        timeouts = {
            " ".join(cmd[:2]) if cmd[0] != "sudo" else " ".join(cmd[1:3]): timeout
            for cmd, timeout in zip(harness.runner.call_log, harness.runner.timeouts)
        }
        cargo = str(home / ".cargo" / "bin" / "cargo")
        assert timeouts == {
            "apt-get update": 7,
            "apt-get install": 7,
            "curl --proto": 7,
            "sh -s": 7,
            f"{cargo} build": None,
        }


class TestFatalStages:
    def test_missing_manifest(self, harness: Harness):
        (harness.project / "Cargo.toml").unlink()
        result = harness.run()
        assert result.exit_code == 1
        assert "Cargo.toml not found" in result.error
        assert harness.runner.call_count == 0

    def test_build_failure(self, harness: Harness):
        harness.runner.set_failure("build", error="error: could not compile `demo`")
        result = harness.run()
        assert result.exit_code == 1
        assert "Compilation failed" in result.error
        assert harness.execute.calls == []

    def test_build_without_artifact(self, harness: Harness):
        result = harness.run()
        assert result.exit_code == 1
        assert "Binary not found" in result.error
        assert "cargo build" in result.error
        assert harness.execute.calls == []

    def test_invalid_config(self, harness: Harness):
        (harness.project / "preflight.yml").write_text("terminal:\n  min_columns: 0\n")
        result = harness.run()
        assert result.exit_code == 1
        assert "Invalid launch configuration" in result.error


class TestTerminalStage:
    def test_undersized_declined(self, harness: Harness, built_artifact: Path):
        harness.size = (40, 10)
        harness.answers = ["n"]

        result = harness.run()

        assert result.exit_code == 0
        assert result.cancelled
        assert not result.launched
        assert harness.asked == ["Continue anyway? (y/N) "]
        assert harness.execute.calls == []

    def test_undersized_accepted(self, harness: Harness, built_artifact: Path):
        harness.size = (40, 10)
        harness.answers = ["y"]

        result = harness.run()

        assert result.launched
        assert len(harness.execute.calls) == 1


class TestDryRun:
    def test_changes_nothing(self, harness: Harness):
        (harness.bin_dir / "gcc").unlink()
        harness.add_tools("apt-get", "sudo")
        harness.size = (40, 10)

        result = harness.run(mode=BuildMode.RELEASE, dry_run=True)

        assert result.exit_code == 0
        assert harness.runner.call_count == 0
        assert harness.execute.calls == []
        assert harness.asked == []
        assert result.terminal.undersized
        assert not result.cancelled
        assert ["sudo", "apt-get", "update", "-qq"] in result.planned_commands
        assert ["cargo", "build", "--release"] in result.planned_commands
        assert not artifact_path(harness.project, "release").exists()

    def test_plans_toolchain_install(self, harness: Harness):
        (harness.bin_dir / "cargo").unlink()
        result = harness.run(dry_run=True)
        assert result.planned_commands[0][0] == "curl"
        assert result.planned_commands[1][:2] == ["sh", "-s"]

    def test_up_to_date_plans_nothing(self, harness: Harness, built_artifact: Path):
        result = harness.run(dry_run=True)
        assert result.planned_commands == []
        d = result.to_dict()
        assert d["rebuild"] == {"required": False, "reason": "artifact up to date"}
        assert d["host"]["identity"] == "ubuntu"
        assert d["artifact"]["exists"] is True
