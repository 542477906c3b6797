"""
Tests for host identity and capability detection.
"""

from pathlib import Path

import pytest

from preflight.core.models.host import UNKNOWN_HOST
from preflight.core.services.tool_install.detection import (
    identify_host,
    is_available,
    probe_capabilities,
    probe_os_release,
)
from tests.fs_helpers import write_executable
from tests.tool_install.simulated_hosts import make_host_root

# ── Host identity ────────────────────────────────────────────────────


class TestIdentifyHost:
    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("ubuntu", "ubuntu"),
            ("debian", "debian"),
            ("fedora", "fedora"),
            ("rocky", "rocky"),
            ("opensuse-leap", "opensuse-leap"),
            ("alpine", "alpine"),
            ("arch", "arch"),
        ],
    )
    def test_os_release_id(self, tmp_path: Path, host: str, expected: str):
        root = make_host_root(tmp_path, host)
        profile = identify_host(root=root)
        assert profile.identity == expected
        assert profile.source == "probe_os_release"

    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("legacy-debian", "debian"),
            ("legacy-centos", "rhel"),
            ("legacy-arch", "arch"),
        ],
    )
    def test_marker_file_fallback(self, tmp_path: Path, host: str, expected: str):
        root = make_host_root(tmp_path, host)
        assert identify_host(root=root).identity == expected

    def test_os_release_wins_over_markers(self, tmp_path: Path):
        # ubuntu ships /etc/debian_version too
        root = make_host_root(tmp_path, "ubuntu")
        assert identify_host(root=root).identity == "ubuntu"

    def test_unknown_when_nothing_matches(self, tmp_path: Path):
        root = make_host_root(tmp_path, "bare")
        profile = identify_host(root=root)
        assert profile.identity == UNKNOWN_HOST
        assert not profile.is_known

    def test_empty_id_falls_through(self, tmp_path: Path):
        root = make_host_root(tmp_path, "legacy-debian")
        (root / "etc" / "os-release").write_text('NAME="Custom"\nID=\n')
        assert identify_host(root=root).identity == "debian"

    def test_injected_probes_in_order(self):
        calls: list[str] = []

        def first(root: Path) -> str | None:
            calls.append("first")
            return None

        def second(root: Path) -> str | None:
            calls.append("second")
            return "gentoo"

        def third(root: Path) -> str | None:
            calls.append("third")
            return "never"

        profile = identify_host([first, second, third])
        assert profile.identity == "gentoo"
        assert profile.source == "second"
        assert calls == ["first", "second"]

    def test_no_probes(self):
        assert identify_host([]).identity == UNKNOWN_HOST


class TestProbeOsRelease:
    def test_quoted_and_upper_case(self, tmp_path: Path):
        (tmp_path / "etc").mkdir()
        (tmp_path / "etc" / "os-release").write_text('ID="Fedora"\n')
        assert probe_os_release(tmp_path) == "fedora"

    def test_ignores_id_like(self, tmp_path: Path):
        (tmp_path / "etc").mkdir()
        (tmp_path / "etc" / "os-release").write_text("ID_LIKE=debian\nID=pop\n")
        assert probe_os_release(tmp_path) == "pop"

    def test_missing_file(self, tmp_path: Path):
        assert probe_os_release(tmp_path) is None


# ── Capabilities ─────────────────────────────────────────────────────


class TestProbeCapabilities:
    def test_reports_each_tool(self, add_tools):
        path = add_tools("gcc", "curl")
        caps = probe_capabilities(["gcc", "make", "curl"], path)
        assert caps.has("gcc")
        assert not caps.has("make")
        assert caps.missing == ["make"]
        assert not caps.satisfied

    def test_all_present(self, add_tools):
        path = add_tools("gcc", "make", "curl")
        assert probe_capabilities(["gcc", "make", "curl"], path).satisfied

    def test_non_executable_is_missing(self, bin_dir: Path):
        (bin_dir / "gcc").write_text("not executable")
        assert not is_available("gcc", str(bin_dir))

    def test_repeatable(self, bin_dir: Path):
        path = str(bin_dir)
        before = probe_capabilities(["make"], path)
        write_executable(bin_dir / "make")
        after = probe_capabilities(["make"], path)
        assert before.missing == ["make"]
        assert after.satisfied
