"""
Tests for the bootstrap runner — end-to-end scenarios with test doubles.
"""

from pathlib import Path

import pytest

from devcert.adapters.mock import MockCertificateTool
from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.models.store import LEAF_CERT, LEAF_KEY, ROOT_CA_CERT, ROOT_CA_KEY
from devcert.core.services.dependency_installer import ensure_dependency
from devcert.core.services.state_check import is_complete
from devcert.core.use_cases.bootstrap import run_bootstrap
from tests.helpers import FakeRunner, FakeWhich, fill_store


class Recorder:
    """Counts calls to a bootstrap collaborator."""

    def __init__(self, fn):
        self.fn = fn
        self.calls = 0

    def __call__(self, *args, **kwargs):
        self.calls += 1
        return self.fn(*args, **kwargs)


@pytest.fixture
def tool() -> MockCertificateTool:
    return MockCertificateTool()


def _linux_dependency(*present: str, run: FakeRunner | None = None) -> Recorder:
    return Recorder(
        lambda ctx: ensure_dependency(ctx, which=FakeWhich(*present), run=run or FakeRunner())
    )


class TestIdempotence:
    def test_complete_store_is_a_noop(self, make_context, store_dir: Path, tool, monkeypatch):
        fill_store(store_dir)
        mkdirs: list[Path] = []
        monkeypatch.setattr(Path, "mkdir", lambda self, *a, **kw: mkdirs.append(self))
        dependency = _linux_dependency()
        factory = Recorder(lambda profile: tool)

        result = run_bootstrap(make_context(), tool_factory=factory, dependency_step=dependency)

        assert result.already_complete
        assert result.exit_code == 0
        assert dependency.calls == 0
        assert factory.calls == 0
        assert mkdirs == []
        assert tool.call_count == 0

    def test_complete_store_on_unsupported_machine_still_succeeds(
        self, make_context, store_dir: Path
    ):
        fill_store(store_dir)
        result = run_bootstrap(make_context(platform_kind="solaris", architecture="sparc"))
        assert result.exit_code == 0

    def test_second_run_after_success_is_noop(self, make_context, tool):
        ctx = make_context()
        first = run_bootstrap(ctx, tool_factory=lambda p: tool,
                              dependency_step=_linux_dependency("certutil"))
        second = run_bootstrap(ctx, tool_factory=lambda p: tool,
                               dependency_step=_linux_dependency("certutil"))
        assert first.ok and not first.already_complete
        assert second.already_complete
        assert len(tool.calls("install_root")) == 1


class TestScenarios:
    def test_a_empty_store_linux_certutil_present(self, make_context, store_dir: Path, tool):
        run = FakeRunner()
        dependency = _linux_dependency("certutil", "apt", run=run)

        result = run_bootstrap(
            make_context(), tool_factory=lambda p: tool, dependency_step=dependency
        )

        assert run.calls == []
        assert store_dir.is_dir()
        assert len(tool.calls("install_root")) == 1
        assert len(tool.calls("issue_leaf")) == 1
        assert is_complete(store_dir)
        assert result.exit_code == 0
        assert result.profile is not None
        assert result.profile.label == "linux-amd64"

    def test_b_only_ca_files_present(self, make_context, store_dir: Path, tool):
        fill_store(store_dir, [ROOT_CA_CERT, ROOT_CA_KEY])
        ca_before = (store_dir / ROOT_CA_CERT).read_text()

        result = run_bootstrap(
            make_context(),
            tool_factory=lambda p: tool,
            dependency_step=_linux_dependency("certutil"),
        )

        assert not result.already_complete
        assert len(tool.calls("install_root")) == 1
        assert (store_dir / LEAF_CERT).is_file()
        assert (store_dir / LEAF_KEY).is_file()
        assert (store_dir / ROOT_CA_CERT).read_text() == ca_before
        assert result.exit_code == 0

    def test_c_no_certutil_no_package_manager(self, make_context, store_dir: Path, tool):
        factory = Recorder(lambda p: tool)
        result = run_bootstrap(
            make_context(), tool_factory=factory, dependency_step=_linux_dependency()
        )

        assert result.error_kind is ErrorKind.NO_PACKAGE_MANAGER_FOUND
        assert result.exit_code == 1
        assert factory.calls == 0
        assert not store_dir.exists()

    def test_d_unsupported_architecture(self, make_context, store_dir: Path, tool):
        dependency = _linux_dependency("certutil")
        result = run_bootstrap(
            make_context(architecture="mips"),
            tool_factory=lambda p: tool,
            dependency_step=dependency,
        )

        assert result.error_kind is ErrorKind.UNSUPPORTED_ARCHITECTURE
        assert result.exit_code == 1
        assert dependency.calls == 0
        assert tool.call_count == 0
        assert not store_dir.exists()

    def test_unsupported_platform_creates_nothing(self, make_context, store_dir: Path):
        dependency = _linux_dependency("certutil")
        result = run_bootstrap(
            make_context(platform_kind="solaris", architecture="sparc"),
            dependency_step=dependency,
        )
        assert result.error_kind is ErrorKind.UNSUPPORTED_PLATFORM
        assert dependency.calls == 0
        assert not store_dir.exists()

    def test_missing_binary_stops_before_dependency(self, make_context, tmp_path: Path):
        dependency = _linux_dependency()
        result = run_bootstrap(
            make_context(bin_dir=tmp_path / "empty"), dependency_step=dependency
        )
        assert result.error_kind is ErrorKind.MISSING_BINARY_FOR_PLATFORM
        assert dependency.calls == 0

    def test_binary_not_required_for_mock_tool(self, make_context, tmp_path: Path, tool):
        result = run_bootstrap(
            make_context(bin_dir=tmp_path / "empty"),
            tool_factory=lambda p: tool,
            dependency_step=lambda ctx: StepResult.skip("install_dependency"),
            require_binary=False,
        )
        assert result.ok, result.error
        assert result.profile.tool_path.parent == tmp_path / "empty"
        assert len(tool.calls("install_root")) == 1


class TestFailurePropagation:
    def test_dependency_install_failure_is_fatal(self, make_context, store_dir: Path, tool):
        run = FakeRunner({"apt-get": {"ok": False, "error": "Command failed (exit 100)"}})
        result = run_bootstrap(
            make_context(),
            tool_factory=lambda p: tool,
            dependency_step=_linux_dependency("apt", run=run),
        )
        assert result.error_kind is ErrorKind.DEPENDENCY_INSTALL_FAILED
        assert result.exit_code == 1
        assert tool.call_count == 0
        assert not store_dir.exists()

    def test_tool_failure_ends_in_verification_failure(self, make_context, tool):
        tool.set_failure("issue_leaf", "mkcert exploded")
        result = run_bootstrap(
            make_context(),
            tool_factory=lambda p: tool,
            dependency_step=_linux_dependency("certutil"),
        )
        assert result.error_kind is ErrorKind.VERIFICATION_FAILED_AFTER_RUN
        assert result.exit_code == 1
        failed_steps = [s.step for s in result.steps if s.failed]
        assert failed_steps == ["issue_leaf", "provision"]

    def test_tool_factory_gets_resolved_profile(self, make_context, bin_dir: Path, tool):
        seen = []

        def factory(profile):
            seen.append(profile)
            return tool

        run_bootstrap(
            make_context(platform_kind="windows"),
            tool_factory=factory,
            dependency_step=lambda ctx: StepResult.skip("install_dependency"),
        )
        assert seen[0].tool_path == bin_dir / "mkcert-v1.3.0-windows-amd64.exe"


class TestToDict:
    def test_failure_dict(self, make_context):
        result = run_bootstrap(make_context(architecture="mips"))
        d = result.to_dict()
        assert d["ok"] is False
        assert d["error_kind"] == "UnsupportedArchitecture"
        assert d["steps"][0]["step"] == "resolve_binary"

    def test_success_dict(self, make_context, tool):
        result = run_bootstrap(
            make_context(),
            tool_factory=lambda p: tool,
            dependency_step=_linux_dependency("certutil"),
        )
        d = result.to_dict()
        assert d["ok"] is True
        assert d["platform"] == "linux-amd64"
        assert [s["step"] for s in d["steps"]] == [
            "resolve_binary",
            "install_dependency",
            "install_root",
            "issue_leaf",
            "provision",
        ]
