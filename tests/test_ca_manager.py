"""
Tests for the certificate authority manager state machine.
"""

from pathlib import Path

from devcert.adapters.mock import MockCertificateTool
from devcert.core.models.result import ErrorKind
from devcert.core.models.store import ROOT_CA_CERT, CertificateStore
from devcert.core.services.ca_manager import (
    CAROOT_ENV,
    LEAF_NAMES,
    CertificateAuthorityManager,
    ProvisionState,
    build_tool_environment,
)
from devcert.core.services.state_check import is_complete
from tests.helpers import fill_store

ENV = {"PATH": "/usr/bin", "LANG": "C.UTF-8"}


def _manager(store_dir: Path, tool=None) -> CertificateAuthorityManager:
    return CertificateAuthorityManager(
        CertificateStore(directory=store_dir),
        tool or MockCertificateTool(),
        ENV,
    )


class TestBuildToolEnvironment:
    def test_sets_caroot_and_keeps_rest(self, store_dir: Path):
        env = build_tool_environment(CertificateStore(directory=store_dir), ENV)
        assert env[CAROOT_ENV] == str(store_dir)
        assert env["LANG"] == "C.UTF-8"

    def test_does_not_mutate_input(self, store_dir: Path):
        source = dict(ENV)
        build_tool_environment(CertificateStore(directory=store_dir), source)
        assert CAROOT_ENV not in source


class TestProvision:
    def test_happy_path(self, store_dir: Path):
        tool = MockCertificateTool()
        manager = _manager(store_dir, tool)
        result = manager.provision()

        assert result.ok
        assert is_complete(store_dir)
        assert manager.state is ProvisionState.SUCCESS
        assert manager.history == [
            ProvisionState.IDLE,
            ProvisionState.ENSURE_STORE_DIR,
            ProvisionState.CONFIGURE_ENVIRONMENT,
            ProvisionState.INSTALL_ROOT_CA,
            ProvisionState.ISSUE_LEAF_CERTIFICATE,
            ProvisionState.VERIFY,
            ProvisionState.SUCCESS,
        ]

    def test_tool_receives_caroot_and_fixed_names(self, store_dir: Path):
        tool = MockCertificateTool()
        _manager(store_dir, tool).provision()

        (root_call,) = tool.calls("install_root")
        (leaf_call,) = tool.calls("issue_leaf")
        assert root_call.env[CAROOT_ENV] == str(store_dir)
        assert leaf_call.env[CAROOT_ENV] == str(store_dir)
        assert leaf_call.args["names"] == list(LEAF_NAMES)
        assert leaf_call.args["cert_file"] == store_dir / "localhost.pem"
        assert leaf_call.args["key_file"] == store_dir / "localhost-key.pem"

    def test_existing_directory_is_fine(self, store_dir: Path):
        store_dir.mkdir()
        assert _manager(store_dir).provision().ok

    def test_root_failure_skips_leaf_and_still_verifies(self, store_dir: Path):
        tool = MockCertificateTool()
        tool.set_failure("install_root", "trust store locked")
        manager = _manager(store_dir, tool)
        result = manager.provision()

        assert tool.calls("issue_leaf") == []
        assert ProvisionState.VERIFY in manager.history
        assert result.error_kind is ErrorKind.VERIFICATION_FAILED_AFTER_RUN
        assert result.metadata["tool_errors"] == ["trust store locked"]

    def test_tool_failure_is_not_authoritative(self, store_dir: Path):
        # The tool reports failure but the files are there anyway.
        fill_store(store_dir)
        tool = MockCertificateTool()
        tool.set_failure("issue_leaf")
        result = _manager(store_dir, tool).provision()
        assert result.ok
        assert result.metadata["tool_errors"] == ["Mock failure"]

    def test_tool_that_writes_nothing_fails_verification(self, store_dir: Path):
        manager = _manager(store_dir, MockCertificateTool(write_files=False))
        result = manager.provision()
        assert result.error_kind is ErrorKind.VERIFICATION_FAILED_AFTER_RUN
        assert manager.state is ProvisionState.FAILURE
        assert len(result.metadata["missing"]) == 4

    def test_existing_root_ca_is_preserved(self, store_dir: Path):
        fill_store(store_dir, [ROOT_CA_CERT, "rootCA-key.pem"])
        original = (store_dir / ROOT_CA_CERT).read_text()
        assert _manager(store_dir).provision().ok
        assert (store_dir / ROOT_CA_CERT).read_text() == original

    def test_uncreatable_store_dir(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        tool = MockCertificateTool()
        manager = _manager(blocker / "store", tool)
        result = manager.provision()
        assert result.error_kind is ErrorKind.VERIFICATION_FAILED_AFTER_RUN
        assert tool.call_count == 0
        assert ProvisionState.VERIFY in manager.history

    def test_reported_states_match_history(self, store_dir: Path):
        manager = _manager(store_dir)
        result = manager.provision()
        assert result.metadata["states"] == [s.value for s in manager.history[1:]]
        assert result.metadata["states"][-2:] == ["verify", "success"]

    def test_reported_states_end_in_failure(self, store_dir: Path):
        manager = _manager(store_dir, MockCertificateTool(write_files=False))
        result = manager.provision()
        assert result.metadata["states"] == [s.value for s in manager.history[1:]]
        assert result.metadata["states"][-1] == "failure"
        assert result.metadata["states"].count("failure") == 1
