"""
Mock certificate tool — test double for mkcert.

Used in ``--mock`` mode and in tests to exercise the CA manager without
touching real trust stores.  Writes placeholder PEM files where mkcert
would, so the completeness check behaves as it would after a real run.
Configurable to fail per operation.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from devcert.adapters.base import CertificateTool
from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.models.store import ROOT_CA_CERT, ROOT_CA_KEY

_PLACEHOLDER = "-----BEGIN MOCK {kind}-----\n{label}\n-----END MOCK {kind}-----\n"


@dataclass
class MockCall:
    """One recorded invocation."""

    operation: str
    env: dict[str, str]
    args: dict = field(default_factory=dict)


class MockCertificateTool(CertificateTool):
    """Records calls; by default succeeds and writes files."""

    def __init__(self, available: bool = True, write_files: bool = True):
        self._available = available
        self._write_files = write_files
        self._failures: dict[str, str] = {}
        self._call_log: list[MockCall] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[MockCall]:
        """All invocations this mock has received."""
        return self._call_log

    def calls(self, operation: str) -> list[MockCall]:
        return [c for c in self._call_log if c.operation == operation]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, operation: str, error: str = "Mock failure") -> None:
        """Make ``install_root`` or ``issue_leaf`` fail."""
        self._failures[operation] = error

    def reset(self) -> None:
        self._failures.clear()
        self._call_log.clear()

    def install_root(self, env: Mapping[str, str]) -> StepResult:
        self._call_log.append(MockCall("install_root", dict(env)))
        if "install_root" in self._failures:
            return self._fail("install_root")

        if self._write_files and env.get("CAROOT"):
            caroot = Path(env["CAROOT"])
            # Never overwrite an existing CA.
            _write_once(caroot / ROOT_CA_CERT, "CERTIFICATE", "root CA")
            _write_once(caroot / ROOT_CA_KEY, "PRIVATE KEY", "root CA")

        return StepResult.success("install_root", output="[mock] root CA installed")

    def issue_leaf(
        self,
        names: Sequence[str],
        cert_file: Path,
        key_file: Path,
        env: Mapping[str, str],
    ) -> StepResult:
        self._call_log.append(
            MockCall(
                "issue_leaf",
                dict(env),
                {"names": list(names), "cert_file": cert_file, "key_file": key_file},
            )
        )
        if "issue_leaf" in self._failures:
            return self._fail("issue_leaf")

        if self._write_files:
            label = " ".join(names)
            cert_file.write_text(_PLACEHOLDER.format(kind="CERTIFICATE", label=label))
            key_file.write_text(_PLACEHOLDER.format(kind="PRIVATE KEY", label=label))

        return StepResult.success("issue_leaf", output="[mock] leaf issued")

    def _fail(self, operation: str) -> StepResult:
        return StepResult.failure(
            operation,
            ErrorKind.CERTIFICATE_TOOL_INVOCATION_FAILED,
            self._failures[operation],
            metadata={"mock": True},
        )


def _write_once(path: Path, kind: str, label: str) -> None:
    if not path.exists():
        path.write_text(_PLACEHOLDER.format(kind=kind, label=label))
