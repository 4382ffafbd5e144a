"""
mkcert adapter — drive the bundled mkcert binary.

    mkcert -install
    mkcert -key-file=<key> -cert-file=<cert> localhost 127.0.0.1 ::1

mkcert reads ``CAROOT`` from its environment to find (or create) the CA.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from devcert.adapters.base import CertificateTool
from devcert.core.models.platform import PlatformProfile
from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.services.subprocess_runner import CommandRunner, run_command

logger = logging.getLogger(__name__)


class MkcertTool(CertificateTool):
    """Certificate tool backed by an mkcert executable."""

    def __init__(self, binary: Path, run: CommandRunner = run_command):
        self._binary = binary
        self._run = run

    @classmethod
    def from_profile(cls, profile: PlatformProfile) -> MkcertTool:
        return cls(profile.tool_path)

    @property
    def name(self) -> str:
        return "mkcert"

    @property
    def binary(self) -> Path:
        return self._binary

    def is_available(self) -> bool:
        return self._binary.is_file()

    def install_root(self, env: Mapping[str, str]) -> StepResult:
        return self._invoke("install_root", ["-install"], env)

    def issue_leaf(
        self,
        names: Sequence[str],
        cert_file: Path,
        key_file: Path,
        env: Mapping[str, str],
    ) -> StepResult:
        args = [f"-key-file={key_file}", f"-cert-file={cert_file}", *names]
        return self._invoke("issue_leaf", args, env)

    def _invoke(self, step: str, args: list[str], env: Mapping[str, str]) -> StepResult:
        cmd = [str(self._binary), *args]
        r = self._run(cmd, env=env)
        meta = {"command": " ".join(cmd)}

        if r["ok"]:
            return StepResult.success(
                step,
                output=r.get("stdout", ""),
                duration_ms=r.get("elapsed_ms", 0),
                metadata=meta,
            )

        detail = r.get("stderr") or r.get("error", "")
        return StepResult.failure(
            step,
            ErrorKind.CERTIFICATE_TOOL_INVOCATION_FAILED,
            f"mkcert {step} failed: {detail}".strip(),
            duration_ms=r.get("elapsed_ms", 0),
            metadata={**meta, "returncode": r.get("returncode")},
        )
