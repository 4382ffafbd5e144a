"""
StepResult and ErrorKind — the result contract between components.

Every component (resolver, dependency installer, CA manager, certificate
tool) returns a StepResult. Components NEVER exit the process and never
raise for expected failures; the bootstrap runner is the single place
where results are mapped to exit codes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ErrorKind(str, Enum):
    """Terminal failure kinds of a bootstrap run."""

    UNSUPPORTED_PLATFORM = "UnsupportedPlatform"
    UNSUPPORTED_ARCHITECTURE = "UnsupportedArchitecture"
    MISSING_BINARY_FOR_PLATFORM = "MissingBinaryForPlatform"
    NO_PACKAGE_MANAGER_FOUND = "NoPackageManagerFound"
    DEPENDENCY_INSTALL_FAILED = "DependencyInstallFailed"
    CERTIFICATE_TOOL_INVOCATION_FAILED = "CertificateToolInvocationFailed"
    VERIFICATION_FAILED_AFTER_RUN = "VerificationFailedAfterRun"


class StepResult(BaseModel):
    """Outcome of a single bootstrap step.

    ``value`` carries the step's product when there is one (e.g. the
    resolved PlatformProfile). ``error_kind`` is set on failures only.
    """

    step: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    error_kind: ErrorKind | None = None
    value: Any = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step succeeded (or was a no-op)."""
        return self.status != "failed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(cls, step: str, output: str = "", **kwargs: Any) -> StepResult:
        """Create a success result."""
        return cls(step=step, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        step: str,
        error_kind: ErrorKind,
        error: str,
        **kwargs: Any,
    ) -> StepResult:
        """Create a failure result."""
        return cls(
            step=step,
            status="failed",
            error_kind=error_kind,
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(cls, step: str, reason: str = "", **kwargs: Any) -> StepResult:
        """Create a skip result."""
        return cls(step=step, status="skipped", output=reason, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view (``value`` is summarised, not serialised)."""
        d: dict[str, Any] = {
            "step": self.step,
            "status": self.status,
            "duration_ms": self.duration_ms,
        }
        if self.output:
            d["output"] = self.output
        if self.error:
            d["error"] = self.error
        if self.error_kind:
            d["error_kind"] = self.error_kind.value
        if self.metadata:
            d["metadata"] = self.metadata
        return d
