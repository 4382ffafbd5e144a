"""
Bootstrap use case — ensure a complete local TLS certificate set.

    check store → resolve mkcert → ensure nss → provision CA + leaf → verify

The only place where step results become an exit code.  Components
report; this module decides.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from devcert.adapters.base import CertificateTool
from devcert.adapters.mkcert import MkcertTool
from devcert.core.context import EnvironmentContext
from devcert.core.models.platform import PlatformProfile
from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.services.binary_resolver import resolve
from devcert.core.services.ca_manager import CertificateAuthorityManager
from devcert.core.services.dependency_installer import ensure_dependency
from devcert.core.services.state_check import is_complete, missing_artifacts

logger = logging.getLogger(__name__)

ToolFactory = Callable[[PlatformProfile], CertificateTool]
DependencyStep = Callable[[EnvironmentContext], StepResult]


@dataclass
class BootstrapResult:
    """Outcome of one bootstrap run."""

    store_dir: Path
    already_complete: bool = False
    profile: PlatformProfile | None = None
    steps: list[StepResult] = field(default_factory=list)
    error_kind: ErrorKind | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "ok": self.ok,
            "store_dir": str(self.store_dir),
            "already_complete": self.already_complete,
            "steps": [s.to_dict() for s in self.steps],
        }
        if self.profile:
            result["platform"] = self.profile.label
            result["tool"] = str(self.profile.tool_path)
        if self.error_kind:
            result["error_kind"] = self.error_kind.value
            result["error"] = self.error
        return result

    def _fail(self, step: StepResult) -> BootstrapResult:
        self.error_kind = step.error_kind
        self.error = step.error
        logger.error("%s", step.error)
        return self


def run_bootstrap(
    ctx: EnvironmentContext,
    *,
    tool_factory: ToolFactory = MkcertTool.from_profile,
    dependency_step: DependencyStep = ensure_dependency,
    require_binary: bool = True,
) -> BootstrapResult:
    """Run the idempotent bootstrap.

    Args:
        ctx: Host facts, computed once by the caller.
        tool_factory: Builds the certificate tool from the resolved profile.
        dependency_step: Ensures the trust-store dependency.
        require_binary: Check the mkcert binary exists (off for mock runs).

    Returns:
        BootstrapResult; ``exit_code`` is 0 on success (including "already
        complete") and 1 on any failure.
    """
    store = ctx.store
    result = BootstrapResult(store_dir=store.directory)

    if is_complete(store.directory):
        logger.info("Local development TLS certificate exists in %s", store.directory)
        result.already_complete = True
        return result

    logger.info(
        "Certificate set incomplete (missing: %s)",
        ", ".join(missing_artifacts(store.directory)),
    )

    # Resolution must fail before anything on the host is touched.
    resolution = resolve(
        ctx.platform_kind,
        ctx.architecture,
        bin_dir=ctx.bin_dir,
        version=ctx.tool_version,
        require_binary=require_binary,
    )
    result.steps.append(resolution)
    if resolution.failed:
        return result._fail(resolution)
    result.profile = resolution.value

    dependency = dependency_step(ctx)
    result.steps.append(dependency)
    if dependency.failed:
        return result._fail(dependency)

    manager = CertificateAuthorityManager(store, tool_factory(result.profile), ctx.environ)
    provision = manager.provision()
    result.steps.extend(manager.tool_results)
    result.steps.append(provision)
    if provision.failed:
        return result._fail(provision)

    return result
