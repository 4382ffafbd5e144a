"""
Certificate authority manager — drive a certificate tool to a complete store.

State machine:

    IDLE → ENSURE_STORE_DIR → CONFIGURE_ENVIRONMENT → INSTALL_ROOT_CA
         → ISSUE_LEAF_CERTIFICATE → VERIFY → SUCCESS | FAILURE

Tool failures are logged and deferred: VERIFY always runs, and the final
completeness check, not the tool's own exit status, decides the outcome.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from enum import Enum

from devcert.adapters.base import CertificateTool
from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.models.store import CertificateStore
from devcert.core.services.state_check import is_complete, missing_artifacts

logger = logging.getLogger(__name__)

STEP = "provision"

# mkcert reads this to locate / create its CA.
CAROOT_ENV = "CAROOT"

LEAF_NAMES: tuple[str, ...] = ("localhost", "127.0.0.1", "::1")


class ProvisionState(str, Enum):
    IDLE = "idle"
    ENSURE_STORE_DIR = "ensure_store_dir"
    CONFIGURE_ENVIRONMENT = "configure_environment"
    INSTALL_ROOT_CA = "install_root_ca"
    ISSUE_LEAF_CERTIFICATE = "issue_leaf_certificate"
    VERIFY = "verify"
    SUCCESS = "success"
    FAILURE = "failure"


def build_tool_environment(
    store: CertificateStore,
    environ: Mapping[str, str],
) -> dict[str, str]:
    """Copy of ``environ`` with CAROOT pointed at the store directory."""
    env = dict(environ)
    env[CAROOT_ENV] = str(store.directory)
    return env


class CertificateAuthorityManager:
    """Runs one provisioning pass against a store.

    Single use: create one per run. ``history`` records every state
    entered, ``tool_results`` every tool invocation.
    """

    def __init__(
        self,
        store: CertificateStore,
        tool: CertificateTool,
        environ: Mapping[str, str],
    ):
        self.store = store
        self.tool = tool
        self._environ = environ
        self.state = ProvisionState.IDLE
        self.history: list[ProvisionState] = [ProvisionState.IDLE]
        self.tool_results: list[StepResult] = []

    def _enter(self, state: ProvisionState) -> None:
        logger.debug("CA manager: %s → %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def provision(self) -> StepResult:
        """Create the store, install the CA, issue the leaf, verify."""
        start = time.monotonic()

        self._enter(ProvisionState.ENSURE_STORE_DIR)
        dir_ok = self._ensure_store_dir()

        if dir_ok:
            self._enter(ProvisionState.CONFIGURE_ENVIRONMENT)
            env = build_tool_environment(self.store, self._environ)

            self._enter(ProvisionState.INSTALL_ROOT_CA)
            root = self._call(lambda: self.tool.install_root(env))

            # Leaf issuance needs the CA; the first tool failure ends the sequence.
            if root.ok:
                self._enter(ProvisionState.ISSUE_LEAF_CERTIFICATE)
                self._call(
                    lambda: self.tool.issue_leaf(
                        LEAF_NAMES,
                        cert_file=self.store.leaf_cert,
                        key_file=self.store.leaf_key,
                        env=env,
                    )
                )

        self._enter(ProvisionState.VERIFY)
        complete = is_complete(self.store.directory)
        self._enter(ProvisionState.SUCCESS if complete else ProvisionState.FAILURE)

        duration_ms = int((time.monotonic() - start) * 1000)
        meta = {
            "states": [s.value for s in self.history[1:]],
            "tool_errors": [r.error for r in self.tool_results if r.failed],
        }

        if complete:
            logger.info("Certificates created in %s", self.store.directory)
            return StepResult.success(
                STEP,
                output=f"Certificates created in {self.store.directory}",
                duration_ms=duration_ms,
                metadata=meta,
            )

        missing = missing_artifacts(self.store.directory)
        meta["missing"] = missing
        return StepResult.failure(
            STEP,
            ErrorKind.VERIFICATION_FAILED_AFTER_RUN,
            f"Certificate set still incomplete after run; missing: {', '.join(missing)}",
            duration_ms=duration_ms,
            metadata=meta,
        )

    def _ensure_store_dir(self) -> bool:
        try:
            self.store.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create store directory %s: %s", self.store.directory, e)
            return False
        return True

    def _call(self, invoke) -> StepResult:
        result = invoke()
        self.tool_results.append(result)
        if result.failed:
            logger.error("%s: %s", result.step, result.error)
        else:
            logger.info("%s: ok", result.step)
        return result
