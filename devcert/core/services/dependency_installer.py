"""
Dependency installer — make sure Mozilla nss is on the host.

mkcert needs nss (``certutil``) to register the CA with Firefox, and
with Chrome on Linux.  Windows has no equivalent step.

    linux:   certutil on PATH? → done
             else apt → yum → pacman, first available installs nss tools
    darwin:  brew → macports
             brew: ``brew list nss`` → done, else ``brew install nss``
    other:   nothing to do

A present dependency triggers zero mutating calls.
"""

from __future__ import annotations

import logging
import shutil

from devcert.core.context import EnvironmentContext
from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.services.package_managers import (
    LINUX_CANDIDATES,
    MACOS_CANDIDATES,
    STEP,
    PackageManagerKind,
    Which,
    detect_package_manager,
)
from devcert.core.services.subprocess_runner import CommandRunner, run_command

logger = logging.getLogger(__name__)

CERTUTIL = "certutil"

_MANUAL_HINT = (
    "Please install certutil manually and run devcert again. For more "
    "instructions on installing mkcert dependencies, please see "
    "https://github.com/FiloSottile/mkcert/"
)


def ensure_dependency(
    ctx: EnvironmentContext,
    *,
    which: Which = shutil.which,
    run: CommandRunner = run_command,
) -> StepResult:
    """Install nss if this platform needs it and it is missing.

    Returns:
        Skipped when already present or not needed, success after an
        install, or a failure with NoPackageManagerFound /
        DependencyInstallFailed. Both failures are fatal for the run.
    """
    if ctx.platform_kind == "linux":
        return _ensure_linux(ctx, which, run)
    if ctx.platform_kind == "darwin":
        return _ensure_macos(ctx, which, run)
    return StepResult.skip(STEP, f"No trust-store dependency on {ctx.platform_kind}")


def _ensure_linux(
    ctx: EnvironmentContext,
    which: Which,
    run: CommandRunner,
) -> StepResult:
    if which(CERTUTIL) is not None:
        logger.debug("certutil already present")
        return StepResult.skip(STEP, "certutil already installed")

    pm = detect_package_manager(LINUX_CANDIDATES, which)
    if pm.kind is PackageManagerKind.NONE:
        return StepResult.failure(
            STEP,
            ErrorKind.NO_PACKAGE_MANAGER_FOUND,
            "No supported package manager found for installing certutil on "
            f"Linux (tried apt, yum, and pacman). {_MANUAL_HINT}",
        )

    return pm.install(ctx, run)


def _ensure_macos(
    ctx: EnvironmentContext,
    which: Which,
    run: CommandRunner,
) -> StepResult:
    pm = detect_package_manager(MACOS_CANDIDATES, which)

    if pm.kind is PackageManagerKind.NONE:
        # TODO: bootstrap Homebrew here, then continue with the brew path.
        logger.warning("Neither Homebrew nor MacPorts is installed")
        return StepResult.failure(
            STEP,
            ErrorKind.NO_PACKAGE_MANAGER_FOUND,
            "Neither Homebrew nor MacPorts is installed; installing Homebrew "
            "automatically is not supported. Install Homebrew and re-run devcert.",
        )

    if pm.kind is PackageManagerKind.MACPORTS:
        logger.info("MacPorts is installed")

    if pm.is_installed(ctx, run):
        logger.debug("nss already installed via %s", pm.name)
        return StepResult.skip(STEP, f"nss already installed ({pm.name})")

    result = pm.install(ctx, run)
    if result.failed and pm.kind is PackageManagerKind.BREW:
        logger.error(
            "Error while attempting to install required dependency (nss) with "
            "Homebrew. Please install the dependency manually and re-run devcert."
        )
    return result
