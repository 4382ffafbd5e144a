"""
Package managers — the closed set of ways to get nss onto a host.

Each variant carries its own availability probe, "already installed"
probe and install command, so callers dispatch uniformly:

    pm = detect_package_manager(LINUX_CANDIDATES)
    result = pm.install(ctx)

Variants: apt, yum, pacman (Linux); brew, macports (macOS); none.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.services.subprocess_runner import CommandRunner, run_command

if TYPE_CHECKING:
    from devcert.core.context import EnvironmentContext

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]

STEP = "install_dependency"


class PackageManagerKind(str, Enum):
    APT = "apt"
    YUM = "yum"
    PACMAN = "pacman"
    BREW = "brew"
    MACPORTS = "macports"
    NONE = "none"


@dataclass(frozen=True)
class PackageManagerProfile:
    """One package manager and how to install nss with it.

    Attributes:
        kind: Variant tag.
        probe_binary: Executable whose presence on PATH means "available".
            None for the ``none`` variant.
        package: Name of the nss package in this manager's naming.
        install_cmd: Full install command (without ``sudo``).
        installed_check_cmd: Command that exits 0 iff the package is
            installed. Empty → no check, treat as not installed.
        env_overrides: Extra env vars for the install (non-interactive mode).
        needs_sudo: Whether the install must run as root.
        supported: False for managers we can detect but not drive.
    """

    kind: PackageManagerKind
    probe_binary: str | None
    package: str = ""
    install_cmd: tuple[str, ...] = ()
    installed_check_cmd: tuple[str, ...] = ()
    env_overrides: Mapping[str, str] = field(default_factory=dict)
    needs_sudo: bool = False
    supported: bool = True

    @property
    def name(self) -> str:
        return self.kind.value

    def is_available(self, which: Which = shutil.which) -> bool:
        """Is this manager's binary on PATH?"""
        if self.probe_binary is None:
            return False
        return which(self.probe_binary) is not None

    def is_installed(
        self,
        ctx: EnvironmentContext,
        run: CommandRunner = run_command,
    ) -> bool:
        """Is the nss package already installed according to this manager?"""
        if not self.installed_check_cmd:
            return False
        r = run(list(self.installed_check_cmd), env=ctx.environ)
        return bool(r["ok"])

    def install(
        self,
        ctx: EnvironmentContext,
        run: CommandRunner = run_command,
    ) -> StepResult:
        """Install the nss package. Never raises."""
        if self.kind is PackageManagerKind.NONE:
            return StepResult.failure(
                STEP,
                ErrorKind.NO_PACKAGE_MANAGER_FOUND,
                "No supported package manager found",
            )

        if not self.supported:
            return StepResult.failure(
                STEP,
                ErrorKind.DEPENDENCY_INSTALL_FAILED,
                f"Installing nss with {self.name} is not supported. "
                "Please install nss manually and re-run devcert.",
                metadata={"package_manager": self.name},
            )

        logger.info("Installing %s with %s", self.package, self.name)
        r = run(
            list(self.install_cmd),
            needs_sudo=self.needs_sudo,
            is_root=ctx.is_root,
            env=ctx.environ,
            env_overrides=self.env_overrides,
        )
        meta = {"package_manager": self.name, "command": " ".join(self.install_cmd)}
        if not r["ok"]:
            detail = r.get("stderr") or r.get("error", "")
            return StepResult.failure(
                STEP,
                ErrorKind.DEPENDENCY_INSTALL_FAILED,
                f"Error while installing {self.package} with {self.name}: {detail}".strip(),
                metadata=meta,
            )
        return StepResult.success(
            STEP,
            output=f"Installed {self.package} with {self.name}",
            duration_ms=r.get("elapsed_ms", 0),
            metadata=meta,
        )


APT = PackageManagerProfile(
    kind=PackageManagerKind.APT,
    probe_binary="apt",
    package="libnss3-tools",
    install_cmd=("apt-get", "install", "-y", "-q", "libnss3-tools"),
    env_overrides={"DEBIAN_FRONTEND": "noninteractive"},
    needs_sudo=True,
)

YUM = PackageManagerProfile(
    kind=PackageManagerKind.YUM,
    probe_binary="yum",
    package="nss-tools",
    install_cmd=("yum", "install", "-y", "nss-tools"),
    needs_sudo=True,
)

PACMAN = PackageManagerProfile(
    kind=PackageManagerKind.PACMAN,
    probe_binary="pacman",
    package="nss",
    install_cmd=("pacman", "-S", "--noconfirm", "nss"),
    needs_sudo=True,
)

# nss is keg-only in Homebrew (not linked into the prefix), so certutil on
# PATH says nothing; ask brew instead.
BREW = PackageManagerProfile(
    kind=PackageManagerKind.BREW,
    probe_binary="brew",
    package="nss",
    install_cmd=("brew", "install", "nss"),
    installed_check_cmd=("brew", "list", "nss"),
)

MACPORTS = PackageManagerProfile(
    kind=PackageManagerKind.MACPORTS,
    probe_binary="port",
    package="nss",
    supported=False,
)

NONE = PackageManagerProfile(kind=PackageManagerKind.NONE, probe_binary=None)

# Detection order matters: first available wins.
LINUX_CANDIDATES: tuple[PackageManagerProfile, ...] = (APT, YUM, PACMAN)
MACOS_CANDIDATES: tuple[PackageManagerProfile, ...] = (BREW, MACPORTS)


def detect_package_manager(
    candidates: tuple[PackageManagerProfile, ...],
    which: Which = shutil.which,
) -> PackageManagerProfile:
    """First available candidate, or the ``NONE`` variant."""
    for pm in candidates:
        if pm.is_available(which):
            logger.debug("Package manager detected: %s", pm.name)
            return pm
    return NONE
