"""
Environment context — the single source of truth for "which machine are we on."

Built ONCE at startup by whichever entry point launches a run and passed
explicitly into every component:

    - CLI:    main.py  → build_context(load_config(...))
    - Tests:  conftest → EnvironmentContext(...) with tmp paths

Nothing downstream reads the home directory, ``platform`` or ``os.environ``
directly; they read this value instead.
"""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from devcert.core.config.loader import DEFAULT_STORE_DIRNAME, DevcertConfig
from devcert.core.models.store import CertificateStore

logger = logging.getLogger(__name__)

# Bundled mkcert binaries live next to the package by default.
DEFAULT_BIN_DIR = Path(__file__).resolve().parent.parent / "mkcert-bin"

# platform.system() → platform kind
_PLATFORM_MAP: dict[str, str] = {
    "Linux": "linux",
    "Darwin": "darwin",
    "Windows": "windows",
}

# platform.machine() → architecture
_ARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "AMD64": "amd64",      # Windows
    "amd64": "amd64",      # FreeBSD style
    "arm": "arm",
    "armv6l": "arm",
    "armv7l": "arm",
}


def detect_platform_kind(system: str | None = None) -> str:
    """Normalise ``platform.system()``; unknown systems pass through lower-cased."""
    system = platform.system() if system is None else system
    return _PLATFORM_MAP.get(system, system.lower())


def detect_architecture(machine: str | None = None) -> str:
    """Normalise ``platform.machine()``; unknown machines pass through lower-cased."""
    machine = platform.machine() if machine is None else machine
    return _ARCH_MAP.get(machine, machine.lower())


def _is_root() -> bool:
    # os.geteuid does not exist on Windows
    return hasattr(os, "geteuid") and os.geteuid() == 0


class EnvironmentContext(BaseModel):
    """Read-only facts about the host, computed once per run."""

    model_config = ConfigDict(frozen=True)

    home_dir: Path
    platform_kind: str
    architecture: str
    store_dir: Path
    bin_dir: Path
    tool_version: str
    is_root: bool = False
    environ: dict[str, str] = Field(default_factory=dict)

    @property
    def store(self) -> CertificateStore:
        return CertificateStore(directory=self.store_dir)


def build_context(
    config: DevcertConfig | None = None,
    environ: Mapping[str, str] | None = None,
) -> EnvironmentContext:
    """Probe the host and freeze the result into an EnvironmentContext."""
    config = config or DevcertConfig()
    home = Path.home()
    ctx = EnvironmentContext(
        home_dir=home,
        platform_kind=detect_platform_kind(),
        architecture=detect_architecture(),
        store_dir=config.store_dir or home / DEFAULT_STORE_DIRNAME,
        bin_dir=config.bin_dir or DEFAULT_BIN_DIR,
        tool_version=config.tool_version,
        is_root=_is_root(),
        environ=dict(os.environ if environ is None else environ),
    )
    logger.debug(
        "Context: %s-%s store=%s bin=%s",
        ctx.platform_kind, ctx.architecture, ctx.store_dir, ctx.bin_dir,
    )
    return ctx
