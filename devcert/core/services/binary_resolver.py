"""
Binary resolver — which bundled mkcert binary belongs to this machine.

Pure lookup: builds the versioned, platform-qualified file name and checks
it exists.  Runs before anything on the host is touched, so an unsupported
machine fails with nothing to undo.

    <bin_dir>/mkcert-v<version>-<platform>-<arch>[.exe]
"""

from __future__ import annotations

import logging
from pathlib import Path

from devcert.core.models.platform import PlatformProfile
from devcert.core.models.result import ErrorKind, StepResult

logger = logging.getLogger(__name__)

STEP = "resolve_binary"

SUPPORTED_PLATFORMS: tuple[str, ...] = ("linux", "darwin", "windows")
SUPPORTED_ARCHITECTURES: tuple[str, ...] = ("arm", "amd64")


def binary_name(platform_kind: str, architecture: str, version: str) -> str:
    """File name of the mkcert release asset for a platform pair."""
    name = f"mkcert-v{version}-{platform_kind}-{architecture}"
    if platform_kind == "windows":
        name += ".exe"
    return name


def resolve(
    platform_kind: str,
    architecture: str,
    *,
    bin_dir: Path,
    version: str,
    require_binary: bool = True,
) -> StepResult:
    """Resolve the certificate tool for a platform pair.

    With ``require_binary=False`` (mock runs) the path is computed but not
    checked, so no bundled binaries are needed.

    Returns:
        Success with ``value`` set to the PlatformProfile, or a failure
        with one of UnsupportedPlatform, UnsupportedArchitecture,
        MissingBinaryForPlatform.
    """
    if platform_kind not in SUPPORTED_PLATFORMS:
        return StepResult.failure(
            STEP,
            ErrorKind.UNSUPPORTED_PLATFORM,
            f"Unsupported platform: {platform_kind}",
            metadata={"platform": platform_kind},
        )

    if architecture not in SUPPORTED_ARCHITECTURES:
        return StepResult.failure(
            STEP,
            ErrorKind.UNSUPPORTED_ARCHITECTURE,
            f"Unsupported architecture: {architecture}",
            metadata={"architecture": architecture},
        )

    tool_path = bin_dir / binary_name(platform_kind, architecture, version)
    if require_binary and not tool_path.is_file():
        return StepResult.failure(
            STEP,
            ErrorKind.MISSING_BINARY_FOR_PLATFORM,
            f"Unsupported platform + architecture combination for "
            f"{platform_kind}-{architecture} (no binary at {tool_path}). "
            "Point bin_dir in devcert.yml or DEVCERT_BIN_DIR at a directory "
            f"containing {tool_path.name}.",
            metadata={"path": str(tool_path)},
        )

    profile = PlatformProfile(
        platform_kind=platform_kind,  # type: ignore[arg-type]
        architecture=architecture,  # type: ignore[arg-type]
        tool_version=version,
        tool_path=tool_path,
    )
    logger.debug("Resolved mkcert for %s: %s", profile.label, tool_path)
    return StepResult.success(STEP, output=str(tool_path), value=profile)
