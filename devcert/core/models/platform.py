"""
PlatformProfile — the resolved certificate tool for this machine.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

PlatformKind = Literal["linux", "darwin", "windows"]
Architecture = Literal["arm", "amd64"]


class PlatformProfile(BaseModel):
    """Computed once per run by the binary resolver, immutable thereafter."""

    model_config = ConfigDict(frozen=True)

    platform_kind: PlatformKind
    architecture: Architecture
    tool_version: str
    tool_path: Path

    @property
    def label(self) -> str:
        """e.g. ``linux-amd64``."""
        return f"{self.platform_kind}-{self.architecture}"
