"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from devcert.core.context import EnvironmentContext
from devcert.core.services.binary_resolver import binary_name

TOOL_VERSION = "1.3.0"


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Return a (not yet created) certificate store directory."""
    return tmp_path / "store"


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Return a directory holding fake mkcert binaries for every supported pair."""
    d = tmp_path / "mkcert-bin"
    d.mkdir()
    for platform_kind in ("linux", "darwin", "windows"):
        for arch in ("arm", "amd64"):
            (d / binary_name(platform_kind, arch, TOOL_VERSION)).write_text("#!/bin/sh\n")
    return d


@pytest.fixture
def make_context(tmp_path: Path, store_dir: Path, bin_dir: Path):
    """Factory for EnvironmentContext values pointing at tmp paths."""

    def _make(**overrides) -> EnvironmentContext:
        fields = {
            "home_dir": tmp_path,
            "platform_kind": "linux",
            "architecture": "amd64",
            "store_dir": store_dir,
            "bin_dir": bin_dir,
            "tool_version": TOOL_VERSION,
            "is_root": False,
            "environ": {"PATH": "/usr/bin:/bin", "HOME": str(tmp_path)},
        }
        fields.update(overrides)
        return EnvironmentContext(**fields)

    return _make
