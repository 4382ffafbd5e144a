"""
Store state checks — is the certificate set complete?

Existence only; file contents are never parsed here.
"""

from __future__ import annotations

from pathlib import Path

from devcert.core.models.store import ARTIFACT_NAMES


def missing_artifacts(store_dir: Path) -> list[str]:
    """Names of the store artifacts that do not exist, in contract order."""
    return [name for name in ARTIFACT_NAMES if not (store_dir / name).is_file()]


def is_complete(store_dir: Path) -> bool:
    """True iff all four artifacts exist. A missing directory is just False."""
    return not missing_artifacts(store_dir)
