"""
Status use case — report on the certificate store without changing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from devcert.core.context import EnvironmentContext
from devcert.core.models.store import ARTIFACT_NAMES
from devcert.core.services.cert_inspect import describe_certificate
from devcert.core.services.state_check import missing_artifacts


@dataclass
class StatusResult:
    """Store completeness plus where each artifact lives."""

    store_dir: Path
    platform: str = ""
    missing: list[str] = field(default_factory=list)
    artifacts: dict[str, Path] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.missing

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "store_dir": str(self.store_dir),
            "platform": self.platform,
            "complete": self.complete,
            "missing": list(self.missing),
            "artifacts": {
                name: {"path": str(path), "exists": name not in self.missing}
                for name, path in self.artifacts.items()
            },
        }


def get_status(ctx: EnvironmentContext) -> StatusResult:
    store = ctx.store
    return StatusResult(
        store_dir=store.directory,
        platform=f"{ctx.platform_kind}-{ctx.architecture}",
        missing=missing_artifacts(store.directory),
        artifacts={name: store.directory / name for name in ARTIFACT_NAMES},
    )


def get_certificate_info(ctx: EnvironmentContext) -> dict[str, dict]:
    """Describe the root and leaf certificates that exist in the store."""
    store = ctx.store
    info: dict[str, dict] = {}
    for label, path in (("root", store.root_ca_cert), ("leaf", store.leaf_cert)):
        if path.is_file():
            info[label] = describe_certificate(path)
    return info
