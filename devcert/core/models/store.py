"""
CertificateStore — the on-disk certificate set.

The four file names are a contract with downstream consumers (a local
HTTPS server reads ``localhost.pem`` / ``localhost-key.pem``).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

ROOT_CA_CERT = "rootCA.pem"
ROOT_CA_KEY = "rootCA-key.pem"
LEAF_CERT = "localhost.pem"
LEAF_KEY = "localhost-key.pem"

ARTIFACT_NAMES: tuple[str, ...] = (ROOT_CA_CERT, ROOT_CA_KEY, LEAF_CERT, LEAF_KEY)


class CertificateStore(BaseModel):
    """A store directory and the paths of its four artifacts."""

    model_config = ConfigDict(frozen=True)

    directory: Path

    @property
    def root_ca_cert(self) -> Path:
        return self.directory / ROOT_CA_CERT

    @property
    def root_ca_key(self) -> Path:
        return self.directory / ROOT_CA_KEY

    @property
    def leaf_cert(self) -> Path:
        return self.directory / LEAF_CERT

    @property
    def leaf_key(self) -> Path:
        return self.directory / LEAF_KEY

    def artifact_paths(self) -> dict[str, Path]:
        """Map of artifact file name → absolute path."""
        return {name: self.directory / name for name in ARTIFACT_NAMES}
