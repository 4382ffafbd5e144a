"""
Certificate tool base — the capability contract between core and tool.

The CA manager only talks to certificate tools through this interface,
never to a specific binary layout.  Implementations:

    - MkcertTool            runs the resolved mkcert binary
    - MockCertificateTool   writes placeholder files, records calls
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from devcert.core.models.result import StepResult


class CertificateTool(ABC):
    """Abstract base class for certificate tools.

    Tools perform external side effects and return results.
    They NEVER raise exceptions — failures are captured in the StepResult
    with ``error_kind=CertificateToolInvocationFailed``.

    ``env`` is the full child environment; the CA root location is
    passed through it (``CAROOT``).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The tool identifier (e.g., 'mkcert', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool can be invoked. Never raises."""

    @abstractmethod
    def install_root(self, env: Mapping[str, str]) -> StepResult:
        """Create the root CA if needed and add it to the trust stores.

        Must be safe to call when a root CA already exists.
        """

    @abstractmethod
    def issue_leaf(
        self,
        names: Sequence[str],
        cert_file: Path,
        key_file: Path,
        env: Mapping[str, str],
    ) -> StepResult:
        """Issue a leaf certificate for ``names`` signed by the root CA."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
