"""Adapters — certificate tool bindings.

Public re-exports for convenient access.
"""

from devcert.adapters.base import CertificateTool
from devcert.adapters.mkcert import MkcertTool
from devcert.adapters.mock import MockCertificateTool

__all__ = [
    "CertificateTool",
    "MkcertTool",
    "MockCertificateTool",
]
