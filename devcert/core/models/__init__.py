"""
Domain models — Pydantic types for devcert.

All models are re-exported here for convenient access:

    from devcert.core.models import CertificateStore, PlatformProfile, StepResult
"""

from devcert.core.models.platform import PlatformProfile
from devcert.core.models.result import ErrorKind, StepResult
from devcert.core.models.store import (
    ARTIFACT_NAMES,
    LEAF_CERT,
    LEAF_KEY,
    ROOT_CA_CERT,
    ROOT_CA_KEY,
    CertificateStore,
)

__all__ = [
    "ARTIFACT_NAMES",
    # store.py
    "CertificateStore",
    # result.py
    "ErrorKind",
    "LEAF_CERT",
    "LEAF_KEY",
    # platform.py
    "PlatformProfile",
    "ROOT_CA_CERT",
    "ROOT_CA_KEY",
    "StepResult",
]
