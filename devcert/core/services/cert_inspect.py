"""
Certificate inspection — read-only summaries of the store's PEM files.

Informational only (``devcert info``).  Completeness never depends on
this: the state check looks at file existence alone.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cryptography import x509

logger = logging.getLogger(__name__)


def describe_certificate(path: Path) -> dict:
    """Summarise a PEM certificate.

    Returns::

        {
            "path": "/home/me/.devcert/localhost.pem",
            "subject": "O=mkcert development certificate,...",
            "issuer": "O=mkcert development CA,...",
            "serial": "0x1f...",
            "not_before": "2026-10-19T00:00:00+00:00",
            "not_after": "2029-01-19T00:00:00+00:00",
            "names": ["localhost", "127.0.0.1", "::1"],
            "is_ca": False,
        }

    On unreadable or unparseable files the dict carries ``error`` instead.
    """
    info: dict = {"path": str(path)}
    try:
        data = path.read_bytes()
    except OSError as e:
        info["error"] = f"Cannot read: {e}"
        return info

    try:
        cert = x509.load_pem_x509_certificate(data)
    except ValueError as e:
        logger.debug("Not a PEM certificate: %s (%s)", path, e)
        info["error"] = "Not a valid PEM certificate"
        return info

    info.update({
        "subject": cert.subject.rfc4514_string(),
        "issuer": cert.issuer.rfc4514_string(),
        "serial": hex(cert.serial_number),
        "not_before": cert.not_valid_before_utc.isoformat(),
        "not_after": cert.not_valid_after_utc.isoformat(),
        "names": _subject_alt_names(cert),
        "is_ca": _is_ca(cert),
    })
    return info


def _subject_alt_names(cert: x509.Certificate) -> list[str]:
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return []
    names: list[str] = list(san.get_values_for_type(x509.DNSName))
    names.extend(str(ip) for ip in san.get_values_for_type(x509.IPAddress))
    return names


def _is_ca(cert: x509.Certificate) -> bool:
    try:
        return cert.extensions.get_extension_for_class(x509.BasicConstraints).value.ca
    except x509.ExtensionNotFound:
        return False
