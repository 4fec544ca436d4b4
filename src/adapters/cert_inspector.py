"""Certificate summaries for the `--info` table.

Parsing is best-effort: a blob the `cryptography` loader rejects still gets
a SHA-256 fingerprint so the operator can tell what was captured.
"""

from __future__ import annotations

import hashlib

from cryptography import x509

from core.domain.models import CertificateSummary


def summarize_certificate(der: bytes) -> CertificateSummary:
    fingerprint = hashlib.sha256(der).hexdigest()
    try:
        cert = x509.load_der_x509_certificate(der)
    except ValueError:
        return CertificateSummary(sha256=fingerprint)

    return CertificateSummary(
        sha256=fingerprint,
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        serial_number=format(cert.serial_number, "x"),
        not_valid_before=cert.not_valid_before_utc,
        not_valid_after=cert.not_valid_after_utc,
    )


def summarize_chain(certificates: list[bytes]) -> list[CertificateSummary]:
    return [summarize_certificate(der) for der in certificates]
