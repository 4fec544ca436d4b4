"""PEM/DER encoding of certificate bytes.

The PEM envelope only wraps bytes: the payload is never parsed, so any byte
string survives an encode/decode round trip unchanged.
"""

from __future__ import annotations

import ssl

from core.domain.output_format import OutputFormat


def der_to_pem(der: bytes) -> bytes:
    """Wrap raw DER bytes in a `CERTIFICATE` PEM block (64-char lines)."""

    return ssl.DER_cert_to_PEM_cert(der).encode("ascii")


def pem_to_der(pem: bytes | str) -> bytes:
    """Decode a single `CERTIFICATE` PEM block back to its DER bytes."""

    if isinstance(pem, bytes):
        pem = pem.decode("ascii")
    return ssl.PEM_cert_to_DER_cert(pem)


def encode_certificate(der: bytes, output_format: OutputFormat) -> bytes:
    if output_format is OutputFormat.DER:
        return der
    return der_to_pem(der)
