from __future__ import annotations

import datetime
import socket
import ssl
import threading
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from core.domain.models import TargetAddress
from core.errors import FetchError


@dataclass
class FakeFetcher:
    """In-memory fetcher: returns canned DER blobs or raises."""

    certificates: list[bytes] = field(default_factory=list)
    error: Exception | None = None
    calls: list[tuple[TargetAddress, float]] = field(default_factory=list)

    def fetch(self, target: TargetAddress, *, timeout: float) -> list[bytes]:
        self.calls.append((target, timeout))
        if self.error is not None:
            raise self.error
        return list(self.certificates)


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher(certificates=[b"\x30\x03leaf", b"\x30\x03intm"])


@pytest.fixture
def failing_fetcher() -> FakeFetcher:
    return FakeFetcher(error=FetchError("connection to example.com:443 timed out"))


@dataclass
class IssuedCert:
    cert: x509.Certificate
    key: ec.EllipticCurvePrivateKey

    @property
    def der(self) -> bytes:
        return self.cert.public_bytes(serialization.Encoding.DER)

    @property
    def pem(self) -> bytes:
        return self.cert.public_bytes(serialization.Encoding.PEM)

    @property
    def key_pem(self) -> bytes:
        return self.key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )


def issue_certificate(common_name: str, issuer: IssuedCert | None = None, *, ca: bool = False) -> IssuedCert:
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer.cert.subject if issuer else subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
    )
    if not ca:
        builder = builder.add_extension(x509.SubjectAlternativeName([x509.DNSName("localhost")]), critical=False)
    signing_key = issuer.key if issuer else key
    return IssuedCert(cert=builder.sign(signing_key, hashes.SHA256()), key=key)


@pytest.fixture(scope="session")
def self_signed() -> IssuedCert:
    return issue_certificate("localhost")


@pytest.fixture(scope="session")
def leaf_and_intermediate() -> tuple[IssuedCert, IssuedCert]:
    root = issue_certificate("certgrab test root", ca=True)
    intermediate = issue_certificate("certgrab test intermediate", root, ca=True)
    leaf = issue_certificate("localhost", intermediate)
    return leaf, intermediate


class LocalTLSServer:
    """Accepts one connection, completes the handshake, then hangs up."""

    def __init__(self, tmp_path: Path, chain: list[IssuedCert]) -> None:
        cert_file = tmp_path / "server-chain.pem"
        key_file = tmp_path / "server-key.pem"
        cert_file.write_bytes(b"".join(c.pem for c in chain))
        key_file.write_bytes(chain[0].key_pem)

        self._context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        self._context.load_cert_chain(str(cert_file), str(key_file))

        self._listener = socket.create_server(("127.0.0.1", 0))
        self._listener.settimeout(5)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        conn.settimeout(5)
        try:
            with self._context.wrap_socket(conn, server_side=True) as tls:
                try:
                    tls.recv(1)
                except (OSError, ssl.SSLError):
                    pass
        except (OSError, ssl.SSLError):
            conn.close()

    def __enter__(self) -> "LocalTLSServer":
        self._thread.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._listener.close()
        self._thread.join(timeout=5)

    @property
    def target(self) -> TargetAddress:
        return TargetAddress(host="127.0.0.1", port=self.port)


@pytest.fixture
def tls_server_factory(tmp_path: Path):
    def _factory(chain: list[IssuedCert]) -> LocalTLSServer:
        return LocalTLSServer(tmp_path, chain)

    return _factory


@pytest.fixture
def silent_listener():
    """TCP listener that never accepts: connect succeeds, handshake never does."""

    listener = socket.create_server(("127.0.0.1", 0), backlog=4)
    try:
        yield TargetAddress(host="127.0.0.1", port=listener.getsockname()[1])
    finally:
        listener.close()


@pytest.fixture
def closed_port() -> TargetAddress:
    sock = socket.create_server(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return TargetAddress(host="127.0.0.1", port=port)


@pytest.fixture
def fetcher_factory():
    return FakeFetcher
