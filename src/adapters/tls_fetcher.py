"""Fetcher TLS basado en pyOpenSSL.

Por qué pyOpenSSL y no `ssl`:
- `Connection.get_peer_cert_chain()` devuelve la cadena tal y como la envía el
  servidor (leaf + intermedios), en todas las versiones de Python soportadas.
- Permite desactivar la verificación por completo (`VERIFY_NONE`): el objetivo
  es capturar certificados aunque sean autofirmados o estén caducados.

La conexión se cierra siempre antes de volver, con éxito o con error.
"""

from __future__ import annotations

import select
import socket
import time

from cryptography.hazmat.primitives.serialization import Encoding
from OpenSSL import SSL

from core.domain.models import TargetAddress
from core.errors import FetchError
from core.interfaces.fetcher import CertificateFetcher


def build_client_context() -> SSL.Context:
    """Contexto cliente con defaults de la librería y sin verificación."""

    context = SSL.Context(SSL.TLS_CLIENT_METHOD)
    context.set_verify(SSL.VERIFY_NONE, lambda *args: True)
    return context


class TLSCertificateFetcher(CertificateFetcher):
    """Abre una conexión TLS y devuelve la cadena del peer en DER."""

    def __init__(self, context: SSL.Context | None = None) -> None:
        self._context = context or build_client_context()

    def fetch(self, target: TargetAddress, *, timeout: float | None) -> list[bytes]:
        # None: socket bloqueante, sin deadline
        deadline = None if timeout is None else time.monotonic() + timeout

        try:
            sock = socket.create_connection((target.host, target.port), timeout=timeout)
        except socket.timeout as exc:
            raise FetchError(f"connection to {target} timed out", target=str(target)) from exc
        except (OSError, OverflowError) as exc:
            raise FetchError(f"cannot connect to {target}: {exc}", target=str(target)) from exc

        try:
            conn = SSL.Connection(self._context, sock)
            # SNI no admite IPs literales
            if not target.is_ip and target.host:
                conn.set_tlsext_host_name(target.host.encode("idna"))
            conn.set_connect_state()
            self._handshake(conn, sock, deadline, target)

            chain = conn.get_peer_cert_chain()
            if not chain:
                raise FetchError(f"{target} presented no certificate", target=str(target))
            return [cert.to_cryptography().public_bytes(Encoding.DER) for cert in chain]
        except SSL.Error as exc:
            raise FetchError(f"TLS handshake with {target} failed: {_describe(exc)}", target=str(target)) from exc
        except UnicodeError as exc:
            raise FetchError(f"invalid hostname {target.host!r}: {exc}", target=str(target)) from exc
        finally:
            sock.close()

    @staticmethod
    def _handshake(
        conn: SSL.Connection,
        sock: socket.socket,
        deadline: float | None,
        target: TargetAddress,
    ) -> None:
        """Handshake acotado por `deadline`.

        El socket tiene timeout, así que a nivel de fd es no bloqueante y
        OpenSSL pide más lectura/escritura con `WantReadError`/`WantWriteError`.
        """

        while True:
            try:
                conn.do_handshake()
                return
            except SSL.WantReadError:
                readers, writers = [sock], []
            except SSL.WantWriteError:
                readers, writers = [], [sock]
            except SSL.SysCallError as exc:
                raise FetchError(
                    f"TLS handshake with {target} failed: {_describe(exc)}",
                    target=str(target),
                ) from exc

            if deadline is None:
                select.select(readers, writers, [])
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise FetchError(f"TLS handshake with {target} timed out", target=str(target))
            ready = select.select(readers, writers, [], remaining)
            if not any(ready):
                raise FetchError(f"TLS handshake with {target} timed out", target=str(target))


def _describe(exc: Exception) -> str:
    if isinstance(exc, SSL.SysCallError) and exc.args:
        # (-1, 'Unexpected EOF') o (errno, strerror)
        return str(exc.args[-1])
    parts = [str(part) for part in exc.args if part]
    return "; ".join(parts) or exc.__class__.__name__
