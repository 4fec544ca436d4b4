"""Errores del dominio.

Por qué una jerarquía propia:
- Cada etapa del pipeline (parseo, conexión, escritura) falla de forma
  distinta, pero la CLI las trata igual: una línea en stderr y salida != 0.
- Los tests pueden observar el fallo sin que el proceso termine.
"""

from __future__ import annotations


class CertGrabError(Exception):
    """Base de todos los errores de certgrab."""


class InvalidTargetError(CertGrabError, ValueError):
    """El argumento `host:port` no es válido."""


class FetchError(CertGrabError):
    """Fallo de DNS, conexión, timeout o handshake TLS."""

    def __init__(self, message: str, *, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class OutputError(CertGrabError):
    """No se pudo abrir o escribir el destino de salida."""
