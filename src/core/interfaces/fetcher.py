"""Contrato del fetcher de certificados.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir la conexión TLS real por un fake en tests sin acoplar
  el Core a pyOpenSSL.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import TargetAddress


@runtime_checkable
class CertificateFetcher(Protocol):
    """Contrato mínimo para obtener certificados de un servidor.

    Reglas de diseño:
    - Devuelve los DER en el orden presentado por el peer (leaf primero).
    - Cualquier fallo se reporta como `FetchError`.
    - La conexión queda cerrada al volver, con éxito o con error.
    """

    def fetch(self, target: TargetAddress, *, timeout: float | None) -> list[bytes]:
        """Conecta a `target` y devuelve la cadena de certificados en DER.

        `timeout=None` espera sin límite.
        """

        ...
