"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los modelos son inmutables (`frozen`): se construyen una vez y se pasan
  explícitamente a cada etapa.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import re
from datetime import datetime
from ipaddress import ip_address

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.errors import InvalidTargetError

_PORT_RE = re.compile(r"[+-]?[0-9]+")


class TargetAddress(BaseModel):
    """Destino remoto `host:port`.

    Reglas:
    - Debe existir un separador `:`; el puerto es un entero base 10 >= 1.
    - No se resuelve DNS ni se comprueba alcanzabilidad al parsear.
    - Un host IPv6 puede ir entre corchetes (`[::1]:443`).
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        ...,
        description="Hostname o IP literal (sin corchetes).",
    )
    port: int = Field(
        ...,
        ge=1,
        description="Puerto TCP remoto.",
    )

    @classmethod
    def parse(cls, value: str) -> "TargetAddress":
        """Parsea `host:port` o lanza `InvalidTargetError`."""

        host, sep, raw_port = value.rpartition(":")
        if not sep:
            raise InvalidTargetError(f"expected host:port, got {value!r}")
        if not _PORT_RE.fullmatch(raw_port):
            raise InvalidTargetError(f"port must be an integer, got {raw_port!r}")
        port = int(raw_port, 10)
        if port < 1:
            raise InvalidTargetError(f"port must be >= 1, got {port}")

        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        return cls(host=host, port=port)

    @property
    def is_ip(self) -> bool:
        try:
            ip_address(self.host)
        except ValueError:
            return False
        return True

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class CertificateSummary(BaseModel):
    """Resumen legible de un certificado (solo para diagnóstico).

    Los campos X.509 son opcionales: un blob que no se puede parsear conserva
    al menos su huella SHA-256.
    """

    model_config = ConfigDict(frozen=True)

    sha256: str = Field(
        ...,
        min_length=64,
        max_length=64,
        description="Huella SHA-256 del DER en hex minúsculas.",
    )
    subject: str | None = Field(
        default=None,
        description="Subject en formato RFC 4514.",
    )
    issuer: str | None = Field(
        default=None,
        description="Issuer en formato RFC 4514.",
    )
    serial_number: str | None = Field(
        default=None,
        description="Número de serie en hex.",
    )
    not_valid_before: datetime | None = None
    not_valid_after: datetime | None = None

    @property
    def parsed(self) -> bool:
        return self.subject is not None

    @property
    def self_signed(self) -> bool:
        return self.parsed and self.subject == self.issuer
