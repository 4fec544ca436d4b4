"""Configuración del Core.

Por qué aquí:
- Centraliza la configuración de una ejecución sin contaminar la CLI.
- Se construye una vez a partir de los flags y se pasa explícitamente a cada
  etapa; no hay estado global de argumentos.

No se leen variables de entorno ni ficheros de configuración: todo viene de
la línea de comandos.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.output_format import OutputFormat

APP_NAME = "certgrab"
VERSION = "1.0.1"

DEFAULT_TIMEOUT_SECONDS = 20


class GrabConfig(BaseModel):
    """Configuración inmutable de una ejecución."""

    model_config = ConfigDict(frozen=True)

    timeout: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        ge=0,
        description="Timeout de conexión + handshake (segundos). 0 = sin límite.",
    )
    include_chain: bool = Field(
        default=False,
        description="Emitir la cadena completa en vez de solo el leaf.",
    )
    use_der: bool = Field(
        default=False,
        description="Emitir DER binario en vez de PEM.",
    )
    out_file: Path | None = Field(
        default=None,
        description="Fichero de salida (append). None = stdout.",
    )
    show_info: bool = Field(
        default=False,
        description="Mostrar tabla resumen de certificados en stderr.",
    )

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.from_bool(self.use_der)
