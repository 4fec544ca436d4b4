"""Destino de salida de certificados.

Por qué un context manager:
- El fichero se abre una vez y se cierra una vez al final de la escritura.
- stdout nunca se cierra; solo se vacía.
- Los errores diferidos de I/O (broken pipe, disco lleno) suelen aparecer al
  vaciar o cerrar, así que también se convierten en `OutputError`.
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import BinaryIO, Iterator

from core.errors import OutputError

# rw para owner y grupo (sujeto a umask)
OUTPUT_FILE_MODE = 0o660


def stdout_binary() -> BinaryIO:
    return sys.stdout.buffer


def open_output_file(path: Path) -> BinaryIO:
    """Abre `path` en modo append binario, creándolo si no existe."""

    try:
        fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_APPEND, OUTPUT_FILE_MODE)
    except OSError as exc:
        raise OutputError(f"cannot open {path}: {exc.strerror or exc}") from exc
    return os.fdopen(fd, "ab")


def _release(stream: BinaryIO, *, close: bool) -> None:
    try:
        if close:
            stream.close()
        else:
            stream.flush()
    except OSError as exc:
        raise OutputError(f"cannot write output: {exc.strerror or exc}") from exc


@contextmanager
def open_sink(out_file: Path | None) -> Iterator[BinaryIO]:
    """Devuelve el stream binario donde escribir los certificados.

    - `out_file` definido: fichero en append (nunca se trunca).
    - `None`: stdout binario del proceso.
    """

    close = out_file is not None
    stream = open_output_file(out_file) if close else stdout_binary()
    try:
        yield stream
    except BaseException:
        # el error original manda sobre el del cierre
        if close:
            with suppress(OSError):
                stream.close()
        raise
    _release(stream, close=close)


def write_chunk(sink: BinaryIO, data: bytes) -> int:
    """Una llamada `write` por certificado; errores de I/O -> `OutputError`."""

    try:
        sink.write(data)
    except OSError as exc:
        raise OutputError(f"cannot write output: {exc.strerror or exc}") from exc
    return len(data)
