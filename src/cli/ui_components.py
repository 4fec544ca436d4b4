"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica del comando con detalles visuales.
- Todo lo que se imprime aquí va a la consola de diagnóstico (stderr); el
  payload de certificados nunca pasa por Rich.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.domain.models import CertificateSummary


def build_console() -> Console:
    """Consola ligada a stderr para líneas de progreso y errores."""

    return Console(stderr=True, highlight=False, soft_wrap=True)


def print_status(console: Console, marker: str, message: str, *, style: str = "cyan") -> None:
    """Imprime una línea `[marker] message` (p.ej. `[*]`, `[+]`, `[!]`)."""

    line = Text.assemble((f"[{marker}] ", f"bold {style}"), message)
    console.print(line)


def print_error(console: Console, error: BaseException) -> None:
    print_status(console, "!", str(error), style="red")


def build_chain_table(summaries: list[CertificateSummary]) -> Table:
    """Tabla resumen de los certificados emitidos (`--info`)."""

    table = Table(title="Certificates")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Subject", style="cyan")
    table.add_column("Issuer", style="white")
    table.add_column("Not after", style="yellow", no_wrap=True)
    table.add_column("SHA-256", style="magenta")

    for index, summary in enumerate(summaries):
        if not summary.parsed:
            table.add_row(str(index), "(unparseable)", "-", "-", summary.sha256)
            continue
        not_after = summary.not_valid_after.isoformat(timespec="seconds") if summary.not_valid_after else "-"
        subject = summary.subject or "-"
        if summary.self_signed:
            subject += " (self-signed)"
        table.add_row(str(index), subject, summary.issuer or "-", not_after, summary.sha256)
    return table
