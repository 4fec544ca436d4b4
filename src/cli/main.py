"""CLI de certgrab (Typer).

Por qué la CLI es fina:
- Solo traduce flags a `GrabConfig`/`TargetAddress` y errores a códigos de
  salida; el flujo vive en `core.services.grab_pipeline`.
- La ayuda se imprime en stderr y sale con estado != 0: el texto de uso es a
  la vez la ruta de error y la de ayuda explícita.
"""

from __future__ import annotations

from pathlib import Path

import typer

from adapters.cert_inspector import summarize_chain
from adapters.cert_writer import open_sink
from adapters.tls_fetcher import TLSCertificateFetcher
from cli.ui_components import build_chain_table, build_console, print_error, print_status
from core.config import APP_NAME, DEFAULT_TIMEOUT_SECONDS, VERSION, GrabConfig
from core.domain.models import TargetAddress
from core.errors import CertGrabError, InvalidTargetError
from core.services.grab_pipeline import PipelineHooks, run_grab

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    rich_markup_mode=None,
    pretty_exceptions_show_locals=False,
)

_console = build_console()


def _help_callback(ctx: typer.Context, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    typer.echo(ctx.get_help(), err=True)
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"{APP_NAME} {VERSION}")
    raise typer.Exit()


def _parse_target(value: str) -> TargetAddress:
    try:
        return TargetAddress.parse(value)
    except InvalidTargetError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command(add_help_option=False, epilog=f"{APP_NAME} v{VERSION}")
def grab(
    target: str = typer.Argument(
        ...,
        metavar="host:port",
        callback=_parse_target,
        show_default=False,
        help="Remote endpoint, e.g. example.com:443.",
    ),
    chain: bool = typer.Option(False, "-c", "--chain", help="Include the full certificate chain."),
    der: bool = typer.Option(False, "-d", "--der", help="Write DER instead of PEM."),
    wait: int = typer.Option(
        DEFAULT_TIMEOUT_SECONDS,
        "-w",
        "--wait",
        min=0,
        metavar="N",
        help="Connection timeout in seconds (0 waits forever).",
    ),
    out: str = typer.Option(
        "",
        "-o",
        "--out",
        metavar="PATH",
        show_default=False,
        help="Append to this file instead of writing to stdout.",
    ),
    info: bool = typer.Option(False, "-i", "--info", help="Print a certificate summary table to stderr."),
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        is_eager=True,
        callback=_version_callback,
        help="Show the version and exit.",
    ),
    show_help: bool = typer.Option(
        False,
        "-h",
        "--help",
        is_eager=True,
        expose_value=False,
        callback=_help_callback,
        help="Show this message and exit.",
    ),
) -> None:
    """Grab x509 certificate(s) from a remote host. Output defaults to PEM.

    The TLS peer is not verified: self-signed and expired certificates are
    captured as presented.
    """

    # `callback=_parse_target` ya convirtió el argumento
    address: TargetAddress = target  # type: ignore[assignment]
    config = GrabConfig(
        timeout=wait,
        include_chain=chain,
        use_der=der,
        out_file=Path(out) if out else None,
        show_info=info,
    )
    hooks = PipelineHooks(
        retrieving=lambda t: print_status(_console, "*", f"retrieving cert(s) from {t}"),
        retrieved=lambda n: print_status(_console, "+", f"retrieved {n} cert(s)", style="green"),
    )

    try:
        result = run_grab(
            address,
            config,
            fetcher=TLSCertificateFetcher(),
            sink=lambda: open_sink(config.out_file),
            hooks=hooks,
        )
    except CertGrabError as exc:
        print_error(_console, exc)
        raise typer.Exit(code=1) from exc

    if config.show_info:
        _console.print(build_chain_table(summarize_chain(result.certificates)))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
