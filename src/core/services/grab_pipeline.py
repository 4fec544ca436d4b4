"""Certificate grab orchestration.

The CLI delegates the whole fetch -> select -> encode -> write flow to these
helpers, so the pipeline can be driven from tests with a fake fetcher and an
in-memory sink. Side-effects meant for the operator (progress lines) go
through `PipelineHooks` and never reach the certificate sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Callable, ContextManager, Sequence

from adapters.cert_writer import write_chunk
from adapters.pem_codec import encode_certificate
from core.config import GrabConfig
from core.domain.models import TargetAddress
from core.interfaces.fetcher import CertificateFetcher


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress lines on stderr)."""

    retrieving: Callable[[TargetAddress], None] | None = None
    retrieved: Callable[[int], None] | None = None


@dataclass
class GrabResult:
    """Output of a pipeline invocation."""

    target: TargetAddress
    presented: int
    certificates: list[bytes] = field(default_factory=list)
    bytes_written: int = 0

    @property
    def emitted(self) -> int:
        return len(self.certificates)


def select_certificates(certificates: Sequence[bytes], *, include_chain: bool) -> list[bytes]:
    """Leaf only unless the chain was requested; order is preserved."""

    if not certificates:
        return []
    if not include_chain:
        return [certificates[0]]
    return list(certificates)


def fetch_certificates(
    target: TargetAddress,
    config: GrabConfig,
    fetcher: CertificateFetcher,
    hooks: PipelineHooks | None = None,
) -> list[bytes]:
    hooks = hooks or PipelineHooks()
    if hooks.retrieving:
        hooks.retrieving(target)
    # 0 = esperar sin límite
    return fetcher.fetch(target, timeout=config.timeout or None)


def write_certificates(certificates: Sequence[bytes], config: GrabConfig, sink: BinaryIO) -> int:
    """Encode and write each certificate with its own `write` call."""

    written = 0
    for der in certificates:
        written += write_chunk(sink, encode_certificate(der, config.output_format))
    return written


def run_grab(
    target: TargetAddress,
    config: GrabConfig,
    *,
    fetcher: CertificateFetcher,
    sink: BinaryIO | Callable[[], ContextManager[BinaryIO]],
    hooks: PipelineHooks | None = None,
) -> GrabResult:
    """Run the full pipeline.

    `sink` is either an open binary stream or a zero-argument factory returning
    a context manager that yields one (e.g. `lambda: open_sink(path)`). The
    factory is only invoked after the fetch succeeded, so a failed connection
    never creates or touches the output file.
    """

    hooks = hooks or PipelineHooks()
    presented = fetch_certificates(target, config, fetcher, hooks)
    selected = select_certificates(presented, include_chain=config.include_chain)
    if hooks.retrieved:
        hooks.retrieved(len(selected))

    if callable(sink):
        with sink() as stream:
            written = write_certificates(selected, config, stream)
    else:
        written = write_certificates(selected, config, sink)

    return GrabResult(
        target=target,
        presented=len(presented),
        certificates=selected,
        bytes_written=written,
    )
