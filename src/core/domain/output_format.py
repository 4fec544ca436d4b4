"""Output encodings supported by certgrab.

Kept in the domain layer so the CLI, the pipeline and the codec share a
single source of truth.
"""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Encoding used when emitting certificates."""

    PEM = "pem"
    DER = "der"

    @classmethod
    def from_bool(cls, der: bool) -> "OutputFormat":
        """Derive the format from the `--der` flag."""

        return cls.DER if der else cls.PEM
