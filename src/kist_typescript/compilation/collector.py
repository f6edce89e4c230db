"""Diagnostic collector.

Pre-emission diagnostics are reported before emission diagnostics. Every
diagnostic becomes exactly one entry: nothing is dropped, deduplicated
or reordered within a phase.

Example:
    >>> collect([], [])
    Success(kind='success')
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from kist_typescript.schemas.diagnostics import (
    CompilationOutcome,
    Diagnostic,
    DiagnosticEntry,
    DiagnosticPhase,
    Failure,
    Success,
    flatten_diagnostic_message_text,
)


def to_entries(
    diagnostics: Iterable[Diagnostic],
    phase: DiagnosticPhase,
) -> list[DiagnosticEntry]:
    """Flatten engine diagnostics into phase-tagged entries."""
    return [
        DiagnosticEntry(
            message=flatten_diagnostic_message_text(diagnostic.message_text, "\n"),
            phase=phase,
            category=diagnostic.category,
            code=diagnostic.code,
            file=diagnostic.file,
            line=diagnostic.line,
            column=diagnostic.column,
        )
        for diagnostic in diagnostics
    ]


def collect(
    pre_emission: Sequence[Diagnostic],
    emission: Sequence[Diagnostic],
) -> CompilationOutcome:
    """Combine both phases into one outcome.

    Returns:
        Success when both sequences are empty, otherwise a Failure carrying
        every entry, pre-emission first.
    """
    entries = [
        *to_entries(pre_emission, DiagnosticPhase.PRE_EMIT),
        *to_entries(emission, DiagnosticPhase.EMIT),
    ]
    if not entries:
        return Success()
    return Failure(diagnostics=tuple(entries))


__all__ = ["collect", "to_entries"]
