"""Parser for ``tsc --pretty false --listEmittedFiles`` output.

tsc prints one line per diagnostic, followed by indented continuation
lines for nested message chains, and one ``TSFILE:`` line per written
artifact:

    src/a.ts(3,7): error TS2322: Type 'string' is not assignable to type 'number'.
    src/b.ts(1,1): error TS2345: Argument of type '...' is not assignable ...
      Property 'x' is missing in type '...'.
    error TS5033: Could not write file '/p/dist/a.js': EACCES: permission denied.
    TSFILE: /p/dist/a.js

Diagnostics with emission-phase codes are reported as emission
diagnostics; everything else is pre-emission.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from kist_typescript.schemas.diagnostics import (
    Diagnostic,
    DiagnosticCategory,
    DiagnosticMessageChain,
)

# Raised while writing artifacts rather than during analysis
EMIT_DIAGNOSTIC_CODES = frozenset(
    {
        5033,  # Could not write file '{0}': {1}.
        5055,  # Cannot write file '{0}' because it would overwrite input file.
        5056,  # Cannot write file '{0}' because it would be overwritten by multiple input files.
    }
)

_CATEGORIES = "error|warning|suggestion|message"
_LOCATED = re.compile(
    rf"^(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\): "
    rf"(?P<category>{_CATEGORIES}) TS(?P<code>\d+): (?P<message>.*)$"
)
_GLOBAL = re.compile(rf"^(?P<category>{_CATEGORIES}) TS(?P<code>\d+): (?P<message>.*)$")
_EMITTED = re.compile(r"^TSFILE: (?P<path>.+)$")


@dataclass
class _PendingDiagnostic:
    category: DiagnosticCategory
    code: int
    head: str
    file: str | None = None
    line: int | None = None
    column: int | None = None
    # (depth, text) for each continuation line
    continuation: list[tuple[int, str]] = field(default_factory=list)

    def build(self) -> Diagnostic:
        message: str | DiagnosticMessageChain = self.head
        if self.continuation:
            message = _build_chain(self.head, self.continuation)
        return Diagnostic(
            category=self.category,
            code=self.code,
            message_text=message,
            file=self.file,
            line=self.line,
            column=self.column,
        )


@dataclass
class _Node:
    text: str
    children: list[_Node] = field(default_factory=list)

    def freeze(self) -> DiagnosticMessageChain:
        return DiagnosticMessageChain(
            message_text=self.text,
            next=[child.freeze() for child in self.children],
        )


def _build_chain(head: str, continuation: list[tuple[int, str]]) -> DiagnosticMessageChain:
    root = _Node(head)
    # stack[i] is the most recent node at depth i
    stack: list[_Node] = [root]
    for depth, text in continuation:
        depth = max(1, min(depth, len(stack)))
        node = _Node(text)
        stack[depth - 1].children.append(node)
        del stack[depth:]
        stack.append(node)
    return root.freeze()


@dataclass(frozen=True)
class TscOutput:
    """Parsed tsc output."""

    pre_emit_diagnostics: tuple[Diagnostic, ...]
    emit_diagnostics: tuple[Diagnostic, ...]
    emitted_files: tuple[str, ...]
    unparsed_lines: tuple[str, ...]


def parse_tsc_output(text: str, cwd: Path) -> TscOutput:
    """Parse tsc output into diagnostics and emitted files.

    Args:
        text: Combined stdout of one tsc run.
        cwd: Directory tsc ran in; relative file names are resolved against it.

    Returns:
        Diagnostics split by phase, in output order.
    """
    diagnostics: list[Diagnostic] = []
    emitted: list[str] = []
    unparsed: list[str] = []
    pending: _PendingDiagnostic | None = None

    def flush() -> None:
        nonlocal pending
        if pending is not None:
            diagnostics.append(pending.build())
            pending = None

    for raw_line in text.splitlines():
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue

        if pending is not None and line.startswith("  "):
            stripped = line.lstrip(" ")
            depth = (len(line) - len(stripped)) // 2
            pending.continuation.append((depth, stripped))
            continue

        flush()
        if match := _EMITTED.match(line):
            emitted.append(_absolute(match["path"], cwd))
        elif match := _LOCATED.match(line):
            pending = _PendingDiagnostic(
                category=DiagnosticCategory(match["category"]),
                code=int(match["code"]),
                head=match["message"],
                file=_absolute(match["file"], cwd),
                line=int(match["line"]),
                column=int(match["column"]),
            )
        elif match := _GLOBAL.match(line):
            pending = _PendingDiagnostic(
                category=DiagnosticCategory(match["category"]),
                code=int(match["code"]),
                head=match["message"],
            )
        else:
            unparsed.append(line)
    flush()

    pre_emit = tuple(d for d in diagnostics if d.code not in EMIT_DIAGNOSTIC_CODES)
    emit = tuple(d for d in diagnostics if d.code in EMIT_DIAGNOSTIC_CODES)
    return TscOutput(
        pre_emit_diagnostics=pre_emit,
        emit_diagnostics=emit,
        emitted_files=tuple(emitted),
        unparsed_lines=tuple(unparsed),
    )


def _absolute(path: str, cwd: Path) -> str:
    return os.path.normpath(os.path.join(cwd, path.strip()))


__all__ = ["EMIT_DIAGNOSTIC_CODES", "TscOutput", "parse_tsc_output"]
