"""Diagnostic and outcome models for TypeScript compilation.

Two layers of diagnostic models live here:

- ``Diagnostic``: what the compiler engine reports, including structured
  message chains and source locations.
- ``DiagnosticEntry``: one flattened, phase-tagged problem as seen by the
  rest of the pipeline.

``CompilationOutcome`` is the terminal result of one invocation, either
``Success`` or ``Failure`` carrying every entry in report order.

Example:
    >>> chain = DiagnosticMessageChain(
    ...     message_text="Type 'string' is not assignable to type 'number'.",
    ...     next=[DiagnosticMessageChain(message_text="Details here.")],
    ... )
    >>> print(flatten_diagnostic_message_text(chain))
    Type 'string' is not assignable to type 'number'.
      Details here.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class DiagnosticCategory(str, Enum):
    """Severity reported by the compiler."""

    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"
    MESSAGE = "message"


class DiagnosticPhase(str, Enum):
    """When a diagnostic was discovered.

    Pre-emission diagnostics come from semantic analysis and are always
    reported before emission diagnostics.
    """

    PRE_EMIT = "pre-emit"
    EMIT = "emit"


class DiagnosticMessageChain(BaseModel):
    """Structured, possibly nested, diagnostic message."""

    model_config = ConfigDict(frozen=True)

    message_text: str
    next: list[DiagnosticMessageChain] = Field(default_factory=list)


def flatten_diagnostic_message_text(
    message: str | DiagnosticMessageChain,
    new_line: str = "\n",
    indent: int = 0,
) -> str:
    """Flatten a diagnostic message into display text.

    Chain nodes are joined with ``new_line``; every nested level is
    indented by two further spaces. Nothing is truncated.

    Args:
        message: Plain text or a message chain.
        new_line: Separator placed between chain nodes.
        indent: Indentation depth of ``message`` itself.

    Returns:
        The flattened text.
    """
    if isinstance(message, str):
        return message

    parts: list[str] = []
    if indent:
        parts.append(new_line)
        parts.append("  " * indent)
    parts.append(message.message_text)
    for child in message.next:
        parts.append(flatten_diagnostic_message_text(child, new_line, indent + 1))
    return "".join(parts)


class Diagnostic(BaseModel):
    """A diagnostic as reported by the compiler engine.

    Attributes:
        category: Severity reported by the compiler.
        code: Numeric TypeScript diagnostic code (``TS2322`` -> 2322), if any.
        message_text: Plain text or a structured message chain.
        file: Absolute path of the file the diagnostic points at.
        line: 1-based line number.
        column: 1-based column number.
    """

    model_config = ConfigDict(frozen=True)

    category: DiagnosticCategory = DiagnosticCategory.ERROR
    code: int | None = None
    message_text: str | DiagnosticMessageChain
    file: str | None = None
    line: int | None = None
    column: int | None = None


class DiagnosticEntry(BaseModel):
    """One reported problem after flattening.

    Attributes:
        message: Flattened human-readable text.
        phase: Pre-emission (analysis) or emission.
        category: Severity reported by the compiler.
        code: TypeScript diagnostic code, if known.
        file: File the problem points at, if known.
        line: 1-based line number, if known.
        column: 1-based column number, if known.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    phase: DiagnosticPhase
    category: DiagnosticCategory = DiagnosticCategory.ERROR
    code: int | None = None
    file: str | None = None
    line: int | None = None
    column: int | None = None

    def format(self) -> str:
        """Render the entry the way ``tsc --pretty false`` prints it.

        Example:
            >>> DiagnosticEntry(
            ...     message="Cannot find name 'x'.",
            ...     phase=DiagnosticPhase.PRE_EMIT,
            ...     code=2304,
            ...     file="src/a.ts",
            ...     line=3,
            ...     column=5,
            ... ).format()
            "src/a.ts(3,5): error TS2304: Cannot find name 'x'."
        """
        head = self.category.value
        if self.code is not None:
            head += f" TS{self.code}"
        if self.file is None:
            return f"{head}: {self.message}"
        location = self.file
        if self.line is not None:
            location += f"({self.line},{self.column or 1})"
        return f"{location}: {head}: {self.message}"


class Success(BaseModel):
    """Outcome of an invocation that produced no diagnostics."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"

    @property
    def ok(self) -> bool:
        return True


class Failure(BaseModel):
    """Outcome of an invocation that produced at least one diagnostic."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    diagnostics: tuple[DiagnosticEntry, ...]

    @property
    def ok(self) -> bool:
        return False

    def aggregate_message(self) -> str:
        """Concatenate every entry, separated by a blank line."""
        return "\n\n".join(entry.format() for entry in self.diagnostics)


CompilationOutcome = Union[Success, Failure]


__all__ = [
    "CompilationOutcome",
    "Diagnostic",
    "DiagnosticCategory",
    "DiagnosticEntry",
    "DiagnosticMessageChain",
    "DiagnosticPhase",
    "Failure",
    "Success",
    "flatten_diagnostic_message_text",
]
