"""Error variants for the TypeScript compilation pipeline.

Every failure of an invocation is one of four variants. Pipeline stages
return a variant instead of raising it; only the orchestrator turns a
variant into a ``TypeScriptCompilationFailed`` exception for the caller.

Variants:
    ConfigReadError         LOAD    tsconfig.json missing, unreadable or unparseable
    ConfigValidationError   LOAD    tsconfig.json fails schema validation
    InvalidOverrideError    MERGE   override key or value rejected by the option schema
    CompilationDiagnostics  COLLECT analysis or emission reported problems

Example:
    >>> error = ConfigReadError(message="Cannot read file '/p/tsconfig.json'.")
    >>> error.format()
    "Error reading tsconfig.json: Cannot read file '/p/tsconfig.json'."
    >>> str(TypeScriptCompilationFailed(error))
    "TypeScript compilation failed: Error reading tsconfig.json: Cannot read file '/p/tsconfig.json'."
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from kist_typescript.schemas.diagnostics import DiagnosticEntry, Failure
from kist_typescript.stages import PipelineStage

FAILURE_PREFIX = "TypeScript compilation failed"


class ErrorKind(str, Enum):
    """Discriminator for the error variants."""

    CONFIG_READ = "config_read"
    CONFIG_VALIDATION = "config_validation"
    INVALID_OVERRIDE = "invalid_override"
    COMPILATION_DIAGNOSTICS = "compilation_diagnostics"

    @property
    def stage(self) -> PipelineStage:
        """Pipeline stage that produces this kind of error."""
        stages = {
            ErrorKind.CONFIG_READ: PipelineStage.LOAD,
            ErrorKind.CONFIG_VALIDATION: PipelineStage.LOAD,
            ErrorKind.INVALID_OVERRIDE: PipelineStage.MERGE,
            ErrorKind.COMPILATION_DIAGNOSTICS: PipelineStage.COLLECT,
        }
        return stages[self]


class _StageError(BaseModel):
    """Common shape of every error variant."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str = Field(..., description="Flattened error text")

    @property
    def stage(self) -> PipelineStage:
        return self.kind.stage  # type: ignore[attr-defined, no-any-return]

    def format(self) -> str:
        """Render the caller-facing text for this error."""
        return self.message


class ConfigReadError(_StageError):
    """The configuration file could not be read or parsed."""

    kind: Literal[ErrorKind.CONFIG_READ] = ErrorKind.CONFIG_READ
    path: str | None = None

    def format(self) -> str:
        name = Path(self.path).name if self.path else "tsconfig.json"
        return f"Error reading {name}: {self.message}"


class ConfigValidationError(_StageError):
    """The configuration file was parsed but failed validation."""

    kind: Literal[ErrorKind.CONFIG_VALIDATION] = ErrorKind.CONFIG_VALIDATION
    path: str | None = None

    def format(self) -> str:
        name = Path(self.path).name if self.path else "tsconfig.json"
        return f"Error parsing {name}: {self.message}"


class InvalidOverrideError(_StageError):
    """A compiler option override was not accepted."""

    kind: Literal[ErrorKind.INVALID_OVERRIDE] = ErrorKind.INVALID_OVERRIDE
    key: str = Field(..., description="Offending override key")

    def format(self) -> str:
        return f"Invalid compiler option override '{self.key}': {self.message}"


class CompilationDiagnostics(_StageError):
    """Compilation ran and reported one or more diagnostics."""

    kind: Literal[ErrorKind.COMPILATION_DIAGNOSTICS] = ErrorKind.COMPILATION_DIAGNOSTICS
    diagnostics: tuple[DiagnosticEntry, ...] = ()

    @classmethod
    def from_failure(cls, failure: Failure) -> CompilationDiagnostics:
        """Build the variant from a failed outcome, entries separated by blank lines."""
        return cls(message=failure.aggregate_message(), diagnostics=failure.diagnostics)


class TypeScriptCompilationFailed(Exception):
    """Raised at the outer boundary when an invocation fails.

    Attributes:
        error: The error variant that terminated the invocation.
    """

    def __init__(
        self,
        error: ConfigReadError | ConfigValidationError | InvalidOverrideError
        | CompilationDiagnostics,
    ) -> None:
        self.error = error
        super().__init__(f"{FAILURE_PREFIX}: {error.format()}")

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


__all__ = [
    "FAILURE_PREFIX",
    "CompilationDiagnostics",
    "ConfigReadError",
    "ConfigValidationError",
    "ErrorKind",
    "InvalidOverrideError",
    "TypeScriptCompilationFailed",
]
