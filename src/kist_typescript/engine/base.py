"""Compiler engine interface.

The pipeline never type-checks or emits code itself. It hands a
``CompilationUnit`` to a ``CompilerEngine`` and receives an
``EmitResult`` with pre-emission and emission diagnostics kept apart.

A compilation unit is bound to one input file list and one option set and
is emitted exactly once; engines must not cache anything between units.

Example:
    >>> class NullEngine(CompilerEngine):
    ...     @property
    ...     def name(self) -> str:
    ...         return "null"
    ...
    ...     async def emit(self, unit: CompilationUnit) -> EmitResult:
    ...         return EmitResult()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kist_typescript.schemas.diagnostics import Diagnostic


class CompilationUnitReusedError(RuntimeError):
    """Raised when a compilation unit is emitted a second time."""


class CompilationUnit:
    """One input file list bound to one effective option set.

    Attributes:
        input_files: Files to compile, in order. Relative entries are
            relative to ``cwd``.
        options: Effective compiler options (read-only view).
        base_dir: Directory of the configuration the options came from.
        config_path: Configuration file; ``base_dir/tsconfig.json`` when not given.
        cwd: Working directory of the caller when the unit was built.
    """

    def __init__(
        self,
        input_files: Sequence[str],
        options: Mapping[str, Any],
        *,
        base_dir: Path,
        config_path: Path | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.input_files: tuple[str, ...] = tuple(input_files)
        self.options: Mapping[str, Any] = MappingProxyType(dict(options))
        self.base_dir = base_dir
        self.config_path = config_path if config_path is not None else base_dir / "tsconfig.json"
        self.cwd = cwd if cwd is not None else Path.cwd()
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def claim(self) -> None:
        """Mark the unit as emitted.

        Raises:
            CompilationUnitReusedError: If the unit was already emitted.
        """
        if self._consumed:
            raise CompilationUnitReusedError("Compilation unit has already been emitted")
        self._consumed = True

    def __repr__(self) -> str:
        return (
            f"CompilationUnit(input_files={len(self.input_files)}, "
            f"options={len(self.options)}, base_dir={str(self.base_dir)!r})"
        )


class EmitResult(BaseModel):
    """Everything an engine reports for one emission request.

    Attributes:
        pre_emit_diagnostics: Problems found by analysis, before writing output.
        emit_diagnostics: Problems found while writing output artifacts.
        emitted_files: Artifacts the engine reports as written.
        emit_skipped: True when the engine wrote nothing.
    """

    model_config = ConfigDict(frozen=True)

    pre_emit_diagnostics: tuple[Diagnostic, ...] = ()
    emit_diagnostics: tuple[Diagnostic, ...] = ()
    emitted_files: tuple[str, ...] = ()
    emit_skipped: bool = False
    execution_time_seconds: float | None = Field(default=None, ge=0)


class CompilerEngine(ABC):
    """Abstract compiler engine.

    Implementations perform full analysis and artifact emission for a
    unit in a single attempt. Problems, including I/O failures while
    writing artifacts, are reported as diagnostics rather than raised.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short engine name used in logs and spans."""
        ...

    def version(self) -> str | None:
        """Engine version if known."""
        return None

    @abstractmethod
    async def emit(self, unit: CompilationUnit) -> EmitResult:
        """Analyze ``unit`` and write its artifacts.

        Args:
            unit: The compilation unit to emit, already claimed by the
                caller.

        Returns:
            Pre-emission and emission diagnostics, kept separate.
        """
        ...


__all__ = [
    "CompilationUnit",
    "CompilationUnitReusedError",
    "CompilerEngine",
    "EmitResult",
]
