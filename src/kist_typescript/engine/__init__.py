"""Compiler engines.

The pipeline talks to the compiler only through ``CompilerEngine``.
``TscEngine`` runs the TypeScript compiler as a subprocess; tests supply
their own engines.
"""

from __future__ import annotations

from kist_typescript.engine.base import (
    CompilationUnit,
    CompilationUnitReusedError,
    CompilerEngine,
    EmitResult,
)
from kist_typescript.engine.output import EMIT_DIAGNOSTIC_CODES, parse_tsc_output
from kist_typescript.engine.tsc import TscEngine

__all__ = [
    "EMIT_DIAGNOSTIC_CODES",
    "CompilationUnit",
    "CompilationUnitReusedError",
    "CompilerEngine",
    "EmitResult",
    "TscEngine",
    "parse_tsc_output",
]
