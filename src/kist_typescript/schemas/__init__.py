"""Pydantic models for TypeScript compilation.

- compiler_options: closed ``compilerOptions`` schema
- tsconfig: tsconfig.json documents and the normalized configuration
- diagnostics: diagnostics, entries and outcomes
- request: per-invocation compile request
"""

from __future__ import annotations

from kist_typescript.schemas.compiler_options import (
    OUTPUT_DIRECTORY_KEY,
    RECOGNIZED_OPTIONS,
    CompilerOptions,
    OptionMap,
)
from kist_typescript.schemas.diagnostics import (
    CompilationOutcome,
    Diagnostic,
    DiagnosticCategory,
    DiagnosticEntry,
    DiagnosticMessageChain,
    DiagnosticPhase,
    Failure,
    Success,
    flatten_diagnostic_message_text,
)
from kist_typescript.schemas.request import CompileRequest
from kist_typescript.schemas.tsconfig import (
    DEFAULT_CONFIG_NAME,
    NormalizedConfig,
    TsConfigDocument,
)

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "OUTPUT_DIRECTORY_KEY",
    "RECOGNIZED_OPTIONS",
    "CompilationOutcome",
    "CompileRequest",
    "CompilerOptions",
    "Diagnostic",
    "DiagnosticCategory",
    "DiagnosticEntry",
    "DiagnosticMessageChain",
    "DiagnosticPhase",
    "Failure",
    "NormalizedConfig",
    "OptionMap",
    "Success",
    "TsConfigDocument",
    "flatten_diagnostic_message_text",
]
