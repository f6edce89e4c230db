"""TypeScript compilation action for kist.

Loads a tsconfig.json, layers caller overrides on top, runs the compiler
once and reports success or every diagnostic it produced.

Example:
    >>> from kist_typescript import TypeScriptCompilerAction
    >>> action = TypeScriptCompilerAction()
    >>> action.run(config_path="tsconfig.json", output_location="./out")
"""

from __future__ import annotations

from kist_typescript.action import (
    ActionLogger,
    StructlogActionLogger,
    TypeScriptCompilerAction,
)
from kist_typescript.errors import (
    CompilationDiagnostics,
    ConfigReadError,
    ConfigValidationError,
    ErrorKind,
    InvalidOverrideError,
    TypeScriptCompilationFailed,
)
from kist_typescript.schemas.diagnostics import Failure, Success
from kist_typescript.schemas.request import CompileRequest

__version__ = "1.0.0"

__all__ = [
    "ActionLogger",
    "CompilationDiagnostics",
    "CompileRequest",
    "ConfigReadError",
    "ConfigValidationError",
    "ErrorKind",
    "Failure",
    "InvalidOverrideError",
    "StructlogActionLogger",
    "Success",
    "TypeScriptCompilationFailed",
    "TypeScriptCompilerAction",
    "__version__",
]
