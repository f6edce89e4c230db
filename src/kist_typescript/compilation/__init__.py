"""Compilation pipeline for TypeScript projects.

The pipeline consists of four stages:
1. LOAD: Read tsconfig.json, apply ``extends`` and select input files
2. MERGE: Layer caller overrides and the output location on top
3. COMPILE: Emit one compilation unit through a compiler engine
4. COLLECT: Turn pre-emission and emission diagnostics into an outcome

Each stage returns an error variant instead of raising.
"""

from __future__ import annotations

from kist_typescript.compilation.collector import collect, to_entries
from kist_typescript.compilation.driver import compile_unit, select_inputs
from kist_typescript.compilation.loader import load_config, resolve_config_path
from kist_typescript.compilation.merger import convert_overrides, merge_options

__all__ = [
    # Load
    "load_config",
    "resolve_config_path",
    # Merge
    "convert_overrides",
    "merge_options",
    # Compile
    "compile_unit",
    "select_inputs",
    # Collect
    "collect",
    "to_entries",
]
