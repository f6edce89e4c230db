"""Compilation driver.

Builds one compilation unit from an input file list and the effective
options and asks the engine for full analysis plus emission, once. No
retries: whatever the engine reports, including I/O problems while
writing artifacts, comes back as diagnostics.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import structlog

from kist_typescript.engine.base import CompilationUnit, CompilerEngine, EmitResult
from kist_typescript.schemas.tsconfig import NormalizedConfig

logger = structlog.get_logger(__name__)


def select_inputs(
    config: NormalizedConfig,
    explicit: Sequence[str] | None = None,
) -> tuple[str, ...]:
    """Pick the input file list for one invocation.

    An explicit list replaces the configuration's list entirely; the two
    are never combined.
    """
    if explicit is not None:
        return tuple(explicit)
    return config.input_files


async def compile_unit(
    input_files: Sequence[str],
    options: Mapping[str, Any],
    *,
    engine: CompilerEngine,
    base_dir: Path,
    config_path: Path | None = None,
) -> EmitResult:
    """Construct a fresh compilation unit and emit it.

    Args:
        input_files: Files to compile, in order.
        options: Effective compiler options.
        engine: Engine performing analysis and emission.
        base_dir: Directory of the configuration the options came from.
        config_path: The configuration file itself, when known.

    Returns:
        Pre-emission and emission diagnostics from the engine.
    """
    unit = CompilationUnit(input_files, options, base_dir=base_dir, config_path=config_path)
    unit.claim()
    logger.debug(
        "compilation_unit_created",
        engine=engine.name,
        input_file_count=len(unit.input_files),
        option_count=len(unit.options),
    )
    return await engine.emit(unit)


__all__ = ["compile_unit", "select_inputs"]
