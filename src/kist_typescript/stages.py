"""Pipeline stages for one TypeScript compilation invocation.

One invocation walks a fixed sequence of stages:

    START -> [LOAD] -> LOADED -> [MERGE] -> MERGED
          -> [COMPILE] -> COMPILED -> [COLLECT] -> DONE

A failure in LOAD or MERGE short-circuits to a failed outcome before the
compiler is ever started. COLLECT is the only stage whose failure implies
a real compilation attempt.

See Also:
    - kist_typescript.action: Orchestrator driving the stages
    - kist_typescript.errors: Error variants tagged with their stage
"""

from __future__ import annotations

from enum import Enum


class PipelineStage(str, Enum):
    """Stage in the compilation pipeline.

    Attributes:
        LOAD: Read, parse and validate tsconfig.json
        MERGE: Layer option overrides and the output-location override
        COMPILE: Build a compilation unit and request emission
        COLLECT: Gather and classify diagnostics

    Example:
        >>> PipelineStage.LOAD.description
        'Read and validate tsconfig.json'
    """

    LOAD = "LOAD"
    """Read, parse and validate the configuration file."""

    MERGE = "MERGE"
    """Merge configuration options with caller overrides."""

    COMPILE = "COMPILE"
    """Construct the compilation unit and emit artifacts."""

    COLLECT = "COLLECT"
    """Aggregate pre-emission and emission diagnostics."""

    @property
    def description(self) -> str:
        """Get a human-readable description of this stage."""
        descriptions = {
            PipelineStage.LOAD: "Read and validate tsconfig.json",
            PipelineStage.MERGE: "Merge compiler option overrides",
            PipelineStage.COMPILE: "Compile and emit artifacts",
            PipelineStage.COLLECT: "Collect compilation diagnostics",
        }
        return descriptions[self]


class PipelineState(str, Enum):
    """Intermediate states reached by a successful invocation."""

    START = "START"
    LOADED = "LOADED"
    MERGED = "MERGED"
    COMPILED = "COMPILED"
    DONE = "DONE"


__all__ = ["PipelineStage", "PipelineState"]
