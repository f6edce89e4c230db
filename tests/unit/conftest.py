"""Unit test fixtures: recording doubles for the engine and the host logger.

Unit tests:
- Run without Node.js or tsc
- Use RecordingEngine in place of TscEngine
- Assert on host log events through RecordingLogger
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from kist_typescript.engine.base import CompilationUnit, CompilerEngine, EmitResult
from kist_typescript.schemas.diagnostics import Diagnostic


class RecordingLogger:
    """ActionLogger double keeping every event in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def log_info(self, message: str) -> None:
        self.events.append(("info", message))

    def log_error(self, message: str) -> None:
        self.events.append(("error", message))

    @property
    def infos(self) -> list[str]:
        return [message for level, message in self.events if level == "info"]

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.events if level == "error"]


class RecordingEngine(CompilerEngine):
    """CompilerEngine double returning canned diagnostics.

    Every unit it receives is kept in ``units``; nothing is compiled.
    """

    def __init__(
        self,
        pre_emit: Sequence[Diagnostic] = (),
        emit: Sequence[Diagnostic] = (),
        emitted_files: Sequence[str] = (),
    ) -> None:
        self.pre_emit = tuple(pre_emit)
        self.emit_diagnostics = tuple(emit)
        self.emitted_files = tuple(emitted_files)
        self.units: list[CompilationUnit] = []

    @property
    def name(self) -> str:
        return "recording"

    async def emit(self, unit: CompilationUnit) -> EmitResult:
        self.units.append(unit)
        return EmitResult(
            pre_emit_diagnostics=self.pre_emit,
            emit_diagnostics=self.emit_diagnostics,
            emitted_files=self.emitted_files,
            emit_skipped=not self.emitted_files,
        )


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a fresh recording host logger."""
    return RecordingLogger()


@pytest.fixture
def clean_engine() -> RecordingEngine:
    """Provide an engine that reports no diagnostics."""
    return RecordingEngine(emitted_files=["/out/index.js"])


@pytest.fixture
def simple_project(project_dir: Path) -> Path:
    """Create a project with one source file and a minimal tsconfig.json.

    Returns:
        Path to the tsconfig.json file.
    """
    (project_dir / "src").mkdir()
    (project_dir / "src" / "index.ts").write_text("export const answer: number = 42;\n")
    config = project_dir / "tsconfig.json"
    config.write_text(
        """{
  // project settings
  "compilerOptions": {
    "target": "ES2020",
    "strict": true,
    "outDir": "./dist",
  },
  "include": ["src"],
}
""",
        encoding="utf-8",
    )
    return config


@pytest.fixture
def engine_factory() -> type[RecordingEngine]:
    """Provide the RecordingEngine class for tests needing canned diagnostics."""
    return RecordingEngine
