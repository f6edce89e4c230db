"""Integration test fixtures: a fake tsc run by the current interpreter."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

FAKE_TSC = Path(__file__).with_name("fake_tsc.py")


@pytest.fixture
def fake_tsc_command() -> list[str]:
    """Command line running the fake compiler."""
    return [sys.executable, str(FAKE_TSC)]


@pytest.fixture
def fake_engine(fake_tsc_command: list[str]):
    """TscEngine wired to the fake compiler."""
    from kist_typescript.engine.tsc import TscEngine

    return TscEngine(command=fake_tsc_command)


@pytest.fixture
def one_file_project(project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Project with one valid source file and no outDir; cwd is the project.

    Returns:
        Path to the tsconfig.json file.
    """
    (project_dir / "src").mkdir()
    (project_dir / "src" / "index.ts").write_text("export const answer: number = 42;\n")
    config = project_dir / "tsconfig.json"
    config.write_text('{"compilerOptions": {"target": "es2020"}, "files": ["src/index.ts"]}\n')
    monkeypatch.chdir(project_dir)
    return config


@pytest.fixture
def type_error_project(project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Project whose only source file contains a type error.

    Returns:
        Path to the tsconfig.json file.
    """
    (project_dir / "src").mkdir()
    (project_dir / "src" / "bad.ts").write_text(
        "// TYPE_ERROR below\nexport const answer: number = 'forty-two';\n"
    )
    config = project_dir / "tsconfig.json"
    config.write_text(
        '{"compilerOptions": {"strict": true, "outDir": "dist"}, "include": ["src"]}\n'
    )
    monkeypatch.chdir(project_dir)
    return config


class _ListLogger:
    def __init__(self) -> None:
        self.infos: list[str] = []
        self.errors: list[str] = []

    def log_info(self, message: str) -> None:
        self.infos.append(message)

    def log_error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def list_logger() -> _ListLogger:
    """Host logger double collecting messages per level."""
    return _ListLogger()
