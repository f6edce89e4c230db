"""Shared pytest fixtures for kist-action-typescript tests.

Unit tests (tests/unit) run without Node.js: they use a recording engine
in place of tsc. Integration tests (tests/integration) drive TscEngine
against a fake compiler script, plus a real tsc when one is installed.

NOTE: Do NOT add __init__.py to test directories - pytest uses importlib mode
which can cause namespace collisions with __init__.py files.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture(autouse=True)
def reset_tracing() -> Generator[None, None, None]:
    """Clear cached tracers between tests."""
    from kist_typescript.telemetry import reset_tracer

    reset_tracer()
    yield
    reset_tracer()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after tests that configure logging."""
    import structlog

    yield
    structlog.reset_defaults()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Provide an empty project directory."""
    directory = tmp_path / "project"
    directory.mkdir()
    return directory


@pytest.fixture
def write_file(project_dir: Path) -> Callable[[str, str], Path]:
    """Write a file below the project directory, creating parents."""

    def _write(relative: str, content: str = "") -> Path:
        path = project_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_tsconfig(project_dir: Path) -> Callable[..., Path]:
    """Write a tsconfig file (JSON) below the project directory.

    Usage:
        config = write_tsconfig({"compilerOptions": {"strict": True}})
        base = write_tsconfig({"files": []}, name="configs/base.json")
    """

    def _write(document: dict[str, Any], name: str = "tsconfig.json") -> Path:
        path = project_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return path

    return _write


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "requirement(id): Mark test as covering a specific requirement",
    )
