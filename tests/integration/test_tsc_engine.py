"""Integration tests driving TscEngine through a subprocess.

The fake compiler in fake_tsc.py is run by the current interpreter, so
these tests need no Node.js. Tests against a real tsc are skipped when
none is installed.
"""

from __future__ import annotations

import shlex
import shutil
from pathlib import Path
from typing import Any

import pytest

requires_tsc = pytest.mark.skipif(shutil.which("tsc") is None, reason="tsc is not installed")


class TestEndToEndWithFakeCompiler:
    """Invocations through the action with the fake compiler."""

    @pytest.mark.requirement("orchestrator")
    @pytest.mark.asyncio
    async def test_output_location_receives_artifact(
        self,
        one_file_project: Path,
        fake_engine: Any,
        list_logger: Any,
    ) -> None:
        """Test that a valid project compiles into the ./out override."""
        from kist_typescript.action import TypeScriptCompilerAction

        action = TypeScriptCompilerAction(logger=list_logger, engine=fake_engine)

        await action.execute(tsconfigPath=str(one_file_project), outputDir="./out")

        project = one_file_project.parent
        assert (project / "out" / "index.js").is_file()
        assert list_logger.errors == []
        assert list_logger.infos[-1] == "TypeScript compilation completed successfully."

    @pytest.mark.requirement("orchestrator")
    @pytest.mark.asyncio
    async def test_type_error_fails_with_its_text(
        self,
        type_error_project: Path,
        fake_engine: Any,
        list_logger: Any,
    ) -> None:
        """Test that a type error surfaces in the aggregated failure."""
        from kist_typescript.action import TypeScriptCompilerAction
        from kist_typescript.errors import ErrorKind, TypeScriptCompilationFailed

        action = TypeScriptCompilerAction(logger=list_logger, engine=fake_engine)

        with pytest.raises(TypeScriptCompilationFailed) as exc_info:
            await action.execute(config_path=str(type_error_project))

        bad = type_error_project.parent / "src" / "bad.ts"
        assert exc_info.value.kind is ErrorKind.COMPILATION_DIAGNOSTICS
        assert (
            f"{bad}(1,7): error TS2322: Type 'string' is not assignable to type 'number'."
            in str(exc_info.value)
        )
        assert len(list_logger.errors) == 1

    @pytest.mark.requirement("compilation-driver")
    @pytest.mark.asyncio
    async def test_write_failure_is_an_emission_diagnostic(
        self,
        one_file_project: Path,
        fake_engine: Any,
        list_logger: Any,
    ) -> None:
        """Test that an unwritable output location is reported, not swallowed."""
        from kist_typescript.action import TypeScriptCompilerAction
        from kist_typescript.errors import CompilationDiagnostics
        from kist_typescript.schemas.diagnostics import DiagnosticPhase

        (one_file_project.parent / "blocked").write_text("not a directory")
        action = TypeScriptCompilerAction(logger=list_logger, engine=fake_engine)

        result = await action.resolve(config_path=str(one_file_project), output_location="blocked")

        assert isinstance(result, CompilationDiagnostics)
        (entry,) = result.diagnostics
        assert entry.phase is DiagnosticPhase.EMIT
        assert entry.code == 5033

    @pytest.mark.requirement("compilation-driver")
    @pytest.mark.asyncio
    async def test_empty_file_list_succeeds_without_output(
        self,
        one_file_project: Path,
        fake_engine: Any,
        list_logger: Any,
    ) -> None:
        """Test that an explicit empty file list compiles nothing and succeeds."""
        from kist_typescript.action import TypeScriptCompilerAction
        from kist_typescript.schemas.diagnostics import Success

        action = TypeScriptCompilerAction(logger=list_logger, engine=fake_engine)

        result = await action.resolve(
            config_path=str(one_file_project), input_files=[], output_location="./out"
        )

        assert isinstance(result, Success)
        assert not (one_file_project.parent / "out").exists()
        assert list_logger.errors == []

    @pytest.mark.requirement("compilation-driver")
    @pytest.mark.asyncio
    async def test_incremental_state_keeps_the_configuration_name(
        self,
        one_file_project: Path,
        fake_engine: Any,
        list_logger: Any,
    ) -> None:
        """Test that incremental builds reuse tsconfig.tsbuildinfo across runs."""
        from kist_typescript.action import TypeScriptCompilerAction

        action = TypeScriptCompilerAction(logger=list_logger, engine=fake_engine)

        for _ in range(2):
            await action.execute(
                config_path=str(one_file_project), option_overrides={"incremental": True}
            )

        project = one_file_project.parent
        assert [p.name for p in project.glob("*.tsbuildinfo")] == ["tsconfig.tsbuildinfo"]
        assert list(project.glob(".tsconfig.kist-*")) == []

    @pytest.mark.requirement("orchestrator")
    @pytest.mark.asyncio
    async def test_repeated_runs_give_the_same_diagnostics(
        self,
        type_error_project: Path,
        fake_engine: Any,
        list_logger: Any,
    ) -> None:
        """Test that unchanged inputs produce the same failure twice."""
        from kist_typescript.action import TypeScriptCompilerAction

        action = TypeScriptCompilerAction(logger=list_logger, engine=fake_engine)

        first = await action.resolve(config_path=str(type_error_project))
        second = await action.resolve(config_path=str(type_error_project))

        assert first == second


class TestTscEngineProcess:
    """Tests for TscEngine process handling."""

    @pytest.mark.requirement("compilation-driver")
    @pytest.mark.asyncio
    async def test_project_file_is_removed(
        self,
        one_file_project: Path,
        fake_engine: Any,
    ) -> None:
        """Test that no throw-away project file is left behind."""
        from kist_typescript.engine.base import CompilationUnit

        project = one_file_project.parent
        unit = CompilationUnit(["src/index.ts"], {"outDir": "build"}, base_dir=project)

        result = await fake_engine.emit(unit)

        assert result.emitted_files == (str(project / "build" / "index.js"),)
        assert result.emit_skipped is False
        assert result.execution_time_seconds is not None
        assert list(project.glob(".tsconfig.kist-*.json")) == []

    @pytest.mark.requirement("compilation-driver")
    @pytest.mark.asyncio
    async def test_crashed_compiler_is_a_diagnostic(
        self,
        one_file_project: Path,
        fake_engine: Any,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that an abnormal exit is reported with its stderr."""
        from kist_typescript.engine.base import CompilationUnit

        monkeypatch.setenv("FAKE_TSC_CRASH", "1")
        unit = CompilationUnit(["src/index.ts"], {}, base_dir=one_file_project.parent)

        result = await fake_engine.emit(unit)

        (diagnostic,) = result.pre_emit_diagnostics
        assert diagnostic.message_text.startswith("TypeScript compiler exited with status 134")
        assert "Reached heap limit" in diagnostic.message_text

    @pytest.mark.requirement("compilation-driver")
    def test_version(self, fake_engine: Any) -> None:
        """Test that the version is read from tsc --version."""
        assert fake_engine.version() == "5.4.5"


class TestCliWithFakeCompiler:
    """kist-tsc runs against the fake compiler."""

    @pytest.mark.requirement("cli")
    def test_success_and_diagnostic_exit_codes(
        self,
        type_error_project: Path,
        fake_tsc_command: list[str],
    ) -> None:
        """Test exit code 0 for a clean file list and 7 for diagnostics."""
        from click.testing import CliRunner

        from kist_typescript.cli.main import cli

        project = type_error_project.parent
        (project / "src" / "good.ts").write_text("export const ok = true;\n")
        tsc = " ".join(shlex.quote(part) for part in fake_tsc_command)
        runner = CliRunner()

        clean = runner.invoke(
            cli, ["-p", str(type_error_project), "-f", "src/good.ts", "--tsc", tsc]
        )
        failing = runner.invoke(cli, ["-p", str(type_error_project), "--tsc", tsc])

        assert clean.exit_code == 0, clean.output
        assert (project / "dist" / "good.js").is_file()
        assert failing.exit_code == 7
        assert "error TS2322" in failing.output
        assert "Error: TypeScript compilation failed: " in failing.output
        assert "(stage=COLLECT)" in failing.output


@requires_tsc
class TestRealCompiler:
    """The same scenarios against an installed tsc."""

    @pytest.mark.requirement("orchestrator")
    @pytest.mark.asyncio
    async def test_output_location_receives_artifact(
        self,
        one_file_project: Path,
        list_logger: Any,
    ) -> None:
        """Test that tsc writes the artifact under ./out."""
        from kist_typescript.action import TypeScriptCompilerAction
        from kist_typescript.engine.tsc import TscEngine

        action = TypeScriptCompilerAction(logger=list_logger, engine=TscEngine())

        await action.execute(config_path=str(one_file_project), output_location="./out")

        assert (one_file_project.parent / "out" / "index.js").is_file()

    @pytest.mark.requirement("orchestrator")
    @pytest.mark.asyncio
    async def test_type_error_fails(
        self,
        type_error_project: Path,
        list_logger: Any,
    ) -> None:
        """Test that tsc's type error reaches the failure message."""
        from kist_typescript.action import TypeScriptCompilerAction
        from kist_typescript.engine.tsc import TscEngine
        from kist_typescript.errors import TypeScriptCompilationFailed

        action = TypeScriptCompilerAction(logger=list_logger, engine=TscEngine())

        with pytest.raises(TypeScriptCompilationFailed) as exc_info:
            await action.execute(config_path=str(type_error_project))

        assert "TS2322" in str(exc_info.value)
        assert "is not assignable to type 'number'" in str(exc_info.value)
