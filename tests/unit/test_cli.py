"""Unit tests for the kist-tsc command.

Only paths that stop before the compiler runs are covered here; the
integration tests drive the command against a fake compiler.
"""

from __future__ import annotations

from pathlib import Path

import click
import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


class TestParseOptionAssignments:
    """Tests for --option KEY=VALUE parsing."""

    @pytest.mark.requirement("cli")
    def test_values_are_json_with_string_fallback(self) -> None:
        """Test that JSON values are decoded and bare words stay strings."""
        from kist_typescript.cli.main import parse_option_assignments

        parsed = parse_option_assignments(
            None,  # type: ignore[arg-type]
            None,  # type: ignore[arg-type]
            ("strict=true", "target=ES2022", 'lib=["dom"]', "maxNodeModuleJsDepth=2"),
        )

        assert parsed == {
            "strict": True,
            "target": "ES2022",
            "lib": ["dom"],
            "maxNodeModuleJsDepth": 2,
        }

    @pytest.mark.requirement("cli")
    def test_assignment_without_equals_is_rejected(self) -> None:
        """Test that a malformed assignment is a usage error."""
        from kist_typescript.cli.main import parse_option_assignments

        with pytest.raises(click.BadParameter):
            parse_option_assignments(None, None, ("strict",))  # type: ignore[arg-type]


class TestCliExitCodes:
    """Tests for exit codes of failures before compilation."""

    @pytest.mark.requirement("cli")
    def test_missing_config_exits_with_file_not_found(
        self,
        cli_runner: CliRunner,
        project_dir: Path,
    ) -> None:
        """Test that a missing tsconfig.json exits with code 3."""
        from kist_typescript.cli.main import cli

        result = cli_runner.invoke(cli, ["--project", str(project_dir / "missing.json")])

        assert result.exit_code == 3
        assert "Error: TypeScript compilation failed: Error reading missing.json" in result.output
        assert "Compiling TypeScript" not in result.output

    @pytest.mark.requirement("cli")
    def test_invalid_override_exits_with_validation_error(
        self,
        cli_runner: CliRunner,
        simple_project: Path,
    ) -> None:
        """Test that an unknown --option key exits with code 5."""
        from kist_typescript.cli.main import cli

        result = cli_runner.invoke(cli, ["-p", str(simple_project), "-O", "stirct=true"])

        assert result.exit_code == 5
        assert "Unknown compiler option 'stirct'" in result.output

    @pytest.mark.requirement("cli")
    def test_malformed_option_is_a_usage_error(
        self,
        cli_runner: CliRunner,
        simple_project: Path,
    ) -> None:
        """Test that --option without '=' exits with code 2."""
        from kist_typescript.cli.main import cli

        result = cli_runner.invoke(cli, ["-p", str(simple_project), "-O", "strict"])

        assert result.exit_code == 2
        assert "expected KEY=VALUE" in result.output


class TestExitCodeMapping:
    """Tests for exit_code_for."""

    @pytest.mark.requirement("cli")
    def test_each_error_kind_has_an_exit_code(self) -> None:
        """Test the error kind to exit code mapping."""
        from kist_typescript.cli.utils import ExitCode, exit_code_for
        from kist_typescript.errors import ErrorKind

        assert exit_code_for(ErrorKind.CONFIG_READ) is ExitCode.FILE_NOT_FOUND
        assert exit_code_for(ErrorKind.CONFIG_VALIDATION) is ExitCode.VALIDATION_ERROR
        assert exit_code_for(ErrorKind.INVALID_OVERRIDE) is ExitCode.VALIDATION_ERROR
        assert exit_code_for(ErrorKind.COMPILATION_DIAGNOSTICS) is ExitCode.COMPILATION_ERROR
