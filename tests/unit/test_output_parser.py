"""Unit tests for parsing tsc --pretty false output."""

from __future__ import annotations

from pathlib import Path

import pytest

BASE = Path("/work/app")


class TestParseTscOutput:
    """Tests for parse_tsc_output."""

    @pytest.mark.requirement("compilation-driver")
    def test_located_diagnostic(self) -> None:
        """Test that file(line,col) diagnostics are parsed and absolutized."""
        from kist_typescript.engine.output import parse_tsc_output
        from kist_typescript.schemas.diagnostics import DiagnosticCategory

        output = parse_tsc_output(
            "src/a.ts(3,7): error TS2322: Type 'string' is not assignable to type 'number'.\n",
            BASE,
        )

        (diagnostic,) = output.pre_emit_diagnostics
        assert diagnostic.file == "/work/app/src/a.ts"
        assert (diagnostic.line, diagnostic.column) == (3, 7)
        assert diagnostic.code == 2322
        assert diagnostic.category is DiagnosticCategory.ERROR
        assert diagnostic.message_text == "Type 'string' is not assignable to type 'number'."
        assert output.emit_diagnostics == ()

    @pytest.mark.requirement("compilation-driver")
    def test_global_diagnostic(self) -> None:
        """Test that diagnostics without a location are parsed."""
        from kist_typescript.engine.output import parse_tsc_output

        output = parse_tsc_output("error TS6053: File '/work/app/x.ts' not found.\n", BASE)

        (diagnostic,) = output.pre_emit_diagnostics
        assert diagnostic.file is None
        assert diagnostic.code == 6053

    @pytest.mark.requirement("compilation-driver")
    def test_continuation_lines_become_a_chain(self) -> None:
        """Test that indented lines nest under the preceding diagnostic."""
        from kist_typescript.engine.output import parse_tsc_output
        from kist_typescript.schemas.diagnostics import flatten_diagnostic_message_text

        text = (
            "src/b.ts(1,1): error TS2345: Argument is not assignable.\n"
            "  Property 'x' is missing.\n"
            "    Deeper detail.\n"
            "  Second detail.\n"
        )

        (diagnostic,) = parse_tsc_output(text, BASE).pre_emit_diagnostics

        assert flatten_diagnostic_message_text(diagnostic.message_text) == (
            "Argument is not assignable.\n"
            "  Property 'x' is missing.\n"
            "    Deeper detail.\n"
            "  Second detail."
        )

    @pytest.mark.requirement("compilation-driver")
    def test_emit_codes_are_emission_diagnostics(self) -> None:
        """Test that write failures are classified as emission diagnostics."""
        from kist_typescript.engine.output import parse_tsc_output

        text = (
            "src/a.ts(1,1): error TS2304: Cannot find name 'x'.\n"
            "error TS5033: Could not write file '/work/app/dist/a.js': EACCES.\n"
        )

        output = parse_tsc_output(text, BASE)

        assert [d.code for d in output.pre_emit_diagnostics] == [2304]
        assert [d.code for d in output.emit_diagnostics] == [5033]

    @pytest.mark.requirement("compilation-driver")
    def test_emitted_files_and_unparsed_lines(self) -> None:
        """Test that TSFILE lines list artifacts and noise is kept aside."""
        from kist_typescript.engine.output import parse_tsc_output

        text = "TSFILE: /work/app/dist/a.js\r\nTSFILE: dist/b.js\nsomething else\n\n"

        output = parse_tsc_output(text, BASE)

        assert output.emitted_files == ("/work/app/dist/a.js", "/work/app/dist/b.js")
        assert output.unparsed_lines == ("something else",)
        assert output.pre_emit_diagnostics == ()
