"""Main entry point for the kist-tsc CLI.

Runs the TypeScript compile action once, outside a kist build.

Example:
    $ kist-tsc --project app/tsconfig.json --out-dir ./out
    $ kist-tsc -p tsconfig.json -f src/index.ts -O strict=true -O target=ES2022
"""

from __future__ import annotations

import json
import shlex
import sys
from importlib.metadata import version as get_version

import click
import structlog

from kist_typescript.action import TypeScriptCompilerAction
from kist_typescript.cli.utils import EchoActionLogger, ExitCode, error_exit, exit_code_for
from kist_typescript.engine.tsc import TscEngine
from kist_typescript.errors import TypeScriptCompilationFailed
from kist_typescript.logging import configure_logging
from kist_typescript.schemas.tsconfig import DEFAULT_CONFIG_NAME

logger = structlog.get_logger(__name__)


def _get_version() -> str:
    try:
        return get_version("kist-action-typescript")
    except Exception:
        return "unknown"


def parse_option_assignments(
    ctx: click.Context,  # noqa: ARG001
    param: click.Parameter,  # noqa: ARG001
    values: tuple[str, ...],
) -> dict[str, object]:
    """Parse repeated ``KEY=VALUE`` options.

    Values are read as JSON (``true``, ``5``, ``["dom"]``) and fall back to
    plain strings (``target=ES2022``).
    """
    overrides: dict[str, object] = {}
    for assignment in values:
        key, sep, raw = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{assignment}'")
        try:
            overrides[key] = json.loads(raw)
        except json.JSONDecodeError:
            overrides[key] = raw
    return overrides


@click.command(
    name="kist-tsc",
    help="Compile a TypeScript project using a tsconfig.json configuration.",
    epilog="""
Examples:
    $ kist-tsc --project app/tsconfig.json --out-dir ./out
    $ kist-tsc -p tsconfig.json -f src/index.ts -O strict=true -O target=ES2022
""",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(
    version=_get_version(),
    prog_name="kist-tsc",
    message="%(prog)s %(version)s",
)
@click.option(
    "--project",
    "-p",
    default=DEFAULT_CONFIG_NAME,
    show_default=True,
    help="Path to tsconfig.json (or the directory containing it).",
    metavar="PATH",
)
@click.option(
    "--file",
    "-f",
    "files",
    multiple=True,
    help="Input file; replaces the configured file list. Repeatable.",
    metavar="PATH",
)
@click.option(
    "--out-dir",
    "-o",
    help="Output directory; overrides outDir from any source.",
    metavar="PATH",
)
@click.option(
    "--option",
    "-O",
    "options",
    multiple=True,
    callback=parse_option_assignments,
    help="Compiler option override as KEY=VALUE. Repeatable.",
    metavar="KEY=VALUE",
)
@click.option(
    "--tsc",
    "tsc_command",
    help="Command used to run the compiler (e.g. 'npx --no-install tsc').",
    metavar="COMMAND",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Level for internal structured logs.",
)
@click.option(
    "--json-logs",
    is_flag=True,
    default=False,
    help="Render internal logs as JSON lines.",
)
def cli(
    project: str,
    files: tuple[str, ...],
    out_dir: str | None,
    options: dict[str, object],
    tsc_command: str | None,
    log_level: str,
    json_logs: bool,
) -> None:
    """Compile a TypeScript project.

    Args:
        project: tsconfig.json path.
        files: Explicit input files.
        out_dir: Output directory override.
        options: Parsed compiler option overrides.
        tsc_command: Compiler command line.
        log_level: Internal log level.
        json_logs: Render internal logs as JSON.
    """
    configure_logging(log_level=log_level, json_output=json_logs)

    engine = TscEngine(command=shlex.split(tsc_command) if tsc_command else None)
    action = TypeScriptCompilerAction(logger=EchoActionLogger(), engine=engine)
    logger.debug("cli_invoked", project=project, file_count=len(files), option_count=len(options))

    try:
        action.run(
            config_path=project,
            input_files=files or None,
            output_location=out_dir,
            option_overrides=options,
        )
    except TypeScriptCompilationFailed as e:
        error_exit(
            str(e),
            exit_code=exit_code_for(e.kind),
            stage=e.error.stage.value,
        )


def main(argv: list[str] | None = None) -> None:
    """Console script entry point.

    Args:
        argv: Command-line arguments (uses sys.argv if None).
    """
    try:
        cli(args=argv, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(ExitCode.USAGE_ERROR if isinstance(e, click.UsageError) else e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(ExitCode.SUCCESS)


if __name__ == "__main__":
    main()
