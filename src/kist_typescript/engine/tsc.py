"""Compiler engine backed by the ``tsc`` executable.

Each emission writes a throw-away project file next to the configuration
(so module and type resolution behave as for the configuration itself),
runs ``tsc --project <file>`` once and removes the file again. The
project file carries the effective options verbatim and lists the input
files explicitly; nothing is inherited through ``extends``.

The executable is located in this order:

    1. the ``command`` passed to the engine
    2. ``KIST_TSC_COMMAND``
    3. ``node_modules/.bin/tsc`` in the configuration directory or an ancestor
    4. ``tsc`` on ``PATH``

Example:
    >>> engine = TscEngine(command=["npx", "--no-install", "tsc"])
    >>> result = await engine.emit(unit)
    >>> [d.code for d in result.pre_emit_diagnostics]
    [2322]
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
import subprocess
import time
import uuid
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import structlog

from kist_typescript.engine.base import CompilationUnit, CompilerEngine, EmitResult
from kist_typescript.engine.output import parse_tsc_output
from kist_typescript.schemas.compiler_options import resolve_path_options
from kist_typescript.schemas.diagnostics import Diagnostic, DiagnosticCategory
from kist_typescript.settings import EngineSettings
from kist_typescript.telemetry import get_tracer, set_result_attributes, tsc_span

logger = structlog.get_logger(__name__)

_TSC_BINARY = "tsc.cmd" if os.name == "nt" else "tsc"

# tsc exit statuses: 0 ok, 1 diagnostics and outputs skipped,
# 2 diagnostics and outputs generated
_TSC_EXIT_CODES = frozenset({0, 1, 2})


class TscEngine(CompilerEngine):
    """Runs the TypeScript compiler as a subprocess.

    Args:
        command: Explicit command line for the compiler.
        settings: Engine settings; read from the environment when omitted.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self._command = list(command) if command else None
        self._settings = settings if settings is not None else EngineSettings()

    @property
    def name(self) -> str:
        return "tsc"

    def resolve_command(self, base_dir: Path) -> list[str] | None:
        """Locate the compiler command for a configuration directory.

        Returns:
            The command as an argument list, or None when tsc is not found.
        """
        if self._command:
            return list(self._command)

        configured = self._settings.command_args()
        if configured:
            return configured

        if self._settings.search_node_modules:
            for directory in (base_dir, *base_dir.parents):
                candidate = directory / "node_modules" / ".bin" / _TSC_BINARY
                if candidate.is_file():
                    return [str(candidate)]

        found = shutil.which("tsc")
        return [found] if found else None

    def version(self) -> str | None:
        """Return the compiler version reported by ``tsc --version``."""
        command = self.resolve_command(Path.cwd())
        if command is None:
            return None
        with tsc_span(get_tracer(), "version") as span:
            try:
                completed = subprocess.run(
                    [*command, "--version"],
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=60,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.debug("tsc_version_failed", error=str(e))
                return None
            output = completed.stdout.strip()
            if completed.returncode != 0 or not output:
                return None
            version = output.removeprefix("Version ").strip()
            set_result_attributes(span, tsc_version=version)
            return version

    async def emit(self, unit: CompilationUnit) -> EmitResult:
        """Run one tsc emission for ``unit``.

        Problems running the compiler are reported as a single
        pre-emission diagnostic.
        """
        base_dir = unit.base_dir
        log = logger.bind(engine=self.name, base_dir=str(base_dir))
        tracer = get_tracer()

        with tsc_span(tracer, "emit", base_dir=str(base_dir)) as span:
            if not unit.input_files:
                # tsc refuses a project with an empty file list
                log.debug("tsc_skipped_empty_unit")
                set_result_attributes(span, emitted_files=0)
                return EmitResult(emit_skipped=True)

            command = self.resolve_command(base_dir)
            if command is None:
                log.warning("tsc_not_found")
                return _failed_run(
                    "TypeScript compiler 'tsc' was not found. Install the 'typescript' "
                    "package or set KIST_TSC_COMMAND."
                )

            project_file = base_dir / f".tsconfig.kist-{uuid.uuid4().hex}.json"
            try:
                project_file.write_text(
                    json.dumps(project_document(unit), indent=2),
                    encoding="utf-8",
                )
            except OSError as e:
                log.warning("tsc_project_file_failed", project_file=str(project_file), error=str(e))
                project_file.unlink(missing_ok=True)
                return _failed_run(f"Cannot write project file '{project_file}': {e}")

            start = time.perf_counter()
            try:
                args = [
                    *command,
                    "--project",
                    str(project_file),
                    "--pretty",
                    "false",
                    "--listEmittedFiles",
                ]
                log.debug("tsc_started", command=command, input_file_count=len(unit.input_files))
                process = await asyncio.create_subprocess_exec(
                    *args,
                    cwd=str(base_dir),
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
                stdout, stderr = await process.communicate()
            except OSError as e:
                log.warning("tsc_failed_to_start", command=command, error=str(e))
                return _failed_run(f"Cannot run TypeScript compiler '{command[0]}': {e}")
            finally:
                project_file.unlink(missing_ok=True)
            execution_time = time.perf_counter() - start

            parsed = parse_tsc_output(stdout.decode("utf-8", errors="replace"), base_dir)
            pre_emit = list(parsed.pre_emit_diagnostics)
            returncode = process.returncode
            nothing_reported = not pre_emit and not parsed.emit_diagnostics
            if returncode not in _TSC_EXIT_CODES or (returncode != 0 and nothing_reported):
                detail = stderr.decode("utf-8", errors="replace").strip()
                if not detail:
                    detail = "\n".join(parsed.unparsed_lines)
                pre_emit.append(
                    _run_diagnostic(
                        f"TypeScript compiler exited with status {returncode}"
                        + (f": {detail}" if detail else ".")
                    )
                )

            result = EmitResult(
                pre_emit_diagnostics=tuple(pre_emit),
                emit_diagnostics=parsed.emit_diagnostics,
                emitted_files=parsed.emitted_files,
                emit_skipped=not parsed.emitted_files,
                execution_time_seconds=execution_time,
            )
            set_result_attributes(
                span,
                pre_emit_diagnostics=len(result.pre_emit_diagnostics),
                emit_diagnostics=len(result.emit_diagnostics),
                emitted_files=len(result.emitted_files),
                execution_time=execution_time,
            )
            log.debug(
                "tsc_completed",
                returncode=returncode,
                pre_emit_diagnostics=len(result.pre_emit_diagnostics),
                emit_diagnostics=len(result.emit_diagnostics),
                emitted_files=len(result.emitted_files),
            )
            return result


def project_document(unit: CompilationUnit) -> dict[str, object]:
    """Build the throw-away project file for one unit.

    Relative inputs and path options come from the caller and are resolved
    against the caller's working directory. Incremental state is pointed at
    the file tsc would use for the real configuration, so it does not
    follow the throw-away file's name.
    """
    options = resolve_path_options(unit.options, unit.cwd)
    build_info = build_info_path(options, unit.config_path)
    if build_info is not None:
        options["tsBuildInfoFile"] = build_info
    return {
        "compilerOptions": options,
        "files": [os.path.normpath(os.path.join(unit.cwd, f)) for f in unit.input_files],
        "include": [],
    }


def build_info_path(options: Mapping[str, Any], config_path: Path) -> str | None:
    """Default ``.tsbuildinfo`` location for a configuration.

    Follows tsc: next to ``outFile`` when set, otherwise in ``outDir``
    (mirroring the config's position under ``rootDir``), otherwise next to
    the configuration file.

    Returns:
        The path, or None when incremental builds are off or
        ``tsBuildInfoFile`` is already set.
    """
    if not (options.get("incremental") or options.get("composite")):
        return None
    if options.get("tsBuildInfoFile"):
        return None

    out_file = options.get("outFile")
    if out_file:
        stem = os.path.splitext(out_file)[0]
    else:
        config_stem = os.path.splitext(str(config_path))[0]
        out_dir = options.get("outDir")
        root_dir = options.get("rootDir")
        if out_dir and root_dir:
            stem = os.path.normpath(os.path.join(out_dir, os.path.relpath(config_stem, root_dir)))
        elif out_dir:
            stem = os.path.join(out_dir, os.path.basename(config_stem))
        else:
            stem = config_stem
    return f"{stem}.tsbuildinfo"


def _run_diagnostic(message: str) -> Diagnostic:
    return Diagnostic(category=DiagnosticCategory.ERROR, message_text=message)


def _failed_run(message: str) -> EmitResult:
    return EmitResult(pre_emit_diagnostics=(_run_diagnostic(message),), emit_skipped=True)


__all__ = ["TscEngine", "build_info_path", "project_document"]
