"""TypeScript compile action.

Sequences one invocation through the pipeline stages:

    START -> [load config] -> LOADED -> [merge options] -> MERGED
          -> [compile] -> COMPILED -> [collect diagnostics] -> DONE

A failure while loading or merging ends the invocation before the engine
is touched. Stages return error variants; ``execute`` is the one place a
variant becomes an exception.

Host-facing log events go through an ``ActionLogger``:
    - one info event naming the configuration before compilation starts
    - one info event when compilation succeeds
    - one error event per diagnostic (or one for a load/merge failure)

Example:
    >>> action = TypeScriptCompilerAction()
    >>> await action.execute({"tsconfigPath": "tsconfig.json", "outputDir": "./out"})
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol, Union, runtime_checkable

import structlog
from pydantic import ValidationError

from kist_typescript.compilation.collector import collect
from kist_typescript.compilation.driver import compile_unit, select_inputs
from kist_typescript.compilation.loader import load_config, resolve_config_path
from kist_typescript.compilation.merger import merge_options
from kist_typescript.engine.base import CompilerEngine
from kist_typescript.engine.tsc import TscEngine
from kist_typescript.errors import (
    CompilationDiagnostics,
    ConfigReadError,
    ConfigValidationError,
    InvalidOverrideError,
    TypeScriptCompilationFailed,
)
from kist_typescript.schemas.diagnostics import Success
from kist_typescript.schemas.request import CompileRequest
from kist_typescript.stages import PipelineState
from kist_typescript.telemetry import get_tracer, pipeline_span, set_result_attributes

logger = structlog.get_logger(__name__)

DESCRIPTION = "Compiles TypeScript files using a given tsconfig.json configuration."

ActionResult = Union[
    Success,
    ConfigReadError,
    ConfigValidationError,
    InvalidOverrideError,
    CompilationDiagnostics,
]


@runtime_checkable
class ActionLogger(Protocol):
    """Logging sink supplied by the host."""

    def log_info(self, message: str) -> None: ...

    def log_error(self, message: str) -> None: ...


class StructlogActionLogger:
    """ActionLogger writing to structlog."""

    def __init__(self, action: str = "TypeScriptCompilerAction") -> None:
        self._log = structlog.get_logger("kist.actions").bind(action=action)

    def log_info(self, message: str) -> None:
        self._log.info(message)

    def log_error(self, message: str) -> None:
        self._log.error(message)


class TypeScriptCompilerAction:
    """Compiles a TypeScript project described by a tsconfig.json.

    Invocations share nothing: each one loads the configuration again and
    builds its own compilation unit, so concurrent invocations are safe
    as long as they write to different output locations.

    Args:
        logger: Host logging sink. Defaults to structlog.
        engine: Compiler engine. Defaults to a ``TscEngine``.
    """

    def __init__(
        self,
        logger: ActionLogger | None = None,
        engine: CompilerEngine | None = None,
    ) -> None:
        self._logger: ActionLogger = logger if logger is not None else StructlogActionLogger()
        self._engine = engine if engine is not None else TscEngine()

    @property
    def engine(self) -> CompilerEngine:
        return self._engine

    def describe(self) -> str:
        return DESCRIPTION

    async def resolve(
        self,
        request: CompileRequest | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> ActionResult:
        """Run the pipeline and return its result without raising.

        Args:
            request: Compile request, or a mapping of its fields (camelCase
                host keys accepted).
            **kwargs: Request fields, when no request object is given.

        Returns:
            Success, or the error variant that ended the invocation.
        """
        try:
            request = _coerce_request(request, kwargs)
        except ValidationError as e:
            error = _request_error(e)
            logger.debug(
                "typescript_request_invalid",
                error_kind=error.kind.value,
                error_count=e.error_count(),
            )
            self._logger.log_error(error.format())
            return error
        config_path = resolve_config_path(request.config_path)
        log = logger.bind(config_path=str(config_path))
        tracer = get_tracer()

        with pipeline_span(tracer, config_path=str(config_path)) as span:
            config = load_config(
                config_path,
                require_inputs=request.input_files is None,
            )
            if isinstance(config, (ConfigReadError, ConfigValidationError)):
                return self._stage_failed(config, span, log)
            log.debug("typescript_pipeline_state", state=PipelineState.LOADED.value)

            options = merge_options(
                config.options,
                request.option_overrides,
                request.output_location,
                base_dir=config.base_dir,
            )
            if isinstance(options, InvalidOverrideError):
                return self._stage_failed(options, span, log)
            log.debug("typescript_pipeline_state", state=PipelineState.MERGED.value)

            input_files = select_inputs(config, request.input_files)
            set_result_attributes(span, input_files=len(input_files))
            self._logger.log_info(
                f"Compiling TypeScript using configuration: {config.config_path}"
            )
            result = await compile_unit(
                input_files,
                options,
                engine=self._engine,
                base_dir=config.base_dir,
                config_path=config.config_path,
            )
            log.debug("typescript_pipeline_state", state=PipelineState.COMPILED.value)
            outcome = collect(result.pre_emit_diagnostics, result.emit_diagnostics)
            set_result_attributes(
                span,
                pre_emit_diagnostics=len(result.pre_emit_diagnostics),
                emit_diagnostics=len(result.emit_diagnostics),
                emitted_files=len(result.emitted_files),
            )

            if isinstance(outcome, Success):
                set_result_attributes(span, outcome="success")
                log.debug(
                    "typescript_compilation_succeeded", emitted_files=len(result.emitted_files)
                )
                self._logger.log_info("TypeScript compilation completed successfully.")
                return outcome

            for entry in outcome.diagnostics:
                self._logger.log_error(entry.format())
            error = CompilationDiagnostics.from_failure(outcome)
            set_result_attributes(span, outcome="failure", error_kind=error.kind.value)
            log.debug("typescript_compilation_failed", diagnostic_count=len(outcome.diagnostics))
            return error

    async def execute(
        self,
        request: CompileRequest | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Run the pipeline.

        Raises:
            TypeScriptCompilationFailed: On any configuration, override or
                compilation failure.
        """
        result = await self.resolve(request, **kwargs)
        if not isinstance(result, Success):
            raise TypeScriptCompilationFailed(result)

    def run(
        self,
        request: CompileRequest | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Synchronous wrapper around ``execute``."""
        asyncio.run(self.execute(request, **kwargs))

    def _stage_failed(
        self,
        error: ConfigReadError | ConfigValidationError | InvalidOverrideError,
        span: Any,
        log: Any,
    ) -> ActionResult:
        set_result_attributes(span, outcome="failure", error_kind=error.kind.value)
        log.debug(
            "typescript_stage_failed",
            stage=error.stage.value,
            stage_description=error.stage.description,
            error_kind=error.kind.value,
        )
        self._logger.log_error(error.format())
        return error


def _coerce_request(
    request: CompileRequest | Mapping[str, Any] | None,
    fields: Mapping[str, Any],
) -> CompileRequest:
    if isinstance(request, CompileRequest):
        if fields:
            return CompileRequest.model_validate(
                {**request.model_dump(exclude_unset=True), **fields}
            )
        return request
    return CompileRequest.model_validate({**(request or {}), **fields})


_OVERRIDE_FIELDS = frozenset({"option_overrides", "optionOverrides", "compilerOptions"})


def _request_error(e: ValidationError) -> ConfigValidationError | InvalidOverrideError:
    detail = e.errors()[0]
    field = str(detail["loc"][0]) if detail["loc"] else "request"
    if field in _OVERRIDE_FIELDS:
        return InvalidOverrideError(key=field, message=detail["msg"])
    return ConfigValidationError(
        message=f"Invalid compile request field '{field}': {detail['msg']}"
    )


__all__ = [
    "DESCRIPTION",
    "ActionLogger",
    "ActionResult",
    "StructlogActionLogger",
    "TypeScriptCompilerAction",
]
