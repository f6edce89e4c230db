"""OpenTelemetry tracing helpers for the TypeScript compilation action.

One ``kist.typescript.pipeline`` span wraps each invocation and one
``tsc.<operation>`` span wraps each engine call.

Security:
    - Spans MUST NOT include option values or source text
    - Only include operation metadata (config path, counts, timings)

Example:
    >>> tracer = get_tracer()
    >>> with tsc_span(tracer, "emit", base_dir="/p") as span:
    ...     set_result_attributes(span, pre_emit_diagnostics=0, emitted_files=3)
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Iterator

TRACER_NAME = "kist.typescript"
PIPELINE_SPAN_NAME = "kist.typescript.pipeline"

ATTR_CONFIG_PATH = "kist.typescript.config_path"
ATTR_INPUT_FILES = "kist.typescript.input_files"
ATTR_OUTCOME = "kist.typescript.outcome"
ATTR_ERROR_KIND = "kist.typescript.error_kind"
ATTR_TSC_OPERATION = "tsc.operation"
ATTR_TSC_BASE_DIR = "tsc.base_dir"
ATTR_TSC_VERSION = "tsc.version"
ATTR_TSC_PRE_EMIT_DIAGNOSTICS = "tsc.diagnostics.pre_emit"
ATTR_TSC_EMIT_DIAGNOSTICS = "tsc.diagnostics.emit"
ATTR_TSC_EMITTED_FILES = "tsc.emitted_files"
ATTR_TSC_EXECUTION_TIME = "tsc.execution_time_seconds"

_tracers: dict[str, trace.Tracer] = {}
_tracer_init_failed = False
_lock = threading.Lock()


def get_tracer(name: str = TRACER_NAME) -> trace.Tracer:
    """Get or create a cached tracer.

    Returns a NoOpTracer if OpenTelemetry initialization fails.
    """
    global _tracer_init_failed

    if name in _tracers:
        return _tracers[name]
    if _tracer_init_failed:
        return trace.NoOpTracer()

    with _lock:
        if name in _tracers:
            return _tracers[name]
        try:
            tracer = trace.get_tracer(name)
        except Exception:
            # OTel global state corrupted (common in test environments)
            _tracer_init_failed = True
            return trace.NoOpTracer()
        _tracers[name] = tracer
        return tracer


def reset_tracer() -> None:
    """Clear cached tracers (for test isolation)."""
    global _tracer_init_failed
    with _lock:
        _tracers.clear()
        _tracer_init_failed = False


@contextmanager
def _span(
    tracer: trace.Tracer,
    name: str,
    attributes: dict[str, Any],
) -> Iterator[trace.Span]:
    with tracer.start_as_current_span(name, attributes=attributes) as span:
        try:
            yield span
            span.set_status(Status(StatusCode.OK))
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            span.record_exception(e)
            raise


@contextmanager
def pipeline_span(
    tracer: trace.Tracer,
    *,
    config_path: str,
) -> Iterator[trace.Span]:
    """Span around one load -> merge -> compile -> collect invocation."""
    attributes: dict[str, Any] = {ATTR_CONFIG_PATH: config_path}
    with _span(tracer, PIPELINE_SPAN_NAME, attributes) as span:
        yield span


@contextmanager
def tsc_span(
    tracer: trace.Tracer,
    operation: str,
    *,
    base_dir: str | None = None,
) -> Iterator[trace.Span]:
    """Context manager for engine operation spans.

    Args:
        tracer: OpenTelemetry tracer instance.
        operation: Engine operation name (e.g., "emit", "version").
        base_dir: Configuration directory the engine runs in.

    Yields:
        The active span for adding result attributes.
    """
    attributes: dict[str, Any] = {ATTR_TSC_OPERATION: operation}
    if base_dir is not None:
        attributes[ATTR_TSC_BASE_DIR] = base_dir
    with _span(tracer, f"tsc.{operation}", attributes) as span:
        yield span


def set_result_attributes(
    span: trace.Span,
    *,
    pre_emit_diagnostics: int | None = None,
    emit_diagnostics: int | None = None,
    emitted_files: int | None = None,
    execution_time: float | None = None,
    outcome: str | None = None,
    error_kind: str | None = None,
    input_files: int | None = None,
    tsc_version: str | None = None,
) -> None:
    """Set result attributes on a pipeline or engine span."""
    if input_files is not None:
        span.set_attribute(ATTR_INPUT_FILES, input_files)
    if tsc_version is not None:
        span.set_attribute(ATTR_TSC_VERSION, tsc_version)
    if pre_emit_diagnostics is not None:
        span.set_attribute(ATTR_TSC_PRE_EMIT_DIAGNOSTICS, pre_emit_diagnostics)
    if emit_diagnostics is not None:
        span.set_attribute(ATTR_TSC_EMIT_DIAGNOSTICS, emit_diagnostics)
    if emitted_files is not None:
        span.set_attribute(ATTR_TSC_EMITTED_FILES, emitted_files)
    if execution_time is not None:
        span.set_attribute(ATTR_TSC_EXECUTION_TIME, execution_time)
    if outcome is not None:
        span.set_attribute(ATTR_OUTCOME, outcome)
    if error_kind is not None:
        span.set_attribute(ATTR_ERROR_KIND, error_kind)


__all__ = [
    "PIPELINE_SPAN_NAME",
    "TRACER_NAME",
    "get_tracer",
    "pipeline_span",
    "reset_tracer",
    "set_result_attributes",
    "tsc_span",
]
