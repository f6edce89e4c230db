"""tsconfig.json loader for the TypeScript compilation pipeline.

Reads a configuration file, applies its ``extends`` chain, validates the
result against the compiler option schema and selects the input files.

Every relative path in a configuration (option paths, ``files``,
``include``, ``exclude``, ``extends``) is resolved against the directory
of the file that declares it, never against the process working
directory. The same tsconfig.json may be used from different working
directories by the host build.

Failures are returned, not raised:
    ConfigReadError        root file missing, unreadable, not JSON(C), not an object
    ConfigValidationError  unknown/malformed options, malformed file specs,
                           broken or circular ``extends``, no inputs found

See Also:
    - kist_typescript.schemas.compiler_options: Option schema
    - kist_typescript.compilation.file_selection: files/include/exclude rules
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from kist_typescript.compilation.file_selection import (
    DEFAULT_INCLUDE,
    IMPLICIT_EXCLUDE_DIRS,
    InvalidFileSpecError,
    normalize_include_spec,
    select_input_files,
    to_spec_path,
)
from kist_typescript.compilation.jsonc import loads_jsonc
from kist_typescript.errors import ConfigReadError, ConfigValidationError
from kist_typescript.schemas.compiler_options import (
    OptionMap,
    describe_option_errors,
    resolve_paths_mapping,
    to_option_map,
    validate_compiler_options,
)
from kist_typescript.schemas.tsconfig import (
    DEFAULT_CONFIG_NAME,
    NormalizedConfig,
    TsConfigDocument,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _ConfigLayer:
    """One file of an ``extends`` chain with its paths made absolute."""

    path: Path
    options: OptionMap
    files: tuple[str, ...] | None
    include: tuple[str, ...] | None
    exclude: tuple[str, ...] | None


def resolve_config_path(config_path: Path | str) -> Path:
    """Resolve a caller-supplied config path against the working directory.

    A directory means ``<dir>/tsconfig.json``.
    """
    path = Path(config_path).expanduser().absolute()
    if path.is_dir():
        path = path / DEFAULT_CONFIG_NAME
    return Path(os.path.normpath(path))


def _read_jsonc(path: Path) -> dict[str, Any] | ConfigReadError:
    """Read and parse one tsconfig file.

    Returns:
        The parsed root object, or a ConfigReadError.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ConfigReadError(message=f"Cannot read file '{path}'.", path=str(path))
    except (OSError, UnicodeDecodeError) as e:
        return ConfigReadError(message=f"Cannot read file '{path}': {e}", path=str(path))

    try:
        data = loads_jsonc(text)
    except json.JSONDecodeError as e:
        return ConfigReadError(
            message=f"Invalid JSON in '{path}' at line {e.lineno}, column {e.colno}: {e.msg}",
            path=str(path),
        )

    if not isinstance(data, dict):
        return ConfigReadError(
            message=f"The root value of a '{path.name}' file must be an object.",
            path=str(path),
        )
    return data


def resolve_extends(spec: str, base_dir: Path) -> Path | None:
    """Locate the file named by an ``extends`` entry.

    Relative and absolute specs are resolved against ``base_dir`` (with
    ``.json`` appended when needed). Other specs are looked up as packages
    in ``node_modules`` of ``base_dir`` and its ancestors.

    Returns:
        The resolved file path, or None when nothing matches.
    """
    relative = spec.startswith(("./", "../", ".\\", "..\\")) or os.path.isabs(spec)
    if relative:
        target = base_dir / spec
        candidates = [target] if spec.endswith(".json") else [target, Path(f"{target}.json")]
    else:
        candidates = []
        for directory in (base_dir, *base_dir.parents):
            package = directory / "node_modules" / spec
            candidates.append(package)
            if not spec.endswith(".json"):
                candidates.extend([Path(f"{package}.json"), package / DEFAULT_CONFIG_NAME])

    for candidate in candidates:
        if candidate.is_file():
            return Path(os.path.normpath(candidate.absolute()))
    return None


def _absolute_specs(specs: list[str] | None, base_dir: Path) -> tuple[str, ...] | None:
    if specs is None:
        return None
    return tuple(to_spec_path(os.path.join(base_dir, spec)) for spec in specs)


def _validate_document(
    data: dict[str, Any],
    path: Path,
    problems: list[str],
) -> TsConfigDocument | None:
    try:
        return TsConfigDocument.model_validate(data)
    except ValidationError as e:
        for err in e.errors():
            where = ".".join(str(part) for part in err.get("loc", ()))
            problems.append(f"Invalid value for '{where}' in '{path}': {err.get('msg', '')}")
        return None


def _layer_from_document(
    doc: TsConfigDocument,
    path: Path,
    problems: list[str],
) -> _ConfigLayer | None:
    try:
        options = validate_compiler_options(doc.compiler_options or {})
    except ValidationError as e:
        problems.extend(message for _, message in describe_option_errors(e))
        return None

    base_dir = path.parent
    return _ConfigLayer(
        path=path,
        options=to_option_map(options, base_dir),
        files=_absolute_specs(doc.files, base_dir),
        include=_absolute_specs(doc.include, base_dir),
        exclude=_absolute_specs(doc.exclude, base_dir),
    )


def _collect_layers(
    path: Path,
    data: dict[str, Any],
    chain: tuple[Path, ...],
    problems: list[str],
) -> list[_ConfigLayer]:
    """Return the layers of ``path`` base-first, recording problems."""
    doc = _validate_document(data, path, problems)
    if doc is None:
        return []

    layers: list[_ConfigLayer] = []
    for spec in doc.extends or []:
        target = resolve_extends(spec, path.parent)
        if target is None:
            problems.append(f"File '{spec}' not found.")
            continue
        if target in chain:
            cycle = " -> ".join(str(p) for p in (*chain, target))
            problems.append(f"Circularity detected while resolving configuration: {cycle}")
            continue
        raw = _read_jsonc(target)
        if isinstance(raw, ConfigReadError):
            problems.append(raw.message)
            continue
        layers.extend(_collect_layers(target, raw, (*chain, target), problems))

    own = _layer_from_document(doc, path, problems)
    if own is not None:
        layers.append(own)
    return layers


def load_config(
    config_path: Path | str = DEFAULT_CONFIG_NAME,
    *,
    require_inputs: bool = True,
) -> NormalizedConfig | ConfigReadError | ConfigValidationError:
    """Load, validate and normalize a tsconfig.json file.

    Args:
        config_path: Path to the config file (or its directory), relative
            to the working directory or absolute.
        require_inputs: Fail when no input file is selected. Callers that
            supply an explicit file list pass False.

    Returns:
        NormalizedConfig on success, otherwise the error variant.

    Example:
        >>> config = load_config("tsconfig.json")
        >>> config.options["outDir"]
        '/work/project/dist'
    """
    path = resolve_config_path(config_path)
    log = logger.bind(config_path=str(path))

    raw = _read_jsonc(path)
    if isinstance(raw, ConfigReadError):
        log.debug("tsconfig_read_failed", error=raw.message)
        return raw

    problems: list[str] = []
    layers = _collect_layers(path, raw, (path,), problems)
    if problems:
        return _validation_error(path, problems, log)

    options: OptionMap = {}
    files: tuple[str, ...] | None = None
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    paths_base: Path | None = None
    for layer in layers:
        options.update(layer.options)
        if "paths" in layer.options:
            paths_base = layer.path.parent
        files = layer.files if layer.files is not None else files
        include = layer.include if layer.include is not None else include
        exclude = layer.exclude if layer.exclude is not None else exclude
    if paths_base is not None and "baseUrl" not in options:
        # targets are relative to the declaring config, not to the generated project file
        options["paths"] = resolve_paths_mapping(options["paths"], paths_base)

    base_dir = path.parent
    if files is None and include is None:
        include = _absolute_specs(list(DEFAULT_INCLUDE), base_dir)
    if exclude is None:
        implicit = [to_spec_path(os.path.join(base_dir, name)) for name in IMPLICIT_EXCLUDE_DIRS]
        for key in ("outDir", "declarationDir"):
            if isinstance(options.get(key), str):
                implicit.append(to_spec_path(options[key]))
        exclude = tuple(implicit)

    include_specs = include or ()
    try:
        for spec in include_specs:
            normalize_include_spec(spec)
        input_files = select_input_files(
            files,
            include_specs,
            exclude,
            allow_js=options.get("allowJs") is True,
        )
    except InvalidFileSpecError as e:
        return _validation_error(path, [str(e)], log)

    if require_inputs and not input_files:
        if files is not None and not files and include is None:
            message = f"The 'files' list in config file '{path}' is empty."
        else:
            message = (
                f"No inputs were found in config file '{path}'. "
                f"Specified 'include' paths were '{json.dumps(list(include_specs))}' "
                f"and 'exclude' paths were '{json.dumps(list(exclude))}'."
            )
        return _validation_error(path, [message], log)

    log.debug(
        "tsconfig_loaded",
        layers=len(layers),
        option_count=len(options),
        input_file_count=len(input_files),
    )
    return NormalizedConfig(
        config_path=path,
        base_dir=base_dir,
        options=options,
        input_files=tuple(input_files),
        files=files,
        include=include_specs,
        exclude=exclude,
    )


def _validation_error(
    path: Path,
    problems: list[str],
    log: Any,
) -> ConfigValidationError:
    message = "\n".join(problems)
    log.debug("tsconfig_validation_failed", problem_count=len(problems))
    return ConfigValidationError(message=message, path=str(path))


__all__ = ["load_config", "resolve_config_path", "resolve_extends"]
