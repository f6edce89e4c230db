"""Closed schema for tsconfig ``compilerOptions``.

The compiler accepts an open key/value bag; this module pins it down to
an explicit set of recognized keys so that a misspelled option fails
loudly instead of being ignored. The same schema validates options read
from tsconfig.json and per-invocation overrides.

Value kinds follow the compiler's option grammar:
- booleans (``strict``, ``declaration``, ...)
- strings and integers
- enumerated constants, matched case-insensitively and stored lowercase
- string lists (``lib``, ``types``, ``typeRoots``, ``rootDirs``)
- the ``paths`` mapping and the ``plugins`` list of objects

Example:
    >>> to_option_map(validate_compiler_options({"target": "ES2020", "strict": True}))
    {'target': 'es2020', 'strict': True}
"""

from __future__ import annotations

import difflib
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

# Effective option set: camelCase option name -> normalized value
OptionMap = dict[str, Any]

OUTPUT_DIRECTORY_KEY = "outDir"

# Options holding a single path, resolved against the declaring config
PATH_OPTIONS = frozenset(
    {
        "outDir",
        "rootDir",
        "baseUrl",
        "declarationDir",
        "outFile",
        "out",
        "tsBuildInfoFile",
        "generateCpuProfile",
        "generateTrace",
    }
)
# Options holding a list of paths
PATH_LIST_OPTIONS = frozenset({"typeRoots", "rootDirs"})

Target = Literal[
    "es3",
    "es5",
    "es6",
    "es2015",
    "es2016",
    "es2017",
    "es2018",
    "es2019",
    "es2020",
    "es2021",
    "es2022",
    "es2023",
    "es2024",
    "es2025",
    "esnext",
]
Module = Literal[
    "none",
    "commonjs",
    "amd",
    "umd",
    "system",
    "es6",
    "es2015",
    "es2020",
    "es2022",
    "esnext",
    "node16",
    "node18",
    "node20",
    "nodenext",
    "preserve",
]
ModuleResolution = Literal["classic", "node", "node10", "node16", "nodenext", "bundler"]
ModuleDetection = Literal["auto", "legacy", "force"]
Jsx = Literal["preserve", "react", "react-native", "react-jsx", "react-jsxdev"]
NewLine = Literal["crlf", "lf"]
ImportsNotUsedAsValues = Literal["remove", "preserve", "error"]

_ENUM_OPTIONS = (
    "target",
    "module",
    "module_resolution",
    "module_detection",
    "jsx",
    "new_line",
    "imports_not_used_as_values",
)


class CompilerOptions(BaseModel):
    """Recognized TypeScript compiler options.

    Field names are snake_case; the accepted keys are their camelCase
    aliases (``no_implicit_any`` <-> ``noImplicitAny``). Unknown keys and
    values of the wrong kind are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        frozen=True,
        strict=True,
    )

    # Language and environment
    target: Target | None = None
    lib: list[str] | None = None
    jsx: Jsx | None = None
    jsx_factory: str | None = None
    jsx_fragment_factory: str | None = None
    jsx_import_source: str | None = None
    react_namespace: str | None = None
    no_lib: bool | None = None
    use_define_for_class_fields: bool | None = None
    experimental_decorators: bool | None = None
    emit_decorator_metadata: bool | None = None
    module_detection: ModuleDetection | None = None
    lib_replacement: bool | None = None

    # Modules
    module: Module | None = None
    module_resolution: ModuleResolution | None = None
    base_url: str | None = None
    paths: dict[str, list[str]] | None = None
    root_dirs: list[str] | None = None
    type_roots: list[str] | None = None
    types: list[str] | None = None
    allow_umd_global_access: bool | None = None
    module_suffixes: list[str] | None = None
    allow_importing_ts_extensions: bool | None = None
    rewrite_relative_import_extensions: bool | None = None
    resolve_package_json_exports: bool | None = None
    resolve_package_json_imports: bool | None = None
    custom_conditions: list[str] | None = None
    resolve_json_module: bool | None = None
    allow_arbitrary_extensions: bool | None = None
    no_resolve: bool | None = None
    no_unchecked_side_effect_imports: bool | None = None

    # JavaScript support
    allow_js: bool | None = None
    check_js: bool | None = None
    max_node_module_js_depth: int | None = None

    # Emit
    declaration: bool | None = None
    declaration_map: bool | None = None
    emit_declaration_only: bool | None = None
    source_map: bool | None = None
    inline_source_map: bool | None = None
    inline_sources: bool | None = None
    source_root: str | None = None
    map_root: str | None = None
    out_file: str | None = None
    out_dir: str | None = None
    root_dir: str | None = None
    declaration_dir: str | None = None
    remove_comments: bool | None = None
    no_emit: bool | None = None
    no_emit_on_error: bool | None = None
    import_helpers: bool | None = None
    downlevel_iteration: bool | None = None
    emit_bom: bool | None = Field(default=None, alias="emitBOM")
    new_line: NewLine | None = None
    strip_internal: bool | None = None
    no_emit_helpers: bool | None = None
    preserve_const_enums: bool | None = None

    # Interop constraints
    isolated_modules: bool | None = None
    isolated_declarations: bool | None = None
    verbatim_module_syntax: bool | None = None
    allow_synthetic_default_imports: bool | None = None
    es_module_interop: bool | None = None
    preserve_symlinks: bool | None = None
    force_consistent_casing_in_file_names: bool | None = None
    erasable_syntax_only: bool | None = None

    # Type checking
    strict: bool | None = None
    no_implicit_any: bool | None = None
    strict_null_checks: bool | None = None
    strict_function_types: bool | None = None
    strict_bind_call_apply: bool | None = None
    strict_property_initialization: bool | None = None
    strict_builtin_iterator_return: bool | None = None
    no_implicit_this: bool | None = None
    use_unknown_in_catch_variables: bool | None = None
    always_strict: bool | None = None
    no_unused_locals: bool | None = None
    no_unused_parameters: bool | None = None
    exact_optional_property_types: bool | None = None
    no_implicit_returns: bool | None = None
    no_fallthrough_cases_in_switch: bool | None = None
    no_unchecked_indexed_access: bool | None = None
    no_implicit_override: bool | None = None
    no_property_access_from_index_signature: bool | None = None
    allow_unused_labels: bool | None = None
    allow_unreachable_code: bool | None = None

    # Projects and completeness
    incremental: bool | None = None
    composite: bool | None = None
    ts_build_info_file: str | None = None
    skip_lib_check: bool | None = None
    skip_default_lib_check: bool | None = None
    no_check: bool | None = None
    disable_size_limit: bool | None = None
    disable_solution_searching: bool | None = None
    disable_referenced_project_load: bool | None = None
    disable_source_of_project_reference_redirect: bool | None = None
    assume_changes_only_affect_direct_dependencies: bool | None = None

    # Editor support
    plugins: list[dict[str, Any]] | None = None

    # Output formatting
    no_error_truncation: bool | None = None
    pretty: bool | None = None
    preserve_watch_output: bool | None = None
    locale: str | None = None

    # Compiler diagnostics
    list_files: bool | None = None
    list_emitted_files: bool | None = None
    diagnostics: bool | None = None
    extended_diagnostics: bool | None = None
    explain_files: bool | None = None
    trace_resolution: bool | None = None
    generate_cpu_profile: str | None = None
    generate_trace: str | None = None

    # Backwards compatibility; tsc reports these as deprecated or removed
    ignore_deprecations: str | None = None
    imports_not_used_as_values: ImportsNotUsedAsValues | None = None
    preserve_value_imports: bool | None = None
    no_implicit_use_strict: bool | None = None
    no_strict_generic_checks: bool | None = None
    keyof_strings_only: bool | None = None
    suppress_excess_property_errors: bool | None = None
    suppress_implicit_any_index_errors: bool | None = None
    out: str | None = None
    charset: str | None = None

    @field_validator(*_ENUM_OPTIONS, mode="before")
    @classmethod
    def _lowercase_enum(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("lib", mode="before")
    @classmethod
    def _lowercase_lib(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item.lower() if isinstance(item, str) else item for item in value]
        return value


RECOGNIZED_OPTIONS: frozenset[str] = frozenset(
    field.alias for field in CompilerOptions.model_fields.values() if field.alias
)

_KIND_NAMES = {
    "bool_type": "boolean",
    "string_type": "string",
    "int_type": "number",
    "list_type": "list",
    "dict_type": "object",
}


def validate_compiler_options(raw: Mapping[str, Any]) -> CompilerOptions:
    """Validate a raw ``compilerOptions`` mapping.

    Raises:
        ValidationError: If a key is unknown or a value has the wrong kind.
    """
    return CompilerOptions.model_validate(dict(raw))


def to_option_map(options: CompilerOptions, base_dir: Path | None = None) -> OptionMap:
    """Dump the options that were set, resolving path options against ``base_dir``."""
    values: OptionMap = options.model_dump(by_alias=True, exclude_unset=True)
    if base_dir is None:
        return values
    return resolve_path_options(values, base_dir)


def resolve_path_options(values: Mapping[str, Any], base_dir: Path) -> OptionMap:
    """Return a copy of ``values`` with relative path options made absolute."""
    resolved = dict(values)
    for key, value in values.items():
        if key in PATH_OPTIONS and isinstance(value, str):
            resolved[key] = _join(base_dir, value)
        elif key in PATH_LIST_OPTIONS and isinstance(value, list):
            resolved[key] = [_join(base_dir, item) for item in value]
    return resolved


def resolve_paths_mapping(paths: Mapping[str, list[str]], base_dir: Path) -> dict[str, list[str]]:
    """Make ``paths`` targets absolute against the declaring configuration.

    tsc reads targets relative to ``baseUrl`` when one is set and relative to
    the configuration that declared ``paths`` otherwise.
    """
    return {
        pattern: [_join(base_dir, target) for target in targets]
        for pattern, targets in paths.items()
    }


def _join(base_dir: Path, value: str) -> str:
    return os.path.normpath(os.path.join(base_dir, value))


def describe_option_errors(exc: ValidationError) -> list[tuple[str, str]]:
    """Turn a validation error into ``(option key, message)`` pairs.

    Messages follow the compiler's wording where one exists.
    """
    problems: list[tuple[str, str]] = []
    for err in exc.errors():
        loc = err.get("loc", ())
        key = str(loc[0]) if loc else ""
        err_type = err.get("type", "")
        if err_type == "extra_forbidden":
            message = f"Unknown compiler option '{key}'."
            suggestion = suggest_option(key)
            if suggestion:
                message += f" Did you mean '{suggestion}'?"
        elif err_type == "literal_error":
            expected = err.get("ctx", {}).get("expected", "")
            message = f"Argument for '--{key}' option must be: {expected}."
        elif err_type in _KIND_NAMES and len(loc) == 1:
            message = f"Compiler option '{key}' requires a value of type {_KIND_NAMES[err_type]}."
        else:
            where = ".".join(str(part) for part in loc)
            message = f"Compiler option '{where}': {err.get('msg', 'Invalid value')}"
        problems.append((key, message))
    return problems


def suggest_option(key: str) -> str | None:
    """Return the closest recognized option name, if any is close enough."""
    lowered = {name.lower(): name for name in RECOGNIZED_OPTIONS}
    if key.lower() in lowered:
        return lowered[key.lower()]
    matches = difflib.get_close_matches(key, sorted(RECOGNIZED_OPTIONS), n=1, cutoff=0.75)
    return matches[0] if matches else None


__all__ = [
    "OUTPUT_DIRECTORY_KEY",
    "PATH_LIST_OPTIONS",
    "PATH_OPTIONS",
    "RECOGNIZED_OPTIONS",
    "CompilerOptions",
    "OptionMap",
    "describe_option_errors",
    "resolve_path_options",
    "resolve_paths_mapping",
    "suggest_option",
    "to_option_map",
    "validate_compiler_options",
]
