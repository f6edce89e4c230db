"""Per-invocation compile request.

Hosts send camelCase keys (``tsconfigPath``, ``filePaths``, ``outputDir``,
``compilerOptions``); Python callers may use the snake_case field names.
Other keys of the host step (``name``, ``action``, ...) are ignored, and a
null value stands for an omitted one.

Example:
    >>> request = CompileRequest.model_validate(
    ...     {"tsconfigPath": "app/tsconfig.json", "outputDir": "./out"}
    ... )
    >>> request.config_path, request.output_location
    ('app/tsconfig.json', './out')
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from kist_typescript.schemas.tsconfig import DEFAULT_CONFIG_NAME


class CompileRequest(BaseModel):
    """Caller intent for one invocation.

    Attributes:
        config_path: tsconfig.json path, relative to the working directory.
        input_files: Explicit input file list; replaces the configured list.
        output_location: Output directory; always wins over ``outDir``.
        option_overrides: Compiler options overriding the configuration.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    config_path: str = Field(
        default=DEFAULT_CONFIG_NAME,
        min_length=1,
        validation_alias=AliasChoices("config_path", "configPath", "tsconfigPath"),
    )
    input_files: tuple[str, ...] | None = Field(
        default=None,
        validation_alias=AliasChoices("input_files", "inputFiles", "filePaths"),
    )
    output_location: str | None = Field(
        default=None,
        validation_alias=AliasChoices("output_location", "outputLocation", "outputDir"),
    )
    option_overrides: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("option_overrides", "optionOverrides", "compilerOptions"),
    )

    @field_validator("config_path", mode="before")
    @classmethod
    def _default_config_path(cls, value: Any) -> Any:
        return DEFAULT_CONFIG_NAME if value is None else value

    @field_validator("option_overrides", mode="before")
    @classmethod
    def _empty_overrides(cls, value: Any) -> Any:
        return {} if value is None else value


__all__ = ["CompileRequest"]
