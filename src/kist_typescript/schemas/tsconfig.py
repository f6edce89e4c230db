"""tsconfig.json document and normalized configuration models.

``TsConfigDocument`` describes the structure of one parsed tsconfig file
before ``extends`` chains are applied. ``NormalizedConfig`` is the result
of loading a file: the effective option set plus the selected input files.

See Also:
    - kist_typescript.compilation.loader: Builds NormalizedConfig
    - kist_typescript.schemas.compiler_options: The option schema
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kist_typescript.schemas.compiler_options import OptionMap

DEFAULT_CONFIG_NAME = "tsconfig.json"


class ProjectReference(BaseModel):
    """Entry of the ``references`` array."""

    model_config = ConfigDict(extra="ignore")

    path: str
    prepend: bool | None = None


class TsConfigDocument(BaseModel):
    """One tsconfig file as written on disk.

    Unknown top-level keys (``$schema``, ``watchOptions``, tool sections)
    are ignored, matching the compiler. Known keys must have the right
    shape; ``compilerOptions`` is validated separately against the closed
    option schema so its errors can name the offending option.

    Attributes:
        compiler_options: Raw ``compilerOptions`` mapping.
        files: Explicit file list, relative to this file's directory.
        include: Include wildcard specs, relative to this file's directory.
        exclude: Exclude wildcard specs, relative to this file's directory.
        extends: One or more base configurations to inherit from.
        references: Project references.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    compiler_options: dict[str, Any] | None = Field(default=None, alias="compilerOptions")
    files: list[str] | None = None
    include: list[str] | None = None
    exclude: list[str] | None = None
    extends: list[str] | None = None
    references: list[ProjectReference] | None = None

    @field_validator("extends", mode="before")
    @classmethod
    def _extends_as_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class NormalizedConfig(BaseModel):
    """Validated, fully resolved configuration.

    Attributes:
        config_path: Absolute path of the loaded tsconfig file.
        base_dir: Directory containing ``config_path``.
        options: Effective compiler options, path options made absolute.
        input_files: Absolute paths selected by files/include/exclude.
        files: Effective ``files`` specs (absolute), if any.
        include: Effective ``include`` specs (absolute).
        exclude: Effective ``exclude`` specs (absolute).
    """

    model_config = ConfigDict(frozen=True)

    config_path: Path
    base_dir: Path
    options: OptionMap = Field(default_factory=dict)
    input_files: tuple[str, ...] = ()
    files: tuple[str, ...] | None = None
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "NormalizedConfig",
    "ProjectReference",
    "TsConfigDocument",
]
