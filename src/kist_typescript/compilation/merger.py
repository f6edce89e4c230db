"""Option merger for the TypeScript compilation pipeline.

Precedence, lowest to highest:

    1. options from tsconfig.json (and its ``extends`` chain)
    2. caller option overrides
    3. the explicit output-location override (always sets ``outDir``)

Values are replaced per key, never deep-merged. Override keys go through
the same option schema as the configuration file, so an unknown or
mistyped option is rejected before any compilation starts.

Example:
    >>> merge_options({"strict": False, "outDir": "/p/dist"}, {"strict": True}, "./out")
    {'strict': True, 'outDir': './out'}
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from kist_typescript.errors import InvalidOverrideError
from kist_typescript.schemas.compiler_options import (
    OUTPUT_DIRECTORY_KEY,
    OptionMap,
    describe_option_errors,
    to_option_map,
    validate_compiler_options,
)

logger = structlog.get_logger(__name__)


def convert_overrides(
    overrides: Mapping[str, Any],
    base_dir: Path | None = None,
) -> OptionMap | InvalidOverrideError:
    """Validate and normalize override options.

    Args:
        overrides: Raw option name -> value mapping from the caller.
        base_dir: Directory relative override paths resolve against
            (the configuration directory).

    Returns:
        The normalized overrides, or an InvalidOverrideError naming the
        first rejected key.
    """
    try:
        options = validate_compiler_options(overrides)
    except ValidationError as e:
        problems = describe_option_errors(e)
        key, _ = problems[0]
        return InvalidOverrideError(
            key=key,
            message="\n".join(message for _, message in problems),
        )
    return to_option_map(options, base_dir)


def merge_options(
    base: Mapping[str, Any],
    overrides: Mapping[str, Any] | None = None,
    output_location: str | None = None,
    *,
    base_dir: Path | None = None,
) -> OptionMap | InvalidOverrideError:
    """Merge configuration options with caller overrides.

    Args:
        base: Options of the normalized configuration.
        overrides: Caller option overrides (validated here).
        output_location: Explicit output directory. Stored verbatim.
        base_dir: Directory relative override paths resolve against.

    Returns:
        The effective option set, or an InvalidOverrideError.
    """
    merged: OptionMap = dict(base)

    if overrides:
        converted = convert_overrides(overrides, base_dir)
        if isinstance(converted, InvalidOverrideError):
            logger.debug("override_rejected", key=converted.key)
            return converted
        merged.update(converted)

    if output_location:
        merged[OUTPUT_DIRECTORY_KEY] = output_location

    logger.debug(
        "options_merged",
        base_count=len(base),
        override_count=len(overrides or {}),
        output_location=output_location,
    )
    return merged


__all__ = ["convert_overrides", "merge_options"]
