"""Input file selection for tsconfig ``files`` / ``include`` / ``exclude``.

Specs are absolute, slash-separated paths that may contain wildcards:

    *    zero or more characters within one path component
    ?    exactly one character within one path component
    **/  zero or more directories

Selection rules:
    - ``files`` entries come first, in declared order, never excluded.
    - ``include`` matches follow, grouped by the first include spec they
      match, each group in directory-walk order (files before
      subdirectories, both sorted by name).
    - ``exclude`` removes a wildcard match, or anything below it.
    - Wildcards do not descend into dot-directories or package directories
      (node_modules, bower_components, jspm_packages).
    - A declaration or JavaScript file is dropped when a same-stem
      TypeScript source is selected.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator, Sequence

import structlog

logger = structlog.get_logger(__name__)

TS_EXTENSIONS = (".d.ts", ".d.mts", ".d.cts", ".ts", ".tsx", ".mts", ".cts")
JS_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs")
IMPLICIT_EXCLUDE_DIRS = ("node_modules", "bower_components", "jspm_packages")
DEFAULT_INCLUDE = ("**/*",)

# extension -> (family, priority); lower priority wins within a family
_EXTENSION_PRIORITY = {
    ".ts": ("", 0),
    ".tsx": ("", 0),
    ".d.ts": ("", 1),
    ".js": ("", 2),
    ".jsx": ("", 2),
    ".cts": ("c", 0),
    ".d.cts": ("c", 1),
    ".cjs": ("c", 2),
    ".mts": ("m", 0),
    ".d.mts": ("m", 1),
    ".mjs": ("m", 2),
}

_WILDCARD = re.compile(r"[*?]")
_IMPLICIT_EXCLUDE = "|".join(IMPLICIT_EXCLUDE_DIRS)
_INCLUDE_DOUBLE_STAR = rf"(/(?!({_IMPLICIT_EXCLUDE})(/|$))[^/.][^/]*)*?"
_EXCLUDE_DOUBLE_STAR = r"(/.+?)?"


class InvalidFileSpecError(ValueError):
    """Raised when an include spec cannot be used."""


def to_spec_path(path: str) -> str:
    """Normalize a filesystem path to the slash-separated spec form."""
    return os.path.normpath(path).replace(os.sep, "/")


def has_wildcard(component: str) -> bool:
    return _WILDCARD.search(component) is not None


def normalize_include_spec(spec: str) -> str:
    """Expand directory-like include specs to ``<dir>/**/*``.

    Raises:
        InvalidFileSpecError: If the spec ends in a recursive wildcard.
    """
    last = spec.rsplit("/", 1)[-1]
    if last == "**":
        raise InvalidFileSpecError(
            f"File specification cannot end in a recursive directory wildcard ('**'): '{spec}'."
        )
    if not has_wildcard(last) and "." not in last:
        return f"{spec.rstrip('/')}/**/*"
    return spec


def spec_to_regex(spec: str, *, exclude: bool = False) -> re.Pattern[str]:
    """Compile a wildcard spec into a regex over slash-separated paths."""
    pattern = ""
    written = False
    for component in spec.split("/"):
        if component == "**":
            pattern += _EXCLUDE_DOUBLE_STAR if exclude else _INCLUDE_DOUBLE_STAR
        else:
            if written:
                pattern += "/"
            pattern += _component_regex(component, exclude=exclude)
        written = True
    suffix = "($|/)" if exclude else "$"
    return re.compile(f"^{pattern}{suffix}")


def _component_regex(component: str, *, exclude: bool) -> str:
    if not has_wildcard(component):
        return re.escape(component)
    prefix = ""
    if not exclude and component[0] in "*?":
        prefix = rf"(?!\.)(?!({_IMPLICIT_EXCLUDE})$)"
    body = "".join(
        "[^/]*" if ch == "*" else "[^/]" if ch == "?" else re.escape(ch) for ch in component
    )
    return prefix + body


def _spec_base(spec: str) -> str:
    """Longest leading part of ``spec`` without wildcards, as a directory."""
    components = spec.split("/")
    base: list[str] = []
    for component in components:
        if has_wildcard(component):
            break
        base.append(component)
    if len(base) == len(components):
        base = base[:-1]
    return "/".join(base) or "/"


def _walk(directory: str) -> Iterator[str]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError:
        return
    subdirs: list[str] = []
    for entry in entries:
        try:
            if entry.is_dir():
                if not entry.name.startswith(".") and entry.name not in IMPLICIT_EXCLUDE_DIRS:
                    subdirs.append(entry.path)
            elif entry.is_file():
                yield to_spec_path(entry.path)
        except OSError:
            continue
    for subdir in subdirs:
        yield from _walk(subdir)


def _walk_roots(specs: Sequence[str]) -> list[str]:
    roots: list[str] = []
    for base in sorted({_spec_base(spec) for spec in specs}):
        if any(base == root or base.startswith(root.rstrip("/") + "/") for root in roots):
            continue
        roots.append(base)
    return roots


def extension_of(path: str) -> str | None:
    """Return the supported extension of ``path`` (longest match), if any."""
    for ext in sorted(_EXTENSION_PRIORITY, key=len, reverse=True):
        if path.endswith(ext):
            return ext
    return None


def match_files(
    include: Sequence[str],
    exclude: Sequence[str],
    extensions: Iterable[str],
) -> list[str]:
    """Return files matched by wildcard ``include`` specs minus ``exclude``."""
    allowed = tuple(extensions)
    include_specs = [normalize_include_spec(spec) for spec in include]
    include_res = [spec_to_regex(spec) for spec in include_specs]
    exclude_res = [spec_to_regex(spec, exclude=True) for spec in exclude]

    buckets: list[list[str]] = [[] for _ in include_res]
    seen: set[str] = set()
    for root in _walk_roots(include_specs):
        for path in _walk(root):
            if path in seen or extension_of(path) not in allowed:
                continue
            seen.add(path)
            if any(regex.match(path) for regex in exclude_res):
                continue
            for index, regex in enumerate(include_res):
                if regex.match(path):
                    buckets[index].append(path)
                    break
    return [path for bucket in buckets for path in bucket]


def _drop_shadowed(literal: Sequence[str], wildcard: Sequence[str]) -> list[str]:
    best: dict[tuple[str, str], int] = {}
    for path in [*literal, *wildcard]:
        ext = extension_of(path)
        if ext is None:
            continue
        family, priority = _EXTENSION_PRIORITY[ext]
        key = (path[: -len(ext)], family)
        best[key] = min(priority, best.get(key, priority))

    kept: list[str] = []
    for path in wildcard:
        ext = extension_of(path)
        if ext is not None:
            family, priority = _EXTENSION_PRIORITY[ext]
            if best[(path[: -len(ext)], family)] < priority:
                continue
        kept.append(path)
    return kept


def select_input_files(
    files: Sequence[str] | None,
    include: Sequence[str],
    exclude: Sequence[str],
    *,
    allow_js: bool = False,
) -> list[str]:
    """Select the ordered input file list for a configuration.

    Args:
        files: Absolute explicit file entries, or None.
        include: Absolute include specs.
        exclude: Absolute exclude specs.
        allow_js: Whether JavaScript sources are selected too.

    Returns:
        Absolute, de-duplicated paths in selection order.

    Raises:
        InvalidFileSpecError: If an include spec is malformed.
    """
    extensions = TS_EXTENSIONS + JS_EXTENSIONS if allow_js else TS_EXTENSIONS
    literal: list[str] = []
    for entry in files or ():
        path = to_spec_path(entry)
        if path not in literal:
            literal.append(path)

    literal_set = set(literal)
    wildcard = [
        path for path in match_files(include, exclude, extensions) if path not in literal_set
    ]
    selected = literal + _drop_shadowed(literal, wildcard)
    logger.debug(
        "input_files_selected",
        literal_count=len(literal),
        wildcard_count=len(selected) - len(literal),
    )
    return selected


__all__ = [
    "DEFAULT_INCLUDE",
    "IMPLICIT_EXCLUDE_DIRS",
    "JS_EXTENSIONS",
    "TS_EXTENSIONS",
    "InvalidFileSpecError",
    "extension_of",
    "match_files",
    "normalize_include_spec",
    "select_input_files",
    "spec_to_regex",
    "to_spec_path",
]
