"""Reader for JSON with comments, the tsconfig.json dialect.

tsconfig files may contain ``//`` and ``/* */`` comments and trailing
commas. Both are removed outside string literals before handing the text
to ``json``; line and column numbers of the remaining text are preserved
so decode errors still point at the right place.
"""

from __future__ import annotations

import json
from typing import Any


def strip_jsonc(text: str) -> str:
    """Remove comments and trailing commas from JSONC text.

    Comment characters are replaced by spaces (newlines kept) so offsets in
    the result line up with the input text.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    # index in ``out`` of the last comma that may turn out to be trailing
    pending_comma: int | None = None

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == "/" and i + 1 < n and text[i + 1] == "/":
            while i < n and text[i] != "\n":
                out.append(" ")
                i += 1
            continue
        if ch == "/" and i + 1 < n and text[i + 1] == "*":
            end = text.find("*/", i + 2)
            stop = n if end == -1 else end + 2
            out.extend("\n" if c == "\n" else " " for c in text[i:stop])
            i = stop
            continue

        if ch in "}]" and pending_comma is not None:
            out[pending_comma] = " "
        if ch == ",":
            pending_comma = len(out)
        elif not ch.isspace():
            pending_comma = None
        if ch == '"':
            in_string = True
        out.append(ch)
        i += 1

    return "".join(out)


def loads_jsonc(text: str) -> Any:
    """Parse JSONC text.

    Raises:
        json.JSONDecodeError: If the text is not valid once comments are removed.
    """
    stripped = strip_jsonc(text.lstrip("\ufeff"))
    if not stripped.strip():
        return {}
    return json.loads(stripped)


__all__ = ["loads_jsonc", "strip_jsonc"]
