"""Stand-in for the tsc executable used by the integration tests.

Understands ``--version`` and ``--project <file> --pretty false
--listEmittedFiles``. A source containing ``TYPE_ERROR`` produces a
TS2322 diagnostic; an unwritable outDir produces TS5033. Incremental
builds write their .tsbuildinfo file. Setting FAKE_TSC_CRASH makes the
process fail like a crashed Node.js.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path


def main(argv: list[str]) -> int:
    if "--version" in argv:
        print("Version 5.4.5")
        return 0
    if os.environ.get("FAKE_TSC_CRASH"):
        print("FATAL ERROR: Reached heap limit Allocation failed", file=sys.stderr)
        return 134

    project = Path(argv[argv.index("--project") + 1])
    document = json.loads(project.read_text(encoding="utf-8"))
    options = document.get("compilerOptions", {})
    out_dir = options.get("outDir")

    errors = 0
    for name in document.get("files", []):
        source = Path(name)
        text = source.read_text(encoding="utf-8")
        if "TYPE_ERROR" in text:
            line = text[: text.index("TYPE_ERROR")].count("\n") + 1
            relative = os.path.relpath(source, Path.cwd())
            print(
                f"{relative}({line},7): error TS2322: "
                "Type 'string' is not assignable to type 'number'."
            )
            errors += 1
            continue
        target_dir = Path(out_dir) if out_dir else source.parent
        target = target_dir / (source.name.rsplit(".", 1)[0] + ".js")
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            target.write_text("export {};\n", encoding="utf-8")
        except OSError as e:
            print(f"error TS5033: Could not write file '{target}': {e.strerror}.")
            errors += 1
            continue
        print(f"TSFILE: {target}")

    if options.get("incremental") or options.get("composite"):
        build_info = options.get("tsBuildInfoFile") or project.with_suffix(".tsbuildinfo")
        Path(build_info).write_text("{}\n", encoding="utf-8")

    return 2 if errors else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
