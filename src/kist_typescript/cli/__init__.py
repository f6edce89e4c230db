"""kist-tsc command line interface."""

from __future__ import annotations

from kist_typescript.cli.main import cli, main

__all__ = ["cli", "main"]
