"""Engine settings loaded from the environment.

Environment Variables:
    KIST_TSC_COMMAND: Command used to run the compiler, shell-split
        (e.g. ``"npx --no-install tsc"``).
    KIST_TSC_SEARCH_NODE_MODULES: Look for ``node_modules/.bin/tsc`` in the
        configuration directory and its ancestors (default true).
"""

from __future__ import annotations

import shlex

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings for locating and running the TypeScript compiler."""

    model_config = SettingsConfigDict(
        env_prefix="KIST_TSC_",
        extra="ignore",
    )

    command: str | None = Field(
        default=None,
        description="Compiler command line, shell-split before use",
    )
    search_node_modules: bool = Field(
        default=True,
        description="Search ancestor node_modules/.bin for tsc",
    )

    def command_args(self) -> list[str] | None:
        """The configured command as an argument list, if any."""
        if not self.command or not self.command.strip():
            return None
        return shlex.split(self.command)


__all__ = ["EngineSettings"]
