"""Action plugin registration.

Hosts discover the plugin through the ``kist.actions`` entry-point group:

    [project.entry-points."kist.actions"]
    typescript = "kist_typescript.plugin:plugin"

Example:
    >>> from importlib.metadata import entry_points
    >>> (ep,) = entry_points(group="kist.actions", name="typescript")
    >>> ep.load().register_actions()["TypeScriptCompilerAction"]
    <class 'kist_typescript.action.TypeScriptCompilerAction'>
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from kist_typescript.action import TypeScriptCompilerAction


class ActionPlugin(BaseModel):
    """Plugin metadata plus the actions it contributes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    version: str = Field(..., pattern=r"^\d+\.\d+\.\d+")
    description: str
    author: str
    repository: str
    keywords: tuple[str, ...] = ()

    def register_actions(self) -> dict[str, type[TypeScriptCompilerAction]]:
        """Map action names to action classes."""
        return {"TypeScriptCompilerAction": TypeScriptCompilerAction}


plugin = ActionPlugin(
    name="kist-action-typescript",
    version="1.0.0",
    description="TypeScript compilation actions for kist",
    author="kist",
    repository="https://github.com/getkist/action-typescript",
    keywords=("kist", "kist-action", "typescript", "compiler", "tsc"),
)


__all__ = ["ActionPlugin", "plugin"]
