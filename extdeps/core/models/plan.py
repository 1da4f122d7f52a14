"""
Plan and report models — what the engine decided and what it did.

A ``DependencyPlan`` is the resolved, classified view of one package's
manifest entry. A ``BuildReport`` is returned by every orchestrator run,
including runs that had nothing to do.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BuildMode(str, Enum):
    """Operating mode selected by the directive."""

    NOOP = "noop"
    SELF_PACKAGE = "self_package"
    COMPILE = "compile"
    DEPENDENCY = "dependency"


class DependencyPlan(BaseModel):
    """Packages to install and archives to apply for one package.

    ``build_args`` is None outside compile mode.
    """

    packages: list[str] = Field(default_factory=list)
    extensions: list[str] = Field(default_factory=list)
    build_args: list[str] | None = None

    @property
    def compile_mode(self) -> bool:
        return self.build_args is not None

    @property
    def empty(self) -> bool:
        return not self.packages and not self.extensions and not self.build_args


class BuildReport(BaseModel):
    """Outcome of one orchestrator run."""

    package: str
    mode: BuildMode
    resolved: bool = False
    packages: list[str] = Field(default_factory=list)
    packages_installed: bool | None = None
    build_args: list[str] = Field(default_factory=list)
    built: bool = False
    extensions: list[str] = Field(default_factory=list)
    artifact: str | None = None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
