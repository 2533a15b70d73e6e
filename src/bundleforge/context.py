# src/bundleforge/context.py

"""Per-invocation context values passed explicitly through the pipeline."""

import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .config.config_types import ProjectConfigResolved, ProjectMetaResolved
from .constants import (
    DEFAULT_LOG_LEVEL,
    ENV_DLL_KEY,
    ENV_PRODUCTION_KEYS,
    ENV_TEST_KEY,
)


def is_production(environment: Mapping[str, Any]) -> bool:
    return any(environment.get(key) for key in ENV_PRODUCTION_KEYS)


def is_dll_pass(environment: Mapping[str, Any]) -> bool:
    return bool(environment.get(ENV_DLL_KEY))


def is_test_pass(environment: Mapping[str, Any]) -> bool:
    return bool(environment.get(ENV_TEST_KEY))


@dataclass(frozen=True)
class BuildRunContext:
    """State of one invocation, created once before any project is resolved.

    The late flags (`progress`, `clean_out_dirs`) are captured before
    construction; use `with_flags()` to derive a context that differs in them.
    """

    workspace_root: Path
    config_path: Path
    environment: Mapping[str, Any] = field(default_factory=dict)
    filter_names: tuple[str, ...] = ()
    clean_out_dirs: bool = False
    verbose: bool = False
    watch: bool = False
    progress: bool = False
    from_cli: bool = False
    start_time: float = field(default_factory=time.time)
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def production(self) -> bool:
        return is_production(self.environment)

    @property
    def dll(self) -> bool:
        return is_dll_pass(self.environment)

    @property
    def test(self) -> bool:
        return is_test_pass(self.environment)

    def with_flags(
        self,
        *,
        progress: bool | None = None,
        clean_out_dirs: bool | None = None,
    ) -> "BuildRunContext":
        return replace(
            self,
            progress=self.progress if progress is None else progress,
            clean_out_dirs=(
                self.clean_out_dirs if clean_out_dirs is None else clean_out_dirs
            ),
        )


@dataclass(frozen=True)
class ProjectBuildContext:
    """The single argument of every fragment builder."""

    run: BuildRunContext
    project: ProjectConfigResolved

    @property
    def meta(self) -> ProjectMetaResolved:
        return self.project["__meta__"]

    @property
    def is_app(self) -> bool:
        return self.meta["project_type"] == "app"

    @property
    def is_dll(self) -> bool:
        return self.meta["is_dll"]

    @property
    def label(self) -> str:
        """Config location of the project, e.g. `apps[main]` or `libs[0]`."""
        group = "apps" if self.is_app else "libs"
        return f"{group}[{self.project.get('name') or self.meta['index']}]"
