# src/bundleforge/config/config_resolve.py

import copy
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

from apathetic_utils import cast_hint

from bundleforge.constants import ENV_DLL_KEY
from bundleforge.logs import getAppLogger

from .config_overrides import apply_env_overrides
from .config_types import ProjectConfigResolved, ProjectType, RootConfig


# Declared processing order: libraries before apps
PROJECT_GROUP_ORDER: tuple[tuple[ProjectType, str], ...] = (
    ("lib", "libs"),
    ("app", "apps"),
)


def make_project_resolved(
    raw: Mapping[str, Any],
    *,
    index: int,
    project_type: ProjectType,
    workspace_root: Path,
    environment: Mapping[str, Any],
) -> ProjectConfigResolved:
    """Deep-copy a raw project config and attach its `__meta__`."""
    project = cast("dict[str, Any]", copy.deepcopy(dict(raw)))
    project["__meta__"] = {
        "index": index,
        "project_type": project_type,
        "is_dll": project_type == "app" and bool(environment.get(ENV_DLL_KEY)),
        "workspace_root": workspace_root,
    }
    return cast("ProjectConfigResolved", project)


def resolve_projects(
    root_cfg: RootConfig,
    *,
    workspace_root: Path,
    environment: Mapping[str, Any],
) -> list[ProjectConfigResolved]:
    """Resolve every declared project with its environment overrides applied.

    Returns libs first, then apps, each in declared order.
    """
    logger = getAppLogger()
    resolved: list[ProjectConfigResolved] = []

    for project_type, group in PROJECT_GROUP_ORDER:
        raw_projects = cast_hint(list[Any], root_cfg.get(group) or [])
        for index, raw in enumerate(raw_projects):
            project = make_project_resolved(
                raw,
                index=index,
                project_type=project_type,
                workspace_root=workspace_root,
                environment=environment,
            )
            resolved.append(apply_env_overrides(project, environment))
        logger.trace(f"[resolve_projects] {len(raw_projects)} project(s) in {group}")

    return resolved
