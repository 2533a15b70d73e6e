# src/bundleforge/config/config_filter.py

from collections.abc import Iterable, Sequence
from typing import Any

from bundleforge.constants import FILTER_GROUP_APPS, FILTER_GROUP_LIBS
from bundleforge.logs import getAppLogger

from .config_types import ProjectConfigResolved, ProjectType


GROUP_NAMES: dict[ProjectType, str] = {
    "app": FILTER_GROUP_APPS,
    "lib": FILTER_GROUP_LIBS,
}


def prepare_filter_names(filter_value: Any) -> list[str]:
    """Normalize a filter given as a string or a list of names.

    Names are trimmed; blanks and duplicates are dropped.
    """
    if isinstance(filter_value, str):
        raw_names: Iterable[Any] = [filter_value]
    elif isinstance(filter_value, (list, tuple)):
        raw_names = filter_value
    else:
        return []

    names: list[str] = []
    for raw in raw_names:
        if not isinstance(raw, str):
            continue
        name = raw.strip()
        if name and name not in names:
            names.append(name)
    return names


def _opposite_group(project_type: ProjectType) -> str:
    return GROUP_NAMES["lib" if project_type == "app" else "app"]


def filter_projects(
    projects: Sequence[ProjectConfigResolved],
    requested_names: Sequence[str],
) -> list[ProjectConfigResolved]:
    """Select the projects taking part in this invocation.

    - `skip`-flagged projects are always dropped.
    - No requested names keeps everything else.
    - `apps` / `libs` select every project of that kind.
    - Requesting only the opposite group's name empties this group.
    - Other names match each project's `name` exactly (case-sensitive).

    Original relative order is preserved.
    """
    logger = getAppLogger()
    names = list(requested_names)
    selected: list[ProjectConfigResolved] = []

    for project in projects:
        project_type = project["__meta__"]["project_type"]
        group = GROUP_NAMES[project_type]
        label = project.get("name") or f"{group}[{project['__meta__']['index']}]"

        if project.get("skip"):
            logger.debug("Skipping %s (skip flag set).", label)
            continue

        if names:
            opposite = _opposite_group(project_type)
            if all(name == opposite for name in names):
                logger.trace(f"[filter_projects] {label}: only {opposite} requested")
                continue
            if group not in names and project.get("name") not in names:
                logger.trace(f"[filter_projects] {label}: not requested")
                continue

        selected.append(project)

    logger.trace(
        f"[filter_projects] Selected {len(selected)} of {len(projects)} project(s)"
    )
    return selected
