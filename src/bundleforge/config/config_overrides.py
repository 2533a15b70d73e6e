# src/bundleforge/config/config_overrides.py

import copy
from collections.abc import Mapping
from typing import Any, cast

from bundleforge.constants import ENV_PRODUCTION_KEYS
from bundleforge.logs import getAppLogger

from .config_types import ProjectConfigResolved


# Keys an override block may not replace
PROTECTED_KEYS = {"__meta__", "envOverrides"}


def deep_merge_override(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge `override` onto `base` without mutating either.

    Nested objects merge key by key; scalars, strings and lists are
    replaced outright (lists are not concatenated).
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge_override(
                cast("Mapping[str, Any]", current),
                cast("Mapping[str, Any]", value),
            )
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _is_selected(key: str, environment: Mapping[str, Any]) -> bool:
    if environment.get(key):
        return True
    # prod and production are aliases of the same flag
    if key in ENV_PRODUCTION_KEYS:
        return any(environment.get(alias) for alias in ENV_PRODUCTION_KEYS)
    return False


def apply_env_overrides(
    project: ProjectConfigResolved,
    environment: Mapping[str, Any],
) -> ProjectConfigResolved:
    """Apply every override block whose key is truthy in `environment`.

    Blocks apply in the declared order of `envOverrides`; later blocks win
    on conflict. Unknown fields inside a block are accepted as-is. Returns
    a new project; the input is left untouched.
    """
    logger = getAppLogger()
    overrides: Mapping[str, Any] = project.get("envOverrides") or {}
    result: dict[str, Any] = copy.deepcopy(dict(project))

    for key, block in overrides.items():
        if not _is_selected(key, environment):
            continue
        if not isinstance(block, Mapping):
            logger.warning("Ignoring envOverrides.%s: expected an object.", key)
            continue

        block_map = cast("Mapping[str, Any]", block)
        ignored = PROTECTED_KEYS & set(block_map)
        if ignored:
            logger.warning(
                "Ignoring %s in envOverrides.%s.", ", ".join(sorted(ignored)), key
            )
        applicable = {k: v for k, v in block_map.items() if k not in PROTECTED_KEYS}

        logger.debug(
            "Applying envOverrides.%s (%s) to %s.",
            key,
            ", ".join(applicable) or "no fields",
            project.get("name") or f"#{project['__meta__']['index']}",
        )
        result = deep_merge_override(result, applicable)

    return cast("ProjectConfigResolved", result)
