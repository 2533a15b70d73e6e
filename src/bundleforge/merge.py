# src/bundleforge/merge.py

"""Ordered merge of config fragments into one final configuration.

Each section has its own precedence rule:
  - entry points: keys are unioned, colliding lists concatenated
  - module rules and plugins: appended in fragment order
  - anything else: objects merge recursively, lists gain the new items,
    scalars from later fragments win

Fragments are never mutated; every merge builds new containers.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, cast

from .bundler_types import (
    ConfigFragment,
    EntryPoints,
    FinalConfiguration,
    PluginSpec,
    RuleSpec,
)
from .logs import getAppLogger


def empty_entry() -> EntryPoints:
    """No-op entry used when no fragment contributes entry points."""
    return {}


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(cast("Iterable[Any]", value))
    return [value]


def merge_entry_points(
    left: Mapping[str, Any],
    right: Mapping[str, Any],
) -> EntryPoints:
    merged: EntryPoints = {key: _as_list(value) for key, value in left.items()}
    for key, value in right.items():
        merged[key] = [*merged.get(key, []), *_as_list(value)]
    return merged


def _as_entry_points(value: Any) -> Any:
    """Entry as a name map; a bare path or path list becomes the `main` chunk."""
    if callable(value) or isinstance(value, Mapping):
        return value
    return {"main": _as_list(value)}


def merge_rules(
    left: Sequence[RuleSpec],
    right: Sequence[RuleSpec],
) -> list[RuleSpec]:
    return [*left, *right]


def merge_plugins(
    left: Sequence[PluginSpec],
    right: Sequence[PluginSpec],
) -> list[PluginSpec]:
    return [*left, *right]


def merge_options(left: Any, right: Any) -> Any:
    """Merge generic option values; `right` wins for scalars."""
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        left_map = cast("Mapping[str, Any]", left)
        merged = dict(left_map)
        for key, value in cast("Mapping[str, Any]", right).items():
            if key in left_map:
                value = merge_options(left_map[key], value)  # noqa: PLW2901
            merged[key] = value
        return merged
    if isinstance(left, list) and isinstance(right, list):
        left_list = cast("list[Any]", left)
        extra = [item for item in cast("list[Any]", right) if item not in left_list]
        return left_list + extra
    return right


def _merge_module(
    left: Mapping[str, Any],
    right: Mapping[str, Any],
) -> dict[str, Any]:
    merged = merge_options(
        {k: v for k, v in left.items() if k != "rules"},
        {k: v for k, v in right.items() if k != "rules"},
    )
    merged["rules"] = merge_rules(left.get("rules", []), right.get("rules", []))
    return merged


def merge_fragments(fragments: Iterable[ConfigFragment]) -> FinalConfiguration:
    """Merge fragments left to right into a final configuration.

    An `entry` given as a string or a list is the `main` chunk; one given as
    a callable replaces whatever came before it. If no
    entry points remain, `empty_entry` is substituted for the empty map.
    """
    logger = getAppLogger()
    result: dict[str, Any] = {}
    count = 0

    for count, fragment in enumerate(fragments, start=1):  # noqa: B007
        for key, value in fragment.items():
            if key == "entry":
                value = _as_entry_points(value)  # noqa: PLW2901
            if key not in result:
                result[key] = value
            elif key == "entry":
                current = result[key]
                if callable(value) or callable(current):
                    result[key] = value
                else:
                    result[key] = merge_entry_points(current, value)
            elif key == "module":
                result[key] = _merge_module(result[key], value)
            elif key == "plugins":
                result[key] = merge_plugins(result[key], value)
            else:
                result[key] = merge_options(result[key], value)

    entry = result.get("entry")
    if not entry:
        result["entry"] = empty_entry

    logger.trace(f"[merge_fragments] Merged {count} fragment(s)")
    return cast("FinalConfiguration", result)
