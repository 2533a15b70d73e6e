# src/bundleforge/bundler_types.py

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias, TypedDict


EntryPoints: TypeAlias = dict[str, list[str]]
EntryFunction: TypeAlias = Callable[[], EntryPoints]


@dataclass(frozen=True)
class PluginSpec:
    """Descriptor of a bundler plugin: its name and constructor options."""

    name: str
    options: Mapping[str, Any] = field(default_factory=dict)


class RuleSpec(TypedDict, total=False):
    test: str  # regex source
    include: list[str]
    exclude: list[str]
    use: list[Any]  # loader names or {loader, options}


class ModuleOptions(TypedDict, total=False):
    rules: list[RuleSpec]


class ConfigFragment(TypedDict, total=False):
    mode: str
    target: str
    devtool: str | bool
    entry: EntryPoints | EntryFunction
    output: dict[str, Any]
    module: ModuleOptions
    plugins: list[PluginSpec]
    resolve: dict[str, Any]
    externals: Any


# A merged fragment; `entry` is never an empty map.
FinalConfiguration: TypeAlias = ConfigFragment
