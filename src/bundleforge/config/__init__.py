# src/bundleforge/config/__init__.py

"""Configuration handling for bundleforge.

This module provides configuration loading, validation, defaults,
environment overrides, and project filtering.
"""

from .config_defaults import (
    apply_build_config_defaults,
    apply_project_config_defaults,
)
from .config_filter import filter_projects, prepare_filter_names
from .config_loader import (
    check_config_path,
    find_config,
    load_and_validate_config,
    load_config,
)
from .config_overrides import apply_env_overrides, deep_merge_override
from .config_resolve import make_project_resolved, resolve_projects
from .config_types import (
    AppProjectConfig,
    AssetEntryConfig,
    DllConfig,
    Environment,
    LibProjectConfig,
    LibraryTarget,
    PlatformTarget,
    ProjectConfig,
    ProjectConfigResolved,
    ProjectMetaResolved,
    ProjectType,
    RootConfig,
    StyleEntryConfig,
    StylePreprocessorOptions,
)
from .config_validate import (
    ConfigValidationSummary,
    Violation,
    validate_config,
    validate_project_config,
    validate_schema,
)


__all__ = [  # noqa: RUF022
    # config_defaults
    "apply_build_config_defaults",
    "apply_project_config_defaults",
    # config_filter
    "filter_projects",
    "prepare_filter_names",
    # config_loader
    "check_config_path",
    "find_config",
    "load_and_validate_config",
    "load_config",
    # config_overrides
    "apply_env_overrides",
    "deep_merge_override",
    # config_resolve
    "make_project_resolved",
    "resolve_projects",
    # config_types
    "AppProjectConfig",
    "AssetEntryConfig",
    "DllConfig",
    "Environment",
    "LibProjectConfig",
    "LibraryTarget",
    "PlatformTarget",
    "ProjectConfig",
    "ProjectConfigResolved",
    "ProjectMetaResolved",
    "ProjectType",
    "RootConfig",
    "StyleEntryConfig",
    "StylePreprocessorOptions",
    # config_validate
    "ConfigValidationSummary",
    "Violation",
    "validate_config",
    "validate_project_config",
    "validate_schema",
]
