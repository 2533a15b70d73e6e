# src/bundleforge/__init__.py

"""Bundleforge: resolve declarative projects into bundler configurations.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use, custom integrations, or plugins.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()                   → CLI entrypoint
    - get_bundler_configs()    → Resolve a config file into final configurations
    - merge_fragments()        → Combine partial configurations in order
    - VendorBundleGatekeeper   → Pre-build check for an app's vendor bundle
"""

from .bundler_types import (
    ConfigFragment,
    EntryPoints,
    FinalConfiguration,
    PluginSpec,
    RuleSpec,
)
from .cli import get_metadata, main
from .config import (
    ProjectConfigResolved,
    RootConfig,
    Violation,
    apply_env_overrides,
    apply_project_config_defaults,
    filter_projects,
    find_config,
    load_and_validate_config,
    load_config,
    validate_config,
    validate_schema,
)
from .constants import (
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STRICT_CONFIG,
)
from .context import BuildRunContext, ProjectBuildContext
from .entries import (
    AssetParsedEntry,
    GlobPattern,
    StyleParsedEntry,
    parse_asset_entries,
    parse_dll_entries,
    parse_style_entries,
)
from .errors import (
    InternalError,
    InvalidConfigError,
    InvalidOptionError,
    VendorBundleError,
)
from .logs import getAppLogger
from .merge import merge_fragments
from .meta import (
    PROGRAM_CONFIG,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .pipeline import get_bundler_configs, get_project_configuration
from .vendor_gate import GateResult, GateState, VendorBundleGatekeeper


__all__ = [  # noqa: RUF022
    # bundler_types
    "ConfigFragment",
    "EntryPoints",
    "FinalConfiguration",
    "PluginSpec",
    "RuleSpec",
    # cli
    "get_metadata",
    "main",
    # config
    "apply_env_overrides",
    "apply_project_config_defaults",
    "filter_projects",
    "find_config",
    "load_and_validate_config",
    "load_config",
    "ProjectConfigResolved",
    "RootConfig",
    "validate_config",
    "validate_schema",
    "Violation",
    # constants
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_STRICT_CONFIG",
    # context
    "BuildRunContext",
    "ProjectBuildContext",
    # entries
    "AssetParsedEntry",
    "GlobPattern",
    "parse_asset_entries",
    "parse_dll_entries",
    "parse_style_entries",
    "StyleParsedEntry",
    # errors
    "InternalError",
    "InvalidConfigError",
    "InvalidOptionError",
    "VendorBundleError",
    # logs
    "getAppLogger",
    # merge
    "merge_fragments",
    # meta
    "Metadata",
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    # pipeline
    "get_bundler_configs",
    "get_project_configuration",
    # vendor_gate
    "GateResult",
    "GateState",
    "VendorBundleGatekeeper",
]
