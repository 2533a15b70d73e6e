# src/bundleforge/constants.py
"""Central constants used across the project."""

from typing import Any


# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_ENVIRONMENT: str = "ENV"  # JSON-encoded build environment

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = True
DEFAULT_PROJECT_ROOT: str = ""
DEFAULT_PLATFORM_TARGET: str = "web"
DEFAULT_PUBLIC_PATH: str = "/"
DEFAULT_VENDOR_CHUNK_NAME: str = "vendor"
DEFAULT_LIBRARY_TARGET: str = "umd"
DEFAULT_STYLE_BUNDLE_NAME: str = "styles"

# --- environment flags ---
# Keys recognized in the build environment; any other key is a user flag.
ENV_PRODUCTION_KEYS: tuple[str, ...] = ("prod", "production")
ENV_DLL_KEY: str = "dll"
ENV_TEST_KEY: str = "test"
ENV_OPTIONS_KEY: str = "options"

# Reserved filter names selecting a whole project group
FILTER_GROUP_APPS: str = "apps"
FILTER_GROUP_LIBS: str = "libs"

# --- output naming ---
HASH_LENGTH: int = 20
BUNDLE_HASH_FORMAT: str = f"[chunkhash:{HASH_LENGTH}]"
CONTENT_HASH_FORMAT: str = f".[contenthash:{HASH_LENGTH}]"
SCRIPT_EXTENSIONS: list[str] = [".ts", ".js"]
STYLE_EXTENSIONS: tuple[str, ...] = (".css", ".scss", ".sass", ".less")

# --- vendor bundle artifacts ---
VENDOR_MANIFEST_SUFFIX: str = "-manifest.json"
VENDOR_ASSETS_SUFFIX: str = "-assets.json"

# Stats printed after a vendor build; verbose adds the noisy sections back.
DEFAULT_STATS_OPTIONS: dict[str, Any] = {
    "colors": True,
    "hash": True,
    "timings": True,
    "chunks": True,
    "chunkModules": False,
    "children": False,
    "modules": False,
    "reasons": False,
    "warnings": True,
    "assets": False,
    "version": False,
}

VERBOSE_STATS_OPTIONS: dict[str, Any] = {
    "children": True,
    "assets": True,
    "version": True,
    "reasons": True,
    "chunkModules": False,
}
