# src/bundleforge/config/config_defaults.py

import copy
from collections.abc import Mapping
from typing import Any, cast

from bundleforge.constants import (
    DEFAULT_LIBRARY_TARGET,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PLATFORM_TARGET,
    DEFAULT_PROJECT_ROOT,
    DEFAULT_PUBLIC_PATH,
    DEFAULT_VENDOR_CHUNK_NAME,
    ENV_PRODUCTION_KEYS,
)
from bundleforge.entries import parse_dll_entries
from bundleforge.errors import InternalError
from bundleforge.logs import getAppLogger

from .config_types import (
    LibraryTarget,
    PlatformTarget,
    ProjectConfigResolved,
    RootConfig,
)


def apply_build_config_defaults(root_cfg: RootConfig) -> RootConfig:
    """Return a copy of the root config with `apps`, `libs` and `logLevel` set."""
    resolved = cast("RootConfig", dict(root_cfg))
    resolved.setdefault("apps", [])
    resolved.setdefault("libs", [])
    resolved.setdefault("logLevel", DEFAULT_LOG_LEVEL)
    return resolved


def apply_project_config_defaults(
    project: ProjectConfigResolved,
    environment: Mapping[str, Any],
) -> ProjectConfigResolved:
    """Fill unset fields from the defaults table and compute absolute paths.

    A field the user set explicitly is never overwritten, including an
    explicit empty list. Requires a validated `outputPath`.
    """
    logger = getAppLogger()
    resolved = copy.deepcopy(project)
    meta = resolved["__meta__"]
    production = any(environment.get(key) for key in ENV_PRODUCTION_KEYS)
    is_app = meta["project_type"] == "app"

    # ------------------------------
    # Shared
    # ------------------------------
    resolved.setdefault("root", DEFAULT_PROJECT_ROOT)
    platform_target = cast("PlatformTarget", DEFAULT_PLATFORM_TARGET)
    resolved.setdefault("platformTarget", platform_target)
    resolved.setdefault("assets", [])
    resolved.setdefault("styles", [])
    resolved.setdefault("scripts", [])
    resolved.setdefault("sourceMap", not production)

    # ------------------------------
    # Apps
    # ------------------------------
    if is_app:
        is_web = resolved["platformTarget"] == "web"
        resolved.setdefault("extractCss", production)
        resolved.setdefault("appendOutputHash", production and is_web)
        resolved.setdefault("publicPath", DEFAULT_PUBLIC_PATH)
        resolved.setdefault("referenceDll", False)
        resolved.setdefault("vendorChunkName", DEFAULT_VENDOR_CHUNK_NAME)

    # ------------------------------
    # Libs
    # ------------------------------
    else:
        library_target = cast("LibraryTarget", DEFAULT_LIBRARY_TARGET)
        resolved.setdefault("libraryTarget", library_target)
        if resolved.get("name"):
            resolved.setdefault("libraryName", resolved["name"])

    # ------------------------------
    # Computed paths
    # ------------------------------
    output_path = resolved.get("outputPath")
    if not output_path:
        xmsg = (
            f"Project #{meta['index']} reached defaults without an outputPath;"
            " validate_project_config() must run first."
        )
        raise InternalError(xmsg)

    workspace_root = meta["workspace_root"]
    meta["project_root"] = (workspace_root / resolved["root"]).resolve()
    meta["output_path"] = (workspace_root / output_path).resolve()

    dll = resolved.get("dll")
    if is_app and dll:
        meta["dll_parsed"] = parse_dll_entries(meta["project_root"], dll)

    logger.trace(
        f"[apply_project_config_defaults] #{meta['index']} ({meta['project_type']})"
        f" root={meta['project_root']} out={meta['output_path']}"
    )
    return resolved
