# src/bundleforge/fragments/dll.py

from dataclasses import replace
from pathlib import Path
from typing import Any

from apathetic_utils import cast_hint

from bundleforge.bundler_types import (
    ConfigFragment,
    FinalConfiguration,
    PluginSpec,
    RuleSpec,
)
from bundleforge.config.config_types import ProjectConfigResolved
from bundleforge.constants import (
    DEFAULT_VENDOR_CHUNK_NAME,
    HASH_LENGTH,
    SCRIPT_EXTENSIONS,
    VENDOR_ASSETS_SUFFIX,
    VENDOR_MANIFEST_SUFFIX,
)
from bundleforge.context import ProjectBuildContext
from bundleforge.entries import iter_dll_entries
from bundleforge.errors import InternalError, InvalidConfigError
from bundleforge.logs import getAppLogger
from bundleforge.merge import merge_fragments

from .common import bundle_hash_format, get_common_fragment, make_ts_rule
from .custom import get_custom_fragment
from .styles import get_styles_fragment


# Optional vert.x bridge pulled in by some vendor packages
IGNORED_MODULES = r"^vertx$"


def vendor_chunk_name(ctx: ProjectBuildContext) -> str:
    return ctx.project.get("vendorChunkName") or DEFAULT_VENDOR_CHUNK_NAME


def vendor_manifest_path(output_path: Path | str, chunk_name: str) -> Path:
    """Manifest written by the vendor build, consulted by the main build."""
    return Path(output_path) / f"{chunk_name}{VENDOR_MANIFEST_SUFFIX}"


def vendor_assets_path(output_path: Path | str, chunk_name: str) -> Path:
    return Path(output_path) / f"{chunk_name}{VENDOR_ASSETS_SUFFIX}"


def get_dll_fragment(ctx: ProjectBuildContext) -> ConfigFragment:
    """Entry, output and plugins of the vendor (dll) bundle of an app.

    Raises:
        InvalidConfigError: no output path, or no usable vendor entry.
        InternalError: the vendor entries were never parsed.

    """
    logger = getAppLogger()
    project = ctx.project
    meta = ctx.meta

    output_path = meta.get("output_path")
    if not project.get("outputPath") or output_path is None:
        xmsg = f"The '{ctx.label}.outputPath' value is required."
        raise InvalidConfigError(xmsg)

    dll_parsed = meta.get("dll_parsed")
    if dll_parsed is None:
        xmsg = f"The '{ctx.label}' vendor entries are not parsed."
        raise InternalError(xmsg)

    entries = list(iter_dll_entries(dll_parsed))
    if not entries:
        xmsg = f"No entry available in '{ctx.label}.dll'."
        raise InvalidConfigError(xmsg)

    chunk_name = vendor_chunk_name(ctx)
    hash_format = bundle_hash_format(ctx)
    library_name = f"[name]_{hash_format or 'lib'}"

    rules: list[RuleSpec] = []
    if dll_parsed["ts_entries"]:
        rules.append(make_ts_rule(ctx, dll_parsed["ts_entries"]))

    plugins: list[PluginSpec] = [
        PluginSpec(
            "dll",
            {
                "path": str(vendor_manifest_path(output_path, "[name]")),
                "name": library_name,
                "context": str(meta["workspace_root"]),
            },
        ),
        PluginSpec(
            "write-stats-json",
            {
                "path": str(vendor_assets_path(output_path, chunk_name)),
                "chunkHashLength": HASH_LENGTH,
            },
        ),
        PluginSpec("write-assets-to-disk", {"path": str(output_path)}),
        PluginSpec("ignore", {"resourceRegExp": IGNORED_MODULES}),
    ]

    output: dict[str, Any] = {
        "path": str(output_path),
        "filename": f"[name]{'.' + hash_format if hash_format else ''}.js",
        "publicPath": project.get("publicPath", "/"),
        "library": library_name,
    }

    logger.trace(
        f"[get_dll_fragment] {ctx.label}: chunk={chunk_name!r}, entries={len(entries)}"
    )
    return {
        "entry": {chunk_name: entries},
        "output": output,
        "module": {"rules": rules},
        "plugins": plugins,
        "resolve": {"extensions": list(SCRIPT_EXTENSIONS)},
    }


def get_vendor_configuration(ctx: ProjectBuildContext) -> FinalConfiguration:
    """Full configuration of the vendor bundle build of an app."""
    project = dict(ctx.project)
    project["__meta__"] = {**ctx.meta, "is_dll": True}
    dll_ctx = replace(ctx, project=cast_hint(ProjectConfigResolved, project))

    return merge_fragments(
        [
            get_common_fragment(dll_ctx),
            get_styles_fragment(dll_ctx),
            get_dll_fragment(dll_ctx),
            get_custom_fragment(dll_ctx),
        ]
    )
