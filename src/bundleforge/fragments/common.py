# src/bundleforge/fragments/common.py

from pathlib import Path
from typing import Any

from bundleforge.bundler_types import ConfigFragment, PluginSpec, RuleSpec
from bundleforge.constants import BUNDLE_HASH_FORMAT, SCRIPT_EXTENSIONS
from bundleforge.context import ProjectBuildContext
from bundleforge.entries import parse_asset_entries
from bundleforge.errors import InternalError


TS_RULE_TEST = r"\.ts$"


def require_paths(ctx: ProjectBuildContext) -> tuple[Path, Path]:
    """Return (project_root, output_path) computed by the defaults resolver."""
    meta = ctx.meta
    project_root = meta.get("project_root")
    output_path = meta.get("output_path")
    if project_root is None or output_path is None:
        xmsg = f"The '{ctx.label}' paths are not resolved; apply defaults first."
        raise InternalError(xmsg)
    return project_root, output_path


def bundle_hash_format(ctx: ProjectBuildContext) -> str:
    """Chunk hash placeholder for web projects that append an output hash."""
    project = ctx.project
    if project.get("platformTarget", "web") == "web" and project.get(
        "appendOutputHash"
    ):
        return BUNDLE_HASH_FORMAT
    return ""


def _resolve_files(base: Path, value: Any) -> list[str]:
    items = [value] if isinstance(value, str) else list(value or [])
    return [str((base / item).resolve()) for item in items]


def make_ts_rule(ctx: ProjectBuildContext, include: list[str]) -> RuleSpec:
    """Script rule compiling the given TypeScript entries."""
    project = ctx.project
    log_level = ctx.run.log_level
    has_ts_config = bool(project.get("tsConfig"))
    options: dict[str, Any] = {
        "instance": f"at-{ctx.label}-loader",
        "transpileOnly": not has_ts_config,
        "onlyCompileBundledFiles": not has_ts_config,
        "silent": log_level != "debug",
        "logLevel": log_level,
    }
    if has_ts_config:
        project_root, _output_path = require_paths(ctx)
        options["configFile"] = str((project_root / project["tsConfig"]).resolve())

    return {
        "test": TS_RULE_TEST,
        "use": [{"loader": "ts-loader", "options": options}],
        "include": list(include),
    }


def get_common_fragment(ctx: ProjectBuildContext) -> ConfigFragment:
    """Mode, target, output, script entry points, assets and run plugins.

    Script entry points and assets belong to the main pass only; the
    vendor pass gets its entries from the dll fragment.
    """
    run = ctx.run
    project = ctx.project
    project_root, output_path = require_paths(ctx)
    is_web = project.get("platformTarget", "web") == "web"
    hash_format = bundle_hash_format(ctx)

    entry_points: dict[str, list[str]] = {}
    rules: list[RuleSpec] = []
    plugins: list[PluginSpec] = []

    # --- entry points ---
    if not ctx.is_dll:
        if project.get("entry"):
            entry_points["main"] = _resolve_files(project_root, project["entry"])
        if ctx.is_app and project.get("polyfills"):
            entry_points["polyfills"] = _resolve_files(
                project_root, project["polyfills"]
            )
        if project.get("scripts"):
            entry_points["scripts"] = _resolve_files(project_root, project["scripts"])

        ts_entries = [
            path
            for paths in entry_points.values()
            for path in paths
            if path.endswith(".ts") and not path.endswith(".d.ts")
        ]
        if ts_entries:
            rules.append(make_ts_rule(ctx, ts_entries))

        # --- assets ---
        assets = parse_asset_entries(project_root, project.get("assets"))
        if assets:
            plugins.append(
                PluginSpec(
                    "copy-assets",
                    {"patterns": assets, "outputPath": str(output_path)},
                )
            )

    # --- run-level plugins ---
    if run.clean_out_dirs:
        plugins.append(
            PluginSpec(
                "clean-output",
                {
                    "paths": [str(output_path)],
                    "root": str(ctx.meta["workspace_root"]),
                },
            )
        )
    if run.progress:
        plugins.append(PluginSpec("progress", {"profile": run.verbose}))

    # --- output ---
    output: dict[str, Any] = {
        "path": str(output_path),
        "filename": f"[name]{'.' + hash_format if hash_format else ''}.js",
    }
    if ctx.is_app:
        output["publicPath"] = project.get("publicPath", "/")
    else:
        output["library"] = project.get("libraryName") or project.get("name")
        output["libraryTarget"] = project.get("libraryTarget")

    fragment: ConfigFragment = {
        "mode": "production" if run.production else "development",
        "target": "web" if is_web else "node",
        "devtool": "source-map" if project.get("sourceMap") else False,
        "entry": entry_points,
        "output": output,
        "resolve": {"extensions": list(SCRIPT_EXTENSIONS)},
        "module": {"rules": rules},
        "plugins": plugins,
    }
    if not ctx.is_app and project.get("externals"):
        fragment["externals"] = project["externals"]
    return fragment
