# src/bundleforge/fragments/app.py

from bundleforge.bundler_types import ConfigFragment, PluginSpec
from bundleforge.context import ProjectBuildContext
from bundleforge.logs import getAppLogger
from bundleforge.vendor_gate import GATE_HOOKS, VendorBundleGatekeeper

from .common import require_paths
from .dll import get_vendor_configuration, vendor_chunk_name, vendor_manifest_path


def get_app_fragment(ctx: ProjectBuildContext) -> ConfigFragment:
    """Vendor bundle wiring of an app's main build.

    Only apps with `referenceDll` and a `dll` list get anything: a reference
    to the vendor manifest and a pre-build gate that builds the vendor
    bundle first when its manifest is missing.
    """
    logger = getAppLogger()
    project = ctx.project
    if not ctx.is_app or ctx.is_dll or ctx.run.dll:
        return {}
    if not project.get("referenceDll") or not project.get("dll"):
        return {}

    _project_root, output_path = require_paths(ctx)
    manifest_file = vendor_manifest_path(output_path, vendor_chunk_name(ctx))
    gatekeeper = VendorBundleGatekeeper(
        manifest_file,
        get_vendor_configuration(ctx),
        verbose=ctx.run.verbose,
    )
    logger.trace(f"[get_app_fragment] {ctx.label}: references {manifest_file}")

    return {
        "plugins": [
            PluginSpec(
                "dll-reference",
                {
                    "manifest": str(manifest_file),
                    "context": str(ctx.meta["workspace_root"]),
                },
            ),
            PluginSpec(
                "try-bundle-vendor",
                {"gatekeeper": gatekeeper, "hooks": list(GATE_HOOKS)},
            ),
        ],
    }
