# src/bundleforge/fragments/__init__.py

from .app import get_app_fragment
from .common import (
    bundle_hash_format,
    get_common_fragment,
    make_ts_rule,
    require_paths,
)
from .custom import get_custom_fragment
from .dll import (
    get_dll_fragment,
    get_vendor_configuration,
    vendor_assets_path,
    vendor_chunk_name,
    vendor_manifest_path,
)
from .styles import RootRelativeUrlRewriter, get_styles_fragment


__all__ = [  # noqa: RUF022
    # app
    "get_app_fragment",
    # common
    "bundle_hash_format",
    "get_common_fragment",
    "make_ts_rule",
    "require_paths",
    # custom
    "get_custom_fragment",
    # dll
    "get_dll_fragment",
    "get_vendor_configuration",
    "vendor_assets_path",
    "vendor_chunk_name",
    "vendor_manifest_path",
    # styles
    "RootRelativeUrlRewriter",
    "get_styles_fragment",
]
