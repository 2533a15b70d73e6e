# src/bundleforge/config/config_types.py


from pathlib import Path
from typing import Any, Literal, TypedDict

from typing_extensions import NotRequired

from bundleforge.entries import DllParsedResult


PlatformTarget = Literal["web", "node"]
ProjectType = Literal["app", "lib"]
LibraryTarget = Literal["var", "umd", "amd", "commonjs", "commonjs2", "module"]

# Environment: predefined flags (prod/production, dll, test) plus any user key.
Environment = dict[str, Any]


# `from` is a keyword, so the functional syntax is required here.
AssetEntryConfig = TypedDict(
    "AssetEntryConfig",
    {
        "from": str,
        "to": str,
        "context": str,
        "exclude": str | list[str],
    },
    total=False,
)


class StyleEntryConfig(TypedDict, total=False):
    input: str
    bundleName: str  # noqa: N815
    lazy: bool


class StylePreprocessorOptions(TypedDict, total=False):
    includePaths: list[str]  # noqa: N815


class DllConfig(TypedDict, total=False):
    entry: str | list[str]
    exclude: list[str]


class ProjectConfig(TypedDict, total=False):
    name: str
    root: str
    outputPath: str  # noqa: N815
    entry: str
    tsConfig: str  # noqa: N815

    assets: str | list[str | AssetEntryConfig]
    styles: str | list[str | StyleEntryConfig]
    scripts: str | list[str]
    stylePreprocessorOptions: StylePreprocessorOptions  # noqa: N815

    sourceMap: bool  # noqa: N815
    extractCss: bool  # noqa: N815
    publicPath: str  # noqa: N815
    baseHref: str  # noqa: N815
    appendOutputHash: bool  # noqa: N815
    platformTarget: PlatformTarget  # noqa: N815

    # Path of a user-supplied fragment merged last (.json, .jsonc or .py)
    bundlerConfig: str  # noqa: N815

    # Override blocks are partial project configs; their fields are not checked
    envOverrides: dict[str, dict[str, Any]]  # noqa: N815
    skip: bool


class AppProjectConfig(ProjectConfig, total=False):
    polyfills: str | list[str]
    dll: list[str] | DllConfig
    referenceDll: bool  # noqa: N815
    vendorChunkName: str  # noqa: N815


class LibProjectConfig(ProjectConfig, total=False):
    libraryName: str  # noqa: N815
    libraryTarget: LibraryTarget  # noqa: N815
    externals: dict[str, str] | list[str]


class RootConfig(TypedDict, total=False):
    apps: list[AppProjectConfig]
    libs: list[LibProjectConfig]

    # runtime behavior
    logLevel: str  # noqa: N815
    strictConfig: bool  # noqa: N815


# Resolved types - computed by the pipeline, never written by users
class ProjectMetaResolved(TypedDict):
    index: int  # position within its `apps` or `libs` list
    project_type: ProjectType
    is_dll: bool  # vendor-bundle variant of an app
    workspace_root: Path

    # filled in by apply_project_config_defaults()
    project_root: NotRequired[Path]
    output_path: NotRequired[Path]
    dll_parsed: NotRequired[DllParsedResult]


class ProjectConfigResolved(AppProjectConfig, LibProjectConfig):
    __meta__: ProjectMetaResolved
