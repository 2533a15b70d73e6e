# src/bundleforge/fragments/styles.py

import re
from dataclasses import dataclass
from typing import Any

from bundleforge.bundler_types import ConfigFragment, PluginSpec, RuleSpec
from bundleforge.constants import CONTENT_HASH_FORMAT, DEFAULT_STYLE_BUNDLE_NAME
from bundleforge.context import ProjectBuildContext
from bundleforge.entries import parse_style_entries
from bundleforge.logs import getAppLogger

from .common import require_paths


CSS_TEST = r"\.css$"
SASS_TEST = r"\.scss$|\.sass$"
LESS_TEST = r"\.less$"

# bootstrap-sass needs at least 8
SASS_PRECISION = 8

EXPORTS_LOADER = "exports-loader?module.exports.toString()"
EXTRACT_CSS_LOADER = "extract-css-loader"
SUPPRESS_PATTERN = r"\.js(\.map)?$"

# Keep license and source-map comments when minimizing
CSSNANO_OPTIONS: dict[str, Any] = {
    "autoprefixer": False,
    "safe": True,
    "mergeLonghand": False,
    "discardComments": {
        "preserve": r"@preserve|@license|[@#]\s*source(?:Mapping)?URL|^!",
    },
}

_SCHEME_RE = re.compile(r":\/\/")
_MULTI_SLASH_RE = re.compile(r"\/\/+")


@dataclass(frozen=True)
class RootRelativeUrlRewriter:
    """Rewrite root-relative CSS URLs to honour `publicPath` and `baseHref`.

    Only URLs starting with a single `/` are touched; css-loader resolves
    everything else itself.
    """

    public_path: str = ""
    base_href: str = ""

    def __call__(self, url: str) -> str:
        if not url.startswith("/") or url.startswith("//"):
            return url
        if _SCHEME_RE.search(self.public_path):
            return f"{self.public_path.rstrip('/')}{url}"
        if _SCHEME_RE.search(self.base_href):
            tail = _MULTI_SLASH_RE.sub("/", f"/{self.public_path}/{url}")
            return self.base_href.rstrip("/") + tail
        return _MULTI_SLASH_RE.sub("/", f"/{self.base_href}/{self.public_path}/{url}")


def _base_rules(
    include_paths: list[str],
    *,
    css_source_map: bool,
) -> list[tuple[str, list[Any]]]:
    return [
        (CSS_TEST, []),
        (
            SASS_TEST,
            [
                {
                    "loader": "sass-loader",
                    "options": {
                        "sourceMap": css_source_map,
                        "precision": SASS_PRECISION,
                        "includePaths": include_paths,
                    },
                }
            ],
        ),
        (
            LESS_TEST,
            [{"loader": "less-loader", "options": {"sourceMap": css_source_map}}],
        ),
    ]


def get_styles_fragment(ctx: ProjectBuildContext) -> ConfigFragment:
    """Style rules for every project, plus global style bundles for web apps.

    Global styles become their own entry points only in the main web app
    build (not the vendor pass, not the test pass). With `extractCss` they
    are written as `.css` files and the empty script chunks of those
    style-only entries are suppressed.
    """
    logger = getAppLogger()
    run = ctx.run
    project = ctx.project
    src_dir, _output_path = require_paths(ctx)

    # style-loader cannot emit source maps without an absolute publicPath
    css_source_map = bool(project.get("extractCss") and project.get("sourceMap"))
    minimize_css = run.production

    url_rewriter = RootRelativeUrlRewriter(
        public_path=project.get("publicPath") or "",
        base_href=project.get("baseHref") or "",
    )

    preprocessor_options = project.get("stylePreprocessorOptions") or {}
    include_paths = [
        str((src_dir / include_path).resolve())
        for include_path in preprocessor_options.get("includePaths", [])
    ]
    base_rules = _base_rules(include_paths, css_source_map=css_source_map)

    postcss_plugins: list[PluginSpec] = [
        PluginSpec("postcss-url", {"url": url_rewriter}),
        PluginSpec("autoprefixer"),
    ]
    if minimize_css:
        postcss_plugins.append(PluginSpec("cssnano", CSSNANO_OPTIONS))

    common_loaders: list[Any] = [
        {
            "loader": "css-loader",
            "options": {"sourceMap": css_source_map, "importLoaders": 1},
        },
        {
            "loader": "postcss-loader",
            "options": {"ident": "postcss", "plugins": postcss_plugins},
        },
    ]

    # --- global styles ---
    global_entries = parse_style_entries(
        src_dir, project.get("styles"), DEFAULT_STYLE_BUNDLE_NAME
    )
    global_paths = [style.path for style in global_entries]

    rules: list[RuleSpec] = [
        {
            "exclude": global_paths,
            "test": test,
            "use": [EXPORTS_LOADER, *common_loaders, *use],
        }
        for test, use in base_rules
    ]
    entry_points: dict[str, list[str]] = {}
    plugins: list[PluginSpec] = []

    is_main_web_app = (
        ctx.is_app
        and project.get("platformTarget", "web") == "web"
        and not ctx.is_dll
        and not run.dll
        and not run.test
    )
    if not is_main_web_app:
        return {"entry": entry_points, "module": {"rules": rules}, "plugins": plugins}

    extract_css = bool(project.get("extractCss"))
    hash_format = CONTENT_HASH_FORMAT if project.get("appendOutputHash") else ""

    if global_entries:
        for style in global_entries:
            entry_points.setdefault(style.entry, []).append(style.path)

        for test, use in base_rules:
            if extract_css:
                loaders = [
                    {"loader": EXTRACT_CSS_LOADER, "options": {"publicPath": ""}},
                    *common_loaders,
                    *use,
                ]
            else:
                loaders = ["style-loader", *common_loaders, *use]
            rules.append({"include": global_paths, "test": test, "use": loaders})

    if extract_css:
        css_filename = f"[name]{hash_format}.css"
        plugins.append(PluginSpec("extract-css", {"filename": css_filename}))
        plugins.append(
            PluginSpec(
                "suppress-entry-chunks",
                {"chunks": list(entry_points), "suppressPattern": SUPPRESS_PATTERN},
            )
        )

    logger.trace(
        f"[get_styles_fragment] {ctx.label}: {len(global_entries)} global style(s),"
        f" extract={extract_css}"
    )
    return {"entry": entry_points, "module": {"rules": rules}, "plugins": plugins}
