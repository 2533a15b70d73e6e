# tests/5_core/test_styles_fragment.py

from pathlib import Path
from typing import Any

import pytest

import bundleforge.fragments.styles as mod_styles
from tests.utils import make_ctx, make_project


def _first_loader(rule: dict) -> Any:  # type: ignore[type-arg]
    return rule["use"][0]


def _postcss_plugin_names(rule: dict) -> list[str]:  # type: ignore[type-arg]
    postcss = next(
        loader
        for loader in rule["use"]
        if isinstance(loader, dict) and loader["loader"] == "postcss-loader"
    )
    return [plugin.name for plugin in postcss["options"]["plugins"]]


@pytest.mark.parametrize(
    ("rewriter", "url", "expected"),
    [
        (mod_styles.RootRelativeUrlRewriter(), "img/logo.png", "img/logo.png"),
        (mod_styles.RootRelativeUrlRewriter(), "//cdn/logo.png", "//cdn/logo.png"),
        (mod_styles.RootRelativeUrlRewriter(), "/logo.png", "/logo.png"),
        (
            mod_styles.RootRelativeUrlRewriter(public_path="https://cdn.io/"),
            "/logo.png",
            "https://cdn.io/logo.png",
        ),
        (
            mod_styles.RootRelativeUrlRewriter(base_href="https://host/app/"),
            "/logo.png",
            "https://host/app/logo.png",
        ),
        (
            mod_styles.RootRelativeUrlRewriter(
                public_path="static/", base_href="/app/"
            ),
            "/logo.png",
            "/app/static/logo.png",
        ),
    ],
)
def test_root_relative_url_rewriter(
    rewriter: mod_styles.RootRelativeUrlRewriter,
    url: str,
    expected: str,
) -> None:
    # --- execute and verify ---
    assert rewriter(url) == expected


def test_styles_fragment_development_app_uses_style_loader(tmp_path: Path) -> None:
    """Global styles become an entry point injected by style-loader."""
    # --- setup ---
    raw = make_project("web", styles=["src/styles.scss"])
    ctx = make_ctx(tmp_path, raw)
    style_path = str(tmp_path / "src" / "styles.scss")

    # --- execute ---
    fragment = mod_styles.get_styles_fragment(ctx)

    # --- verify ---
    assert fragment["entry"] == {"styles": [style_path]}
    rules = fragment["module"]["rules"]
    assert len(rules) == 6
    excluded = rules[:3]
    included = rules[3:]
    assert all(rule["exclude"] == [style_path] for rule in excluded)
    assert all(_first_loader(rule) == mod_styles.EXPORTS_LOADER for rule in excluded)
    assert all(rule["include"] == [style_path] for rule in included)
    assert all(_first_loader(rule) == "style-loader" for rule in included)
    assert _postcss_plugin_names(rules[0]) == ["postcss-url", "autoprefixer"]
    assert fragment["plugins"] == []


def test_styles_fragment_production_app_extracts_css(tmp_path: Path) -> None:
    """Production extracts hashed css files and suppresses style-only chunks."""
    # --- setup ---
    raw = make_project("web", styles=["a.css", {"input": "b.less", "bundleName": "b"}])
    ctx = make_ctx(tmp_path, raw, environment={"production": True})

    # --- execute ---
    fragment = mod_styles.get_styles_fragment(ctx)

    # --- verify ---
    assert list(fragment["entry"]) == ["styles", "b"]
    included = fragment["module"]["rules"][3:]
    assert all(
        _first_loader(rule)["loader"] == mod_styles.EXTRACT_CSS_LOADER
        for rule in included
    )
    assert _postcss_plugin_names(included[0]) == [
        "postcss-url",
        "autoprefixer",
        "cssnano",
    ]
    extract, suppress = fragment["plugins"]
    assert extract.name == "extract-css"
    assert extract.options == {"filename": "[name].[contenthash:20].css"}
    assert suppress.name == "suppress-entry-chunks"
    assert suppress.options["chunks"] == ["styles", "b"]


def test_styles_fragment_sass_include_paths(tmp_path: Path) -> None:
    # --- setup ---
    raw = make_project(
        "web",
        root="src",
        stylePreprocessorOptions={"includePaths": ["styles/partials"]},
    )
    ctx = make_ctx(tmp_path, raw)

    # --- execute ---
    fragment = mod_styles.get_styles_fragment(ctx)

    # --- verify ---
    sass_rule = fragment["module"]["rules"][1]
    assert sass_rule["test"] == mod_styles.SASS_TEST
    sass_loader = sass_rule["use"][-1]
    assert sass_loader["options"]["includePaths"] == [
        str(tmp_path / "src" / "styles" / "partials")
    ]
    assert sass_loader["options"]["precision"] == mod_styles.SASS_PRECISION


@pytest.mark.parametrize(
    ("project_type", "environment"),
    [
        ("lib", None),
        ("app", {"dll": True}),
        ("app", {"test": True}),
    ],
)
def test_styles_fragment_without_global_entries(
    tmp_path: Path,
    project_type: str,
    environment: dict[str, bool] | None,
) -> None:
    """Only the main web app build turns global styles into entry points."""
    # --- setup ---
    raw = make_project("web", styles=["styles.css"], extractCss=True, dll=["rxjs"])
    ctx = make_ctx(
        tmp_path,
        raw,
        project_type=project_type,  # type: ignore[arg-type]
        environment=environment,
    )

    # --- execute ---
    fragment = mod_styles.get_styles_fragment(ctx)

    # --- verify ---
    assert fragment["entry"] == {}
    assert len(fragment["module"]["rules"]) == 3
    assert fragment["plugins"] == []
