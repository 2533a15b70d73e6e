# tests/5_core/test_parse_asset_entries.py

from pathlib import Path

import pytest

import bundleforge.entries as mod_entries
import bundleforge.errors as mod_errors


def test_parse_asset_entries_rewrites_relative_directory(tmp_path: Path) -> None:
    """A relative directory becomes a recursive glob in the base dir context."""
    # --- setup ---
    (tmp_path / "assets").mkdir()

    # --- execute ---
    result = mod_entries.parse_asset_entries(tmp_path, ["assets/"])

    # --- verify ---
    assert result == [
        mod_entries.AssetParsedEntry(
            source=mod_entries.GlobPattern("assets/**/*"),
            context=str(tmp_path),
        )
    ]
    assert result[0].is_glob


def test_parse_asset_entries_absolute_directory_is_a_glob(tmp_path: Path) -> None:
    """Rewriting changed the string, so no literal shortcut applies."""
    # --- setup ---
    assets = tmp_path / "assets"
    assets.mkdir()

    # --- execute ---
    result = mod_entries.parse_asset_entries(tmp_path, str(assets))

    # --- verify ---
    assert len(result) == 1
    assert result[0].source == mod_entries.GlobPattern(f"{assets}/**/*")
    assert result[0].context == str(tmp_path)


def test_parse_asset_entries_absolute_file_is_literal(tmp_path: Path) -> None:
    """An absolute file path is kept as a literal path."""
    # --- setup ---
    icon = tmp_path / "favicon.ico"
    icon.write_text("")
    missing = tmp_path / "nope.txt"

    # --- execute ---
    result = mod_entries.parse_asset_entries(tmp_path, [str(icon), str(missing)])

    # --- verify ---
    assert [entry.source for entry in result] == [str(icon), str(missing)]
    assert not any(entry.is_glob for entry in result)
    assert all(entry.context == str(tmp_path) for entry in result)


def test_parse_asset_entries_relative_file_is_glob(tmp_path: Path) -> None:
    """Relative paths that are not directories stay as-is but are globs."""
    # --- setup ---
    (tmp_path / "favicon.ico").write_text("")

    # --- execute ---
    result = mod_entries.parse_asset_entries(tmp_path, "favicon.ico")

    # --- verify ---
    assert result[0].source == mod_entries.GlobPattern("favicon.ico")
    assert result[0].source.include_hidden is True  # type: ignore[union-attr]


def test_parse_asset_entries_wildcards_are_not_rewritten(tmp_path: Path) -> None:
    """Entries with glob characters are never treated as directories."""
    # --- setup ---
    (tmp_path / "img[1]").mkdir()

    # --- execute ---
    result = mod_entries.parse_asset_entries(tmp_path, ["images/*.png", "img[1]"])

    # --- verify ---
    assert [entry.source for entry in result] == [
        mod_entries.GlobPattern("images/*.png"),
        mod_entries.GlobPattern("img[1]"),
    ]


def test_parse_asset_entries_structured_keeps_to_and_context(tmp_path: Path) -> None:
    """Object entries apply the same rule to `from` and keep user fields."""
    # --- setup ---
    (tmp_path / "assets").mkdir()
    entries = [
        {"from": "assets", "to": "static", "exclude": ["*.tmp"]},
        {"from": "robots.txt", "context": "/srv/site"},
    ]

    # --- execute ---
    result = mod_entries.parse_asset_entries(tmp_path, entries)

    # --- verify ---
    assert result[0] == mod_entries.AssetParsedEntry(
        source=mod_entries.GlobPattern("assets/**/*"),
        context=str(tmp_path),
        to="static",
        exclude=("*.tmp",),
    )
    assert result[1].source == mod_entries.GlobPattern("robots.txt")
    assert result[1].context == "/srv/site"
    assert result[1].to is None


@pytest.mark.parametrize("entries", [None, "", []])
def test_parse_asset_entries_empty_input(tmp_path: Path, entries: object) -> None:
    """Absent or empty entries yield an empty list, not an error."""
    # --- execute and verify ---
    assert mod_entries.parse_asset_entries(tmp_path, entries) == []


def test_parse_asset_entries_object_without_from_raises(tmp_path: Path) -> None:
    """An object entry must name its source."""
    # --- execute and verify ---
    with pytest.raises(mod_errors.InvalidConfigError, match="'from' field"):
        mod_entries.parse_asset_entries(tmp_path, [{"to": "static"}])


def test_parse_asset_entries_rejects_other_types(tmp_path: Path) -> None:
    """Numbers, booleans and nested lists are configuration errors."""
    # --- execute and verify ---
    with pytest.raises(mod_errors.InvalidConfigError, match=r"assets\[1\]"):
        mod_entries.parse_asset_entries(tmp_path, ["ok", 42])
    with pytest.raises(mod_errors.InvalidConfigError):
        mod_entries.parse_asset_entries(tmp_path, {"from": "x"})


def test_parse_asset_entries_is_repeatable(tmp_path: Path) -> None:
    """The same raw input always yields identical output."""
    # --- setup ---
    (tmp_path / "assets").mkdir()
    entries = ["assets", {"from": "favicon.ico"}, str(tmp_path / "x.txt")]

    # --- execute ---
    first = mod_entries.parse_asset_entries(tmp_path, entries)
    second = mod_entries.parse_asset_entries(tmp_path, entries)

    # --- verify ---
    assert first == second


def test_prepare_glob_strips_single_trailing_separator(tmp_path: Path) -> None:
    """Only one trailing separator is removed before the suffix."""
    # --- setup ---
    (tmp_path / "assets").mkdir()

    # --- execute and verify ---
    assert mod_entries.prepare_glob(tmp_path, "assets/") == "assets/**/*"
    assert mod_entries.prepare_glob(tmp_path, "assets") == "assets/**/*"
    assert mod_entries.prepare_glob(tmp_path, "missing/") == "missing/"
    assert mod_entries.prepare_glob(tmp_path, "") == ""


def test_parse_asset_entries_single_exclude_string(tmp_path: Path) -> None:
    """A string `exclude` is one pattern, not a list of characters."""
    # --- execute ---
    result = mod_entries.parse_asset_entries(
        tmp_path, [{"from": "docs", "exclude": "*.md"}]
    )

    # --- verify ---
    assert result[0].exclude == ("*.md",)
