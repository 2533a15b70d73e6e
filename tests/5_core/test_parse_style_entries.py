# tests/5_core/test_parse_style_entries.py

from pathlib import Path

import pytest

import bundleforge.entries as mod_entries
import bundleforge.errors as mod_errors


def test_parse_style_entries_strings_go_to_default_bundle(tmp_path: Path) -> None:
    """Plain strings resolve to absolute paths in the default bundle."""
    # --- execute ---
    result = mod_entries.parse_style_entries(tmp_path, ["styles.scss", "theme.css"])

    # --- verify ---
    assert result == [
        mod_entries.StyleParsedEntry(str(tmp_path / "styles.scss"), "styles"),
        mod_entries.StyleParsedEntry(str(tmp_path / "theme.css"), "styles"),
    ]


def test_parse_style_entries_objects(tmp_path: Path) -> None:
    """bundleName wins; lazy entries default to their own stem."""
    # --- setup ---
    entries = [
        {"input": "print.css", "bundleName": "print"},
        {"input": "dark-theme.scss", "lazy": True},
    ]

    # --- execute ---
    result = mod_entries.parse_style_entries(tmp_path, entries, "global")

    # --- verify ---
    assert result[0].entry == "print"
    assert result[0].lazy is False
    assert result[1] == mod_entries.StyleParsedEntry(
        str(tmp_path / "dark-theme.scss"), "dark-theme", lazy=True
    )


def test_parse_style_entries_requires_input(tmp_path: Path) -> None:
    """An object without `input` is a configuration error."""
    # --- execute and verify ---
    with pytest.raises(mod_errors.InvalidConfigError, match="'input' field"):
        mod_entries.parse_style_entries(tmp_path, [{"bundleName": "x"}])


def test_parse_style_entries_empty(tmp_path: Path) -> None:
    # --- execute and verify ---
    assert mod_entries.parse_style_entries(tmp_path, None) == []
