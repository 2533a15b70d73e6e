# tests/5_core/test_load_config.py

from pathlib import Path

import pytest

import bundleforge.config.config_loader as mod_loader
import bundleforge.errors as mod_errors
from tests.utils import make_project, write_config_file


def test_load_config_jsonc_with_comments(tmp_path: Path) -> None:
    """Comments and trailing commas are allowed; `$schema` is stripped."""
    # --- setup ---
    cfg = write_config_file(
        tmp_path,
        """
        {
          // editor hint
          "$schema": "./schema.json",
          "libs": [{"name": "core", "outputPath": "dist/core",},],
        }
        """,
        name="bundleforge.jsonc",
    )

    # --- execute ---
    result = mod_loader.load_config(cfg)

    # --- verify ---
    assert result == {"libs": [{"name": "core", "outputPath": "dist/core"}]}


def test_load_config_invalid_json(tmp_path: Path) -> None:
    # --- setup ---
    cfg = write_config_file(tmp_path, "{ not json")

    # --- execute and verify ---
    with pytest.raises(mod_errors.InvalidConfigError, match="Invalid configuration"):
        mod_loader.load_config(cfg)


def test_load_config_rejects_empty_and_non_object(tmp_path: Path) -> None:
    # --- setup ---
    empty = write_config_file(tmp_path, "", name="empty.json")
    array = write_config_file(tmp_path, "[]", name="array.json")

    # --- execute and verify ---
    with pytest.raises(mod_errors.InvalidConfigError, match="empty"):
        mod_loader.load_config(empty)
    with pytest.raises(mod_errors.InvalidConfigError, match="must contain an object"):
        mod_loader.load_config(array)


@pytest.mark.parametrize("name", ["bundleforge.yaml", "bundleforge.json5"])
def test_check_config_path_rejects_extension(tmp_path: Path, name: str) -> None:
    # --- setup ---
    path = tmp_path / name
    path.write_text("{}")

    # --- execute and verify ---
    with pytest.raises(mod_errors.InvalidOptionError, match="Invalid config file"):
        mod_loader.check_config_path(path)


def test_check_config_path_requires_existing_file(tmp_path: Path) -> None:
    # --- execute and verify ---
    with pytest.raises(mod_errors.InvalidOptionError, match="does not exist"):
        mod_loader.check_config_path(tmp_path / "bundleforge.json")
    with pytest.raises(mod_errors.InvalidOptionError, match="required"):
        mod_loader.check_config_path("")


def test_load_and_validate_config_raises_with_violations(tmp_path: Path) -> None:
    """Schema violations fail the whole run and are carried on the error."""
    # --- setup ---
    cfg = write_config_file(tmp_path, {"apps": [make_project(skip="no")]})

    # --- execute ---
    with pytest.raises(mod_errors.InvalidConfigError) as exc_info:
        mod_loader.load_and_validate_config(cfg)

    # --- verify ---
    assert exc_info.value.silent is True
    assert exc_info.value.violations
    assert all(v.path == "/apps/0" for v in exc_info.value.violations)


def test_load_and_validate_config_returns_config(tmp_path: Path) -> None:
    # --- setup ---
    data = {"libs": [make_project("core")]}
    cfg = write_config_file(tmp_path, data)

    # --- execute ---
    result = mod_loader.load_and_validate_config(cfg)

    # --- verify ---
    assert result == data
