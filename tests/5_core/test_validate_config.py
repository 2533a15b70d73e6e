# tests/5_core/test_validate_config.py

from typing import Any

import bundleforge.config.config_validate as mod_validate


def _app(**fields: Any) -> dict[str, Any]:
    return {"name": "web", "outputPath": "dist/web", **fields}


def test_validate_config_accepts_valid_config() -> None:
    """A well-formed config has no violations."""
    # --- setup ---
    cfg = {
        "apps": [
            _app(
                assets=["assets", {"from": "favicon.ico", "to": "."}],
                styles=["styles.scss"],
                envOverrides={"prod": {"sourceMap": False}},
                dll=["rxjs"],
            )
        ],
        "libs": [{"name": "core", "outputPath": "dist/core", "libraryTarget": "umd"}],
        "logLevel": "debug",
    }

    # --- execute ---
    summary = mod_validate.validate_config(cfg)

    # --- verify ---
    assert summary.valid is True
    assert summary.violations == []


def test_validate_config_reports_type_errors_with_path() -> None:
    """A wrongly typed field is a violation located at its project."""
    # --- setup ---
    cfg = {"apps": [_app(), _app(sourceMap="yes")]}

    # --- execute ---
    summary = mod_validate.validate_config(cfg)

    # --- verify ---
    assert summary.valid is False
    assert {v.path for v in summary.violations} == {"/apps/1"}
    assert "sourceMap" in summary.violations[0].message


def test_validate_config_non_list_group() -> None:
    # --- execute ---
    summary = mod_validate.validate_config({"libs": {"name": "core"}})

    # --- verify ---
    assert summary.valid is False
    assert summary.violations[0].path == "/libs"


def test_validate_config_unknown_keys_depend_on_strictness() -> None:
    """Unknown keys are violations in strict mode, warnings otherwise."""
    # --- setup ---
    cfg = {"apps": [_app(outputDir="dist")]}

    # --- execute ---
    strict = mod_validate.validate_config(cfg, strict=True)
    lenient = mod_validate.validate_config(cfg, strict=False)

    # --- verify ---
    assert strict.valid is False
    assert strict.violations[0].path == "/apps/0"
    assert lenient.valid is True
    assert lenient.warnings


def test_validate_config_root_strict_config_key() -> None:
    """`strictConfig: false` in the file relaxes unknown keys."""
    # --- setup ---
    cfg = {"strictConfig": False, "apps": [_app(outputDir="dist")]}

    # --- execute ---
    summary = mod_validate.validate_config(cfg)

    # --- verify ---
    assert summary.valid is True
    assert summary.strict is False


def test_validate_config_invocation_keys_are_flagged() -> None:
    """CLI-only keys inside the config are reported once."""
    # --- setup ---
    cfg = {"apps": [_app(watch=True)], "libs": [{"outputPath": "x", "watch": 1}]}

    # --- execute ---
    summary = mod_validate.validate_config(cfg, strict=False)

    # --- verify ---
    invocation = [w for w in summary.warnings if "invocation parameters" in w]
    assert len(invocation) == 1


def test_validate_schema_rejects_non_object() -> None:
    # --- execute ---
    violations = mod_validate.validate_schema(
        mod_validate.AppProjectConfig, ["not", "an", "object"], path="/apps/0"
    )

    # --- verify ---
    assert len(violations) == 1
    assert str(violations[0]).startswith("/apps/0: ")


def test_validate_config_accepts_dll_on_libs() -> None:
    """A `dll` list on a lib is accepted and ignored, even in strict mode."""
    # --- setup ---
    cfg = {"libs": [{"name": "core", "outputPath": "dist/core", "dll": ["rxjs"]}]}

    # --- execute ---
    summary = mod_validate.validate_config(cfg, strict=True)

    # --- verify ---
    assert summary.valid is True
    assert summary.violations == []
