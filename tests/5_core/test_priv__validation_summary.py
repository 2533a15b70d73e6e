# tests/5_core/test_priv__validation_summary.py
"""Tests for the validation summary printed while loading a config."""

from pathlib import Path

import pytest

import bundleforge.config.config_loader as mod_loader
import bundleforge.config.config_validate as mod_validate
from tests.utils import make_summary


def test_invalid_summary_lists_violations(
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    violation = mod_validate.Violation("/apps/0", "Missing required key `outputPath`")
    summary = make_summary(
        valid=False,
        errors=[violation.message],
        violations=[violation],
    )

    # --- execute ---
    mod_loader._validation_summary(summary, Path("bundleforge.json"))  # noqa: SLF001

    # --- verify ---
    err = capsys.readouterr().err
    assert "Failed to validate configuration file bundleforge.json" in err
    assert "strict mode" in err
    assert "Found 1 error." in err
    assert "/apps/0: Missing required key `outputPath`" in err


def test_warnings_only_summary(capsys: pytest.CaptureFixture[str]) -> None:
    # --- setup ---
    summary = make_summary(warnings=["Unknown key `colour`"], strict=False)

    # --- execute ---
    mod_loader._validation_summary(summary, Path("bundleforge.jsonc"))  # noqa: SLF001

    # --- verify ---
    err = capsys.readouterr().err
    assert "with warnings" in err
    assert "lenient mode" in err
    assert "1 normal warning" in err
    assert "Unknown key `colour`" in err
    assert "Violations" not in err


def test_violation_str_uses_root_for_empty_path() -> None:
    # --- execute and verify ---
    assert str(mod_validate.Violation("", "bad")) == "/: bad"
