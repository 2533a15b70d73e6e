# tests/conftest.py
"""Shared test setup for project."""

from collections.abc import Generator

import pytest

import bundleforge.logs as mod_logs
import bundleforge.pipeline as mod_pipeline
from tests.utils import DEFAULT_TEST_LOG_LEVEL


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Reset logger level to DEFAULT_TEST_LOG_LEVEL (test)
        before each test for isolation.

    The app logger is a module-level singleton that persists between tests;
    some code paths (config logLevel, --verbose) change its level.
    """
    logger = mod_logs.getAppLogger()
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)  # test
    yield
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)  # test


@pytest.fixture(autouse=True)
def clear_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's environment out of the pipeline under test."""
    monkeypatch.delenv(mod_pipeline.ENV_VAR, raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("BUNDLEFORGE_LOG_LEVEL", raising=False)
