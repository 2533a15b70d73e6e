# tests/utils/__init__.py

from .buildconfig import (
    make_ctx,
    make_project,
    make_project_resolved,
    make_run_context,
    write_config_file,
)
from .config_validate import make_summary
from .constants import DEFAULT_TEST_LOG_LEVEL


__all__ = [  # noqa: RUF022
    # buildconfig
    "make_ctx",
    "make_project",
    "make_project_resolved",
    "make_run_context",
    "write_config_file",
    # config_validate
    "make_summary",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
]
