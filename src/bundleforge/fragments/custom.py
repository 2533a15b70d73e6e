# src/bundleforge/fragments/custom.py

import sys
import traceback
from pathlib import Path
from typing import Any

from apathetic_utils import cast_hint, load_jsonc, remove_path_in_error_message

from bundleforge.bundler_types import ConfigFragment
from bundleforge.context import ProjectBuildContext
from bundleforge.errors import InvalidConfigError
from bundleforge.logs import getAppLogger

from .common import require_paths


JSON_SUFFIXES = (".json", ".jsonc")


def _exec_python_config(config_path: Path) -> Any:
    """Run a Python bundler config and return its `config` value."""
    logger = getAppLogger()
    config_globals: dict[str, Any] = {}

    # Allow local imports next to the config file
    parent_dir = str(config_path.parent)
    added_to_sys_path = parent_dir not in sys.path
    if added_to_sys_path:
        sys.path.insert(0, parent_dir)

    try:
        source = config_path.read_text(encoding="utf-8")
        exec(compile(source, str(config_path), "exec"), config_globals)  # noqa: S102
        logger.trace(f"[EXEC] globals after exec: {list(config_globals.keys())}")
    except Exception as e:
        tb = traceback.format_exc()
        xmsg = (
            f"Error while executing bundler config: {config_path.name}\n"
            f"{type(e).__name__}: {e}\n{tb}"
        )
        raise RuntimeError(xmsg) from e
    finally:
        if added_to_sys_path and sys.path[0] == parent_dir:
            sys.path.pop(0)

    if "config" not in config_globals:
        xmsg = f"{config_path.name} did not define `config`."
        raise InvalidConfigError(xmsg)
    return config_globals["config"]


def get_custom_fragment(ctx: ProjectBuildContext) -> ConfigFragment:
    """Load the user's own bundler config for a project (`bundlerConfig`).

    JSON/JSONC files are used as-is. Python files must define `config`,
    either a dict or a callable taking the project build context and
    returning one. Merged last, so its values win.
    """
    logger = getAppLogger()
    bundler_config = ctx.project.get("bundlerConfig")
    if not bundler_config:
        return {}

    project_root, _output_path = require_paths(ctx)
    config_path = (project_root / bundler_config).resolve()
    if not config_path.is_file():
        xmsg = (
            f"The '{ctx.label}.bundlerConfig' file does not exist: {config_path}."
        )
        raise InvalidConfigError(xmsg)

    logger.debug("Using custom bundler config %s for %s", config_path, ctx.label)

    result: Any
    if config_path.suffix.lower() in JSON_SUFFIXES:
        try:
            result = load_jsonc(config_path)
        except ValueError as e:
            clean_msg = remove_path_in_error_message(str(e), config_path)
            xmsg = f"Invalid bundler config '{config_path.name}': {clean_msg}."
            raise InvalidConfigError(xmsg) from e
    elif config_path.suffix == ".py":
        result = _exec_python_config(config_path)
        if callable(result):
            result = result(ctx)
    else:
        xmsg = (
            f"Unsupported bundler config {config_path.name};"
            " expected a .json, .jsonc or .py file."
        )
        raise InvalidConfigError(xmsg)

    if result is None:
        return {}
    if not isinstance(result, dict):
        xmsg = (
            f"Bundler config {config_path.name} must produce an object,"
            f" not {type(result).__name__}."
        )
        raise InvalidConfigError(xmsg)
    return cast_hint(ConfigFragment, result)
