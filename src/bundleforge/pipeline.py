# src/bundleforge/pipeline.py

"""Turn a bundleforge config file into one bundler configuration per project."""

import json
import os
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from apathetic_utils import cast_hint

from .bundler_types import FinalConfiguration
from .config import (
    apply_build_config_defaults,
    apply_project_config_defaults,
    check_config_path,
    filter_projects,
    load_and_validate_config,
    prepare_filter_names,
    resolve_projects,
    validate_project_config,
)
from .constants import DEFAULT_ENV_ENVIRONMENT, ENV_OPTIONS_KEY
from .context import BuildRunContext, ProjectBuildContext
from .errors import InvalidConfigError, InvalidOptionError
from .fragments import (
    get_app_fragment,
    get_common_fragment,
    get_custom_fragment,
    get_styles_fragment,
    get_vendor_configuration,
)
from .logs import getAppLogger
from .merge import merge_fragments
from .meta import PROGRAM_ENV


ENV_VAR = f"{PROGRAM_ENV}_{DEFAULT_ENV_ENVIRONMENT}"


# --------------------------------------------------------------------------- #
# environment
# --------------------------------------------------------------------------- #


def resolve_environment(
    env: Mapping[str, Any] | None,
    *,
    from_cli: bool = False,
) -> dict[str, Any]:
    """Build the environment flags of one invocation.

    An explicit `env` wins. Otherwise, outside the CLI, the JSON object in
    the `BUNDLEFORGE_ENV` environment variable is used.
    """
    logger = getAppLogger()
    if env is None and not from_cli:
        raw_env = os.environ.get(ENV_VAR)
        if raw_env:
            try:
                parsed = json.loads(raw_env)
            except json.JSONDecodeError as e:
                xmsg = f"Invalid JSON in {ENV_VAR}: {e}."
                raise InvalidOptionError(xmsg) from e
            if isinstance(parsed, dict):
                logger.debug("Using environment from %s", ENV_VAR)
                env = cast_hint(dict[str, Any], parsed)
            else:
                logger.warning("Ignoring %s: expected a JSON object.", ENV_VAR)

    if env is not None and not isinstance(env, Mapping):
        xmsg = f"The environment must be an object, not {type(env).__name__}."
        raise InvalidOptionError(xmsg)
    return dict(env or {})


def _extract_env_options(
    environment: dict[str, Any],  # modified
    *,
    from_cli: bool,
) -> dict[str, Any]:
    """Pop the `options` bucket (clean, filter) out of the environment."""
    if from_cli or ENV_OPTIONS_KEY not in environment:
        return {}
    options = environment.pop(ENV_OPTIONS_KEY)
    if not isinstance(options, dict):
        return {}
    return cast_hint(dict[str, Any], options)


def _argv_flag(argv: Any, *names: str) -> bool:
    return any(bool(getattr(argv, name, False)) for name in names)


# --------------------------------------------------------------------------- #
# per-project configuration
# --------------------------------------------------------------------------- #


def get_project_configuration(
    ctx: ProjectBuildContext,
) -> FinalConfiguration | None:
    """Merge the fragments of one project, or None if it has nothing to build.

    Order is common, styles, project-kind specific, then custom, so user
    customization always has the final say.
    """
    logger = getAppLogger()
    if not ctx.is_app:
        fragments = [
            get_common_fragment(ctx),
            get_styles_fragment(ctx),
            get_custom_fragment(ctx),
        ]
    elif ctx.run.dll:
        if not ctx.project.get("dll"):
            logger.debug("Skipping %s: no 'dll' entries for vendor build.", ctx.label)
            return None
        return get_vendor_configuration(ctx)
    else:
        fragments = [
            get_common_fragment(ctx),
            get_styles_fragment(ctx),
            get_app_fragment(ctx),
            get_custom_fragment(ctx),
        ]
    return merge_fragments(fragments)


# --------------------------------------------------------------------------- #
# entry point
# --------------------------------------------------------------------------- #


def get_bundler_configs(
    config_path: Path | str | None,
    env: Mapping[str, Any] | None = None,
    argv: Any = None,
) -> list[FinalConfiguration]:
    """Resolve every selected project of a config file.

    `argv` is any object with optional attributes: filter, clean or
    clean_out_dirs, verbose, watch or w, progress, from_cli, start_time.

    Returns libs first, then apps, each in declared order. Never empty.

    Raises:
        InvalidOptionError: missing or unusable config path or environment.
        InvalidConfigError: invalid config, or no project left to build.

    """
    logger = getAppLogger()
    if not config_path:
        xmsg = "The 'config_path' is required."
        raise InvalidOptionError(xmsg)

    from_cli = _argv_flag(argv, "from_cli")
    start_time = getattr(argv, "start_time", None) or time.time()
    filter_names = prepare_filter_names(getattr(argv, "filter", None))
    clean_out_dirs = _argv_flag(argv, "clean", "clean_out_dirs")
    verbose = _argv_flag(argv, "verbose")
    watch = _argv_flag(argv, "watch", "w")
    progress = _argv_flag(argv, "progress")

    # --- environment ---
    environment = resolve_environment(env, from_cli=from_cli)
    env_options = _extract_env_options(environment, from_cli=from_cli)
    if env_options.get("clean"):
        clean_out_dirs = True
    if env_options.get("filter"):
        filter_names = prepare_filter_names(env_options["filter"])

    # --- config ---
    path = check_config_path(config_path).resolve()
    root_cfg = apply_build_config_defaults(
        load_and_validate_config(path, args=argv if from_cli else None)
    )
    if verbose:
        root_cfg["logLevel"] = "debug"
        logger.setLevel("debug")

    if not root_cfg.get("apps") and not root_cfg.get("libs"):
        xmsg = "No app or lib project is available."
        raise InvalidConfigError(xmsg)

    run = BuildRunContext(
        workspace_root=path.parent,
        config_path=path,
        environment=environment,
        filter_names=tuple(filter_names),
        verbose=verbose,
        watch=watch,
        from_cli=from_cli,
        start_time=start_time,
        log_level=logger.effectiveLevelName.lower(),
    ).with_flags(progress=progress, clean_out_dirs=clean_out_dirs)
    logger.trace(f"[get_bundler_configs] {run!r}")

    # --- projects ---
    projects = resolve_projects(
        root_cfg, workspace_root=run.workspace_root, environment=environment
    )
    configs: list[FinalConfiguration] = []
    for project in filter_projects(projects, filter_names):
        validate_project_config(project)
        resolved = apply_project_config_defaults(project, environment)
        ctx = ProjectBuildContext(run=run, project=resolved)
        final = get_project_configuration(ctx)
        if final is not None:
            logger.debug("Resolved configuration for %s", ctx.label)
            configs.append(final)

    if not configs:
        xmsg = "No app or lib project is available."
        raise InvalidConfigError(xmsg)

    logger.debug(
        "Resolved %d configuration(s) in %.2fs",
        len(configs),
        time.time() - run.start_time,
    )
    return configs
