# src/bundleforge/config/config_loader.py


import argparse
from pathlib import Path
from typing import Any

from apathetic_utils import (
    cast_hint,
    load_jsonc,
    plural,
    remove_path_in_error_message,
)

from bundleforge.errors import InvalidConfigError, InvalidOptionError
from bundleforge.logs import getAppLogger
from bundleforge.meta import PROGRAM_CONFIG

from .config_types import RootConfig
from .config_validate import ConfigValidationSummary, validate_config


CONFIG_SUFFIXES = (".json", ".jsonc")

# Editor hints that are not part of the schema
STRIPPED_ROOT_KEYS = ("$schema",)


def find_config(
    args: argparse.Namespace | None,
    cwd: Path,
    *,
    missing_level: str = "error",
) -> Path | None:
    """Locate a configuration file.

    missing_level: log-level for failing to find a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. Default candidates in the current working directory and its parents:
         {PROGRAM_CONFIG}.jsonc, {PROGRAM_CONFIG}.json

    Returns the first matching path, or None if no config was found.
    """
    logger = getAppLogger()

    # --- 1. Explicit config path ---
    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()  # type: ignore[union-attr]
        logger.trace(f"[find_config] Checking explicit path: {config}")
        check_config_path(config)
        return config

    # --- 2. Default candidate files (search current dir and parents) ---
    # .jsonc wins over .json at the same level
    candidate_names = [f"{PROGRAM_CONFIG}{suffix}" for suffix in (".jsonc", ".json")]
    current = cwd
    found: list[Path] = []
    while True:
        found = [
            current / name for name in candidate_names if (current / name).is_file()
        ]
        if found:
            break
        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    if not found:
        logger.logDynamic(missing_level, f"No config file found in {cwd} or parents")
        return None

    if len(found) > 1:
        names = ", ".join(p.name for p in found)
        logger.warning(
            "Multiple config files detected (%s); using %s.",
            names,
            found[0].name,
        )
    return found[0]


def check_config_path(config_path: Path | str | None) -> Path:
    """Reject config paths with a wrong extension or that do not exist."""
    if not config_path:
        xmsg = "The config path is required."
        raise InvalidOptionError(xmsg)

    path = Path(config_path)
    if path.suffix.lower() not in CONFIG_SUFFIXES:
        xmsg = f"Invalid config file, path: {path}. Expected a .json or .jsonc file"
        raise InvalidOptionError(xmsg)
    if not path.is_file():
        xmsg = (
            f"{PROGRAM_CONFIG}.json config file does not exist"
            f" - search location: {path}."
            " Use --config=<your config file> or create one in the"
            " current working directory."
        )
        raise InvalidOptionError(xmsg)
    return path


def load_config(config_path: Path) -> dict[str, Any]:
    """Load configuration data from a JSON/JSONC file.

    Comments and trailing commas are allowed. Editor-only keys such as
    `$schema` are stripped.

    Raises:
        InvalidConfigError if the file is empty, malformed, or not an object.

    """
    logger = getAppLogger()
    logger.trace(f"[load_config] Loading from {config_path} ({config_path.suffix})")

    try:
        raw_config = load_jsonc(config_path)
    except ValueError as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = f"Invalid configuration, error: {clean_msg}."
        raise InvalidConfigError(xmsg) from e

    if raw_config is None:
        xmsg = f"Configuration file {config_path.name} is empty."
        raise InvalidConfigError(xmsg)
    if not isinstance(raw_config, dict):
        xmsg = (
            f"Configuration file {config_path.name} must contain an object,"
            f" not {type(raw_config).__name__}."
        )
        raise InvalidConfigError(xmsg)

    cfg = cast_hint(dict[str, Any], raw_config)
    for key in STRIPPED_ROOT_KEYS:
        cfg.pop(key, None)
    return cfg


def _validation_summary(
    summary: ConfigValidationSummary,
    config_path: Path,
) -> None:
    """Pretty-print a validation summary."""
    logger = getAppLogger()
    mode = "strict mode" if summary.strict else "lenient mode"

    # --- Build concise counts line ---
    counts: list[str] = []
    if summary.errors:
        counts.append(f"{len(summary.errors)} error{plural(summary.errors)}")
    if summary.strict_warnings:
        counts.append(
            f"{len(summary.strict_warnings)} strict warning"
            f"{plural(summary.strict_warnings)}",
        )
    if summary.warnings:
        counts.append(
            f"{len(summary.warnings)} normal warning{plural(summary.warnings)}",
        )
    counts_msg = f"\nFound {', '.join(counts)}." if counts else ""

    # --- Header ---
    if not summary.valid:
        logger.error(
            "Failed to validate configuration file %s (%s).%s",
            config_path.name,
            mode,
            counts_msg,
        )
    elif counts:
        logger.warning(
            "Validated configuration file %s (%s) with warnings.%s",
            config_path.name,
            mode,
            counts_msg,
        )
    else:
        logger.debug("Validated %s (%s) successfully.", config_path.name, mode)

    # --- Detailed sections ---
    if summary.violations:
        msg_summary = "\n  • ".join(str(v) for v in summary.violations)
        logger.error("\nViolations:\n  • %s", msg_summary)
    if summary.warnings:
        msg_summary = "\n  • ".join(summary.warnings)
        logger.warning("\nWarnings (non-fatal):\n  • %s", msg_summary)


def load_and_validate_config(
    config_path: Path | str,
    *,
    args: argparse.Namespace | None = None,
    strict: bool | None = None,
) -> RootConfig:
    """Check, load and validate the user's configuration.

    Also determines the effective log level (from CLI/env/config/default)
    early, so logging reflects the config as soon as possible.

    Raises:
        InvalidOptionError for a bad path, InvalidConfigError (carrying the
        violations) when the file does not validate.

    """
    logger = getAppLogger()
    path = check_config_path(config_path)
    parsed_cfg = load_config(path)

    # --- Early peek for logLevel before validating ---
    raw_log_level = parsed_cfg.get("logLevel")
    if isinstance(raw_log_level, str) and raw_log_level:
        logger.setLevel(
            logger.determineLogLevel(args=args, root_log_level=raw_log_level)
        )

    # --- Validate schema ---
    summary = validate_config(parsed_cfg, strict=strict)
    _validation_summary(summary, path)
    if not summary.valid:
        xmsg = f"Invalid configuration in {path.name}."
        raise InvalidConfigError(xmsg, violations=summary.violations, silent=True)

    return cast_hint(RootConfig, parsed_cfg)
