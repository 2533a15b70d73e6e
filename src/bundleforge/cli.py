# src/bundleforge/cli.py

import argparse
import json
import subprocess
import sys
import time
from contextlib import suppress
from dataclasses import asdict, is_dataclass
from difflib import get_close_matches
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from apathetic_logging import LEVEL_ORDER, safeLog

from .bundler_types import PluginSpec
from .config import find_config
from .errors import InvalidOptionError
from .logs import getAppLogger
from .meta import (
    DESCRIPTION,
    PROGRAM_DISPLAY,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .pipeline import get_bundler_configs
from .vendor_gate import VendorBundleGatekeeper


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # "unrecognized arguments: --filtr ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(prog=PROGRAM_SCRIPT, description=DESCRIPTION)

    parser.add_argument(
        "-c",
        "--config",
        help="Path to the config file (default: search cwd and parents).",
    )
    parser.add_argument(
        "--env",
        help='Environment flags as a JSON object, e.g. \'{"prod": true}\'.',
    )
    parser.add_argument(
        "--filter",
        nargs="+",
        help="Only resolve these projects (names, or the groups apps / libs).",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Clean output directories before building.",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Mark the run as a watch build.",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Report build progress.",
    )

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    return parser


def get_metadata() -> Metadata:
    """Return version and commit of this tool.

    - Installed package → version from package metadata
    - Source checkout → commit from git
    """
    logger = getAppLogger()
    try:
        pkg_version = version(PROGRAM_PACKAGE)
    except PackageNotFoundError:
        pkg_version = "unknown"

    commit = "unknown"
    with suppress(Exception):
        logger.trace("trying to get commit from git")
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=Path(__file__).resolve().parent,
            capture_output=True,
            text=True,
            check=True,
        )
        commit = result.stdout.strip()

    return Metadata(pkg_version, commit)


def _parse_env(raw_env: str | None) -> dict[str, Any] | None:
    if raw_env is None:
        return None
    try:
        env = json.loads(raw_env)
    except json.JSONDecodeError as e:
        xmsg = f"Invalid --env value, expected a JSON object: {e}."
        raise InvalidOptionError(xmsg) from e
    if not isinstance(env, dict):
        xmsg = "Invalid --env value, expected a JSON object."
        raise InvalidOptionError(xmsg)
    return env


def _json_default(obj: Any) -> Any:
    """Render non-JSON values of a final configuration."""
    if isinstance(obj, PluginSpec):
        return {"plugin": obj.name, "options": dict(obj.options)}
    if isinstance(obj, VendorBundleGatekeeper):
        return repr(obj)
    if isinstance(obj, Path):
        return str(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if callable(obj):
        return f"<function {getattr(obj, '__name__', type(obj).__name__)}>"
    return str(obj)


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = getAppLogger()
    logger.setLevel(logger.determineLogLevel(args=args))
    logger.trace(f"[BOOT] log-level initialized: {logger.levelName}")


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = getAppLogger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)
        start_time = time.time()

        # --- Early runtime init (use CLI + env + defaults) ---
        _initialize_logger(args)

        if args.version:
            meta = get_metadata()
            logger.info("%s %s", PROGRAM_DISPLAY, meta)
            return 0

        config_path = find_config(args, Path.cwd())
        if config_path is None:
            return 1
        logger.debug("Using config: %s", config_path)

        args.verbose = (args.log_level or "").lower() in ("debug", "trace")
        args.from_cli = True
        args.start_time = start_time
        configs = get_bundler_configs(config_path, _parse_env(args.env), args)

        sys.stdout.write(json.dumps(configs, indent=2, default=_json_default))
        sys.stdout.write("\n")

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.errorIfNotDebug(str(e))
            except Exception:  # noqa: BLE001
                safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.criticalIfNotDebug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safeLog(f"[FATAL] Logging failed while reporting: {e}")

        return getattr(e, "code", 1)

    else:
        return 0
