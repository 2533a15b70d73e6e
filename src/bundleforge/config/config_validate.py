# src/bundleforge/config/config_validate.py


from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from apathetic_schema import (
    ApatheticSchema_SchemaErrorAggregator,
    ApatheticSchema_ValidationSummary,
    check_schema_conformance,
    collect_msg,
    flush_schema_aggregators,
    warn_keys_once,
)
from apathetic_utils import cast_hint, schema_from_typeddict

from bundleforge.constants import DEFAULT_STRICT_CONFIG
from bundleforge.errors import InvalidConfigError
from bundleforge.logs import getAppLogger

from .config_types import (
    AppProjectConfig,
    LibProjectConfig,
    ProjectConfigResolved,
    RootConfig,
)


# --- constants ------------------------------------------------------

INVOCATION_KEYS = {"watch", "verbose", "clean", "filter", "progress"}
INVOCATION_MSG = (
    "Ignored config key(s) {keys} {ctx}: these are invocation parameters. "
    "Pass them on the command line or in the environment `options` instead."
)

PROJECT_GROUPS: dict[str, type[Any]] = {
    "apps": AppProjectConfig,
    "libs": LibProjectConfig,
}

# Accepted but unused per group; only apps have a vendor bundle
IGNORED_PROJECT_KEYS: dict[str, set[str]] = {
    "apps": set(),
    "libs": {"dll"},
}

# Field-specific type examples for better error messages
FIELD_EXAMPLES: dict[str, str] = {
    "root.*.*.outputPath": '"dist/app"',
    "root.*.*.assets": '["assets/", {"from": "favicon.ico"}]',
    "root.*.*.styles": '["styles.scss"]',
    "root.*.*.platformTarget": '"web"',
    "root.*.*.envOverrides": '{"prod": {"sourceMap": false}}',
    "root.apps.*.dll": '["rxjs", "./vendor.ts"]',
    "root.logLevel": '"debug"',
    "root.strictConfig": "true",
}


# --- types ----------------------------------------------------------


@dataclass(frozen=True)
class Violation:
    """One schema violation located by a JSON-pointer-like path."""

    path: str  # "", "/apps/0", "/libs/1"
    message: str

    def __str__(self) -> str:
        return f"{self.path or '/'}: {self.message}"


@dataclass
class ConfigValidationSummary(ApatheticSchema_ValidationSummary):
    violations: list[Violation] = field(default_factory=list)


def make_validation_summary(
    *,
    strict: bool = DEFAULT_STRICT_CONFIG,
) -> ConfigValidationSummary:
    return ConfigValidationSummary(
        valid=True,
        errors=[],
        strict_warnings=[],
        warnings=[],
        strict=strict,
    )


# ---------------------------------------------------------------------------
# schema validator
# ---------------------------------------------------------------------------


def _record_violations(
    path: str,
    *,
    summary: ConfigValidationSummary,  # modified
    errors_before: int,
    strict_before: int,
) -> list[Violation]:
    new_msgs = (
        summary.errors[errors_before:] + summary.strict_warnings[strict_before:]
    )
    found = [Violation(path, msg) for msg in new_msgs]
    summary.violations.extend(found)
    return found


def validate_schema(  # noqa: PLR0913
    schema: type[Any] | dict[str, Any],
    raw: Any,
    *,
    path: str = "",
    context: str = "in top-level configuration",
    strict: bool = DEFAULT_STRICT_CONFIG,
    summary: ConfigValidationSummary | None = None,  # modified
    prewarn: set[str] | None = None,
    ignore_keys: set[str] | None = None,
    base_path: str = "root",
) -> list[Violation]:
    """Check `raw` for structural and type conformance against `schema`.

    `schema` is a TypedDict class or an already-extracted schema dict.
    Returns the violations found by this call (also appended to
    `summary.violations`). Unknown keys only count as violations in
    strict mode. Semantic cross-field checks are not done here.
    """
    if summary is None:
        summary = make_validation_summary(strict=strict)
    schema_dict = (
        schema if isinstance(schema, dict) else schema_from_typeddict(schema)
    )

    errors_before = len(summary.errors)
    strict_before = len(summary.strict_warnings)

    if not isinstance(raw, dict):
        collect_msg(
            f"{context}: expected an object with named keys,"
            f" got {type(raw).__name__}",
            strict=True,
            summary=summary,
            is_error=True,
        )
    else:
        ok = check_schema_conformance(
            cast_hint(dict[str, Any], raw),
            schema_dict,
            context,
            strict_config=strict,
            summary=summary,
            prewarn=prewarn,
            ignore_keys=ignore_keys,
            base_path=base_path,
            field_examples=FIELD_EXAMPLES,
        )
        if not ok and len(summary.errors) == errors_before and (
            len(summary.strict_warnings) == strict_before
        ):
            collect_msg(
                f"Configuration {context} is invalid.",
                strict=True,
                summary=summary,
                is_error=True,
            )

    return _record_violations(
        path,
        summary=summary,
        errors_before=errors_before,
        strict_before=strict_before,
    )


# ---------------------------------------------------------------------------
# main validator
# ---------------------------------------------------------------------------


def _determine_strictness(
    parsed_cfg: dict[str, Any],
    strict_arg: bool | None,
) -> bool:
    if strict_arg is not None:
        return strict_arg
    strict_from_root: Any = parsed_cfg.get("strictConfig")
    if isinstance(strict_from_root, bool):
        return strict_from_root
    return DEFAULT_STRICT_CONFIG


def _validate_group(
    group: str,
    parsed_cfg: dict[str, Any],
    *,
    strict_config: bool,
    summary: ConfigValidationSummary,  # modified
    agg: ApatheticSchema_SchemaErrorAggregator,  # modified
) -> None:
    logger = getAppLogger()
    raw_projects: Any = parsed_cfg.get(group, [])

    if not isinstance(raw_projects, list):
        errors_before = len(summary.errors)
        collect_msg(
            f"`{group}` must be a list of projects.",
            strict=True,
            summary=summary,
            is_error=True,
        )
        _record_violations(
            f"/{group}",
            summary=summary,
            errors_before=errors_before,
            strict_before=len(summary.strict_warnings),
        )
        return

    schema = schema_from_typeddict(PROJECT_GROUPS[group])
    for i, project in enumerate(cast_hint(list[Any], raw_projects)):
        logger.trace(f"[validate_group] Checking {group}[{i}]")
        context = f"in {group}[{i}]"

        prewarn: set[str] = set()
        if isinstance(project, dict):
            _ok, found = warn_keys_once(
                "invocation",
                INVOCATION_KEYS,
                cast_hint(dict[str, Any], project),
                context,
                INVOCATION_MSG,
                strict_config=strict_config,
                summary=summary,
                agg=agg,
            )
            prewarn |= found
            ignored = IGNORED_PROJECT_KEYS[group] & set(project)
            if ignored:
                logger.debug(
                    "Ignoring %s %s: only apps have a vendor bundle.",
                    ", ".join(sorted(ignored)),
                    context,
                )
            prewarn |= ignored

        validate_schema(
            schema,
            project,
            path=f"/{group}/{i}",
            context=context,
            strict=strict_config,
            summary=summary,
            prewarn=prewarn,
            base_path=f"root.{group}.*",
        )


def validate_config(
    parsed_cfg: dict[str, Any],
    *,
    strict: bool | None = None,
) -> ConfigValidationSummary:
    """Validate a loaded config (root, every app and every lib).

    strict=True  →  unknown keys become fatal, but are still listed separately
    strict=False →  unknown keys remain non-fatal warnings

    When `strict` is None the root `strictConfig` key decides.
    Returns a ConfigValidationSummary; `valid` is False whenever
    `violations` is non-empty.
    """
    logger = getAppLogger()
    logger.trace(f"[validate_config] Starting validation (strict={strict})")

    strict_config = _determine_strictness(parsed_cfg, strict)
    summary = make_validation_summary(strict=strict_config)
    agg: ApatheticSchema_SchemaErrorAggregator = {}

    # --- Validate root-level keys ---
    _ok, found = warn_keys_once(
        "invocation",
        INVOCATION_KEYS,
        parsed_cfg,
        "in top-level configuration",
        INVOCATION_MSG,
        strict_config=strict_config,
        summary=summary,
        agg=agg,
    )
    validate_schema(
        RootConfig,
        parsed_cfg,
        path="",
        strict=strict_config,
        summary=summary,
        prewarn=found,
        ignore_keys=set(PROJECT_GROUPS),
    )

    # --- Validate projects ---
    for group in PROJECT_GROUPS:
        _validate_group(
            group,
            parsed_cfg,
            strict_config=strict_config,
            summary=summary,
            agg=agg,
        )

    # --- Aggregated warnings belong to no single project ---
    errors_before = len(summary.errors)
    strict_before = len(summary.strict_warnings)
    flush_schema_aggregators(summary=summary, agg=agg)
    _record_violations(
        "",
        summary=summary,
        errors_before=errors_before,
        strict_before=strict_before,
    )

    summary.valid = not summary.violations
    logger.trace(
        f"[validate_config] Done: {len(summary.violations)} violation(s),"
        f" {len(summary.warnings)} warning(s)"
    )
    return summary


# ---------------------------------------------------------------------------
# semantic project checks
# ---------------------------------------------------------------------------


def _project_label(project: ProjectConfigResolved) -> str:
    meta = project["__meta__"]
    group = "apps" if meta["project_type"] == "app" else "libs"
    return f"{group}[{project.get('name') or meta['index']}]"


def validate_project_config(project: ProjectConfigResolved) -> None:
    """Semantic checks run once environment overrides are applied.

    Raises InvalidConfigError for a missing `outputPath` or one that would
    write into the workspace or project root, and for fields an override
    replaced with a value of the wrong type.
    """
    meta = project["__meta__"]
    group = "apps" if meta["project_type"] == "app" else "libs"
    label = _project_label(project)

    # Override blocks are only checked as objects at load time
    raw = {key: value for key, value in project.items() if key != "__meta__"}
    violations = validate_schema(
        PROJECT_GROUPS[group],
        raw,
        path=f"/{group}/{meta['index']}",
        context=f"in {group}[{meta['index']}]",
        strict=False,
        prewarn=IGNORED_PROJECT_KEYS[group] & set(raw),
        base_path=f"root.{group}.*",
    )
    if violations:
        details = "; ".join(violation.message for violation in violations)
        xmsg = f"Invalid '{label}' after environment overrides: {details}"
        raise InvalidConfigError(xmsg, violations=violations)

    output_path = project.get("outputPath")
    if not output_path or not output_path.strip():
        xmsg = f"The '{label}.outputPath' value is required."
        raise InvalidConfigError(xmsg)

    workspace_root = project["__meta__"]["workspace_root"]
    resolved_out = (workspace_root / output_path).resolve()
    project_root = (workspace_root / project.get("root", "")).resolve()
    if resolved_out in {Path(workspace_root).resolve(), project_root}:
        xmsg = (
            f"The '{label}.outputPath' must not be the workspace or project root"
            f" ({resolved_out})."
        )
        raise InvalidConfigError(xmsg)
