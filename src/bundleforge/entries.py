# src/bundleforge/entries.py

"""Canonicalize declarative asset, style and vendor entry specifications.

User configs describe file selections in several shapes: a single string,
a list of strings, or a list mixing strings and objects. Each entry is
classified once at the input boundary into a tagged spec
(`LiteralEntrySpec` or `StructuredEntrySpec`); everything downstream works
on the parsed descriptors only.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias, TypedDict

from apathetic_utils import cast_hint, has_glob_chars

from .constants import DEFAULT_STYLE_BUNDLE_NAME, STYLE_EXTENSIONS
from .errors import InvalidConfigError
from .logs import getAppLogger


RECURSIVE_SUFFIX = "/**/*"


class DllParsedResult(TypedDict):
    ts_entries: list[str]
    script_entries: list[str]
    style_entries: list[str]


# --------------------------------------------------------------------------- #
# Input specs (decided once per entry)
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class LiteralEntrySpec:
    path: str


@dataclass(frozen=True)
class StructuredEntrySpec:
    from_: str
    to: str | None = None
    context: str | None = None
    exclude: tuple[str, ...] = ()


EntrySpec: TypeAlias = LiteralEntrySpec | StructuredEntrySpec


# --------------------------------------------------------------------------- #
# Parsed descriptors
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class GlobPattern:
    glob: str
    include_hidden: bool = True


@dataclass(frozen=True)
class AssetParsedEntry:
    """One canonical asset selection.

    `source` is a literal absolute path only when the user already gave an
    exact absolute target; every other input becomes a `GlobPattern`.
    """

    source: str | GlobPattern
    context: str
    to: str | None = None
    exclude: tuple[str, ...] = field(default=())

    @property
    def is_glob(self) -> bool:
        return isinstance(self.source, GlobPattern)


@dataclass(frozen=True)
class StyleParsedEntry:
    path: str  # absolute
    entry: str  # bundle name
    lazy: bool = False


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _as_entry_list(entries: Any, label: str) -> list[Any]:
    if entries is None or entries == "":
        return []
    if isinstance(entries, str):
        return [entries]
    if isinstance(entries, (list, tuple)):
        return list(cast_hint(Sequence[Any], entries))
    xmsg = (
        f"Invalid '{label}' value: expected a string or a list,"
        f" got {type(entries).__name__}."
    )
    raise InvalidConfigError(xmsg)


def to_entry_specs(entries: Any, *, label: str = "assets") -> list[EntrySpec]:
    """Classify raw entries into tagged specs.

    Raises InvalidConfigError for objects without `from` and for values that
    are neither strings nor objects.
    """
    specs: list[EntrySpec] = []
    for i, raw in enumerate(_as_entry_list(entries, label)):
        if isinstance(raw, str):
            specs.append(LiteralEntrySpec(raw))
        elif isinstance(raw, dict):
            entry = cast_hint(dict[str, Any], raw)
            from_value = entry.get("from")
            if not isinstance(from_value, str) or not from_value:
                xmsg = f"Invalid '{label}[{i}]' value: the 'from' field is required."
                raise InvalidConfigError(xmsg)
            specs.append(
                StructuredEntrySpec(
                    from_=from_value,
                    to=entry.get("to"),
                    context=entry.get("context"),
                    exclude=tuple(
                        _as_entry_list(entry.get("exclude"), f"{label}[{i}].exclude")
                    ),
                )
            )
        else:
            xmsg = (
                f"Invalid '{label}[{i}]' value: expected a string or an object,"
                f" got {type(raw).__name__}."
            )
            raise InvalidConfigError(xmsg)
    return specs


def prepare_glob(base_dir: Path | str, p: str) -> str:
    """Rewrite a directory-shaped path into a recursive glob.

    A path without wildcard characters that resolves (relative to
    `base_dir`) to an existing directory gets a single trailing separator
    stripped and `/**/*` appended. Anything else is returned unchanged.
    """
    if not p or has_glob_chars(p):
        return p

    candidate = Path(base_dir) / p  # absolute `p` replaces base_dir
    if not candidate.is_dir():
        return p

    if p.endswith(("/", "\\")):
        p = p[:-1]
    return p + RECURSIVE_SUFFIX


def _parse_source(base_dir: Path | str, p: str) -> str | GlobPattern:
    rewritten = prepare_glob(base_dir, p)
    if rewritten == p and Path(p).is_absolute():
        return p
    return GlobPattern(glob=rewritten)


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #


def parse_asset_entries(
    base_dir: Path | str,
    entries: Any,
) -> list[AssetParsedEntry]:
    """Normalize asset entries into canonical descriptors.

    `entries` may be a single string, a list mixing strings and
    `{from, to, context, exclude}` objects, or empty (yields an empty list).
    The only side effects are read-only stat calls to detect directories.
    """
    logger = getAppLogger()
    context = str(base_dir)
    parsed: list[AssetParsedEntry] = []

    for spec in to_entry_specs(entries, label="assets"):
        if isinstance(spec, LiteralEntrySpec):
            source = _parse_source(base_dir, spec.path)
            parsed.append(AssetParsedEntry(source=source, context=context))
            continue

        parsed.append(
            AssetParsedEntry(
                source=_parse_source(base_dir, spec.from_),
                context=spec.context or context,
                to=spec.to,
                exclude=spec.exclude,
            )
        )

    logger.trace(f"[parse_asset_entries] {len(parsed)} entries from {context}")
    return parsed


def parse_style_entries(
    base_dir: Path | str,
    entries: Any,
    default_entry: str = DEFAULT_STYLE_BUNDLE_NAME,
) -> list[StyleParsedEntry]:
    """Normalize global style entries.

    Accepts strings or `{input, bundleName, lazy}` objects. Lazy entries
    without a bundle name are emitted under their own file stem.
    """
    parsed: list[StyleParsedEntry] = []
    for i, raw in enumerate(_as_entry_list(entries, "styles")):
        if isinstance(raw, str):
            path = str(Path(base_dir, raw).resolve())
            parsed.append(StyleParsedEntry(path=path, entry=default_entry))
            continue

        if not isinstance(raw, dict):
            xmsg = (
                f"Invalid 'styles[{i}]' value: expected a string or an object,"
                f" got {type(raw).__name__}."
            )
            raise InvalidConfigError(xmsg)

        entry = cast_hint(dict[str, Any], raw)
        input_value = entry.get("input")
        if not isinstance(input_value, str) or not input_value:
            xmsg = f"Invalid 'styles[{i}]' value: the 'input' field is required."
            raise InvalidConfigError(xmsg)

        path = Path(base_dir, input_value).resolve()
        lazy = bool(entry.get("lazy", False))
        bundle_name = entry.get("bundleName") or (path.stem if lazy else default_entry)
        parsed.append(StyleParsedEntry(path=str(path), entry=bundle_name, lazy=lazy))

    return parsed


def _is_path_like(entry: str) -> bool:
    return entry.startswith(("./", "../", ".\\", "..\\")) or Path(entry).is_absolute()


def parse_dll_entries(project_root: Path, dll: Any) -> DllParsedResult:
    """Sort vendor entries into script, TypeScript and style buckets.

    Path-like entries resolve against `project_root`; bare module names are
    kept as-is. Entries named in `exclude` are dropped and duplicates removed.
    """
    if isinstance(dll, dict):
        dll_dict = cast_hint(dict[str, Any], dll)
        raw_entries = _as_entry_list(dll_dict.get("entry"), "dll.entry")
        excluded = set(_as_entry_list(dll_dict.get("exclude"), "dll.exclude"))
    else:
        raw_entries = _as_entry_list(dll, "dll")
        excluded = set()

    result: DllParsedResult = {
        "ts_entries": [],
        "script_entries": [],
        "style_entries": [],
    }
    seen: set[str] = set()
    for raw in raw_entries:
        if not isinstance(raw, str) or not raw.strip():
            xmsg = f"Invalid 'dll' entry: {raw!r}."
            raise InvalidConfigError(xmsg)
        name = raw.strip()
        if name in excluded:
            continue

        entry = str((project_root / name).resolve()) if _is_path_like(name) else name
        if entry in seen:
            continue
        seen.add(entry)

        lower = entry.lower()
        if lower.endswith(".ts") and not lower.endswith(".d.ts"):
            result["ts_entries"].append(entry)
        elif lower.endswith(STYLE_EXTENSIONS):
            result["style_entries"].append(entry)
        else:
            result["script_entries"].append(entry)

    return result


def iter_dll_entries(parsed: DllParsedResult) -> Iterable[str]:
    """Yield all vendor entries in bundling order (ts, scripts, styles)."""
    yield from parsed["ts_entries"]
    yield from parsed["script_entries"]
    yield from parsed["style_entries"]
