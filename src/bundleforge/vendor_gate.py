# src/bundleforge/vendor_gate.py

"""Pre-build gate that makes sure an app's vendor bundle exists.

Before the main build of an app that references a vendor (dll) bundle, the
gate checks for the vendor manifest on disk. If it is there the main build
proceeds at once; otherwise the vendor configuration is compiled first and
the main build only proceeds when that compilation reports no errors.
"""

import asyncio
import os
import stat
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from .bundler_types import FinalConfiguration
from .constants import DEFAULT_STATS_OPTIONS, VERBOSE_STATS_OPTIONS
from .errors import VendorBundleError
from .logs import getAppLogger


GATE_HOOKS = ("run", "watch-run")


class GateState(Enum):
    CHECK = "check"
    SKIP = "skip"
    BUILD = "build"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class GateResult:
    """Outcome of one gate invocation. `error` is set only when FAILED."""

    state: GateState
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.state in (GateState.SKIP, GateState.DONE)

    def raise_for_error(self) -> None:
        """Raise the failure so the dependent main build is aborted."""
        if self.ok:
            return
        if self.error is not None:
            raise self.error
        xmsg = f"Vendor bundle gate ended in state {self.state.value}."
        raise VendorBundleError(xmsg)


class BuildStats(Protocol):
    def has_errors(self) -> bool: ...

    def to_string(self, options: Mapping[str, Any]) -> str: ...


class BundlerCompiler(Protocol):
    async def run(self, config: FinalConfiguration) -> BuildStats: ...


def get_stats_options(*, verbose: bool = False) -> dict[str, Any]:
    """Stats output options for the vendor build, richer when verbose."""
    options = dict(DEFAULT_STATS_OPTIONS)
    if verbose:
        options.update(VERBOSE_STATS_OPTIONS)
    return options


class VendorBundleGatekeeper:
    """Skip-or-build decision for one app's vendor bundle.

    Transitions: CHECK -> SKIP when the manifest is a regular file,
    CHECK -> BUILD otherwise (including any stat failure), then
    BUILD -> DONE or BUILD -> FAILED depending on the compilation.

    Overlapping `run()` calls on the same instance are not deduplicated.
    """

    def __init__(
        self,
        manifest_file: Path | str,
        vendor_config: FinalConfiguration,
        *,
        verbose: bool = False,
    ) -> None:
        self.manifest_file = Path(manifest_file)
        self.vendor_config = vendor_config
        self.verbose = verbose
        self.state = GateState.CHECK

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(manifest_file={str(self.manifest_file)!r},"
            f" state={self.state.value!r})"
        )

    async def _manifest_exists(self) -> bool:
        logger = getAppLogger()
        try:
            st = await asyncio.to_thread(os.stat, self.manifest_file)
        except Exception as e:  # noqa: BLE001
            logger.trace(f"[vendor_gate] stat failed for {self.manifest_file}: {e}")
            return False
        return stat.S_ISREG(st.st_mode)

    def _transition(self, state: GateState) -> None:
        logger = getAppLogger()
        logger.trace(f"[vendor_gate] {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, error: BaseException) -> GateResult:
        self._transition(GateState.FAILED)
        return GateResult(GateState.FAILED, error)

    async def run(self, compiler: BundlerCompiler, *, hook: str = "run") -> GateResult:
        """Check the manifest and build the vendor bundle when it is missing.

        Never raises for build failures; they are returned as a FAILED
        result. Call `raise_for_error()` on it to abort the main build.
        """
        logger = getAppLogger()
        if hook not in GATE_HOOKS:
            xmsg = f"Unknown build hook {hook!r}; expected one of {GATE_HOOKS}."
            raise ValueError(xmsg)

        self.state = GateState.CHECK
        logger.trace(f"[vendor_gate] {hook}: checking {self.manifest_file}")
        if await self._manifest_exists():
            self._transition(GateState.SKIP)
            logger.debug("Vendor manifest found, skipping vendor build.")
            return GateResult(GateState.SKIP)

        self._transition(GateState.BUILD)
        logger.info(
            "Vendor manifest %s not found, building vendor bundle.",
            self.manifest_file,
        )
        try:
            stats = await compiler.run(self.vendor_config)
            stats_options = get_stats_options(verbose=self.verbose)
            logger.info("%s", stats.to_string(stats_options))
            has_errors = stats.has_errors()
        except Exception as e:  # noqa: BLE001
            logger.errorIfNotDebug("Vendor bundle build raised: %s", e)
            xmsg = f"Vendor bundle build failed: {e}"
            error = VendorBundleError(xmsg)
            error.__cause__ = e
            return self._fail(error)

        if has_errors:
            xmsg = "Vendor bundle build reported errors."
            return self._fail(VendorBundleError(xmsg))

        self._transition(GateState.DONE)
        return GateResult(GateState.DONE)
