# src/bundleforge/errors.py

"""Error taxonomy.

All errors subclass a builtin (ValueError or RuntimeError) so that callers
which already catch those, like the CLI's main(), terminate cleanly.
"""

from collections.abc import Iterable
from typing import Any


class InvalidOptionError(ValueError):
    """The caller supplied an unusable invocation parameter."""


class InvalidConfigError(ValueError):
    """The configuration is unusable after validation or resolution.

    `violations` carries the schema violations when the error comes from
    validation. `silent` marks errors whose details were already logged.
    """

    def __init__(
        self,
        message: str,
        *,
        violations: Iterable[Any] | None = None,
        silent: bool = False,
    ) -> None:
        super().__init__(message)
        self.violations: list[Any] = list(violations or [])
        self.silent = silent


class InternalError(RuntimeError):
    """An invariant guaranteed by the pipeline itself was violated."""


class VendorBundleError(RuntimeError):
    """The vendor bundle pre-build did not complete successfully."""
