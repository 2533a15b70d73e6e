# src/bundleforge/meta.py

"""Centralized program identity constants for Bundleforge."""

from dataclasses import dataclass


# --- program identity ---------------------------------------------------------

PROGRAM_PACKAGE = "bundleforge"
PROGRAM_SCRIPT = "bundleforge"
PROGRAM_DISPLAY = "Bundleforge"
PROGRAM_CONFIG = "bundleforge"
PROGRAM_ENV = "BUNDLEFORGE"

DESCRIPTION = "Resolve declarative app and library projects into bundler configs."


@dataclass(frozen=True)
class Metadata:
    """Version and commit information reported by the CLI."""

    version: str
    commit: str

    def __str__(self) -> str:
        return f"{self.version} ({self.commit})"
