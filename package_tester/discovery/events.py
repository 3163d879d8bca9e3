"""Diagnostic events emitted by discovery and merge.

Events are advisory. The command layer decides which ones to print based
on the requested verbosity.
"""

from __future__ import annotations

from dataclasses import dataclass

PACKAGE_DISCOVERED = "package_discovered"
NAMESPACE_INJECTED = "namespace_injected"
NAMESPACE_SKIPPED = "namespace_skipped"
DIRECTORY_NOT_FOUND = "directory_not_found"

# Verbosity at which each kind is shown (0 = always, 1 = -v, 2 = -vv)
DEFAULT_VERBOSITY = {
    PACKAGE_DISCOVERED: 1,
    NAMESPACE_INJECTED: 1,
    NAMESPACE_SKIPPED: 2,
    DIRECTORY_NOT_FOUND: 1,
}


@dataclass
class DiagnosticEvent:
    """A single advisory message produced during a discovery run."""

    kind: str
    message: str
    verbosity: int = 1

    @classmethod
    def create(cls, kind: str, message: str) -> DiagnosticEvent:
        return cls(kind, message, DEFAULT_VERBOSITY.get(kind, 1))

    @property
    def is_warning(self) -> bool:
        return self.kind == DIRECTORY_NOT_FOUND
