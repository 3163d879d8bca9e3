"""Merge discovered test namespaces into the root autoload-dev table.

The merge source is each package's raw ``autoload-dev.psr-4`` table, not
its resolved test entries. Namespaces already present in the root table
are never overwritten, so running the merge again injects nothing new.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from package_tester.discovery.events import (
    DIRECTORY_NOT_FOUND,
    NAMESPACE_INJECTED,
    NAMESPACE_SKIPPED,
    DiagnosticEvent,
)
from package_tester.discovery.models import Registry
from package_tester.discovery.namespaces import iter_autoload_paths
from package_tester.paths import is_dir, normalize_namespace, package_path, relative_to_base


@dataclass
class MergeResult:
    """Outcome of one merge pass."""

    table: dict[str, Any]
    injected: int = 0
    skipped: int = 0
    warnings: list[str] = field(default_factory=list)
    events: list[DiagnosticEvent] = field(default_factory=list)


def merge_autoload(
    registry: Registry,
    table: dict[str, Any],
    base_path: str,
) -> MergeResult:
    """Inject every discovered (namespace, path) pair into *table*.

    Args:
        registry: Packages from a discovery scan, in scan order.
        table: The root project's ``autoload-dev.psr-4`` mapping. Mutated
            in place and returned on the result.
        base_path: Root project directory used to relativize paths.

    Returns:
        MergeResult with injected/skipped counts, warnings for directories
        that do not exist, and one diagnostic event per processed pair.
    """
    result = MergeResult(table=table)

    for package in registry:
        for namespace, paths in package.autoload_dev.items():
            for path in iter_autoload_paths(paths):
                full_path = package_path(package.root_path, path)

                if not is_dir(full_path):
                    message = f"Directory not found: {full_path}"
                    result.warnings.append(message)
                    result.events.append(
                        DiagnosticEvent.create(DIRECTORY_NOT_FOUND, message)
                    )
                    continue

                ns = normalize_namespace(namespace)
                relative = relative_to_base(full_path, base_path)

                if ns in table:
                    result.skipped += 1
                    result.events.append(DiagnosticEvent.create(
                        NAMESPACE_SKIPPED, f"Skip (already exists): {ns}",
                    ))
                    continue

                table[ns] = relative
                result.injected += 1
                result.events.append(DiagnosticEvent.create(
                    NAMESPACE_INJECTED, f"+ {ns} => {relative}",
                ))

    return result
