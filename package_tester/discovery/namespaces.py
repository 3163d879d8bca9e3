"""Assign PSR-4 namespaces to discovered test paths.

A package's ``autoload-dev.psr-4`` table maps namespaces to one path or a
list of paths. Discovery inverts it into a path -> namespace map so each
test directory can be labelled with the namespace that autoloads it.
"""

from __future__ import annotations

from typing import Any, Mapping

from package_tester.paths import NAMESPACE_SEPARATOR, strip_trailing_separators


def iter_autoload_paths(paths: Any) -> list[str]:
    """Expand a PSR-4 value (string or list of strings) into a path list."""
    if isinstance(paths, (list, tuple)):
        return [p for p in paths if isinstance(p, str)]
    if isinstance(paths, str):
        return [paths]
    return []


def build_path_namespace_map(autoload_dev: Mapping[str, Any]) -> dict[str, str]:
    """Build a normalized path -> namespace map.

    Empty paths are ignored. When several namespaces declare the same
    normalized path, the first declared namespace wins.
    """
    mapping: dict[str, str] = {}
    for namespace, paths in autoload_dev.items():
        for path in iter_autoload_paths(paths):
            if path == "":
                continue
            normalized = strip_trailing_separators(path)
            if normalized not in mapping:
                mapping[normalized] = namespace
    return mapping


def resolve_namespace(path_map: Mapping[str, str], path: str) -> str | None:
    """Look up the namespace for *path*, or None when it is not autoloaded."""
    return path_map.get(strip_trailing_separators(path))


def strip_namespace(namespace: str | None) -> str | None:
    if namespace is None:
        return None
    return namespace.rstrip(NAMESPACE_SEPARATOR)


def display_name(namespace: str | None, fallback: str) -> str:
    """Label a test entry by its namespace, else by *fallback*."""
    stripped = strip_namespace(namespace)
    return stripped if stripped else fallback
