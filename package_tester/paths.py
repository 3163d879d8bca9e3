"""Path helpers shared by discovery and merge.

Package paths come from JSON metadata written on any platform, so both
``/`` and ``\\`` are treated as trailing separators when normalizing.
"""

from __future__ import annotations

import os
from pathlib import Path

# Separators stripped from declared paths before comparison
PATH_SEPARATORS = "/\\"

# PSR-4 namespace separator
NAMESPACE_SEPARATOR = "\\"


def join_path(*parts: str) -> str:
    """Join path segments, dropping trailing separators of each segment."""
    cleaned = [part.rstrip(os.sep) for part in parts]
    return os.sep.join(cleaned)


def package_path(root: str, relative: str) -> str:
    """Resolve *relative* (as declared in package metadata) under *root*."""
    return root.rstrip(os.sep) + os.sep + relative.lstrip(PATH_SEPARATORS)


def strip_trailing_separators(path: str) -> str:
    return path.rstrip(PATH_SEPARATORS)


def normalize_namespace(namespace: str) -> str:
    """Return *namespace* with exactly one trailing ``\\``."""
    return namespace.rstrip(NAMESPACE_SEPARATOR) + NAMESPACE_SEPARATOR


def is_dir(path: str) -> bool:
    """``os.path.isdir`` that treats any OS error as absence."""
    try:
        return os.path.isdir(path)
    except (OSError, ValueError):
        return False


def is_file(path: str) -> bool:
    try:
        return os.path.isfile(path)
    except (OSError, ValueError):
        return False


def list_subdirectories(path: str) -> list[str]:
    """List visible subdirectory names of *path*, sorted.

    Returns an empty list when *path* cannot be listed.
    """
    try:
        names = sorted(os.listdir(path))
    except OSError:
        return []
    return [
        name for name in names
        if not name.startswith(".") and is_dir(os.path.join(path, name))
    ]


def relative_to_base(absolute_path: str, base_path: str) -> str:
    """Express *absolute_path* relative to *base_path* when it lies inside it.

    Both paths are resolved through symlinks first. Paths outside the base
    (or on another drive) are returned unchanged.
    """
    try:
        real_base = Path(os.path.realpath(base_path))
        real_path = Path(os.path.realpath(absolute_path))
        relative = real_path.relative_to(real_base)
    except (OSError, ValueError):
        return absolute_path

    posix = relative.as_posix()
    return "" if posix == "." else posix
