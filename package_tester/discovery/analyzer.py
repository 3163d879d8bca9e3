"""Analyze a single package for test configuration.

Packages opt in through an ``extra.package-tester`` block in their
``composer.json``. Test paths are either listed explicitly in that block
or auto-discovered from conventional test directory layouts.
"""

from __future__ import annotations

import json
import os
from typing import Any, Sequence

from package_tester.discovery.models import PackageDescriptor, TestEntry
from package_tester.discovery.namespaces import (
    build_path_namespace_map,
    display_name,
    resolve_namespace,
    strip_namespace,
)
from package_tester.paths import is_dir, is_file, join_path, list_subdirectories

METADATA_FILE = "composer.json"
EXTRA_KEY = "package-tester"

# Candidate test directories, searched in order
DEFAULT_TEST_DIRS: tuple[str, ...] = ("tests", "test", "Tests", "Test")

# Conventional sub-suites, listed before any other subdirectory
DEFAULT_SUB_SUITES: tuple[str, ...] = (
    "Unit", "Feature", "Integration", "Functional", "Api",
)

# Subdirectories that never hold suites (compared case-insensitively)
DEFAULT_IGNORED_SUB_DIRS: tuple[str, ...] = (
    "fixtures", "stubs", "data", "__snapshots__",
)


def read_json_object(path: str) -> dict[str, Any] | None:
    """Read a JSON file that must contain an object.

    Returns None when the file is missing, unreadable, not valid JSON or
    not a JSON object.
    """
    if not is_file(path):
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


def get_section(data: dict[str, Any], *keys: str) -> Any:
    """Walk nested dict keys, returning None on any missing level."""
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, dict):
        return list(value.values())
    return [value]


def read_autoload_dev(composer: dict[str, Any]) -> dict[str, Any]:
    psr4 = get_section(composer, "autoload-dev", "psr-4")
    return dict(psr4) if isinstance(psr4, dict) else {}


def runner_disabled(declaration: dict[str, Any]) -> bool:
    enabled = get_section(declaration, "runner", "enabled")
    return enabled is not None and not enabled


def find_test_directory(
    package_path: str,
    candidates: Sequence[str] | None = None,
) -> str | None:
    """Return the first candidate that exists as a directory, relative."""
    for candidate in candidates if candidates is not None else DEFAULT_TEST_DIRS:
        if is_dir(join_path(package_path, candidate)):
            return candidate
    return None


def find_test_subdirectories(
    test_path: str,
    sub_suites: Sequence[str] = DEFAULT_SUB_SUITES,
    ignored: Sequence[str] = DEFAULT_IGNORED_SUB_DIRS,
) -> list[str]:
    """List suite directories inside *test_path*.

    Conventional sub-suites come first in their fixed order, followed by
    any other subdirectory not on the ignore list.
    """
    ignored_lower = {name.lower() for name in ignored}
    found: list[str] = []
    for name in sub_suites:
        if name.lower() in ignored_lower:
            continue
        if is_dir(join_path(test_path, name)):
            found.append(name)

    for name in list_subdirectories(test_path):
        if name.lower() in ignored_lower or name in found:
            continue
        found.append(name)
    return found


class PackageAnalyzer:
    """Builds a PackageDescriptor from a package's ``extra.package-tester``."""

    def __init__(
        self,
        test_dirs: Sequence[str] = DEFAULT_TEST_DIRS,
        sub_suites: Sequence[str] = DEFAULT_SUB_SUITES,
        ignored_sub_dirs: Sequence[str] = DEFAULT_IGNORED_SUB_DIRS,
    ) -> None:
        self.test_dirs = tuple(test_dirs)
        self.sub_suites = tuple(sub_suites)
        self.ignored_sub_dirs = tuple(ignored_sub_dirs)

    def analyze(self, package_path: str) -> PackageDescriptor | None:
        """Analyze one package directory.

        Returns None when the package has no readable metadata, no
        ``extra.package-tester`` block, a disabled runner, or neither
        test entries nor an autoload-dev table.
        """
        composer = read_json_object(join_path(package_path, METADATA_FILE))
        if composer is None:
            return None

        tester_config = get_section(composer, "extra", EXTRA_KEY)
        if not isinstance(tester_config, dict):
            return None
        if runner_disabled(tester_config):
            return None

        autoload_dev = read_autoload_dev(composer)
        path_map = build_path_namespace_map(autoload_dev)
        entries = self.resolve_tests(package_path, tester_config, path_map)

        if not entries and not autoload_dev:
            return None

        name = composer.get("name")
        if not isinstance(name, str) or not name:
            name = os.path.basename(package_path)

        return PackageDescriptor(
            name=name,
            root_path=package_path,
            version=str(composer.get("version") or "dev"),
            description=str(composer.get("description") or ""),
            test_entries=entries,
            options=[str(o) for o in as_list(tester_config.get("options"))],
            dependency_packages=unique_strings(
                as_list(tester_config.get("dependency-packages"))
            ),
            autoload_dev=autoload_dev,
        )

    def resolve_tests(
        self,
        package_path: str,
        tester_config: dict[str, Any],
        path_map: dict[str, str],
    ) -> list[TestEntry]:
        """Use the explicit ``tests`` list if given, else auto-discover."""
        declared = tester_config.get("tests")
        if declared:
            return self.explicit_tests(package_path, as_list(declared), path_map)
        return self.auto_discover(package_path, path_map)

    def explicit_tests(
        self,
        package_path: str,
        declared: list[Any],
        path_map: dict[str, str],
    ) -> list[TestEntry]:
        entries: list[TestEntry] = []
        for item in declared:
            if isinstance(item, str):
                item = {"path": item}
            if not isinstance(item, dict):
                continue

            path = item.get("path") or "tests"
            if not isinstance(path, str):
                continue
            if not is_dir(join_path(package_path, path)):
                continue

            namespace = item.get("namespace")
            if not isinstance(namespace, str) or not namespace:
                namespace = resolve_namespace(path_map, path)

            name = item.get("name")
            if not isinstance(name, str) or not name:
                name = os.path.basename(path.rstrip("/\\")) or path

            filter_ = item.get("filter")
            entries.append(TestEntry(
                name=name,
                path=path,
                namespace=strip_namespace(namespace),
                options=[str(o) for o in as_list(item.get("options"))],
                filter=filter_ if isinstance(filter_, str) else None,
            ))
        return entries

    def auto_discover(
        self,
        package_path: str,
        path_map: dict[str, str],
    ) -> list[TestEntry]:
        test_dir = find_test_directory(package_path, self.test_dirs)
        if test_dir is None:
            return []

        sub_dirs = find_test_subdirectories(
            join_path(package_path, test_dir),
            self.sub_suites,
            self.ignored_sub_dirs,
        )
        if not sub_dirs:
            namespace = resolve_namespace(path_map, test_dir)
            return [TestEntry(
                name=display_name(namespace, "Tests"),
                path=test_dir,
                namespace=strip_namespace(namespace),
            )]

        entries = []
        for sub_dir in sub_dirs:
            path = f"{test_dir}/{sub_dir}"
            namespace = resolve_namespace(path_map, path)
            entries.append(TestEntry(
                name=display_name(namespace, sub_dir),
                path=path,
                namespace=strip_namespace(namespace),
            ))
        return entries


def unique_strings(values: list[Any]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if isinstance(value, str) and value not in seen:
            seen.append(value)
    return seen


def analyze_package(
    package_path: str,
    **overrides: Any,
) -> PackageDescriptor | None:
    """Convenience wrapper around ``PackageAnalyzer(**overrides).analyze``."""
    return PackageAnalyzer(**overrides).analyze(package_path)
