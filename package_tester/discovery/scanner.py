"""Scan a dependency directory tree for packages that declare tests.

The dependency root is laid out as ``<root>/<group>/<package>/``. A package
qualifies when it carries both ``composer.json`` and a
``package-tester.json`` test declaration with an enabled runner and at
least one test path that exists on disk.
"""

from __future__ import annotations

import os
from typing import Any

from package_tester.discovery.analyzer import (
    METADATA_FILE,
    as_list,
    get_section,
    read_autoload_dev,
    read_json_object,
    runner_disabled,
    unique_strings,
)
from package_tester.discovery.events import PACKAGE_DISCOVERED, DiagnosticEvent
from package_tester.discovery.models import PackageDescriptor, Registry, TestEntry
from package_tester.discovery.namespaces import (
    build_path_namespace_map,
    display_name,
    iter_autoload_paths,
    resolve_namespace,
    strip_namespace,
)
from package_tester.paths import is_dir, is_file, join_path, list_subdirectories, package_path

DECLARATION_FILE = "package-tester.json"


def extract_test_entries(
    declaration: dict[str, Any],
    root_path: str,
    autoload_dev: dict[str, Any],
) -> list[TestEntry]:
    """Resolve the test entries of one package.

    A ``namespace`` block yields a single entry for its ``path``. Without
    it, every autoload-dev path that exists on disk becomes an entry.
    """
    path_map = build_path_namespace_map(autoload_dev)

    block = declaration.get("namespace")
    if block is not None:
        if not isinstance(block, dict):
            return []
        test_path = block.get("path") or "tests"
        if not isinstance(test_path, str):
            return []
        if not is_dir(package_path(root_path, test_path)):
            return []
        namespace = resolve_namespace(path_map, test_path)
        filter_ = block.get("filter")
        return [TestEntry(
            name=display_name(namespace, "Tests"),
            path=test_path,
            namespace=strip_namespace(namespace),
            options=[str(o) for o in as_list(block.get("option"))],
            filter=filter_ if isinstance(filter_, str) else None,
        )]

    entries: list[TestEntry] = []
    for declared_namespace, paths in autoload_dev.items():
        for test_path in iter_autoload_paths(paths):
            if not is_dir(package_path(root_path, test_path)):
                continue
            namespace = resolve_namespace(path_map, test_path) or declared_namespace
            entries.append(TestEntry(
                name=display_name(namespace, "Tests"),
                path=test_path,
                namespace=strip_namespace(namespace),
            ))
    return entries


class DependencyScanner:
    """Walks a dependency root and collects qualifying packages.

    Each call to :meth:`scan` starts from an empty registry.
    """

    def __init__(
        self,
        dependency_root: str,
        nested: bool = True,
        declaration_file: str = DECLARATION_FILE,
    ) -> None:
        self.dependency_root = dependency_root
        self.nested = nested
        self.declaration_file = declaration_file
        self.registry = Registry()

    def scan(self) -> Registry:
        self.registry = Registry()
        if not is_dir(self.dependency_root):
            return self.registry

        for group in list_subdirectories(self.dependency_root):
            group_path = join_path(self.dependency_root, group)
            if not self.nested:
                self.process_package(group_path)
                continue
            for name in list_subdirectories(group_path):
                self.process_package(join_path(group_path, name))

        return self.registry

    def process_package(self, root_path: str) -> PackageDescriptor | None:
        """Register the package at *root_path* if it qualifies."""
        composer_file = join_path(root_path, METADATA_FILE)
        declaration_file = join_path(root_path, self.declaration_file)
        if not is_file(composer_file) or not is_file(declaration_file):
            return None

        composer = read_json_object(composer_file)
        if composer is None:
            return None

        name = composer.get("name")
        if not isinstance(name, str) or not name:
            name = os.path.basename(root_path)
        if name in self.registry:
            return None

        declaration = read_json_object(declaration_file)
        if declaration is None or runner_disabled(declaration):
            return None

        autoload_dev = read_autoload_dev(composer)
        entries = extract_test_entries(declaration, root_path, autoload_dev)
        if not entries:
            return None

        package = PackageDescriptor(
            name=name,
            root_path=root_path,
            version=str(composer.get("version") or "dev"),
            description=str(composer.get("description") or ""),
            test_entries=entries,
            options=[
                str(o) for o in as_list(get_section(declaration, "namespace", "option"))
            ],
            dependency_packages=unique_strings(
                as_list(declaration.get("dependency-packages"))
            ),
            autoload_dev=autoload_dev,
            declaration_file=declaration_file,
        )
        self.registry.add(package)
        self.registry.events.append(DiagnosticEvent.create(
            PACKAGE_DISCOVERED,
            f"Discovered {name} ({len(entries)} test path(s))",
        ))
        return package


def scan_dependencies(
    dependency_root: str,
    nested: bool = True,
    declaration_file: str = DECLARATION_FILE,
) -> Registry:
    """Scan *dependency_root* and return a fresh Registry."""
    return DependencyScanner(dependency_root, nested, declaration_file).scan()
