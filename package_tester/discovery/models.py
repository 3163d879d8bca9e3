"""Data model for discovered packages and their test entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from package_tester.discovery.events import DiagnosticEvent


@dataclass
class TestEntry:
    """One test-source location within a package."""

    __test__ = False  # not a pytest test class

    name: str
    path: str  # relative to the package root
    namespace: str | None = None  # trailing "\" stripped
    options: list[str] = field(default_factory=list)
    filter: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "namespace": self.namespace,
            "options": list(self.options),
            "filter": self.filter,
        }


@dataclass
class PackageDescriptor:
    """A package that opted into test discovery."""

    name: str
    root_path: str
    version: str = "dev"
    description: str = ""
    test_entries: list[TestEntry] = field(default_factory=list)
    options: list[str] = field(default_factory=list)
    dependency_packages: list[str] = field(default_factory=list)
    autoload_dev: dict[str, str | list[str]] = field(default_factory=dict)
    declaration_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "path": self.root_path,
            "tests": [entry.to_dict() for entry in self.test_entries],
            "options": list(self.options),
            "dependencies": list(self.dependency_packages),
            "autoload_dev": dict(self.autoload_dev),
            "package_tester_config": self.declaration_file,
        }


class Registry:
    """Insertion-ordered collection of discovered packages keyed by name.

    The first package registered under a name is kept; later packages
    declaring the same name (symlinked or re-vendored copies) are ignored.
    """

    def __init__(self) -> None:
        self._packages: dict[str, PackageDescriptor] = {}
        self.events: list[DiagnosticEvent] = []

    def add(self, package: PackageDescriptor) -> bool:
        """Register *package*; returns False if its name was already taken."""
        if package.name in self._packages:
            return False
        self._packages[package.name] = package
        return True

    def get(self, name: str) -> PackageDescriptor | None:
        return self._packages.get(name)

    def has(self, name: str) -> bool:
        return name in self._packages

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[PackageDescriptor]:
        return iter(self._packages.values())

    def count(self) -> int:
        return len(self._packages)

    @property
    def names(self) -> list[str]:
        return list(self._packages)

    def test_paths(self, name: str) -> list[TestEntry]:
        """Get the resolved test entries of a package (empty if unknown)."""
        package = self._packages.get(name)
        if package is None:
            return []
        return list(package.test_entries)

    def summary(self) -> dict[str, dict[str, Any]]:
        """Flatten to ``{name: {"autoload_dev": {...}}}`` for persistence."""
        return {
            name: {"autoload_dev": dict(package.autoload_dev)}
            for name, package in self._packages.items()
        }
