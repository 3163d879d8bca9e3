"""Discovery configuration file management.

Reads and writes the optional .package_tester_config JSON file at the
project root. Every key falls back to DEFAULT_CONFIG.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from package_tester.discovery.analyzer import (
    DEFAULT_IGNORED_SUB_DIRS,
    DEFAULT_SUB_SUITES,
    DEFAULT_TEST_DIRS,
)
from package_tester.discovery.scanner import DECLARATION_FILE

CONFIG_FILE_NAME = ".package_tester_config"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "vendor_dir": "vendor",
    "declaration_file": DECLARATION_FILE,
    "nested": True,
    "test_dirs": list(DEFAULT_TEST_DIRS),
    "sub_suites": list(DEFAULT_SUB_SUITES),
    "ignored_sub_dirs": list(DEFAULT_IGNORED_SUB_DIRS),
    "cache_dir": ".package-tester",
}


def _string_list(value: Any, default: list[str]) -> list[str]:
    if not isinstance(value, list):
        return list(default)
    return [str(v) for v in value]


class PackageTesterConfig:
    """Manages the .package_tester_config JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    @classmethod
    def for_project(cls, project_dir: Path) -> PackageTesterConfig:
        return cls(project_dir / CONFIG_FILE_NAME)

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            data = json.loads(text)
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            self._data = dict(DEFAULT_CONFIG)

    def save(self) -> None:
        """Write config to the file."""
        if self.path is None:
            raise ValueError("No config file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
            f.write("\n")

    @property
    def vendor_dir(self) -> str:
        """Get the dependency root, relative to the project directory."""
        return str(self._data.get("vendor_dir") or DEFAULT_CONFIG["vendor_dir"])

    @property
    def declaration_file(self) -> str:
        """Get the name of the per-package test declaration file."""
        return str(
            self._data.get("declaration_file")
            or DEFAULT_CONFIG["declaration_file"]
        )

    @property
    def nested(self) -> bool:
        """Whether packages live two levels deep (group/package)."""
        value = self._data.get("nested")
        if not isinstance(value, bool):
            return DEFAULT_CONFIG["nested"]
        return value

    @property
    def test_dirs(self) -> list[str]:
        return _string_list(
            self._data.get("test_dirs"), DEFAULT_CONFIG["test_dirs"]
        )

    @property
    def sub_suites(self) -> list[str]:
        return _string_list(
            self._data.get("sub_suites"), DEFAULT_CONFIG["sub_suites"]
        )

    @property
    def ignored_sub_dirs(self) -> list[str]:
        return _string_list(
            self._data.get("ignored_sub_dirs"),
            DEFAULT_CONFIG["ignored_sub_dirs"],
        )

    @property
    def cache_dir(self) -> str:
        """Get the directory holding the persisted discovery summary."""
        return str(self._data.get("cache_dir") or DEFAULT_CONFIG["cache_dir"])

    def analyzer_options(self) -> dict[str, Any]:
        """Keyword overrides for PackageAnalyzer."""
        return {
            "test_dirs": self.test_dirs,
            "sub_suites": self.sub_suites,
            "ignored_sub_dirs": self.ignored_sub_dirs,
        }

