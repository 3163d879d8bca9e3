"""Persisted discovery summary.

Stores ``{package: {"autoload_dev": {...}}}`` in
``<project>/.package-tester/config.json`` so later commands can reuse the
last discovery result without rescanning the vendor tree.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from package_tester.discovery.models import PackageDescriptor

CACHE_DIR = ".package-tester"
CACHE_FILE = "config.json"


def normalize_packages(packages: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Keep only the autoload-dev mapping of each package.

    Accepts descriptors or plain dicts. Entries without a usable name are
    dropped and a non-dict ``autoload_dev`` becomes an empty mapping.
    """
    normalized: dict[str, dict[str, Any]] = {}
    for package_name, package in packages.items():
        if isinstance(package, PackageDescriptor):
            package = package.to_dict()
        if not isinstance(package, dict):
            continue

        name = package_name if isinstance(package_name, str) and package_name else ""
        if not name:
            name = str(package.get("name") or "")
        if not name:
            continue

        autoload_dev = package.get("autoload_dev")
        if not isinstance(autoload_dev, dict):
            autoload_dev = {}
        normalized[name] = {"autoload_dev": dict(autoload_dev)}
    return normalized


class DiscoveryCache:
    """Manages the persisted discovery summary file."""

    def __init__(self, base_path: str | Path, cache_dir: str = CACHE_DIR) -> None:
        self.base_path = Path(base_path)
        self.path = self.base_path / cache_dir / CACHE_FILE

    def save(self, packages: Mapping[str, Any]) -> bool:
        """Write the flattened summary. Returns False if it could not be written."""
        data = normalize_packages(packages)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
                f.write("\n")
        except OSError:
            return False
        return True

    def load(self) -> dict[str, Any]:
        """Load the summary; missing or corrupted files give ``{}``."""
        try:
            text = self.path.read_text(encoding="utf-8")
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def clear(self) -> bool:
        """Remove the summary file. Returns True if a file was removed."""
        try:
            self.path.unlink()
        except OSError:
            return False
        return True
