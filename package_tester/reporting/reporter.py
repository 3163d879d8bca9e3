"""Report generation for discovery runs.

Produces a JSON or YAML document listing every discovered package with
its resolved test entries, the merged autoload-dev table and the merge
counters.
"""

from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any

import yaml

from package_tester.discovery.models import Registry
from package_tester.merge.autoload import MergeResult


class DiscoveryReporter:
    """Collects a registry and merge result and renders them as a report."""

    def __init__(self) -> None:
        self.registry: Registry | None = None
        self.merge_result: MergeResult | None = None
        self.project_dir: str | None = None

    def set_registry(self, registry: Registry) -> None:
        self.registry = registry

    def set_merge_result(self, result: MergeResult) -> None:
        self.merge_result = result

    def set_project_dir(self, project_dir: str) -> None:
        self.project_dir = project_dir

    def generate_report(self) -> dict[str, Any]:
        """Generate the report data structure.

        Returns:
            Dictionary representing the full report, suitable for
            JSON or YAML serialization.
        """
        now = datetime.datetime.now(tz=datetime.timezone.utc).isoformat()

        report: dict[str, Any] = {
            "generated_at": now,
            "summary": self._compute_summary(),
        }
        if self.project_dir is not None:
            report["project"] = self.project_dir

        packages = list(self.registry) if self.registry is not None else []
        report["packages"] = [package.to_dict() for package in packages]

        if self.merge_result is not None:
            report["autoload_dev"] = dict(self.merge_result.table)
            report["warnings"] = list(self.merge_result.warnings)

        return {"report": report}

    def _compute_summary(self) -> dict[str, Any]:
        packages = list(self.registry) if self.registry is not None else []
        summary: dict[str, Any] = {
            "packages": len(packages),
            "test_paths": sum(len(p.test_entries) for p in packages),
        }
        if self.merge_result is not None:
            summary["injected"] = self.merge_result.injected
            summary["skipped"] = self.merge_result.skipped
            summary["warnings"] = len(self.merge_result.warnings)
        return summary

    def write_report(self, path: Path) -> None:
        """Write the report as a JSON file."""
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(report, f, indent=2)

    def write_yaml(self, path: Path) -> None:
        """Write the report as a YAML file."""
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(
                report,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    def write(self, path: Path) -> None:
        """Write JSON or YAML depending on the file suffix."""
        if path.suffix.lower() in (".yaml", ".yml"):
            self.write_yaml(path)
        else:
            self.write_report(path)
