"""Unit tests for the package analyzer (extra.package-tester entry point)."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any

from package_tester.discovery.analyzer import (
    PackageAnalyzer,
    analyze_package,
    find_test_directory,
    find_test_subdirectories,
    read_json_object,
)


def _make_package(
    root: Path,
    composer: dict[str, Any] | str | None,
    dirs: list[str] = (),
) -> Path:
    """Create a package directory with a composer.json and directories."""
    root.mkdir(parents=True, exist_ok=True)
    if isinstance(composer, str):
        (root / "composer.json").write_text(composer)
    elif composer is not None:
        (root / "composer.json").write_text(json.dumps(composer))
    for d in dirs:
        (root / d).mkdir(parents=True, exist_ok=True)
    return root


def _composer(tester: Any = None, **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"name": "acme/widgets"}
    if tester is not None:
        data["extra"] = {"package-tester": tester}
    data.update(extra)
    return data


# ---------------------------------------------------------------------------
# read_json_object
# ---------------------------------------------------------------------------


class TestReadJsonObject:
    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            assert read_json_object(str(Path(tmpdir) / "missing.json")) is None

    def test_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "composer.json"
            path.write_text("{ not json")
            assert read_json_object(str(path)) is None

    def test_non_object(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "composer.json"
            path.write_text("[1, 2]")
            assert read_json_object(str(path)) is None

    def test_object(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "composer.json"
            path.write_text('{"name": "a/b"}')
            assert read_json_object(str(path)) == {"name": "a/b"}


# ---------------------------------------------------------------------------
# Qualification
# ---------------------------------------------------------------------------


class TestQualification:
    def test_no_metadata_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(Path(tmpdir) / "pkg", None, ["tests"])
            assert analyze_package(str(pkg)) is None

    def test_unparseable_metadata(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(Path(tmpdir) / "pkg", "{oops", ["tests"])
            assert analyze_package(str(pkg)) is None

    def test_no_declaration_block(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(Path(tmpdir) / "pkg", _composer(), ["tests"])
            assert analyze_package(str(pkg)) is None

    def test_disabled_runner(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"runner": {"enabled": False}, "tests": ["tests"]}),
                ["tests/Unit"],
            )
            assert analyze_package(str(pkg)) is None

    def test_enabled_runner_included(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"runner": {"enabled": True}}),
                ["tests"],
            )
            assert analyze_package(str(pkg)) is not None

    def test_no_entries_no_autoload_excluded(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(Path(tmpdir) / "pkg", _composer({}))
            assert analyze_package(str(pkg)) is None

    def test_no_entries_with_autoload_included(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({}, **{
                    "autoload-dev": {"psr-4": {"Acme\\Tests\\": "spec/"}},
                }),
            )
            descriptor = analyze_package(str(pkg))
            assert descriptor is not None
            assert descriptor.test_entries == []
            assert descriptor.autoload_dev == {"Acme\\Tests\\": "spec/"}

    def test_metadata_fields(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer(
                    {"options": ["--stop-on-failure"]},
                    version="1.2.0",
                    description="Widgets",
                ),
                ["tests"],
            )
            descriptor = analyze_package(str(pkg))
            assert descriptor.name == "acme/widgets"
            assert descriptor.version == "1.2.0"
            assert descriptor.description == "Widgets"
            assert descriptor.root_path == str(pkg)
            assert descriptor.options == ["--stop-on-failure"]
            assert descriptor.declaration_file is None

    def test_name_falls_back_to_basename(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "gadgets",
                {"extra": {"package-tester": {}}},
                ["tests"],
            )
            descriptor = analyze_package(str(pkg))
            assert descriptor.name == "gadgets"
            assert descriptor.version == "dev"

    def test_non_string_name_falls_back_to_basename(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "gadgets",
                {"name": 5, "extra": {"package-tester": {}}},
                ["tests"],
            )
            assert analyze_package(str(pkg)).name == "gadgets"


# ---------------------------------------------------------------------------
# Explicit test lists
# ---------------------------------------------------------------------------


class TestExplicitTests:
    def test_string_entry_promoted(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": ["tests/Unit"]}),
                ["tests/Unit"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert len(entries) == 1
            assert entries[0].name == "Unit"
            assert entries[0].path == "tests/Unit"
            assert entries[0].namespace is None
            assert entries[0].options == []
            assert entries[0].filter is None

    def test_object_entry_fields(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": [{
                    "path": "tests/Feature",
                    "name": "Features",
                    "namespace": "Acme\\Feature\\",
                    "options": ["--testdox"],
                    "filter": "Checkout",
                }]}),
                ["tests/Feature"],
            )
            entry = analyze_package(str(pkg)).test_entries[0]
            assert entry.name == "Features"
            assert entry.namespace == "Acme\\Feature"
            assert entry.options == ["--testdox"]
            assert entry.filter == "Checkout"

    def test_missing_path_dropped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": ["tests/Unit", "tests/Missing"]}),
                ["tests/Unit"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert [e.path for e in entries] == ["tests/Unit"]

    def test_only_entry_missing_and_no_autoload_excluded(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": ["tests/Missing"]}),
                ["tests/Unit"],
            )
            assert analyze_package(str(pkg)) is None

    def test_declaration_order_preserved(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": ["tests/Zeta", "tests/Alpha"]}),
                ["tests/Alpha", "tests/Zeta"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert [e.name for e in entries] == ["Zeta", "Alpha"]

    def test_invalid_items_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": [42, None, "tests"]}),
                ["tests"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert [e.path for e in entries] == ["tests"]

    def test_namespace_from_autoload_table(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": ["tests/Unit/"]}, **{
                    "autoload-dev": {"psr-4": {"Acme\\Unit\\": "tests/Unit"}},
                }),
                ["tests/Unit"],
            )
            entry = analyze_package(str(pkg)).test_entries[0]
            assert entry.namespace == "Acme\\Unit"
            assert entry.name == "Unit"

    def test_own_namespace_overrides_table(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({"tests": [{"path": "tests", "namespace": "Own\\"}]}, **{
                    "autoload-dev": {"psr-4": {"Table\\": "tests"}},
                }),
                ["tests"],
            )
            entry = analyze_package(str(pkg)).test_entries[0]
            assert entry.namespace == "Own"


# ---------------------------------------------------------------------------
# Auto-discovery
# ---------------------------------------------------------------------------


class TestAutoDiscovery:
    def test_sub_suites(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({}),
                ["tests/Feature", "tests/Unit"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert [(e.name, e.path) for e in entries] == [
                ("Unit", "tests/Unit"),
                ("Feature", "tests/Feature"),
            ]

    def test_single_test_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(Path(tmpdir) / "pkg", _composer({}), ["tests"])
            entries = analyze_package(str(pkg)).test_entries
            assert [(e.name, e.path) for e in entries] == [("Tests", "tests")]

    def test_fixtures_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({}),
                ["tests/Unit", "tests/Fixtures"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert [e.name for e in entries] == ["Unit"]

    def test_only_ignored_subdirs_falls_back_to_test_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({}),
                ["tests/stubs", "tests/__snapshots__", "tests/DATA"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert [(e.name, e.path) for e in entries] == [("Tests", "tests")]

    def test_custom_subdirs_after_conventional(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({}),
                ["tests/Browser", "tests/Api", "tests/Unit"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert [e.name for e in entries] == ["Unit", "Api", "Browser"]

    def test_test_dir_candidate_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg", _composer({}), ["Tests", "test"],
            )
            entries = analyze_package(str(pkg)).test_entries
            assert entries[0].path == "test"

    def test_namespace_labels_auto_discovered_path(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg",
                _composer({}, **{
                    "autoload-dev": {"psr-4": {"Acme\\Tests\\": "tests/"}},
                }),
                ["tests"],
            )
            entry = analyze_package(str(pkg)).test_entries[0]
            assert entry.namespace == "Acme\\Tests"
            assert entry.name == "Acme\\Tests"

    def test_custom_candidates(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pkg = _make_package(
                Path(tmpdir) / "pkg", _composer({}), ["spec/Unit"],
            )
            analyzer = PackageAnalyzer(test_dirs=["spec"])
            entries = analyzer.analyze(str(pkg)).test_entries
            assert [e.path for e in entries] == ["spec/Unit"]


class TestFindHelpers:
    def test_find_test_directory_none(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            assert find_test_directory(tmpdir) is None

    def test_find_test_directory_custom(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "checks").mkdir()
            assert find_test_directory(tmpdir, ["specs", "checks"]) == "checks"

    def test_subdirectories_skip_hidden(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / ".cache").mkdir()
            (Path(tmpdir) / "Unit").mkdir()
            (Path(tmpdir) / "notes.txt").write_text("x")
            assert find_test_subdirectories(tmpdir) == ["Unit"]
