"""Command-line entry point for package test discovery.

Provides discover, analyze, list, show-cache and clear subcommands. The
discover command scans the vendor tree, merges discovered test namespaces
into the root composer.json autoload-dev table and persists the discovery
summary for later runs.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from package_tester.discovery.analyzer import PackageAnalyzer
from package_tester.discovery.events import DiagnosticEvent
from package_tester.discovery.models import Registry
from package_tester.discovery.scanner import DependencyScanner
from package_tester.lifecycle.cache import DiscoveryCache
from package_tester.lifecycle.config import CONFIG_FILE_NAME, PackageTesterConfig
from package_tester.merge.autoload import merge_autoload
from package_tester.reporting.reporter import DiscoveryReporter

ROOT_METADATA_FILE = "composer.json"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project",
        type=Path,
        default=Path("."),
        help="Root project directory (default: current directory)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help=f"Path to the {CONFIG_FILE_NAME} JSON file "
             f"(default: <project>/{CONFIG_FILE_NAME})",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Discover package test suites and register their "
                    "namespaces in the root autoload-dev table"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    discover_parser = subparsers.add_parser(
        "discover",
        help="Scan the vendor tree and merge test namespaces into autoload-dev",
    )
    _add_common_arguments(discover_parser)
    discover_parser.add_argument(
        "--vendor-dir",
        type=Path,
        default=None,
        help="Dependency root (default: <project>/vendor)",
    )
    discover_parser.add_argument(
        "--write",
        action="store_true",
        default=False,
        help="Write the updated autoload-dev table back to composer.json",
    )
    discover_parser.add_argument(
        "--no-cache",
        action="store_true",
        default=False,
        help="Do not persist the discovery summary",
    )
    discover_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a discovery report (.json, or .yaml/.yml for YAML)",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze one package's extra.package-tester configuration",
    )
    _add_common_arguments(analyze_parser)
    analyze_parser.add_argument(
        "package",
        type=Path,
        help="Package directory to analyze",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List discovered packages and their test paths",
    )
    _add_common_arguments(list_parser)
    list_parser.add_argument(
        "--vendor-dir",
        type=Path,
        default=None,
        help="Dependency root (default: <project>/vendor)",
    )

    show_parser = subparsers.add_parser(
        "show-cache",
        help="Print the persisted discovery summary",
    )
    _add_common_arguments(show_parser)

    clear_parser = subparsers.add_parser(
        "clear",
        help="Remove the persisted discovery summary",
    )
    _add_common_arguments(clear_parser)

    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> PackageTesterConfig:
    if args.config_file is not None:
        return PackageTesterConfig(args.config_file)
    return PackageTesterConfig.for_project(args.project)


def _vendor_dir(args: argparse.Namespace, config: PackageTesterConfig) -> Path:
    if args.vendor_dir is not None:
        return args.vendor_dir
    return args.project / config.vendor_dir


def _scan(args: argparse.Namespace, config: PackageTesterConfig) -> Registry:
    scanner = DependencyScanner(
        str(_vendor_dir(args, config).absolute()),
        nested=config.nested,
        declaration_file=config.declaration_file,
    )
    return scanner.scan()


def _print_events(events: list[DiagnosticEvent], verbosity: int) -> None:
    for event in events:
        if event.verbosity > verbosity:
            continue
        if event.is_warning:
            print(f"  Warning: {event.message}", file=sys.stderr)
        else:
            print(f"  {event.message}")


def _read_root_metadata(path: Path) -> dict[str, Any] | None:
    """Load the root composer.json, printing an error on failure."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        print(f"Error: Root metadata file not found: {path}", file=sys.stderr)
        return None
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read {path}: {e}", file=sys.stderr)
        return None
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {path}: {e}", file=sys.stderr)
        return None

    if not isinstance(data, dict):
        print(f"Error: {path} does not contain a JSON object", file=sys.stderr)
        return None
    return data


def _object_section(parent: dict[str, Any], key: str) -> dict[str, Any] | None:
    """Return ``parent[key]`` as a dict, creating it when absent.

    An empty JSON array counts as an empty object, since composer writes
    empty maps as ``[]``. Any other non-object value gives None.
    """
    value = parent.get(key)
    if value is None or value == []:
        value = parent[key] = {}
    if not isinstance(value, dict):
        return None
    return value


def _root_psr4_table(
    composer: dict[str, Any], root_file: Path
) -> dict[str, Any] | None:
    """Return the root ``autoload-dev.psr-4`` table, creating it if absent."""
    autoload_dev = _object_section(composer, "autoload-dev")
    if autoload_dev is None:
        print(f"Error: autoload-dev in {root_file} is not an object", file=sys.stderr)
        return None
    psr4 = _object_section(autoload_dev, "psr-4")
    if psr4 is None:
        print(
            f"Error: autoload-dev.psr-4 in {root_file} is not an object",
            file=sys.stderr,
        )
        return None
    return psr4


def cmd_discover(args: argparse.Namespace) -> int:
    """Handle discover subcommand.

    Returns:
        Exit code (0 for success, 1 if the root metadata cannot be used).
    """
    config = _load_config(args)
    project = args.project.absolute()
    root_file = project / ROOT_METADATA_FILE

    composer = _read_root_metadata(root_file)
    if composer is None:
        return 1
    table = _root_psr4_table(composer, root_file)
    if table is None:
        return 1

    print("Package Tester: Discovering and registering test namespaces...")
    registry = _scan(args, config)
    _print_events(registry.events, args.verbose)

    if not registry:
        print("Package Tester: No packages with tests found.")
        return 0

    if not args.no_cache:
        cache = DiscoveryCache(project, config.cache_dir)
        if not cache.save(registry.summary()):
            print(
                f"Warning: could not write discovery cache {cache.path}",
                file=sys.stderr,
            )

    result = merge_autoload(registry, table, str(project))
    _print_events(result.events, args.verbose)

    if args.verbose:
        print(
            f"Package Tester: Injected {result.injected} namespace(s) "
            f"into autoload-dev."
        )

    if args.write:
        try:
            with open(root_file, "w", encoding="utf-8") as f:
                json.dump(composer, f, indent=4, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            print(f"Error: Cannot write {root_file}: {e}", file=sys.stderr)
            return 1

    if args.output is not None:
        reporter = DiscoveryReporter()
        reporter.set_project_dir(str(project))
        reporter.set_registry(registry)
        reporter.set_merge_result(result)
        reporter.write(args.output)

    print(f"Package Tester: Registered {len(registry)} package(s) test namespaces.")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle analyze subcommand.

    Prints the package descriptor as JSON, or a notice when the package
    does not opt into discovery.
    """
    config = _load_config(args)
    analyzer = PackageAnalyzer(**config.analyzer_options())
    package = analyzer.analyze(str(args.package.absolute()))

    if package is None:
        print(f"No test configuration found in {args.package}")
        return 0

    print(json.dumps(package.to_dict(), indent=2))
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Handle list subcommand.

    Displays discovered packages and their test paths in tabular format.
    """
    config = _load_config(args)
    registry = _scan(args, config)

    if not registry:
        print("No packages with tests found")
        return 0

    rows: list[tuple[str, str, str, str]] = []
    for package in registry:
        for entry in package.test_entries:
            rows.append((
                package.name, entry.name, entry.path, entry.namespace or "-",
            ))

    # Compute column widths
    widths = [
        max([len(row[i]) for row in rows] + [len(title)])
        for i, title in enumerate(("Package", "Suite", "Path", "Namespace"))
    ]

    header = (
        f"{'Package':<{widths[0]}}  {'Suite':<{widths[1]}}  "
        f"{'Path':<{widths[2]}}  Namespace"
    )
    print(header)
    print("-" * len(header))
    for name, suite, path, namespace in rows:
        print(
            f"{name:<{widths[0]}}  {suite:<{widths[1]}}  "
            f"{path:<{widths[2]}}  {namespace}"
        )

    print()
    print(f"Total: {len(registry)} package(s), {len(rows)} test path(s)")
    return 0


def cmd_show_cache(args: argparse.Namespace) -> int:
    """Handle show-cache subcommand."""
    config = _load_config(args)
    cache = DiscoveryCache(args.project.absolute(), config.cache_dir)
    print(json.dumps(cache.load(), indent=2))
    return 0


def cmd_clear(args: argparse.Namespace) -> int:
    """Handle clear subcommand."""
    config = _load_config(args)
    cache = DiscoveryCache(args.project.absolute(), config.cache_dir)
    if cache.clear():
        print(f"Removed {cache.path}")
    else:
        print("Nothing to clear")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 1

    if args.command == "discover":
        return cmd_discover(args)
    elif args.command == "analyze":
        return cmd_analyze(args)
    elif args.command == "list":
        return cmd_list(args)
    elif args.command == "show-cache":
        return cmd_show_cache(args)
    elif args.command == "clear":
        return cmd_clear(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
