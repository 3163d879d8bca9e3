"""Package test discovery: analyzer, scanner, namespace resolution."""

from package_tester.discovery.analyzer import PackageAnalyzer, analyze_package, find_test_directory
from package_tester.discovery.events import DiagnosticEvent
from package_tester.discovery.models import PackageDescriptor, Registry, TestEntry
from package_tester.discovery.scanner import DependencyScanner, scan_dependencies

__all__ = [
    "DependencyScanner",
    "DiagnosticEvent",
    "PackageAnalyzer",
    "PackageDescriptor",
    "Registry",
    "TestEntry",
    "analyze_package",
    "find_test_directory",
    "scan_dependencies",
]
