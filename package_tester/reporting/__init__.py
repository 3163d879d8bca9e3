"""Discovery reporting: JSON and YAML report generation."""

from package_tester.reporting.reporter import DiscoveryReporter

__all__ = [
    "DiscoveryReporter",
]
