"""Configuration and persisted state for discovery runs."""

from package_tester.lifecycle.cache import DiscoveryCache
from package_tester.lifecycle.config import DEFAULT_CONFIG, PackageTesterConfig

__all__ = [
    "DEFAULT_CONFIG",
    "DiscoveryCache",
    "PackageTesterConfig",
]
