"""Root autoload-dev merging."""

from package_tester.merge.autoload import MergeResult, merge_autoload

__all__ = [
    "MergeResult",
    "merge_autoload",
]
