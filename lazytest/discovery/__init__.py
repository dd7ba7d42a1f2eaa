"""Package discovery: tree walking, package location and exclusion filtering."""

from .packages import ALL_PACKAGES, filter_packages, locate_packages, package_directory
from .walker import iter_subdirectories, walk_matching_directories

__all__ = [
    "ALL_PACKAGES",
    "filter_packages",
    "iter_subdirectories",
    "locate_packages",
    "package_directory",
    "walk_matching_directories",
]
