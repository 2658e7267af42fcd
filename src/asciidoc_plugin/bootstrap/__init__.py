"""Locate and extract the toolkit archive bundled with this package."""

from .archive import ArchiveBootstrap, resolve_installation
from .installation import ToolkitInstallation, current_package_location

__all__ = [
    "ArchiveBootstrap",
    "ToolkitInstallation",
    "current_package_location",
    "resolve_installation",
]
