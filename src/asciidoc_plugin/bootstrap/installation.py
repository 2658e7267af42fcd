"""Package container location and toolkit installation value objects."""

from __future__ import annotations

import importlib
import zipfile
from dataclasses import dataclass
from pathlib import Path

from asciidoc_plugin.types import TOOLKIT_MODULE


@dataclass(frozen=True)
class ToolkitInstallation:
    """Extracted toolkit directory on disk.

    Parameters
    ----------
    home : Path
        Absolute toolkit home directory.
    """

    home: Path

    @property
    def exists(self) -> bool:
        """Return ``True`` when the home directory is present on disk."""
        return self.home.is_dir()

    @property
    def images_dir(self) -> Path:
        """Return the toolkit's bundled images directory."""
        return self.home / "images"

    @property
    def entry_module_path(self) -> Path:
        """Return the expected path of the toolkit entry module."""
        return self.home / f"{TOOLKIT_MODULE}.py"


def current_package_location(module_name: str = "asciidoc_plugin") -> Path:
    """Return the archive this package was imported from.

    Parameters
    ----------
    module_name : str, default="asciidoc_plugin"
        Top-level module whose container should be located.

    Returns
    -------
    Path
        Absolute path of the zip container (zipapp, wheel or egg) when the
        module was imported from one, otherwise the package directory. A
        directory is not an archive, so bootstrap will report it as a
        discovery failure and fall back to a configured home.
    """
    module = importlib.import_module(module_name)
    spec = module.__spec__
    archive = getattr(spec.loader, "archive", None) if spec is not None else None
    if archive:
        return Path(archive).resolve()

    origin = Path(module.__file__ or ".").resolve()
    for parent in origin.parents:
        if parent.is_file() and zipfile.is_zipfile(parent):
            return parent
    return origin.parent
