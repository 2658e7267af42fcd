"""Discover, extract, and locate the toolkit archive bundled in the package."""

from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath, PureWindowsPath

from asciidoc_plugin.bootstrap.cleanup import schedule_deletion
from asciidoc_plugin.bootstrap.installation import ToolkitInstallation
from asciidoc_plugin.bootstrap.lock import extraction_lock
from asciidoc_plugin.errors import (
    DirectoryCreationError,
    DiscoveryError,
    ExtractionError,
)
from asciidoc_plugin.types import ARCHIVE_PREFIX, ARCHIVE_SUFFIX, LogSink, PathLike

logger = logging.getLogger(__name__)


def is_bundled_archive(name: str) -> bool:
    """Return ``True`` when a member name looks like the bundled toolkit."""
    return name.startswith(ARCHIVE_PREFIX) and name.endswith(ARCHIVE_SUFFIX)


def find_bundled_entry(package: zipfile.ZipFile) -> zipfile.ZipInfo | None:
    """Return the first bundled toolkit member in archive order."""
    for info in package.infolist():
        if is_bundled_archive(info.filename):
            return info
    return None


def installation_name(entry_name: str) -> str:
    """Strip the archive extension from a bundled member name."""
    return entry_name[: -len(ARCHIVE_SUFFIX)]


def create_dir(directory: Path, *, log: LogSink = logger) -> None:
    """Create ``directory`` and its parents.

    Raises
    ------
    DirectoryCreationError
        If the filesystem refuses to create the directory.
    """
    if directory.is_dir():
        return
    if log.isEnabledFor(logging.DEBUG):
        log.debug("creating dir %s", directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(f"Can not create dir {directory}: {exc}") from exc


def member_target(output_dir: Path, name: str) -> Path:
    """Resolve a member name under ``output_dir``.

    Raises
    ------
    ExtractionError
        If the member is absolute or escapes ``output_dir``.
    """
    member = PurePosixPath(name.replace("\\", "/"))
    if member.is_absolute() or ".." in member.parts or PureWindowsPath(name).drive:
        raise ExtractionError(f"Refusing to extract unsafe member '{name}'")
    return output_dir.joinpath(*member.parts)


def extract_entry(
    archive: zipfile.ZipFile,
    info: zipfile.ZipInfo,
    output_dir: Path,
    *,
    log: LogSink = logger,
) -> Path:
    """Extract one member of ``archive`` into ``output_dir``.

    Directory members become directories; file members are streamed to disk,
    creating parent directories on demand.

    Returns
    -------
    Path
        Extracted path.

    Raises
    ------
    DirectoryCreationError
        If a required directory could not be created.
    ExtractionError
        If the member could not be read or written.
    """
    target = member_target(output_dir, info.filename)
    if info.is_dir():
        create_dir(target, log=log)
        return target

    create_dir(target.parent, log=log)
    if log.isEnabledFor(logging.DEBUG):
        log.debug("extracting %s", info.filename)
    try:
        with archive.open(info) as source, target.open("wb") as sink:
            shutil.copyfileobj(source, sink)
    except (OSError, KeyError, zipfile.BadZipFile) as exc:
        raise ExtractionError(f"Cannot extract '{info.filename}': {exc}") from exc
    return target


def extract_archive(
    archive_path: Path,
    output_dir: Path,
    *,
    log: LogSink = logger,
) -> bool:
    """Extract every member of ``archive_path`` into ``output_dir``.

    Read and write failures are logged and reported through the return value.
    Directory creation failures propagate.

    Returns
    -------
    bool
        ``True`` when every member was extracted.

    Raises
    ------
    DirectoryCreationError
        If a required directory could not be created.
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                extract_entry(archive, info, output_dir, log=log)
    except (OSError, zipfile.BadZipFile, ExtractionError) as exc:
        log.error("Error while extracting file %s: %s", archive_path, exc, exc_info=True)
        return False
    return True


class ArchiveBootstrap:
    """Resolve the bundled toolkit home, extracting it on first use.

    Parameters
    ----------
    package_location : PathLike
        Zip container the plugin is distributed in.
    configured_home : PathLike | None, default=None
        Explicitly configured toolkit home. Used as-is when it exists and as
        the fallback when discovery fails.
    log : LogSink | None, default=None
        Logging sink; defaults to this module's logger.
    lock_timeout : float, default=60.0
        Seconds to wait for a concurrent extractor.
    """

    def __init__(
        self,
        package_location: PathLike,
        configured_home: PathLike | None = None,
        *,
        log: LogSink | None = None,
        lock_timeout: float = 60.0,
    ) -> None:
        self.package_location = Path(package_location).resolve()
        self.installation = (
            ToolkitInstallation(Path(configured_home).resolve())
            if configured_home is not None
            else None
        )
        self._log = log or logger
        self._lock_timeout = lock_timeout

    def resolve_installation(self) -> ToolkitInstallation | None:
        """Return the toolkit installation, extracting it when missing.

        Returns
        -------
        ToolkitInstallation | None
            Resolved installation, or the configured one (possibly ``None``)
            when discovery failed. Callers must check for ``None``.

        Raises
        ------
        DirectoryCreationError
            If extraction could not create a required directory.
        """
        log = self._log
        if log.isEnabledFor(logging.DEBUG):
            log.debug("source package: %s", self.package_location)
        if self.installation is not None and self.installation.exists:
            return self.installation

        try:
            resolved = self._discover_and_extract()
        except DiscoveryError as exc:
            log.error("%s", exc)
            return self.installation
        except ExtractionError as exc:
            log.error("%s", exc, exc_info=True)
            return self.installation
        except (OSError, zipfile.BadZipFile) as exc:
            log.error(
                "Cannot read package %s: %s", self.package_location, exc, exc_info=True
            )
            return self.installation

        self.installation = resolved
        if log.isEnabledFor(logging.INFO):
            log.info("toolkit home: %s", resolved.home)
        return resolved

    def _discover_and_extract(self) -> ToolkitInstallation:
        log = self._log
        output_dir = self.package_location.parent
        with zipfile.ZipFile(self.package_location) as package:
            entry = find_bundled_entry(package)
            if entry is None:
                raise DiscoveryError(
                    f"No {ARCHIVE_PREFIX}*{ARCHIVE_SUFFIX} entry found in "
                    f"{self.package_location}"
                )
            if log.isEnabledFor(logging.INFO):
                log.info("found toolkit archive %s", entry.filename)

            installation = ToolkitInstallation(
                output_dir / installation_name(entry.filename)
            )
            if installation.exists:
                return installation

            with extraction_lock(installation.home, timeout=self._lock_timeout):
                if installation.exists:
                    log.debug("toolkit extracted concurrently into %s", installation.home)
                    return installation
                nested = extract_entry(package, entry, output_dir, log=log)
                try:
                    extract_archive(nested, output_dir, log=log)
                finally:
                    schedule_deletion(nested)

        if not installation.exists:
            raise ExtractionError(
                f"Bundled archive {entry.filename} did not produce {installation.home}"
            )
        return installation


def resolve_installation(
    package_location: PathLike,
    configured_home: PathLike | None = None,
    *,
    log: LogSink | None = None,
    lock_timeout: float = 60.0,
) -> ToolkitInstallation | None:
    """Resolve the toolkit installation for one package container.

    See :class:`ArchiveBootstrap` for parameters and failure semantics.
    """
    bootstrap = ArchiveBootstrap(
        package_location,
        configured_home,
        log=log,
        lock_timeout=lock_timeout,
    )
    return bootstrap.resolve_installation()
