"""Mutual exclusion around the check-then-extract step."""

from __future__ import annotations

import logging
import os
import shutil
import socket
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from asciidoc_plugin.errors import DirectoryCreationError, ExtractionError

logger = logging.getLogger(__name__)

OWNER_FILE = "owner"

_thread_lock = threading.Lock()


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except OSError:
        return True
    return True


def _write_owner(lock_dir: Path) -> None:
    try:
        (lock_dir / OWNER_FILE).write_text(
            f"{socket.gethostname()} {os.getpid()}\n", encoding="utf-8"
        )
    except OSError as exc:
        logger.debug("could not record owner of %s: %s", lock_dir, exc)


def is_stale(lock_dir: Path, stale_after: float) -> bool:
    """Return ``True`` when the holder of ``lock_dir`` is gone.

    A lock owned by a dead process on this host is stale. A lock whose owner
    cannot be checked (missing record, other host) is stale once it is older
    than ``stale_after`` seconds.
    """
    try:
        record = (lock_dir / OWNER_FILE).read_text(encoding="utf-8")
        host, _, pid = record.partition(" ")
        owner = int(pid)
    except (OSError, ValueError):
        owner = None
        host = ""
    # Signal 0 is CTRL_C_EVENT on Windows; only the lock age counts there.
    if owner is not None and host == socket.gethostname() and os.name != "nt":
        return owner != os.getpid() and not _pid_alive(owner)

    try:
        age = time.time() - lock_dir.stat().st_mtime
    except FileNotFoundError:
        return False
    return age > stale_after


def break_lock(lock_dir: Path) -> bool:
    """Remove a stale lock directory left behind by a dead extractor.

    Returns ``True`` when the lock is gone, whoever removed it.
    """
    graveyard = lock_dir.with_name(
        f"{lock_dir.name}.stale-{os.getpid()}-{time.monotonic_ns()}"
    )
    try:
        os.rename(lock_dir, graveyard)
    except FileNotFoundError:
        return True
    except OSError as exc:
        logger.debug("could not break extraction lock %s: %s", lock_dir, exc)
        return False
    logger.warning("broke stale extraction lock %s", lock_dir)
    shutil.rmtree(graveyard, ignore_errors=True)
    return True


@contextmanager
def extraction_lock(
    target: Path,
    *,
    timeout: float = 60.0,
    poll_interval: float = 0.05,
    stale_after: float | None = None,
) -> Iterator[None]:
    """Hold an exclusive lock for extracting into ``target``.

    The lock is a sibling ``<target>.lock`` directory: ``os.mkdir`` is atomic
    on local filesystems, so concurrent processes on the same host serialize
    on it. Threads of one process serialize on a module-level lock first.
    The directory records its owner so a lock left by a killed process is
    broken instead of waited on.

    Parameters
    ----------
    target : Path
        Directory about to be created by extraction.
    timeout : float, default=60.0
        Seconds to wait for another extractor before giving up.
    poll_interval : float, default=0.05
        Seconds between lock attempts.
    stale_after : float | None, default=None
        Age in seconds after which a lock without a checkable owner is
        broken. Defaults to ``timeout``.

    Raises
    ------
    DirectoryCreationError
        If the filesystem refuses to create the lock directory.
    ExtractionError
        If the lock could not be acquired in time.
    """
    lock_dir = target.with_name(f"{target.name}.lock")
    stale_after = timeout if stale_after is None else stale_after
    deadline = time.monotonic() + timeout
    if not _thread_lock.acquire(timeout=timeout):
        raise ExtractionError(f"Timed out waiting for extraction lock {lock_dir}")
    try:
        while True:
            try:
                os.mkdir(lock_dir)
                break
            except FileExistsError:
                if is_stale(lock_dir, stale_after) and break_lock(lock_dir):
                    continue
                if time.monotonic() >= deadline:
                    raise ExtractionError(
                        f"Timed out waiting for extraction lock {lock_dir}"
                    ) from None
                time.sleep(poll_interval)
            except OSError as exc:
                raise DirectoryCreationError(
                    f"Can not create dir {lock_dir}: {exc}"
                ) from exc
        _write_owner(lock_dir)
        logger.debug("acquired extraction lock %s", lock_dir)
        try:
            yield
        finally:
            try:
                (lock_dir / OWNER_FILE).unlink(missing_ok=True)
                os.rmdir(lock_dir)
            except OSError as exc:
                logger.debug("could not release extraction lock %s: %s", lock_dir, exc)
    finally:
        _thread_lock.release()
