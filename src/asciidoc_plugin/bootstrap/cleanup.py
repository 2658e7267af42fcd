"""Best-effort removal of intermediate files when the interpreter exits."""

from __future__ import annotations

import atexit
import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

_pending: list[Path] = []
_lock = threading.Lock()
_registered = False


def schedule_deletion(path: Path) -> None:
    """Delete ``path`` at normal interpreter exit.

    Not guaranteed on abnormal termination (signals, ``os._exit``).
    """
    global _registered
    with _lock:
        if path not in _pending:
            _pending.append(path)
        if not _registered:
            atexit.register(run_pending_deletions)
            _registered = True


def pending_deletions() -> list[Path]:
    """Return paths currently scheduled for deletion."""
    with _lock:
        return list(_pending)


def run_pending_deletions() -> None:
    """Remove every scheduled file, logging failures."""
    with _lock:
        paths = list(_pending)
        _pending.clear()
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.debug("could not remove %s: %s", path, exc)
