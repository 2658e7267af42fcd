"""Isolated import state for toolkit modules.

A :class:`RuntimeState` owns its own search path and module table. While a
state is active its search path is prepended to ``sys.path`` and its modules
are visible in ``sys.modules``, so toolkit code can import its sibling modules
and use relative imports. On deactivation every module loaded from the
state's search path moves back into the state's table, so two states never
share a toolkit module object.
"""

from __future__ import annotations

import importlib
import logging
import sys
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType

from asciidoc_plugin.errors import ForeignResolutionError
from asciidoc_plugin.types import PathLike

logger = logging.getLogger(__name__)

# sys.path and sys.modules are process-wide: one state is active at a time.
_activation_lock = threading.RLock()


class RuntimeState:
    """Search path plus private module table.

    Parameters
    ----------
    search_path : Iterable[PathLike], optional
        Directories searched before the host interpreter's ``sys.path``.

    Notes
    -----
    Modules already present in the host's ``sys.modules`` take precedence
    over same-named modules on the search path.
    """

    def __init__(self, search_path: Iterable[PathLike] = ()) -> None:
        self.path: list[str] = []
        self.modules: dict[str, ModuleType] = {}
        self._depth = 0
        for entry in search_path:
            self.append_path(entry)

    def append_path(self, entry: PathLike) -> None:
        """Append a directory to the search path (ignoring duplicates)."""
        resolved = str(Path(entry).resolve())
        if resolved not in self.path:
            self.path.append(resolved)

    @contextmanager
    def activated(self) -> Iterator[RuntimeState]:
        """Expose this state to the interpreter's import system.

        Reentrant for the same state. Imports of modules on the search path
        made while active, including imports from inside toolkit code, are
        recorded in :attr:`modules` and removed from ``sys.modules`` again
        on exit.
        """
        with _activation_lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            saved_path = list(sys.path)
            shadowed = {name: sys.modules.get(name) for name in self.modules}
            sys.path[:] = [*self.path, *saved_path]
            sys.modules.update(self.modules)
            before = set(sys.modules)
            importlib.invalidate_caches()
            self._depth = 1
            try:
                yield self
            finally:
                self._depth = 0
                self._collect(before)
                for name, previous in shadowed.items():
                    if previous is None:
                        sys.modules.pop(name, None)
                    else:
                        sys.modules[name] = previous
                sys.path[:] = saved_path

    def import_module(self, name: str) -> ModuleType:
        """Import ``name`` inside this state.

        Parameters
        ----------
        name : str
            Absolute (possibly dotted) module name.

        Returns
        -------
        ModuleType
            Loaded module, from the search path when found there, otherwise
            from the host interpreter.

        Raises
        ------
        ForeignResolutionError
            If the module cannot be found or raises while executing.
        """
        if not name or name.startswith("."):
            raise ForeignResolutionError(f"Invalid module name '{name}'.")
        cached = self.modules.get(name)
        if cached is not None:
            return cached
        with self.activated():
            try:
                module = importlib.import_module(name)
            except Exception as exc:
                raise ForeignResolutionError(
                    f"Unable to import module '{name}': {exc}"
                ) from exc
        if name in self.modules:
            logger.debug("loaded %s from %s", name, getattr(module, "__file__", None))
        return module

    def owns(self, module: ModuleType) -> bool:
        """Return ``True`` when ``module`` was loaded from the search path."""
        spec = getattr(module, "__spec__", None)
        if spec is None:
            return False
        locations = list(spec.submodule_search_locations or [])
        if spec.has_location and spec.origin:
            locations.append(spec.origin)
        roots = [Path(entry) for entry in self.path]
        for location in locations:
            resolved = Path(location).resolve()
            if any(resolved.is_relative_to(root) for root in roots):
                return True
        return False

    def _collect(self, before: set[str]) -> None:
        for name in [name for name in sys.modules if name not in before]:
            module = sys.modules[name]
            if self.owns(module):
                self.modules[name] = sys.modules.pop(name)
