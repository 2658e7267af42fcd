"""Generic factory for objects defined in dynamically loaded modules."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import PurePath
from types import ModuleType
from typing import Any, cast

from asciidoc_plugin.bridge.runtime import RuntimeState
from asciidoc_plugin.errors import (
    ForeignConversionError,
    ForeignInvocationError,
    ForeignResolutionError,
)

logger = logging.getLogger(__name__)


def marshal(value: object) -> object:
    """Convert a host value into the plain form toolkit code expects.

    Paths become strings; tuples, lists and mappings are converted
    element-wise. Everything else is passed through unchanged.
    """
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, tuple):
        return tuple(marshal(item) for item in value)
    if isinstance(value, list):
        return [marshal(item) for item in value]
    if isinstance(value, Mapping):
        return {marshal(key): marshal(item) for key, item in value.items()}
    return value


def adapt[T](value: object, capability: type[T]) -> T:
    """Return ``value`` typed as ``capability``.

    Raises
    ------
    ForeignConversionError
        If ``value`` does not satisfy ``capability``.
    """
    if capability is object:
        return cast(T, value)
    try:
        matches = isinstance(value, capability)
    except TypeError as exc:
        raise ForeignConversionError(
            f"Cannot check result against {capability!r}: {exc}"
        ) from exc
    if not matches:
        raise ForeignConversionError(
            f"{type(value).__name__} object does not provide "
            f"{getattr(capability, '__name__', capability)!r}."
        )
    return cast(T, value)


@dataclass(frozen=True)
class BridgeHandle:
    """Resolved module attribute."""

    module_name: str
    attribute_name: str
    module: ModuleType
    target: Callable[..., object]


def open_handle(
    state: RuntimeState,
    module_name: str,
    attribute_name: str,
) -> BridgeHandle:
    """Import ``module_name`` in ``state`` and resolve ``attribute_name``.

    Raises
    ------
    ForeignResolutionError
        If the module cannot be imported, the attribute is missing, or the
        attribute is not callable.
    """
    module = state.import_module(module_name)
    try:
        target = getattr(module, attribute_name)
    except AttributeError as exc:
        raise ForeignResolutionError(
            f"Module '{module_name}' has no attribute '{attribute_name}'."
        ) from exc
    if not callable(target):
        raise ForeignResolutionError(
            f"'{module_name}.{attribute_name}' is not callable."
        )
    logger.debug("module=%s, class=%s", module, target)
    return BridgeHandle(
        module_name=module_name,
        attribute_name=attribute_name,
        module=module,
        target=target,
    )


class ObjectFactory[T]:
    """Create objects from a class resolved in a dynamically loaded module.

    Parameters
    ----------
    capability : type[T]
        Type every created object must satisfy. ``runtime_checkable``
        protocols are accepted; ``object`` disables the check.
    module_name : str
        Module to import inside ``state``.
    attribute_name : str
        Class (or any callable) to resolve from the module.
    state : RuntimeState | None, default=None
        Import state to resolve the module in. A fresh one is created when
        omitted; factories given the same state share loaded modules.

    Raises
    ------
    ForeignResolutionError
        If the module or attribute cannot be resolved.
    """

    def __init__(
        self,
        capability: type[T],
        module_name: str,
        attribute_name: str,
        *,
        state: RuntimeState | None = None,
    ) -> None:
        self.capability = capability
        self.state = state if state is not None else RuntimeState()
        self.handle = open_handle(self.state, module_name, attribute_name)

    def instantiate(self, *args: object) -> T:
        """Call the resolved attribute with positional arguments.

        Raises
        ------
        ForeignInvocationError
            If the call raises.
        ForeignConversionError
            If the result does not satisfy the capability type.
        """
        return self._call([marshal(arg) for arg in args], {})

    def instantiate_with_keywords(
        self,
        args: Sequence[object],
        keywords: Sequence[str],
    ) -> T:
        """Call the resolved attribute with trailing keyword arguments.

        The last ``len(keywords)`` values of ``args`` are bound to
        ``keywords`` in order; the rest are passed positionally.

        Raises
        ------
        ForeignInvocationError
            If the argument lists do not line up or the call raises.
        ForeignConversionError
            If the result does not satisfy the capability type.
        """
        if len(keywords) > len(args):
            raise ForeignInvocationError(
                f"{len(keywords)} keywords given for {len(args)} arguments."
            )
        split = len(args) - len(keywords)
        positional = [marshal(arg) for arg in args[:split]]
        named = {
            keyword: marshal(value)
            for keyword, value in zip(keywords, args[split:], strict=True)
        }
        return self._call(positional, named)

    def _call(self, args: list[object], kwargs: dict[str, object]) -> T:
        handle = self.handle
        try:
            with self.state.activated():
                result = handle.target(*args, **kwargs)
        except Exception as exc:
            raise ForeignInvocationError(
                f"{handle.module_name}.{handle.attribute_name}() failed: {exc}"
            ) from exc
        return adapt(result, self.capability)


def get_attribute(obj: object, name: str) -> Any:
    """Read attribute ``name`` from a bridged object.

    Raises
    ------
    ForeignResolutionError
        If the attribute does not exist.
    """
    try:
        return getattr(obj, name)
    except AttributeError as exc:
        raise ForeignResolutionError(
            f"{type(obj).__name__} object has no attribute '{name}'."
        ) from exc


def set_attribute(obj: object, name: str, value: object) -> None:
    """Assign a marshalled value to attribute ``name``."""
    try:
        setattr(obj, name, marshal(value))
    except Exception as exc:
        raise ForeignInvocationError(
            f"Cannot set '{name}' on {type(obj).__name__}: {exc}"
        ) from exc


def set_item(obj: object, container: str, key: str, value: object) -> None:
    """Store a marshalled value under ``key`` of mapping attribute ``container``."""
    mapping = get_attribute(obj, container)
    try:
        mapping[marshal(key)] = marshal(value)
    except Exception as exc:
        raise ForeignInvocationError(
            f"Cannot set {container}[{key!r}] on {type(obj).__name__}: {exc}"
        ) from exc


def invoke(
    obj: object,
    name: str,
    *args: object,
    state: RuntimeState | None = None,
) -> Any:
    """Call method ``name`` of a bridged object with marshalled arguments.

    ``name`` may be dotted (``"options.append"``) to reach a method of a
    nested attribute. When ``state`` is given the call runs with it active,
    so imports made by the method resolve against the toolkit's modules.

    Raises
    ------
    ForeignResolutionError
        If the method does not exist.
    ForeignInvocationError
        If the call raises.
    """
    target: Any = obj
    for part in name.split("."):
        target = get_attribute(target, part)
    if not callable(target):
        raise ForeignResolutionError(f"'{name}' is not callable.")
    activation = state.activated() if state is not None else nullcontext()
    try:
        with activation:
            return target(*(marshal(arg) for arg in args))
    except Exception as exc:
        raise ForeignInvocationError(f"{name}() failed: {exc}") from exc
