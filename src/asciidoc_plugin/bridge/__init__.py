"""Dynamic loading and invocation of toolkit objects."""

from .factory import (
    BridgeHandle,
    ObjectFactory,
    adapt,
    get_attribute,
    invoke,
    marshal,
    open_handle,
    set_attribute,
    set_item,
)
from .runtime import RuntimeState

__all__ = [
    "BridgeHandle",
    "ObjectFactory",
    "RuntimeState",
    "adapt",
    "get_attribute",
    "invoke",
    "marshal",
    "open_handle",
    "set_attribute",
    "set_item",
]
