"""Shared type aliases and protocols for bootstrap and bridge modules."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

type PathLike = str | Path
type OptionTokens = tuple[str, ...]
type AttributeMap = Mapping[str, str]

# Entry point expected inside an extracted toolkit home.
TOOLKIT_MODULE = "asciidocapi"
TOOLKIT_CLASS = "AsciiDocAPI"

# Bundled archive discovery pattern.
ARCHIVE_PREFIX = "asciidoc"
ARCHIVE_SUFFIX = ".zip"


class LogSink(Protocol):
    """Three-level logging sink with level queries.

    ``logging.Logger`` and ``logging.LoggerAdapter`` satisfy this protocol.
    """

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def isEnabledFor(self, level: int) -> bool: ...  # noqa: N802


class AppendableOptions(Protocol):
    """Toolkit options collection accepting token pairs."""

    def append(self, name: str, value: str | None = None) -> None: ...


@runtime_checkable
class ToolkitAPI(Protocol):
    """Capability expected from the toolkit entry class instance."""

    options: AppendableOptions
    attributes: MutableMapping[str, str]

    def execute(self, infile: str, *args: Any, **kwargs: Any) -> Any: ...
