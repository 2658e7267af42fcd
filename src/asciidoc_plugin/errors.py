"""Exception hierarchy for toolkit bootstrap, bridge, and conversion failures.

Errors fall into two tiers:

- fail-soft kinds (``DiscoveryError``, ``ExtractionError``,
  ``AuxiliaryCopyError``) are logged where they happen and never reach the
  host;
- fatal kinds (everything else) propagate to the caller.
"""

from __future__ import annotations


class AsciiDocPluginError(Exception):
    """Base error for the plugin.

    Parameters
    ----------
    message : str
        Human-readable error message.
    exit_code : int, default=1
        Process exit code the CLI uses when this error escapes a command.
    """

    exit_code: int = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class DiscoveryError(AsciiDocPluginError):
    """Package container unreadable or no bundled toolkit archive found."""


class ExtractionError(AsciiDocPluginError):
    """Bundled archive member could not be read or written."""


class DirectoryCreationError(AsciiDocPluginError):
    """A directory required by extraction could not be created."""

    exit_code = 3


class AuxiliaryCopyError(AsciiDocPluginError):
    """Toolkit images could not be copied next to the rendered output."""


class BridgeError(AsciiDocPluginError):
    """Base error for dynamic module loading and invocation."""


class ForeignResolutionError(BridgeError):
    """Module import or attribute lookup failed."""


class ForeignInvocationError(BridgeError):
    """A bridged call raised inside the toolkit."""


class ForeignConversionError(BridgeError):
    """A bridged result does not satisfy the requested capability type."""


class ConfigurationError(AsciiDocPluginError):
    """Conversion could not be configured."""

    exit_code = 2


class ExecutionError(AsciiDocPluginError):
    """The toolkit failed while converting the source document."""


class OrchestratorStateError(AsciiDocPluginError):
    """Conversion step called out of order."""


__all__ = [
    "AsciiDocPluginError",
    "AuxiliaryCopyError",
    "BridgeError",
    "ConfigurationError",
    "DirectoryCreationError",
    "DiscoveryError",
    "ExecutionError",
    "ExtractionError",
    "ForeignConversionError",
    "ForeignInvocationError",
    "ForeignResolutionError",
    "OrchestratorStateError",
]
