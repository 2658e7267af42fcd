"""Configure and run one document conversion through the bundled toolkit."""

from __future__ import annotations

import enum
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from asciidoc_plugin.bootstrap.installation import ToolkitInstallation
from asciidoc_plugin.bridge import ObjectFactory, RuntimeState, invoke, set_item
from asciidoc_plugin.errors import (
    AuxiliaryCopyError,
    BridgeError,
    ConfigurationError,
    ExecutionError,
    OrchestratorStateError,
)
from asciidoc_plugin.types import (
    TOOLKIT_CLASS,
    TOOLKIT_MODULE,
    AttributeMap,
    LogSink,
    OptionTokens,
    ToolkitAPI,
)

logger = logging.getLogger(__name__)

OUT_FILE_OPTION = "--out-file"
BACKEND_OPTION = "--backend"
NO_HEADER_FOOTER_OPTION = "--no-header-footer"


@dataclass(frozen=True)
class ConversionRequest:
    """One conversion as requested by the host.

    Parameters
    ----------
    source_path : Path
        Source document. Relative paths are resolved against ``source_dir``
        when given, otherwise against the working directory.
    output_path : Path | None, default=None
        Explicit output file.
    output_dir : Path | None, default=None
        Output directory; derived from ``output_path`` when omitted.
    backend : str | None, default="html5"
        Toolkit backend name.
    options : tuple[str, ...], default=()
        Extra toolkit options (``--name=value``, ``-x value`` or bare flags).
    attributes : Mapping[str, str], default={}
        Attribute overrides set on the toolkit before conversion.
    no_header_footer : bool, default=False
        Suppress document header and footer.
    lang : str | None, default="en"
        Language code stored as the ``lang`` attribute.
    source_dir : Path | None, default=None
        Base directory for a relative ``source_path``.
    """

    source_path: Path
    output_path: Path | None = None
    output_dir: Path | None = None
    backend: str | None = "html5"
    options: tuple[str, ...] = ()
    attributes: AttributeMap = field(default_factory=dict)
    no_header_footer: bool = False
    lang: str | None = "en"
    source_dir: Path | None = None

    def resolved_source(self) -> Path:
        """Return the absolute source document path."""
        source = self.source_path
        if not source.is_absolute() and self.source_dir is not None:
            source = self.source_dir / source
        return source.resolve()


class ConversionState(enum.Enum):
    """Lifecycle of a :class:`AsciiDocConversion`."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    EXECUTED = "executed"


def split_option(token: str) -> OptionTokens:
    """Split an option string into the tokens passed to ``options.append``.

    ``"-a toc"`` and ``"--attribute=toc"`` become two tokens; anything else is
    a single flag.
    """
    cleaned = token.strip()
    name, sep, value = cleaned.partition("=")
    if sep and cleaned.startswith("--") and " " not in name:
        return (name, value)
    name, sep, value = cleaned.partition(" ")
    if sep:
        return (name, value.strip())
    return (cleaned,)


class AsciiDocConversion:
    """Drive the toolkit through one conversion.

    ``UNCONFIGURED -> CONFIGURED -> EXECUTED``; a finished conversion cannot
    be reused.

    Parameters
    ----------
    request : ConversionRequest
        What to convert.
    installation : ToolkitInstallation
        Extracted toolkit home.
    state : RuntimeState | None, default=None
        Import state for the toolkit. A fresh one is created per conversion
        when omitted; never share one between concurrent conversions.
    log : LogSink | None, default=None
        Logging sink; defaults to this module's logger.
    """

    def __init__(
        self,
        request: ConversionRequest,
        installation: ToolkitInstallation,
        *,
        state: RuntimeState | None = None,
        log: LogSink | None = None,
    ) -> None:
        self.request = request
        self.installation = installation
        self.state = state if state is not None else RuntimeState()
        self.status = ConversionState.UNCONFIGURED
        self.toolkit: ToolkitAPI | None = None
        self.output_dir: Path | None = (
            request.output_dir.resolve() if request.output_dir is not None else None
        )
        self._log = log or logger

    def configure(self) -> ToolkitAPI:
        """Instantiate the toolkit and apply the request's settings.

        Returns
        -------
        ToolkitAPI
            Configured toolkit instance.

        Raises
        ------
        OrchestratorStateError
            If already configured or executed.
        ConfigurationError
            If the toolkit cannot be loaded or rejects a setting.
        """
        if self.status is not ConversionState.UNCONFIGURED:
            raise OrchestratorStateError(
                f"Cannot configure a conversion in state '{self.status.value}'."
            )
        home = self.installation.home
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug("toolkit home absolute path: %s", home)

        self.state.append_path(home)
        try:
            factory = ObjectFactory(
                ToolkitAPI, TOOLKIT_MODULE, TOOLKIT_CLASS, state=self.state
            )
            toolkit = factory.instantiate()
            self._apply(toolkit)
        except BridgeError as exc:
            raise ConfigurationError(
                f"Cannot configure toolkit from {home}: {exc}"
            ) from exc

        self.toolkit = toolkit
        self.status = ConversionState.CONFIGURED
        return toolkit

    def execute(self) -> Path:
        """Convert the source document.

        Configures the toolkit first when needed.

        Returns
        -------
        Path
            Absolute source path that was converted.

        Raises
        ------
        OrchestratorStateError
            If the conversion already ran.
        ExecutionError
            If the toolkit fails.
        """
        if self.status is ConversionState.EXECUTED:
            raise OrchestratorStateError("Conversion already executed.")
        if self.status is ConversionState.UNCONFIGURED:
            self.configure()

        source = self.request.resolved_source()
        if self._log.isEnabledFor(logging.INFO):
            self._log.info("converting %s", source)
        try:
            invoke(self.toolkit, "execute", source, state=self.state)
        except BridgeError as exc:
            raise ExecutionError(f"Conversion of {source} failed: {exc}") from exc
        finally:
            self.status = ConversionState.EXECUTED
        return source

    def _apply(self, toolkit: ToolkitAPI) -> None:
        request = self.request
        if request.output_path is not None:
            output_path = request.output_path.resolve()
            self._append_option(toolkit, OUT_FILE_OPTION, output_path)
            if self.output_dir is None:
                self.output_dir = output_path.parent

        if self.output_dir is not None:
            self._copy_images(self.output_dir)

        if request.backend:
            self._append_option(toolkit, BACKEND_OPTION, request.backend)

        if request.no_header_footer:
            self._append_option(toolkit, NO_HEADER_FOOTER_OPTION)

        for option in request.options:
            self._append_option(toolkit, *split_option(option))

        for name, value in request.attributes.items():
            set_item(toolkit, "attributes", name, value)

        if request.lang and "lang" not in request.attributes:
            set_item(toolkit, "attributes", "lang", request.lang)

    def _append_option(self, toolkit: ToolkitAPI, *tokens: object) -> None:
        invoke(toolkit, "options.append", *tokens, state=self.state)

    def _copy_images(self, output_dir: Path) -> None:
        source = self.installation.images_dir
        target = output_dir / "images"
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug("copying %s to %s", source, target)
        try:
            if not source.is_dir():
                raise AuxiliaryCopyError(f"Toolkit images directory {source} is missing")
            shutil.copytree(source, target, dirs_exist_ok=True)
        except (OSError, AuxiliaryCopyError) as exc:
            self._log.error("%s", exc, exc_info=True)
