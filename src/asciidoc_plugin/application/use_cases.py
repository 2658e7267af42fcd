"""Application use-cases wiring bootstrap, bridge, and orchestrator."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from pydantic import ValidationError

from asciidoc_plugin.application.results import ConversionResult
from asciidoc_plugin.bootstrap import (
    ArchiveBootstrap,
    ToolkitInstallation,
    current_package_location,
)
from asciidoc_plugin.bridge import RuntimeState
from asciidoc_plugin.errors import ConfigurationError
from asciidoc_plugin.orchestrator import AsciiDocConversion, ConversionRequest
from asciidoc_plugin.schemas import BootstrapConfig, ConversionRequestConfig
from asciidoc_plugin.types import LogSink


def build_request(
    *,
    source_path: Path,
    output_path: Path | None = None,
    output_dir: Path | None = None,
    backend: str | None = "html5",
    options: Iterable[str] | None = None,
    attributes: Mapping[str, str] | None = None,
    no_header_footer: bool = False,
    lang: str | None = "en",
    source_dir: Path | None = None,
) -> ConversionRequest:
    """Validate host parameters into a :class:`ConversionRequest`."""
    try:
        config = ConversionRequestConfig(
            source_path=source_path,
            source_dir=source_dir,
            output_path=output_path,
            output_dir=output_dir,
            backend=backend,
            options=list(options or []),
            attributes=dict(attributes or {}),
            no_header_footer=no_header_footer,
            lang=lang,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid conversion parameters: {exc}") from exc

    return ConversionRequest(
        source_path=config.source_path,
        output_path=config.output_path,
        output_dir=config.output_dir,
        backend=config.backend,
        options=tuple(config.options),
        attributes=dict(config.attributes),
        no_header_footer=config.no_header_footer,
        lang=config.lang,
        source_dir=config.source_dir,
    )


def bootstrap_toolkit(
    *,
    package_location: Path | None = None,
    configured_home: Path | None = None,
    lock_timeout: float = 60.0,
    log: LogSink | None = None,
) -> ToolkitInstallation | None:
    """Use-case: resolve (and extract if needed) the bundled toolkit.

    ``package_location`` defaults to the container this package was imported
    from.
    """
    try:
        config = BootstrapConfig(
            package_location=package_location,
            configured_home=configured_home,
            lock_timeout=lock_timeout,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid bootstrap parameters: {exc}") from exc

    bootstrap = ArchiveBootstrap(
        config.package_location or current_package_location(),
        config.configured_home,
        log=log,
        lock_timeout=config.lock_timeout,
    )
    return bootstrap.resolve_installation()


def convert_document(
    request: ConversionRequest,
    *,
    package_location: Path | None = None,
    toolkit_home: Path | None = None,
    state: RuntimeState | None = None,
    log: LogSink | None = None,
) -> ConversionResult:
    """Use-case: bootstrap the toolkit and run one conversion.

    Raises
    ------
    ConfigurationError
        If no toolkit installation could be resolved or configured.
    ExecutionError
        If the toolkit fails to convert the document.
    DirectoryCreationError
        If extraction could not create a required directory.
    """
    installation = bootstrap_toolkit(
        package_location=package_location,
        configured_home=toolkit_home,
        log=log,
    )
    if installation is None or not installation.exists:
        raise ConfigurationError(
            "No toolkit installation available. Bundle an asciidoc*.zip archive "
            "or pass an existing toolkit home."
        )

    conversion = AsciiDocConversion(request, installation, state=state, log=log)
    conversion.configure()
    source = conversion.execute()
    return ConversionResult(
        source_path=source,
        toolkit_home=installation.home,
        output_path=request.output_path.resolve() if request.output_path else None,
        output_dir=conversion.output_dir,
        backend=request.backend,
    )
