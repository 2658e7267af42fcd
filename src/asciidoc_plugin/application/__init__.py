"""Application-layer use-cases and result objects."""

from __future__ import annotations

from pathlib import Path

from asciidoc_plugin.application.results import ConversionResult
from asciidoc_plugin.orchestrator import ConversionRequest


def convert_document(
    request: ConversionRequest,
    *,
    package_location: Path | None = None,
    toolkit_home: Path | None = None,
) -> ConversionResult:
    """Convert one document via lazy use-case import."""
    from asciidoc_plugin.application.use_cases import convert_document as _impl

    return _impl(
        request,
        package_location=package_location,
        toolkit_home=toolkit_home,
    )


__all__ = [
    "ConversionRequest",
    "ConversionResult",
    "convert_document",
]
