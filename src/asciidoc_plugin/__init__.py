"""Top-level API for converting documents with the bundled AsciiDoc toolkit."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

__version__ = "0.1.0"


def convert_asciidoc(
    source_path: Path,
    output_path: Path | None = None,
    *,
    output_dir: Path | None = None,
    backend: str | None = "html5",
    options: Iterable[str] | None = None,
    attributes: Mapping[str, str] | None = None,
    no_header_footer: bool = False,
    lang: str | None = "en",
    source_dir: Path | None = None,
    toolkit_home: Path | None = None,
    package_location: Path | None = None,
) -> Path | None:
    """Convert an AsciiDoc source document.

    Parameters
    ----------
    source_path : Path
        Source document path.
    output_path : Path | None, default=None
        Output file. When omitted the toolkit picks a name next to the source
        (or inside ``output_dir``).
    output_dir : Path | None, default=None
        Output directory; toolkit images are copied into ``images`` there.
    backend : str | None, default="html5"
        Toolkit backend.
    options : Iterable[str] | None, optional
        Extra toolkit options.
    attributes : Mapping[str, str] | None, optional
        Attribute overrides.
    no_header_footer : bool, default=False
        Suppress document header and footer.
    lang : str | None, default="en"
        Document language code.
    source_dir : Path | None, optional
        Base directory for a relative ``source_path``.
    toolkit_home : Path | None, optional
        Existing toolkit home; skips discovery when it exists.
    package_location : Path | None, optional
        Package container holding the bundled toolkit archive. Defaults to the
        container this package was imported from.

    Returns
    -------
    Path | None
        Resolved output file, when one was requested.
    """
    from .application.use_cases import build_request, convert_document

    request = build_request(
        source_path=source_path,
        output_path=output_path,
        output_dir=output_dir,
        backend=backend,
        options=options,
        attributes=attributes,
        no_header_footer=no_header_footer,
        lang=lang,
        source_dir=source_dir,
    )
    result = convert_document(
        request,
        package_location=package_location,
        toolkit_home=toolkit_home,
    )
    return result.output_path


__all__ = ["__version__", "convert_asciidoc"]
