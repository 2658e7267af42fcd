#!/usr/bin/env python3
"""
asciidoc_plugin.cli.cli

Typer-based CLI that stands in for the host build goal: bootstrap the bundled
toolkit and convert one document with it.

Examples
--------
Install core + CLI:

    uv pip install -e ".[cli]"

Convert a document next to an explicit toolkit home:

    asciidoc-plugin convert docs/index.txt --out-file site/index.html \
        --toolkit-home build/asciidoc-8.6.9
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

import typer

from asciidoc_plugin.errors import AsciiDocPluginError

app = typer.Typer(
    name="asciidoc-plugin",
    help="Convert AsciiDoc documents with the toolkit bundled in this package.",
    no_args_is_help=True,
)

TOOLKIT_HOME_HELP = "Existing toolkit home; skips discovery when it exists."
PACKAGE_HELP = "Package archive holding the bundled asciidoc*.zip."


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Route plugin logging to stderr at the requested level."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("asciidoc_plugin").setLevel(level)


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised during conversion.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            err=True,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _parse_attributes(attribute_items: list[str] | None) -> dict[str, str]:
    """Parse repeated NAME=VALUE attribute entries."""
    parsed: dict[str, str] = {}
    for item in attribute_items or []:
        if "=" not in item:
            raise typer.BadParameter(
                f"Invalid attribute entry '{item}'. Use NAME=VALUE format."
            )
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Attribute name cannot be empty.")
        parsed[key] = value
    return parsed


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress."),
    debug: bool = typer.Option(
        False, "--debug", help="Log debug details and show full tracebacks on error."
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    verbose : bool, default=False
        Whether to log info-level progress.
    debug : bool, default=False
        Whether to enable debug logging and error output.
    """
    _configure_logging(verbose, debug)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    source_path: Path = typer.Argument(..., help="AsciiDoc source document."),
    source_dir: Path | None = typer.Option(
        None,
        "--source-dir",
        envvar="ASCIIDOC_SRCDIR",
        help="Base directory for a relative source path.",
    ),
    out_file: Path | None = typer.Option(
        None, "--out-file", "-o", envvar="ASCIIDOC_OUTFILE", help="Output file."
    ),
    out_dir: Path | None = typer.Option(
        None, "--out-dir", envvar="ASCIIDOC_OUTDIR", help="Output directory."
    ),
    backend: str = typer.Option(
        "html5", "--backend", "-b", envvar="ASCIIDOC_BACKEND", help="Toolkit backend."
    ),
    lang: str = typer.Option(
        "en", "--lang", envvar="ASCIIDOC_LANG", help="Document language code."
    ),
    no_header_footer: bool = typer.Option(
        False,
        "--no-header-footer",
        "-s",
        envvar="ASCIIDOC_NO_HEADER_FOOTER",
        help="Suppress document header and footer.",
    ),
    attribute: list[str] | None = typer.Option(
        None, "--attribute", "-a", help="Document attribute NAME=VALUE (repeatable)."
    ),
    option: list[str] | None = typer.Option(
        None, "--option", help="Extra toolkit option, e.g. '--section-numbers'."
    ),
    toolkit_home: Path | None = typer.Option(
        None, "--toolkit-home", envvar="ASCIIDOC_HOME", help=TOOLKIT_HOME_HELP
    ),
    package: Path | None = typer.Option(
        None, "--package", envvar="ASCIIDOC_PACKAGE", help=PACKAGE_HELP
    ),
) -> None:
    """Convert one AsciiDoc document.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    source_path : Path
        Source document path.
    out_file : Path | None
        Output file; its parent becomes the output directory when
        ``--out-dir`` is omitted.
    backend : str, default="html5"
        Toolkit backend.
    lang : str, default="en"
        Language code stored in the ``lang`` attribute.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    attributes = _parse_attributes(attribute)

    try:
        from asciidoc_plugin.application.use_cases import (
            build_request,
            convert_document,
        )

        request = build_request(
            source_path=source_path,
            source_dir=source_dir,
            output_path=out_file,
            output_dir=out_dir,
            backend=backend,
            options=option,
            attributes=attributes,
            no_header_footer=no_header_footer,
            lang=lang,
        )
        result = convert_document(
            request,
            package_location=package,
            toolkit_home=toolkit_home,
        )
        typer.echo(f"✓ Converted: {result.source_path}")
        if result.output_path is not None:
            typer.echo(f"  Output: {result.output_path}")
    except AsciiDocPluginError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_conversion_error(exc, debug))


@app.command("bootstrap")
def bootstrap_cmd(
    ctx: typer.Context,
    toolkit_home: Path | None = typer.Option(
        None, "--toolkit-home", envvar="ASCIIDOC_HOME", help=TOOLKIT_HOME_HELP
    ),
    package: Path | None = typer.Option(
        None, "--package", envvar="ASCIIDOC_PACKAGE", help=PACKAGE_HELP
    ),
) -> None:
    """Extract the bundled toolkit (once) and print its home directory."""
    debug: bool = bool(ctx.obj.get("debug", False))
    try:
        from asciidoc_plugin.application.use_cases import bootstrap_toolkit

        installation = bootstrap_toolkit(
            package_location=package,
            configured_home=toolkit_home,
        )
    except AsciiDocPluginError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if installation is None:
        typer.echo("✗ No toolkit installation could be resolved.", err=True)
        raise typer.Exit(code=1)
    typer.echo(str(installation.home))


@app.command("doctor")
def doctor_cmd() -> None:
    """Print runtime versions and the location bootstrap would scan."""
    import importlib.metadata as metadata

    from asciidoc_plugin.bootstrap import current_package_location

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ["asciidoc-build-plugin", "pydantic", "typer"]:
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    try:
        typer.echo(f"package: {current_package_location()}")
    except Exception:
        typer.echo("package: <unavailable>")


if __name__ == "__main__":
    app()
