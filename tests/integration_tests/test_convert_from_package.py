"""Integration tests converting documents with a toolkit bundled in a package."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

import asciidoc_plugin
from asciidoc_plugin.cli import cli as cli_module

runner = CliRunner()


def test_convert_asciidoc_extracts_and_converts(
    make_package: Callable[..., Path], tmp_path: Path
) -> None:
    """Bootstrap the bundled toolkit on first use and render the document."""
    package = make_package()
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "guide.txt").write_text("= Guide\n", encoding="utf-8")
    out_file = tmp_path / "site" / "guide.html"

    output = asciidoc_plugin.convert_asciidoc(
        Path("guide.txt"),
        out_file,
        source_dir=docs,
        attributes={"toc": "left"},
        package_location=package,
    )

    assert output == out_file.resolve()
    assert out_file.read_text(encoding="utf-8") == "<html>= Guide\n</html>"
    assert (tmp_path / "site" / "images" / "icons" / "note.png").is_file()
    assert (package.parent / "asciidoc-8.6.9" / "asciidocapi.py").is_file()


def test_repeated_conversions_reuse_extraction(
    make_package: Callable[..., Path], tmp_path: Path
) -> None:
    """Convert several documents against one extracted toolkit."""
    package = make_package()
    for name in ("one", "two"):
        source = tmp_path / f"{name}.txt"
        source.write_text(name, encoding="utf-8")
        asciidoc_plugin.convert_asciidoc(
            source, tmp_path / "out" / f"{name}.html", package_location=package
        )

    assert (tmp_path / "out" / "one.html").read_text(encoding="utf-8") == (
        "<html>one</html>"
    )
    assert (tmp_path / "out" / "two.html").read_text(encoding="utf-8") == (
        "<html>two</html>"
    )


def test_cli_convert_from_package(
    make_package: Callable[..., Path], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Run the convert command against a package container."""
    monkeypatch.setattr(cli_module, "_configure_logging", lambda verbose, debug: None)
    package = make_package()
    source = tmp_path / "index.txt"
    source.write_text("cli", encoding="utf-8")

    result = runner.invoke(
        cli_module.app,
        [
            "convert",
            str(source),
            "-o",
            str(tmp_path / "site" / "index.html"),
            "--package",
            str(package),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "site" / "index.html").is_file()
