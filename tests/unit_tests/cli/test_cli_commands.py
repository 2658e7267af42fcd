"""Unit tests for CLI command behavior."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from asciidoc_plugin.application import use_cases
from asciidoc_plugin.application.results import ConversionResult
from asciidoc_plugin.cli import cli as cli_module
from asciidoc_plugin.errors import ConfigurationError, DirectoryCreationError
from asciidoc_plugin.orchestrator import ConversionRequest

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI invocations from reconfiguring the root logger."""
    monkeypatch.setattr(cli_module, "_configure_logging", lambda verbose, debug: None)


def test_help_shows_commands() -> None:
    """Ensure top-level help lists the subcommands."""
    result = runner.invoke(cli_module.app, ["--help"])
    assert result.exit_code == 0
    assert "convert" in result.output
    assert "bootstrap" in result.output
    assert "doctor" in result.output


def test_convert_with_existing_toolkit(toolkit_home: Path, tmp_path: Path) -> None:
    """Convert a document end to end through the CLI."""
    source = tmp_path / "index.txt"
    source.write_text("cli", encoding="utf-8")
    out_file = tmp_path / "site" / "index.html"

    result = runner.invoke(
        cli_module.app,
        [
            "convert",
            str(source),
            "--out-file",
            str(out_file),
            "--toolkit-home",
            str(toolkit_home),
            "--package",
            str(tmp_path / "missing.zip"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "✓ Converted:" in result.output
    assert f"Output: {out_file.resolve()}" in result.output
    assert out_file.read_text(encoding="utf-8") == "<html>cli</html>"


def test_convert_forwards_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Ensure command options reach the conversion request."""
    captured: dict[str, object] = {}

    def fake_convert(
        request: ConversionRequest,
        *,
        package_location: Path | None = None,
        toolkit_home: Path | None = None,
    ) -> ConversionResult:
        captured["request"] = request
        captured["package_location"] = package_location
        captured["toolkit_home"] = toolkit_home
        return ConversionResult(
            source_path=request.resolved_source(), toolkit_home=tmp_path
        )

    monkeypatch.setattr(use_cases, "convert_document", fake_convert)

    result = runner.invoke(
        cli_module.app,
        [
            "convert",
            "index.txt",
            "--source-dir",
            str(tmp_path),
            "--backend",
            "docbook",
            "--lang",
            "fr",
            "--no-header-footer",
            "-a",
            "toc=left",
            "--attribute",
            "icons=font",
            "--option=--section-numbers",
            "--toolkit-home",
            str(tmp_path / "home"),
        ],
    )

    assert result.exit_code == 0, result.output
    request = captured["request"]
    assert isinstance(request, ConversionRequest)
    assert request.source_dir == tmp_path
    assert request.backend == "docbook"
    assert request.lang == "fr"
    assert request.no_header_footer is True
    assert dict(request.attributes) == {"toc": "left", "icons": "font"}
    assert request.options == ("--section-numbers",)
    assert captured["toolkit_home"] == tmp_path / "home"
    assert "Output:" not in result.output


def test_convert_rejects_malformed_attribute(tmp_path: Path) -> None:
    """Ensure attribute entries must use NAME=VALUE."""
    result = runner.invoke(
        cli_module.app, ["convert", str(tmp_path / "a.txt"), "-a", "broken"]
    )
    assert result.exit_code != 0
    assert "Invalid attribute entry" in result.output


@pytest.mark.parametrize(
    ("error", "expected_code"),
    [
        (ConfigurationError("toolkit missing"), 2),
        (DirectoryCreationError("Can not create dir /x"), 3),
        (RuntimeError("boom"), 1),
    ],
)
def test_convert_maps_errors_to_exit_codes(
    error: Exception,
    expected_code: int,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Ensure failures print a clean message and use the error's exit code."""

    def failing_convert(*args: object, **kwargs: object) -> ConversionResult:
        raise error

    monkeypatch.setattr(use_cases, "convert_document", failing_convert)
    result = runner.invoke(cli_module.app, ["convert", str(tmp_path / "a.txt")])

    assert result.exit_code == expected_code
    assert f"✗ {type(error).__name__}: {error}" in result.output
    assert "Traceback" not in result.output


def test_convert_debug_prints_traceback(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Ensure --debug adds the traceback to the error output."""

    def failing_convert(*args: object, **kwargs: object) -> ConversionResult:
        raise ConfigurationError("toolkit missing")

    monkeypatch.setattr(use_cases, "convert_document", failing_convert)
    result = runner.invoke(
        cli_module.app, ["--debug", "convert", str(tmp_path / "a.txt")]
    )
    assert result.exit_code == 2
    assert "Traceback" in result.output


def test_bootstrap_prints_home(toolkit_home: Path, tmp_path: Path) -> None:
    """Print the resolved toolkit home."""
    result = runner.invoke(
        cli_module.app,
        [
            "bootstrap",
            "--toolkit-home",
            str(toolkit_home),
            "--package",
            str(tmp_path / "missing.zip"),
        ],
    )
    assert result.exit_code == 0, result.output
    assert str(toolkit_home) in result.output


def test_bootstrap_reports_missing_toolkit(tmp_path: Path) -> None:
    """Exit non-zero when nothing could be resolved."""
    result = runner.invoke(
        cli_module.app, ["bootstrap", "--package", str(tmp_path / "missing.zip")]
    )
    assert result.exit_code == 1
    assert "No toolkit installation could be resolved" in result.output


def test_doctor_lists_runtime_versions() -> None:
    """Ensure doctor prints dependency versions."""
    result = runner.invoke(cli_module.app, ["doctor"])
    assert result.exit_code == 0
    assert "pydantic:" in result.output
    assert "package:" in result.output
