"""Shared pytest configuration, marker assignment, and archive fixtures."""

from __future__ import annotations

import zipfile
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

# Entry value ``None`` marks a directory member.
type ZipEntries = Sequence[tuple[str, bytes | None]]

STUB_TOOLKIT = '''\
"""Stand-in for the toolkit entry module."""


class Options:
    def __init__(self):
        self.values = []

    def append(self, name, value=None):
        self.values.append((name, value))


class AsciiDocAPI:
    def __init__(self):
        self.options = Options()
        self.attributes = {}
        self.executed = []

    def execute(self, infile, outfile=None, backend=None):
        if infile.endswith("broken.txt"):
            raise RuntimeError("asciidoc: FAILED: malformed source")
        self.executed.append(infile)
        out = dict(self.options.values).get("--out-file")
        if out:
            with open(infile) as source, open(out, "w") as target:
                target.write("<html>" + source.read() + "</html>")
'''


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def write_zip(path: Path, entries: ZipEntries) -> Path:
    """Write ``entries`` into a new zip archive at ``path``."""
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in entries:
            if data is None:
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, data)
    return path


@pytest.fixture
def zip_writer() -> Callable[[Path, ZipEntries], Path]:
    """Return the zip archive builder."""
    return write_zip


@pytest.fixture
def toolkit_entries() -> Callable[[str], list[tuple[str, bytes | None]]]:
    """Return a builder for the members of a bundled toolkit archive."""

    def _build(home: str) -> list[tuple[str, bytes | None]]:
        return [
            (f"{home}/", None),
            (f"{home}/asciidocapi.py", STUB_TOOLKIT.encode("utf-8")),
            (f"{home}/images/", None),
            (f"{home}/images/icons/note.png", b"\x89PNG-note"),
        ]

    return _build


@pytest.fixture
def make_package(
    tmp_path: Path,
    toolkit_entries: Callable[[str], list[tuple[str, bytes | None]]],
) -> Callable[..., Path]:
    """Build a package container bundling a toolkit archive.

    The returned callable accepts ``home`` (toolkit directory name) and
    ``before`` (members written ahead of the bundled archive).
    """

    def _build(
        home: str = "asciidoc-8.6.9",
        before: ZipEntries = (("META-INF/MANIFEST.MF", b"Manifest-Version: 1.0\n"),),
    ) -> Path:
        build_dir = tmp_path / "build"
        build_dir.mkdir(exist_ok=True)
        nested = write_zip(build_dir / f"{home}.zip", toolkit_entries(home))
        dist = tmp_path.resolve() / "dist"
        dist.mkdir(exist_ok=True)
        return write_zip(
            dist / "plugin.zip",
            [*before, (f"{home}.zip", nested.read_bytes())],
        )

    return _build


@pytest.fixture
def toolkit_home(tmp_path: Path) -> Path:
    """Create an already-extracted toolkit home with the stub entry module."""
    home = tmp_path.resolve() / "asciidoc-home"
    (home / "images" / "icons").mkdir(parents=True)
    (home / "images" / "icons" / "note.png").write_bytes(b"\x89PNG-note")
    (home / "asciidocapi.py").write_text(STUB_TOOLKIT, encoding="utf-8")
    return home
