#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/asciidoc_plugin"


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = path.read_text(encoding="utf-8")
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    # Bootstrap and bridge are independent leaves.
    for path in (PACKAGE / "bootstrap").glob("*.py"):
        _assert_no_imports(
            path, ["asciidoc_plugin.bridge", "asciidoc_plugin.orchestrator", "typer"]
        )
    for path in (PACKAGE / "bridge").glob("*.py"):
        _assert_no_imports(
            path, ["asciidoc_plugin.bootstrap", "asciidoc_plugin.orchestrator", "typer"]
        )

    for path in [PACKAGE / "orchestrator.py", *(PACKAGE / "application").glob("*.py")]:
        _assert_no_imports(path, ["import typer", "from typer"])

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
