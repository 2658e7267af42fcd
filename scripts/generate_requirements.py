#!/usr/bin/env python3
"""Generate (or verify) requirements.txt from pyproject.toml extras."""

from __future__ import annotations

import sys
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
REQUIREMENTS = ROOT / "requirements.txt"
# Runtime profile installed by the build host.
SYNC_EXTRAS = ("cli",)
HEADER = [
    "# Generated from pyproject.toml (base + extras: cli)",
    "# Do not edit manually; run: uv run python scripts/generate_requirements.py",
    "",
]


def _collect_requirements() -> list[str]:
    pyproject = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))
    deps = set(pyproject["project"].get("dependencies", []))
    optional = pyproject["project"].get("optional-dependencies", {})
    for extra in SYNC_EXTRAS:
        deps.update(optional.get(extra, []))
    return sorted(dep.strip() for dep in deps if dep.strip())


def _current_requirements() -> set[str]:
    lines = REQUIREMENTS.read_text(encoding="utf-8").splitlines()
    return {line.split("#", 1)[0].strip() for line in lines} - {""}


def main(argv: list[str]) -> None:
    """Write requirements.txt, or with ``--check`` fail when it is stale."""
    reqs = _collect_requirements()
    if "--check" in argv:
        stale = sorted(set(reqs) ^ _current_requirements())
        if stale:
            raise SystemExit(
                "requirements.txt is out of sync with pyproject.toml:\n"
                + "\n".join(f"- {entry}" for entry in stale)
            )
        print("Dependency sync check passed.")
        return
    REQUIREMENTS.write_text("\n".join(HEADER) + "\n".join(reqs) + "\n", encoding="utf-8")
    print(f"Wrote {len(reqs)} requirements to requirements.txt")


if __name__ == "__main__":
    main(sys.argv[1:])
