"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConversionResult:
    """Structured conversion outcome."""

    source_path: Path
    toolkit_home: Path
    output_path: Path | None = None
    output_dir: Path | None = None
    backend: str | None = None
