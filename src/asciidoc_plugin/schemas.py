"""Pydantic schemas for runtime validation of host configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BootstrapConfig(BaseModel):
    """Validated input for toolkit bootstrap."""

    model_config = ConfigDict(extra="forbid")

    package_location: Path | None = None
    configured_home: Path | None = None
    lock_timeout: float = Field(default=60.0, gt=0.0)


class ConversionRequestConfig(BaseModel):
    """Validated host configuration for one document conversion."""

    model_config = ConfigDict(extra="forbid")

    source_path: Path
    source_dir: Path | None = None
    output_path: Path | None = None
    output_dir: Path | None = None
    backend: str | None = "html5"
    options: list[str] = Field(default_factory=list)
    attributes: dict[str, str] = Field(default_factory=dict)
    no_header_footer: bool = False
    lang: str | None = "en"

    @field_validator("backend", "lang")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("options")
    @classmethod
    def _validate_options(cls, value: list[str]) -> list[str]:
        if any(not item.strip() for item in value):
            raise ValueError("options cannot contain empty entries.")
        return [item.strip() for item in value]

    @field_validator("attributes", mode="before")
    @classmethod
    def _normalize_attributes(cls, value: object) -> dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("attributes must be a mapping.")
        normalized = {str(key).strip(): str(item) for key, item in value.items()}
        if any(not key for key in normalized):
            raise ValueError("attribute names cannot be empty.")
        return normalized
