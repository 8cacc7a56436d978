"""Simplex system document models (encoding version 2 layout).

Version 1 documents are converted to this layout before validation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShapeEntry(BaseModel):
    name: str


class ProgressionEntry(BaseModel):
    name: str
    # (shape index or None for a placeholder, position)
    pairs: list[tuple[int | None, float]] = Field(default_factory=list)
    interp: str = "spline"

    @field_validator("interp")
    @classmethod
    def _known_interp(cls, v: str) -> str:
        v = v.lower()
        if v not in ("linear", "spline"):
            raise ValueError(f"unknown interpolation {v!r}")
        return v


class SliderEntry(BaseModel):
    name: str
    prog: int
    enabled: bool = True


class ComboEntry(BaseModel):
    """A combo, or a floater when any target lies strictly between -1 and 1."""

    name: str
    prog: int
    pairs: list[tuple[int, float]]
    enabled: bool = True


class TraversalEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    prog: int
    progress_type: str = Field(alias="progressType")
    progress_control: int = Field(alias="progressControl")
    progress_flip: bool = Field(default=False, alias="progressFlip")
    multiplier_type: str = Field(alias="multiplierType")
    multiplier_control: int = Field(alias="multiplierControl")
    multiplier_flip: bool = Field(default=False, alias="multiplierFlip")
    enabled: bool = True

    @field_validator("progress_type", "multiplier_type")
    @classmethod
    def _known_type(cls, v: str) -> str:
        v = v.lower()
        if v not in ("slider", "combo", "traversal", "floater"):
            raise ValueError(f"unknown controller type {v!r}")
        return v


class SimplexDocument(BaseModel):
    """Represents a parsed simplex system."""

    model_config = ConfigDict(populate_by_name=True)

    encoding_version: int = Field(alias="encodingVersion")
    system_name: str = Field(default="", alias="systemName")
    shapes: list[ShapeEntry] = Field(default_factory=list)
    progressions: list[ProgressionEntry] = Field(default_factory=list)
    sliders: list[SliderEntry] = Field(default_factory=list)
    combos: list[ComboEntry] = Field(default_factory=list)
    floaters: list[ComboEntry] = Field(default_factory=list)
    traversals: list[TraversalEntry] = Field(default_factory=list)
