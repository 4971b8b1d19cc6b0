"""YAML schema validation and config loading.

Provides centralized validation using pydantic:
    - Pad config (pad.v1.yaml): canvas size, default style, fitter tuning,
      render tuning constants
    - Strokes file (strokes.v1.yaml): ordered point groups with their style

All loaders fail fast with actionable messages (offending field, expected
range) instead of guessing at malformed data.

Units:
    - Geometry: canvas pixels
    - Time: integer milliseconds
    - Pressure: [0.0, 1.0]

Usage:
    from inkpad.utils import validators

    cfg = validators.load_pad_config("configs/pad.v1.yaml")
    strokes = validators.validate_strokes_file("signature.yaml")
"""

from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


# ============================================================================
# STYLE / POINT GROUP SCHEMA
# ============================================================================

class StyleOptionsV1(BaseModel):
    """Per-group pen style."""
    pen_color: str = Field(default="black", min_length=1, description="CSS color")
    dot_size: float = Field(default=0.0, ge=0.0, description="Tap radius; 0 uses the width midpoint")
    min_width: float = Field(default=0.5, gt=0.0, description="Minimum stroke radius (px)")
    max_width: float = Field(default=2.5, gt=0.0, description="Maximum stroke radius (px)")

    @model_validator(mode='after')
    def validate_width_order(self) -> 'StyleOptionsV1':
        if self.max_width < self.min_width:
            raise ValueError(
                f"max_width={self.max_width} must be >= min_width={self.min_width}"
            )
        return self


class PointV1(BaseModel):
    """One raw pointer sample."""
    x: float
    y: float
    pressure: float = Field(default=0.0, ge=0.0, le=1.0)
    time: int = Field(..., description="Timestamp (ms)")


class PointGroupV1(BaseModel):
    """One stroke (pointer-down to pointer-up) or tap."""
    style: StyleOptionsV1
    points: List[PointV1] = Field(..., min_length=1, description="Samples in arrival order")


class StrokesFileV1(BaseModel):
    """Container for a whole signature (YAML file format)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("strokes.v1", alias="schema")
    groups: List[PointGroupV1] = Field(default_factory=list)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "strokes.v1":
            raise ValueError(f"Expected schema 'strokes.v1', got '{v}'")
        return v


# ============================================================================
# PAD CONFIG (pad.v1.yaml)
# ============================================================================

class CanvasConfig(BaseModel):
    """Drawing surface size in pixels."""
    width: int = Field(default=300, gt=0)
    height: int = Field(default=150, gt=0)


class RenderTuning(BaseModel):
    """Empirical visual-quality constants, re-tunable without touching fitting."""
    sampling_density: int = Field(default=2, ge=1, le=16, description="Stamps per px of arc length")
    vector_width_multiplier: float = Field(default=2.25, gt=0.0, description="SVG stroke-width / end width")


class PadConfigV1(BaseModel):
    """Signature pad configuration (pad.v1.yaml schema)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("pad.v1", alias="schema")
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    style: StyleOptionsV1 = Field(default_factory=StyleOptionsV1)
    velocity_filter_weight: float = Field(default=0.7, gt=0.0, le=1.0)
    min_distance: float = Field(default=5.0, ge=0.0, description="Jitter rejection radius (px)")
    background_color: str = Field(default="rgba(0,0,0,0)")
    render: RenderTuning = Field(default_factory=RenderTuning)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "pad.v1":
            raise ValueError(f"schema must be 'pad.v1', got {v}")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def load_pad_config(path: Union[str, Path]) -> PadConfigV1:
    """Load and validate pad config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to pad.v1.yaml file

    Returns
    -------
    PadConfigV1
        Validated config; omitted sections take their defaults

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pad config not found: {path}")

    data = fs.load_yaml(path) or {}
    try:
        return PadConfigV1(**data)
    except ValidationError as e:
        raise ValueError(f"Pad config validation failed at {path}: {e}") from e


def parse_strokes(data: Dict[str, Any]) -> StrokesFileV1:
    """Validate an in-memory strokes document.

    Raises
    ------
    ValueError
        If any group is malformed (missing field, empty point list, ...)
    """
    try:
        return StrokesFileV1(**data)
    except ValidationError as e:
        raise ValueError(f"Strokes validation failed: {e}") from e


def validate_strokes_file(path: Union[str, Path]) -> StrokesFileV1:
    """Load and validate a strokes.v1 YAML file.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (whole file is rejected)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Strokes file not found: {path}")

    data = fs.load_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"Strokes file {path} must contain a mapping, got {type(data).__name__}")

    try:
        return StrokesFileV1(**data)
    except ValidationError as e:
        raise ValueError(f"Strokes file validation failed at {path}: {e}") from e
