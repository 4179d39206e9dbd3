"""Pydantic models for capture records, import options, and the floor plan.

The floor plan is the structured JSON output of the capture-import
pipeline.  It describes axis-aligned walls in centimetres, the doors and
windows anchored to them, re-projected furniture, and room stubs from the
scan's labelled sections.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Short random identifier for plan entities."""
    return uuid.uuid4().hex[:8]


class _CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── tiny helpers ──────────────────────────────────────────────────────
class Vec3(BaseModel):
    """A 3-component vector (x, y, z) in metres."""

    x: float
    y: float
    z: float


class Point(BaseModel):
    """A ground-plane point (x, y) in centimetres."""

    x: float
    y: float


class Scale(BaseModel):
    x: float = 1.0
    y: float = 1.0
    z: float = 1.0


# ── capture (scan) records ───────────────────────────────────────────
class CaptureRecord(_CamelModel):
    """One wall / door / window / object entry of a capture JSON."""

    model_config = ConfigDict(extra="ignore")

    identifier: str
    dimensions: list[float] = Field(description="Width, height, depth in metres")
    transform: list[float] = Field(description="Column-major 4×4 matrix")
    category: Any = None
    parent_identifier: Optional[str] = None

    @field_validator("dimensions")
    @classmethod
    def _three_dimensions(cls, v: list[float]) -> list[float]:
        if len(v) != 3:
            raise ValueError(f"dimensions must have 3 components, got {len(v)}")
        return v

    @field_validator("transform")
    @classmethod
    def _sixteen_entries(cls, v: list[float]) -> list[float]:
        if len(v) != 16:
            raise ValueError(f"transform must have 16 entries, got {len(v)}")
        return v


class CaptureSection(_CamelModel):
    """A labelled region of the scan (living room, kitchen, ...)."""

    model_config = ConfigDict(extra="ignore")

    center: list[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    label: str = ""
    story: int = 0


class Capture(_CamelModel):
    """Top-level capture JSON.  Missing arrays are treated as empty."""

    model_config = ConfigDict(extra="ignore")

    walls: list[CaptureRecord] = Field(default_factory=list)
    doors: list[CaptureRecord] = Field(default_factory=list)
    windows: list[CaptureRecord] = Field(default_factory=list)
    objects: list[CaptureRecord] = Field(default_factory=list)
    sections: list[CaptureSection] = Field(default_factory=list)

    @field_validator("walls", "doors", "windows", "objects", "sections", mode="before")
    @classmethod
    def _null_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ── import options ───────────────────────────────────────────────────
class ImportOptions(_CamelModel):
    """Post-processing options for a capture import.

    ``orthogonal`` selects the full reconstruction; otherwise the legacy
    straightening pass runs unless ``straighten`` is false.
    """

    straighten: bool = True
    orthogonal: bool = False
    angle_tolerance: float = Field(5.0, description="Degrees (legacy pass)")
    merge_distance: float = Field(15.0, description="Centimetres")
    iterations: int = Field(5, ge=0)
    snap_tolerance: float = Field(3.0, ge=0, description="Centimetres")
    drop_degenerate_walls: bool = False


# ── plan entities ────────────────────────────────────────────────────
class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class DoorType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    SLIDING = "sliding"
    FRENCH = "french"
    POCKET = "pocket"
    BIFOLD = "bifold"


class WindowType(str, Enum):
    STANDARD = "standard"
    FIXED = "fixed"
    CASEMENT = "casement"
    SLIDING = "sliding"
    BAY = "bay"


class Wall(_CamelModel):
    id: str = Field(default_factory=new_id)
    start: Point
    end: Point
    thickness: float = 15.0
    height: float = 250.0
    color: str = "#444444"

    @property
    def length(self) -> float:
        return ((self.end.x - self.start.x) ** 2 + (self.end.y - self.start.y) ** 2) ** 0.5


class Door(_CamelModel):
    id: str = Field(default_factory=new_id)
    wall_id: str
    position: float = Field(ge=0.0, le=1.0, description="Parametric position along the wall")
    width: float
    height: float
    type: DoorType = DoorType.SINGLE
    swing_direction: str = "left"
    flip_side: bool = False


class Window(_CamelModel):
    id: str = Field(default_factory=new_id)
    wall_id: str
    position: float = Field(ge=0.0, le=1.0, description="Parametric position along the wall")
    width: float
    height: float
    sill_height: float = 90.0
    type: WindowType = WindowType.STANDARD


class FurnitureItem(_CamelModel):
    id: str = Field(default_factory=new_id)
    catalog_id: str
    position: Point
    rotation: float = Field(0.0, description="Degrees")
    scale: Scale = Field(default_factory=Scale)
    width: Optional[float] = None
    depth: Optional[float] = None
    height: Optional[float] = None


class Room(_CamelModel):
    """Room stub imported from a labelled section (no polygon yet)."""

    id: str = Field(default_factory=new_id)
    name: str
    walls: list[str] = Field(default_factory=list)
    floor_texture: str = "hardwood"
    area: float = 0.0
    story: int = 0


# ── floor ────────────────────────────────────────────────────────────
class Floor(_CamelModel):
    """Top-level floor plan produced by one capture import."""

    id: str = Field(default_factory=new_id)
    name: str = "Ground Floor"
    level: int = 0
    version: str = "0.1.0"
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    units: str = "centimetres"
    source_file: str = ""
    walls: list[Wall] = Field(default_factory=list)
    rooms: list[Room] = Field(default_factory=list)
    doors: list[Door] = Field(default_factory=list)
    windows: list[Window] = Field(default_factory=list)
    furniture: list[FurnitureItem] = Field(default_factory=list)


# ── result checks ────────────────────────────────────────────────────
class CornerGap(_CamelModel):
    """Two wall endpoints that nearly, but not exactly, meet."""

    wall_a: str
    end_a: str
    wall_b: str
    end_b: str
    distance: float


class MisalignedWall(_CamelModel):
    wall_id: str
    deviation: float = Field(description="Degrees off the nearest axis")
    length: float


class FloorCheck(_CamelModel):
    wall_count: int
    misaligned: list[MisalignedWall] = Field(default_factory=list)
    gaps: list[CornerGap] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.misaligned
