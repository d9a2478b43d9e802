from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Shape(str, Enum):
    """True shape of an item. Packing always uses the bounding box."""

    BOX = "box"
    CYLINDER = "cylinder"
    SPHERE = "sphere"


class Container(BaseModel):
    """Cargo area of a vehicle, in the caller's length unit (e.g. cm)."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0, description="Width of the cargo area (Z axis)")
    height: float = Field(gt=0, description="Height of the cargo area (Y axis)")
    depth: float = Field(gt=0, description="Depth of the cargo area (X axis)")
    max_weight: Optional[float] = Field(
        default=None,
        gt=0,
        description="Maximum payload in kg (informational, not enforced by packing)")

    @property
    def floor_y(self) -> float:
        return -self.height / 2


class Item(BaseModel):
    """Cargo item with identifier and bounding-box dimensions."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier for the item")
    length: float = Field(gt=0, description="Length of the bounding box")
    width: float = Field(gt=0, description="Width of the bounding box")
    height: float = Field(gt=0, description="Height of the bounding box")
    weight: float = Field(gt=0, description="Weight in kg")
    shape: Shape = Field(default=Shape.BOX, description="Shape tag used for clearance")
    color: Optional[str] = Field(default=None, description="Display colour, opaque to packing")

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height


class Placement(BaseModel):
    """Placed item: centre position in the container frame plus orientation index."""

    model_config = ConfigDict(frozen=True)

    item: Item
    position: Tuple[float, float, float] = Field(
        description="Centre of the oriented bounding box (x, y, z)"
    )
    rotation: int = Field(ge=0, le=5, description="Orientation index 0..5")

    @property
    def dimensions(self) -> tuple[float, float, float]:
        from cargo_packer.geometry import rotated_dimensions

        return rotated_dimensions(self.item, self.rotation)


class PackingResult(BaseModel):
    """Placements in placement order plus the items that did not fit."""

    placements: list[Placement] = Field(default_factory=list)
    unplaced: list[Item] = Field(default_factory=list)

    @property
    def all_placed(self) -> bool:
        return not self.unplaced
