"""Request/response schemas shared by the CLI and the HTTP API."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from cargo_packer.models import Shape


class ContainerSchema(BaseModel):
    """Schema for a cargo area. Any field left out is taken from the preset."""
    width: Optional[float] = Field(None, gt=0, description="Width of the cargo area")
    height: Optional[float] = Field(None, gt=0, description="Height of the cargo area")
    depth: Optional[float] = Field(None, gt=0, description="Depth of the cargo area")
    max_weight: Optional[float] = Field(None, gt=0, description="Maximum weight capacity (not enforced)")


class ItemSchema(BaseModel):
    """Schema for an item line, optionally repeated `quantity` times."""
    id: str = Field(min_length=1, description="Identifier of the item line")
    length: float = Field(gt=0, description="Length of the item")
    width: float = Field(gt=0, description="Width of the item")
    height: float = Field(gt=0, description="Height of the item")
    weight: float = Field(gt=0, description="Weight of the item")
    shape: Shape = Field(default=Shape.BOX, description="box, cylinder or sphere")
    color: Optional[str] = Field(default=None, description="Display colour")
    quantity: int = Field(default=1, ge=1, description="Number of identical items")


class PackRequestSchema(BaseModel):
    """Schema for a packing request."""
    container_preset: Optional[str] = Field(None, description="Preset name, e.g. VAN or 40HC")
    container: Optional[ContainerSchema] = None
    items: List[ItemSchema] = Field(default_factory=list, description="Items to pack")


class PlacementSchema(BaseModel):
    """Schema for one placed item, with the extents a renderer needs."""
    item_id: str
    shape: Shape
    color: Optional[str] = None
    position: Tuple[float, float, float] = Field(description="Centre (x, y, z)")
    rotation: int = Field(ge=0, le=5)
    dimensions: Tuple[float, float, float] = Field(description="Oriented extents (x, y, z)")


class PackResponseSchema(BaseModel):
    """Schema for a packing result."""
    container: ContainerSchema
    placements: List[PlacementSchema] = Field(default_factory=list)
    unplaced: List[str] = Field(default_factory=list, description="Ids of items that did not fit")
    requested_count: int = Field(ge=0)
    packed_count: int = Field(ge=0)
