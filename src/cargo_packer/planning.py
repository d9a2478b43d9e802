"""Turn a pack request into a container + item list, run the packer, shape the response."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from cargo_packer.config import PackingSettings
from cargo_packer.containers import preset_container
from cargo_packer.io.schemas import (
    ContainerSchema,
    ItemSchema,
    PackRequestSchema,
    PackResponseSchema,
    PlacementSchema,
)
from cargo_packer.models import Container, Item, Placement
from cargo_packer.packing.bin_packer import pack_items

logger = logging.getLogger(__name__)


def resolve_container(request: PackRequestSchema) -> Container:
    """
    Container from a preset and/or explicit fields.

    Explicit fields override the preset. Raises ValueError for an unknown
    preset or when neither is given.
    """
    explicit: dict[str, Any] = {}
    if request.container is not None:
        explicit = request.container.model_dump(exclude_none=True)

    if request.container_preset:
        return preset_container(request.container_preset, **explicit)
    if request.container is None:
        raise ValueError("request must include either 'container_preset' or 'container'")
    return Container(**explicit)


def expand_items(lines: list[ItemSchema]) -> list[Item]:
    """One Item per unit; lines with quantity > 1 get ids <id>_0001, <id>_0002, ..."""
    items: list[Item] = []
    for line in lines:
        fields = line.model_dump(exclude={"id", "quantity"})
        if line.quantity == 1:
            items.append(Item(id=line.id, **fields))
            continue
        for i in range(line.quantity):
            items.append(Item(id=f"{line.id}_{i + 1:04d}", **fields))
    return items


def placement_to_schema(placement: Placement) -> PlacementSchema:
    return PlacementSchema(
        item_id=placement.item.id,
        shape=placement.item.shape,
        color=placement.item.color,
        position=placement.position,
        rotation=placement.rotation,
        dimensions=placement.dimensions,
    )


def build_plan(
    request: PackRequestSchema,
    settings: Optional[PackingSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> PackResponseSchema:
    """Run one packing request end to end."""
    container = resolve_container(request)
    items = expand_items(request.items)

    result = pack_items(items, container, settings, cancel_event)

    return PackResponseSchema(
        container=ContainerSchema(**container.model_dump()),
        placements=[placement_to_schema(p) for p in result.placements],
        unplaced=[item.id for item in result.unplaced],
        requested_count=len(items),
        packed_count=len(result.placements),
    )
