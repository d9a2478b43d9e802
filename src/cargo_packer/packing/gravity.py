# src/cargo_packer/packing/gravity.py

from __future__ import annotations

import logging
import threading
from typing import Optional

from cargo_packer.geometry import boxes_overlap, clearance
from cargo_packer.packing.placement import collision_buffer, would_overlap
from cargo_packer.packing.state import PackedItem, PackingState, check_cancelled

logger = logging.getLogger(__name__)


def _contact_height(state: PackingState, packed: PackedItem, test_y: float) -> Optional[float]:
    """Centre height that rests packed on the highest item blocking it at test_y."""
    dims = packed.dims
    x, _, z = packed.position
    highest: Optional[float] = None
    for other in state.packed:
        if other is packed:
            continue
        ox, oy, oz = other.position
        buffer = collision_buffer(state, packed.item.shape, other.item.shape)
        if boxes_overlap((x, test_y, z), dims, (ox, oy, oz), other.dims, buffer):
            gap = clearance(packed.item.shape, other.item.shape, state.settings)[1]
            surface = other.top + gap
            if highest is None or surface > highest:
                highest = surface
    if highest is None:
        return None
    return highest + dims[1] / 2


def settle_item(state: PackingState, packed: PackedItem) -> bool:
    """
    Lower one item as far as collisions and the floor allow.

    The last step is cut short at the floor, and the floor position is
    collision checked like any other step, so thin items below are respected.
    Returns True if the item moved down.
    """
    dims = packed.dims
    shape = packed.item.shape
    step = state.settings.gravity_step
    eps = state.settings.epsilon
    rest_y = state.floor_y + dims[1] / 2
    x, current_y, z = packed.position
    new_y = current_y

    while new_y > rest_y:
        test_y = max(new_y - step, rest_y)
        if would_overlap(state, (x, test_y, z), dims, shape, exclude=packed):
            # close the sub-step gap above whatever is blocking
            contact = _contact_height(state, packed, test_y)
            if (
                contact is not None
                and contact <= new_y + eps
                and not would_overlap(state, (x, contact, z), dims, shape, exclude=packed)
            ):
                new_y = contact
            break
        new_y = test_y

    if new_y == current_y:
        return False
    packed.position[1] = new_y
    return new_y < current_y


def apply_gravity(state: PackingState, cancel_event: Optional[threading.Event] = None) -> int:
    """
    Settle every packed item until a full pass moves nothing.

    Items are processed in placement order against the current (possibly
    already lowered) positions of all the others. Returns the number of passes.
    """
    passes = 0
    changed = True
    while changed:
        check_cancelled(cancel_event)
        changed = False
        passes += 1
        for packed in state.packed:
            if settle_item(state, packed):
                changed = True
    logger.debug(f"Gravity settled {len(state.packed)} items in {passes} passes")
    return passes
