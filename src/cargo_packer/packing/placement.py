# src/cargo_packer/packing/placement.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cargo_packer.geometry import (
    Vector3,
    all_orientations,
    boxes_overlap,
    clearance,
    footprints_overlap,
)
from cargo_packer.models import Item, Shape
from cargo_packer.packing.free_space import FreeSpace
from cargo_packer.packing.state import PackedItem, PackingState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    space: FreeSpace
    dims: Vector3
    rotation: int
    score: float

    @property
    def center(self) -> Vector3:
        (px, py, pz), (dx, dy, dz) = self.space.position, self.dims
        return px + dx / 2, py + dy / 2, pz + dz / 2


def fits(dims: Vector3, space: FreeSpace) -> bool:
    return all(dims[axis] <= space.size[axis] for axis in range(3))


def is_position_supported(state: PackingState, corner: Vector3, dims: Vector3) -> bool:
    """
    True if a box with its min corner at `corner` sits on the top face of a packed item.

    Support means a packed item's top is at the corner's height (within epsilon)
    and the two X/Z footprints overlap.
    """
    x, y, z = corner
    eps = state.settings.epsilon
    for packed in state.packed:
        if abs(packed.top - y) >= eps:
            continue
        px, _, pz = packed.position
        pdx, _, pdz = packed.dims
        if footprints_overlap(x, z, dims[0], dims[2], px - pdx / 2, pz - pdz / 2, pdx, pdz):
            return True
    return False


def is_stable(state: PackingState, corner: Vector3, dims: Vector3) -> bool:
    on_floor = abs(corner[1] - state.floor_y) < state.settings.epsilon
    return on_floor or is_position_supported(state, corner, dims)


def _stable_score(state: PackingState, corner: Vector3) -> float:
    x, y, z = corner
    return x ** 2 + z ** 2 + state.settings.height_weight * y


def _any_score(corner: Vector3) -> float:
    x, y, z = corner
    return x ** 2 + y ** 2 + z ** 2


def find_best_placement(state: PackingState, item: Item) -> Optional[Candidate]:
    """
    Best (space, orientation) pair for item, or None if it fits nowhere.

    Pass 1 only considers stable positions and strongly prefers low ones.
    Pass 2 drops the stability requirement and takes the one closest to the origin.
    Ties keep the first candidate found (space order, then orientation order).
    """
    orientations = all_orientations(item)
    spaces = list(state.spaces)

    best: Optional[Candidate] = None
    for space in spaces:
        for rotation, dims in enumerate(orientations):
            if not fits(dims, space):
                continue
            if not is_stable(state, space.position, dims):
                continue
            score = _stable_score(state, space.position)
            if best is None or score < best.score:
                best = Candidate(space=space, dims=dims, rotation=rotation, score=score)

    if best is not None:
        return best

    for space in spaces:
        for rotation, dims in enumerate(orientations):
            if not fits(dims, space):
                continue
            score = _any_score(space.position)
            if best is None or score < best.score:
                best = Candidate(space=space, dims=dims, rotation=rotation, score=score)
    return best


def collision_buffer(state: PackingState, shape_a: Shape, shape_b: Shape) -> Vector3:
    """Pair clearance less epsilon, so faces that only touch after float rounding do not collide."""
    eps = state.settings.epsilon
    bx, by, bz = clearance(shape_a, shape_b, state.settings)
    return bx - eps, by - eps, bz - eps


def would_overlap(
    state: PackingState,
    position: Vector3,
    dims: Vector3,
    shape: Shape = Shape.BOX,
    exclude: Optional[PackedItem] = None,
) -> bool:
    """Shape-aware collision of a box at position against every packed item except `exclude`."""
    for packed in state.packed:
        if packed is exclude:
            continue
        buffer = collision_buffer(state, shape, packed.item.shape)
        px, py, pz = packed.position
        if boxes_overlap(position, dims, (px, py, pz), packed.dims, buffer):
            return True
    return False


def _clearance_offsets(state: PackingState, shape: Shape) -> list[Vector3]:
    """Nudges into the space that open the widest clearance this shape needs against packed items."""
    gx = gy = gz = 0.0
    for packed in state.packed:
        bx, by, bz = clearance(shape, packed.item.shape, state.settings)
        gx, gy, gz = max(gx, bx), max(gy, by), max(gz, bz)

    offsets: list[Vector3] = []
    # sideways first so the item stays on its floor or support
    for offset in ((gx, 0.0, 0.0), (0.0, 0.0, gz), (gx, 0.0, gz), (0.0, gy, 0.0), (gx, gy, gz)):
        if any(offset) and offset not in offsets:
            offsets.append(offset)
    return offsets


def _clear_position(state: PackingState, item: Item, candidate: Candidate) -> Optional[Vector3]:
    """Offset from the space corner at which the candidate is collision free, if any."""
    if not would_overlap(state, candidate.center, candidate.dims, item.shape):
        return 0.0, 0.0, 0.0

    cx, cy, cz = candidate.center
    for offset in _clearance_offsets(state, item.shape):
        if any(candidate.dims[axis] + offset[axis] > candidate.space.size[axis] for axis in range(3)):
            continue
        ox, oy, oz = offset
        if not would_overlap(state, (cx + ox, cy + oy, cz + oz), candidate.dims, item.shape):
            return offset
    return None


def place_item(state: PackingState, item: Item) -> Optional[PackedItem]:
    """
    Search and commit a placement for item.

    A cylinder or sphere that would sit flush against a neighbour is moved
    into its space by the clearance it needs, when the space has room for it.
    Returns the packed item, or None when nothing fits or the chosen
    candidate still collides with an already packed item.
    """
    candidate = find_best_placement(state, item)
    if candidate is None:
        logger.debug(f"No space for item {item.id}")
        return None

    offset = _clear_position(state, item, candidate)
    if offset is None:
        logger.warning(f"Collision detected during placement, skipping item {item.id} at {candidate.center}")
        return None

    (cx, cy, cz), (ox, oy, oz) = candidate.center, offset
    center = (cx + ox, cy + oy, cz + oz)
    # the clearance gap is used up along with the item
    occupied = tuple(candidate.dims[axis] + offset[axis] for axis in range(3))

    packed = PackedItem(item=item, position=list(center), rotation=candidate.rotation)
    state.packed.append(packed)
    state.spaces.consume(candidate.space, (occupied[0], occupied[1], occupied[2]))
    logger.debug(f"Placed item {item.id} at {center} rotation={candidate.rotation}")
    return packed
