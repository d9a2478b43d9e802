# src/cargo_packer/packing/overlap.py

from __future__ import annotations

import logging
import math
import threading
from typing import Optional

from cargo_packer.geometry import boxes_overlap, penetration
from cargo_packer.packing.state import PackedItem, PackingState, check_cancelled

logger = logging.getLogger(__name__)


def tight_overlap(a: PackedItem, b: PackedItem, margin: float) -> bool:
    """Overlap with a safety margin subtracted: near-touching items count as apart."""
    ax, ay, az = a.position
    bx, by, bz = b.position
    return boxes_overlap((ax, ay, az), a.dims, (bx, by, bz), b.dims, (-margin, -margin, -margin))


def minimum_separation(a: PackedItem, b: PackedItem) -> tuple[int, float]:
    """
    Cheapest axis to separate b from a, and the signed distance to move b.

    Picks the smallest positive penetration; b moves away from a along it
    (negative direction when the centres coincide on that axis).
    """
    ax, ay, az = a.position
    bx, by, bz = b.position
    depths = penetration((ax, ay, az), a.dims, (bx, by, bz), b.dims)

    axis = 0
    smallest = math.inf
    for candidate, depth in enumerate(depths):
        if 0 < depth < smallest:
            smallest = depth
            axis = candidate
    if smallest == math.inf:
        smallest = 0.0

    direction = 1.0 if b.position[axis] > a.position[axis] else -1.0
    return axis, smallest * direction


def _shift_within(state: PackingState, packed: PackedItem, axis: int, delta: float) -> float:
    """Move packed along axis by delta, clamped inside the container. Returns the distance moved."""
    low, high = state.bounds(axis)
    half = packed.dims[axis] / 2
    # keep the centre where the whole box stays inside
    target = min(max(packed.position[axis] + delta, low + half), high - half)
    moved = target - packed.position[axis]
    packed.position[axis] = target
    return moved


def separate(state: PackingState, a: PackedItem, b: PackedItem) -> None:
    """Push b off a along the cheapest axis; a takes whatever the container wall blocks."""
    axis, amount = minimum_separation(a, b)
    margin = state.settings.separation_margin
    delta = amount + math.copysign(margin, amount)

    moved = _shift_within(state, b, axis, delta)
    remaining = delta - moved
    if abs(remaining) > state.settings.epsilon:
        _shift_within(state, a, axis, -remaining)


def resolve_overlaps(state: PackingState, cancel_event: Optional[threading.Event] = None) -> int:
    """
    Push apart any items that still overlap, for a bounded number of rounds.

    Returns the number of corrections made. Does not re-settle afterwards,
    so a corrected item may end up slightly off its support.
    """
    margin = state.settings.overlap_margin
    corrections = 0

    for round_no in range(state.settings.max_correction_rounds):
        check_cancelled(cancel_event)
        found = False
        for i in range(len(state.packed)):
            for j in range(i + 1, len(state.packed)):
                a, b = state.packed[i], state.packed[j]
                if tight_overlap(a, b, margin):
                    found = True
                    corrections += 1
                    separate(state, a, b)
        if not found:
            if corrections:
                logger.info(f"Resolved overlaps with {corrections} corrections in {round_no + 1} rounds")
            return corrections

    logger.warning(
        f"Overlap correction stopped after {state.settings.max_correction_rounds} rounds "
        f"({corrections} corrections); result may still overlap"
    )
    return corrections
