# src/cargo_packer/packing/bin_packer.py

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from cargo_packer.config import PackingSettings
from cargo_packer.models import Container, Item, PackingResult, Placement
from cargo_packer.packing.gravity import apply_gravity
from cargo_packer.packing.overlap import resolve_overlaps
from cargo_packer.packing.placement import place_item
from cargo_packer.packing.state import PackingState, check_cancelled

logger = logging.getLogger(__name__)


def item_volume(item: Item) -> float:
    return float(item.length) * float(item.width) * float(item.height)


def pack_items(
    items: Iterable[Item],
    container: Container,
    settings: Optional[PackingSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> PackingResult:
    """
    Free-space packer with gravity settling and overlap correction.
    - Largest items first (stable sort, ties keep input order)
    - Evaluates every free space x 6 orientations, preferring stable, low positions
    - Items that do not fit are reported in `unplaced`, never raised
    - Deterministic (no randomness)
    - Weight is NOT enforced; container.max_weight is the caller's concern
    """
    settings = settings or PackingSettings()
    state = PackingState.for_container(container, settings)

    # Sort big items first (helps fill)
    items_sorted = sorted(items, key=item_volume, reverse=True)
    unplaced: list[Item] = []

    for item in items_sorted:
        check_cancelled(cancel_event)
        if place_item(state, item) is None:
            unplaced.append(item)

    apply_gravity(state, cancel_event)
    resolve_overlaps(state, cancel_event)

    placements = [p.to_placement() for p in state.packed]
    logger.info(
        f"packed={len(placements)}, unplaced={len(unplaced)}, "
        f"free_spaces={len(state.spaces)}, "
        f"container={container.depth}x{container.height}x{container.width}"
    )
    return PackingResult(placements=placements, unplaced=unplaced)


def pack(
    items: Iterable[Item],
    container: Container,
    settings: Optional[PackingSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> list[Placement]:
    """
    Pack items into container and return the placements.

    Items that cannot be placed are silently left out; compare lengths
    (or use pack_items) to find out whether everything fit.
    """
    return pack_items(items, container, settings, cancel_event).placements
