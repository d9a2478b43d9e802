from __future__ import annotations

import logging

import pytest

from cargo_packer.config import PackingSettings
from cargo_packer.models import Container, Item
from cargo_packer.packing.overlap import minimum_separation, resolve_overlaps, tight_overlap
from cargo_packer.packing.state import PackedItem, PackingState


def cube(item_id: str, size: float) -> Item:
    return Item(id=item_id, length=size, width=size, height=size, weight=1.0)


def new_state(settings: PackingSettings = PackingSettings()) -> PackingState:
    return PackingState.for_container(Container(width=100, height=100, depth=100), settings)


def test_near_touching_is_not_an_overlap() -> None:
    a = PackedItem(item=cube("A", 10), position=[0.0, 0.0, 0.0], rotation=0)
    b = PackedItem(item=cube("B", 10), position=[9.99, 0.0, 0.0], rotation=0)

    assert tight_overlap(a, b, margin=0.02) is False
    assert tight_overlap(a, b, margin=0.0) is True


def test_minimum_separation_picks_smallest_penetration() -> None:
    a = PackedItem(item=cube("A", 10), position=[0.0, 0.0, 0.0], rotation=0)
    b = PackedItem(item=cube("B", 10), position=[1.0, -7.0, 2.0], rotation=0)

    axis, amount = minimum_separation(a, b)

    assert axis == 1
    assert amount == pytest.approx(-3.0)


def test_resolver_pushes_second_item_along_cheapest_axis() -> None:
    state = new_state()
    a = PackedItem(item=cube("A", 10), position=[0.0, 0.0, 0.0], rotation=0)
    b = PackedItem(item=cube("B", 10), position=[4.0, 0.0, 0.0], rotation=0)
    state.packed.extend([a, b])

    corrections = resolve_overlaps(state)

    assert corrections == 1
    assert a.position == [0.0, 0.0, 0.0]
    assert b.position[0] == pytest.approx(10.2)
    assert not tight_overlap(a, b, state.settings.overlap_margin)


def test_resolver_keeps_items_inside_the_container() -> None:
    state = new_state()
    # B against the +X wall; it cannot move further so A gives way
    a = PackedItem(item=cube("A", 10), position=[40.0, -45.0, 0.0], rotation=0)
    b = PackedItem(item=cube("B", 10), position=[45.0, -45.0, 0.0], rotation=0)
    state.packed.extend([a, b])

    resolve_overlaps(state)

    assert b.position[0] == pytest.approx(45.0)
    assert a.position[0] == pytest.approx(34.8)
    assert not tight_overlap(a, b, state.settings.overlap_margin)


def test_resolver_without_overlaps_does_nothing() -> None:
    state = new_state()
    a = PackedItem(item=cube("A", 10), position=[0.0, 0.0, 0.0], rotation=0)
    b = PackedItem(item=cube("B", 10), position=[10.0, 0.0, 0.0], rotation=0)
    state.packed.extend([a, b])

    assert resolve_overlaps(state) == 0
    assert b.position == [10.0, 0.0, 0.0]


def test_resolver_stops_at_round_cap(caplog) -> None:
    # no room anywhere: three cubes that cannot all fit along any axis
    settings = PackingSettings(max_correction_rounds=3)
    state = PackingState.for_container(Container(width=10, height=10, depth=10), settings)
    state.packed.extend(
        PackedItem(item=cube(name, 10), position=[0.0, 0.0, 0.0], rotation=0) for name in "ABC"
    )

    with caplog.at_level(logging.WARNING, logger="cargo_packer.packing.overlap"):
        corrections = resolve_overlaps(state)

    # every pair is corrected in each of the three rounds, then it gives up
    assert corrections == 9
    assert "stopped after 3 rounds" in caplog.text
    assert tight_overlap(state.packed[0], state.packed[1], settings.overlap_margin)
