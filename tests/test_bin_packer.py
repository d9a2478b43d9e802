import threading

import pytest
from pydantic import ValidationError

from cargo_packer.config import PackingSettings
from cargo_packer.geometry import boxes_overlap, clearance
from cargo_packer.models import Container, Item, Shape
from cargo_packer.packing.bin_packer import pack, pack_items
from cargo_packer.packing.state import PackingCancelled

EPS = 1e-6


def bounds_from_placement(p):
    (x, y, z), (dx, dy, dz) = p.position, p.dimensions
    return (x - dx / 2, y - dy / 2, z - dz / 2, x + dx / 2, y + dy / 2, z + dz / 2)


def assert_within_container(container, placements):
    for p in placements:
        x1, y1, z1, x2, y2, z2 = bounds_from_placement(p)
        assert x1 >= -container.depth / 2 - EPS and x2 <= container.depth / 2 + EPS
        assert y1 >= container.floor_y - EPS and y2 <= container.floor_y + container.height + EPS
        assert z1 >= -container.width / 2 - EPS and z2 <= container.width / 2 + EPS


def assert_no_overlaps(placements):
    settings = PackingSettings()
    for i in range(len(placements)):
        for j in range(i + 1, len(placements)):
            a, b = placements[i], placements[j]
            # face contact may come out a rounding error inside
            bx, by, bz = clearance(a.item.shape, b.item.shape, settings)
            buffer = (bx - EPS, by - EPS, bz - EPS)
            assert not boxes_overlap(a.position, a.dimensions, b.position, b.dimensions, buffer), (
                f"{a.item.id} overlaps {b.item.id}"
            )


def assert_supported(container, placements):
    for p in placements:
        bottom = bounds_from_placement(p)[1]
        if abs(bottom - container.floor_y) < 1e-3:
            continue
        x1, _, z1, x2, _, z2 = bounds_from_placement(p)
        supporters = [
            q for q in placements
            if q is not p
            and abs(bounds_from_placement(q)[4] - bottom) < 1e-3
            and x1 < bounds_from_placement(q)[3] and x2 > bounds_from_placement(q)[0]
            and z1 < bounds_from_placement(q)[5] and z2 > bounds_from_placement(q)[2]
        ]
        assert supporters, f"{p.item.id} is floating"


def box(item_id, length, width, height, weight=1.0, shape=Shape.BOX):
    return Item(id=item_id, length=length, width=width, height=height, weight=weight, shape=shape)


def test_single_item_rests_on_the_floor():
    container = Container(width=180, height=180, depth=300)

    placements = pack([box("A", 50, 50, 50, weight=10)], container)

    assert len(placements) == 1
    (p,) = placements
    assert p.position[1] == pytest.approx(-65.0)
    assert p.position == pytest.approx((-125.0, -65.0, -65.0))
    assert p.rotation == 0


def test_item_longer_than_every_axis_is_dropped():
    container = Container(width=100, height=100, depth=100)

    result = pack_items([box("long", 150, 50, 50, weight=5)], container)

    assert result.placements == []
    assert [i.id for i in result.unplaced] == ["long"]
    assert result.all_placed is False


def test_two_cubes_in_a_cube_container():
    container = Container(width=200, height=200, depth=200)
    items = [box("A", 100, 100, 100), box("B", 100, 100, 100)]

    placements = pack(items, container)

    assert [p.item.id for p in placements] == ["A", "B"]
    assert placements[0].position == pytest.approx((-50.0, -50.0, -50.0))
    assert placements[1].position == pytest.approx((50.0, -50.0, -50.0))
    assert_within_container(container, placements)
    assert_no_overlaps(placements)
    assert_supported(container, placements)


def test_second_cube_stacks_in_a_narrow_container():
    container = Container(width=100, height=200, depth=100)
    items = [box("A", 100, 100, 100), box("B", 100, 100, 100)]

    placements = pack(items, container)

    assert len(placements) == 2
    lower, upper = placements
    assert bounds_from_placement(upper)[1] == pytest.approx(bounds_from_placement(lower)[4])
    assert_supported(container, placements)


def test_no_items_gives_empty_result():
    assert pack([], Container(width=100, height=100, depth=100)) == []


def test_weight_is_not_enforced():
    container = Container(width=100, height=100, depth=100, max_weight=100)

    placements = pack([box("heavy", 10, 10, 10, weight=500)], container)

    assert [p.item.id for p in placements] == ["heavy"]


def test_largest_item_is_tried_first():
    container = Container(width=100, height=100, depth=100)
    items = [box("A", 60, 60, 60), box("B", 70, 70, 70), box("C", 80, 80, 80)]

    result = pack_items(items, container)

    assert [p.item.id for p in result.placements] == ["C"]
    assert [i.id for i in result.unplaced] == ["B", "A"]


def test_packing_is_deterministic():
    container = Container(width=180, height=180, depth=350)
    items = [
        box(f"I{i}", 20 + (i * 7) % 40, 15 + (i * 11) % 35, 10 + (i * 5) % 30)
        for i in range(25)
    ]

    first = pack(items, container)
    second = pack(items, container)

    assert [p.model_dump() for p in first] == [p.model_dump() for p in second]


def test_mixed_load_invariants():
    container = Container(width=180, height=180, depth=350)
    items = [box(f"B{i}", 40, 30, 30) for i in range(30)]
    items += [box(f"T{i}", 60, 60, 20) for i in range(6)]

    result = pack_items(items, container)

    assert len(result.placements) + len(result.unplaced) == len(items)
    assert len(result.placements) > 0
    assert_within_container(container, result.placements)
    assert_no_overlaps(result.placements)


def test_cubes_fill_a_grid():
    container = Container(width=30, height=30, depth=30)
    items = [box(f"C{i}", 10, 10, 10) for i in range(27)]

    result = pack_items(items, container)

    assert len(result.placements) > 0
    assert_within_container(container, result.placements)
    assert_no_overlaps(result.placements)
    assert_supported(container, result.placements)


def test_curved_shapes_keep_their_clearance():
    container = Container(width=180, height=180, depth=350)
    items = [box(f"B{i}", 50, 40, 40) for i in range(4)]
    items += [box(f"C{i}", 30, 30, 60, shape=Shape.CYLINDER) for i in range(3)]
    items += [box(f"S{i}", 25, 25, 25, shape=Shape.SPHERE) for i in range(3)]

    result = pack_items(items, container)

    assert result.unplaced == []
    curved = [p for p in result.placements if p.item.shape is not Shape.BOX]
    assert len(curved) == 6
    assert_within_container(container, result.placements)
    assert_no_overlaps(result.placements)
    assert_supported(container, result.placements)


def test_decimal_sizes_pack_without_losses():
    container = Container(width=180, height=180, depth=350)
    items = [box(f"b{i}", 40.3, 30.7, 20.1) for i in range(20)]

    result = pack_items(items, container)

    assert result.unplaced == []
    assert_within_container(container, result.placements)
    assert_no_overlaps(result.placements)
    assert_supported(container, result.placements)


def test_cube_rests_on_a_plate_thinner_than_a_gravity_step():
    container = Container(width=100, height=100, depth=100)
    items = [box("plate", 100, 100, 0.3), box("cube", 10, 10, 10)]

    result = pack_items(items, container)

    assert result.unplaced == []
    plate, cube = result.placements
    assert bounds_from_placement(cube)[1] == pytest.approx(bounds_from_placement(plate)[4])
    assert_within_container(container, result.placements)
    assert_no_overlaps(result.placements)
    assert_supported(container, result.placements)


def test_input_order_is_untouched():
    container = Container(width=100, height=100, depth=100)
    items = [box("small", 10, 10, 10), box("big", 50, 50, 50)]

    pack(items, container)

    assert [i.id for i in items] == ["small", "big"]


def test_invalid_container_fails_fast():
    with pytest.raises(ValidationError):
        Container(width=0, height=100, depth=100)


def test_invalid_item_fails_fast():
    with pytest.raises(ValidationError):
        box("bad", -1, 10, 10)


def test_cancelled_run_raises():
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(PackingCancelled):
        pack([box("A", 10, 10, 10)], Container(width=100, height=100, depth=100), cancel_event=cancel)
