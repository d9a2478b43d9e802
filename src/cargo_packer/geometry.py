"""Geometry utilities: orientations, overlap and penetration of centred boxes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from cargo_packer.models import Shape

if TYPE_CHECKING:
    from .config import PackingSettings
    from .models import Item

Vector3 = tuple[float, float, float]

# Index triples into (length, width, height) giving the (X, Y, Z) extents.
# Orientation 0 keeps the item upright with its length along the depth axis.
ORIENTATIONS: tuple[tuple[int, int, int], ...] = (
    (0, 2, 1),  # 0: (L, H, W)
    (1, 2, 0),  # 1: (W, H, L) rotated about Y
    (0, 1, 2),  # 2: (L, W, H) rotated about X
    (2, 0, 1),  # 3: (H, L, W)
    (1, 0, 2),  # 4: (W, L, H)
    (2, 1, 0),  # 5: (H, W, L) rotated about Z
)


def rotated_dimensions(item: "Item", rotation: int) -> Vector3:
    """
    Axis-aligned (X, Y, Z) extents of an item in the given orientation.

    Y is vertical. Raises ValueError for an index outside 0..5.
    """
    if not 0 <= rotation < len(ORIENTATIONS):
        raise ValueError(f"rotation must be in 0..{len(ORIENTATIONS) - 1}, got {rotation}")
    dims = (float(item.length), float(item.width), float(item.height))
    ix, iy, iz = ORIENTATIONS[rotation]
    return dims[ix], dims[iy], dims[iz]


def all_orientations(item: "Item") -> list[Vector3]:
    return [rotated_dimensions(item, r) for r in range(len(ORIENTATIONS))]


def clearance(
    shape_a: Shape,
    shape_b: Shape,
    settings: "PackingSettings",
) -> Vector3:
    """
    Extra per-axis clearance for curved shapes packed as bounding boxes.

    Cylinders add horizontal (X/Z) clearance, spheres add clearance on all
    three axes. Both rules apply when both shapes are involved.
    """
    bx = by = bz = 0.0
    if Shape.CYLINDER in (shape_a, shape_b):
        bx += settings.cylinder_clearance
        bz += settings.cylinder_clearance
    if Shape.SPHERE in (shape_a, shape_b):
        bx += settings.sphere_clearance
        by += settings.sphere_clearance
        bz += settings.sphere_clearance
    return bx, by, bz


def boxes_overlap(
    pos_a: Vector3,
    size_a: Vector3,
    pos_b: Vector3,
    size_b: Vector3,
    buffer: Optional[Vector3] = None,
) -> bool:
    """
    Overlap test for axis-aligned boxes given as centre + full size.

    Overlap exists only if they overlap on ALL 3 axes.
    Touching faces (|d| == (a + b) / 2) is NOT considered overlap.
    A negative buffer shrinks the test (near-touching counts as apart).
    """
    buf = buffer or (0.0, 0.0, 0.0)
    return all(
        abs(pos_a[axis] - pos_b[axis]) < (size_a[axis] + size_b[axis]) / 2 + buf[axis]
        for axis in range(3)
    )


def penetration(pos_a: Vector3, size_a: Vector3, pos_b: Vector3, size_b: Vector3) -> Vector3:
    """Per-axis intrusion depth (a + b) / 2 - |d|; positive means intruding."""
    px, py, pz = (
        (size_a[axis] + size_b[axis]) / 2 - abs(pos_a[axis] - pos_b[axis])
        for axis in range(3)
    )
    return px, py, pz


def footprints_overlap(
    x1: float, z1: float, dx1: float, dz1: float,
    x2: float, z2: float, dx2: float, dz2: float,
) -> bool:
    """Horizontal overlap of two corner-anchored rectangles on the X/Z plane."""
    return x1 < x2 + dx2 and x1 + dx1 > x2 and z1 < z2 + dz2 and z1 + dz1 > z2
