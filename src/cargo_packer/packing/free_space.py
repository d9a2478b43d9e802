# src/cargo_packer/packing/free_space.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from cargo_packer.geometry import Vector3
from cargo_packer.models import Container


@dataclass(frozen=True)
class FreeSpace:
    """Candidate empty region: min corner + size. Spaces may overlap each other."""

    position: Vector3
    size: Vector3


def initial_space(container: Container) -> FreeSpace:
    """
    One space spanning the whole container, centred on the origin.

    X spans the depth, Y the height (floor at -height/2), Z the width.
    """
    size = (float(container.depth), float(container.height), float(container.width))
    return FreeSpace(position=(-size[0] / 2, -size[1] / 2, -size[2] / 2), size=size)


def split_space(space: FreeSpace, item_size: Vector3, epsilon: float = 0.001) -> list[FreeSpace]:
    """
    Successor spaces after an item of item_size is put in the min corner of space.

    beside (X): only as tall and wide as the item
    above  (Y): full X and Z extent of the space
    behind (Z): full X and Y extent of the space
    """
    (px, py, pz), (sx, sy, sz) = space.position, space.size
    ix, iy, iz = item_size
    candidates = [
        FreeSpace(position=(px + ix, py, pz), size=(sx - ix, iy, iz)),
        FreeSpace(position=(px, py + iy, pz), size=(sx, sy - iy, sz)),
        FreeSpace(position=(px, py, pz + iz), size=(sx, sy, sz - iz)),
    ]
    return [s for s in candidates if all(extent > epsilon for extent in s.size)]


def _try_merge(a: FreeSpace, b: FreeSpace, epsilon: float) -> Optional[FreeSpace]:
    """Concatenate a and b along one axis if they line up exactly on the other two."""
    for axis in range(3):
        others = [o for o in range(3) if o != axis]
        if not all(
            abs(a.position[o] - b.position[o]) < epsilon and abs(a.size[o] - b.size[o]) < epsilon
            for o in others
        ):
            continue

        if abs(a.position[axis] + a.size[axis] - b.position[axis]) < epsilon:
            start = a.position[axis]
        elif abs(b.position[axis] + b.size[axis] - a.position[axis]) < epsilon:
            start = b.position[axis]
        else:
            continue

        position = list(a.position)
        size = list(a.size)
        position[axis] = start
        size[axis] = a.size[axis] + b.size[axis]
        return FreeSpace(position=(position[0], position[1], position[2]), size=(size[0], size[1], size[2]))
    return None


def merge_spaces(spaces: list[FreeSpace], epsilon: float = 0.001) -> list[FreeSpace]:
    """Merge adjacent compatible spaces until a full scan finds nothing to merge."""
    merged = list(spaces)
    changed = True
    while changed:
        changed = False
        for i in range(len(merged)):
            for j in range(i + 1, len(merged)):
                combined = _try_merge(merged[i], merged[j], epsilon)
                if combined is not None:
                    merged[i] = combined
                    del merged[j]
                    changed = True
                    break
            if changed:
                break
    return merged


class FreeSpaceTracker:
    """Ordered set of free spaces for one packing run."""

    def __init__(self, spaces: list[FreeSpace], epsilon: float = 0.001):
        self._spaces = list(spaces)
        self.epsilon = epsilon

    @classmethod
    def for_container(cls, container: Container, epsilon: float = 0.001) -> "FreeSpaceTracker":
        return cls([initial_space(container)], epsilon=epsilon)

    def __iter__(self) -> Iterator[FreeSpace]:
        return iter(list(self._spaces))

    def __len__(self) -> int:
        return len(self._spaces)

    @property
    def spaces(self) -> list[FreeSpace]:
        return list(self._spaces)

    def consume(self, space: FreeSpace, item_size: Vector3) -> None:
        """Remove space, add what is left beside/above/behind the item, then merge."""
        self._spaces = [s for s in self._spaces if s is not space]
        self._spaces.extend(split_space(space, item_size, self.epsilon))
        self._spaces = merge_spaces(self._spaces, self.epsilon)
