# src/cargo_packer/packing/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from cargo_packer.config import PackingSettings
from cargo_packer.geometry import Vector3, rotated_dimensions
from cargo_packer.models import Container, Item, Placement
from cargo_packer.packing.free_space import FreeSpaceTracker


class PackingCancelled(RuntimeError):
    """Raised when a packing run is cancelled through its cancel event."""


def check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise PackingCancelled("packing run cancelled")


@dataclass
class PackedItem:
    """Mutable placement used while settling and correcting."""

    item: Item
    position: list[float]
    rotation: int

    @property
    def dims(self) -> Vector3:
        return rotated_dimensions(self.item, self.rotation)

    @property
    def bottom(self) -> float:
        return self.position[1] - self.dims[1] / 2

    @property
    def top(self) -> float:
        return self.position[1] + self.dims[1] / 2

    def to_placement(self) -> Placement:
        x, y, z = self.position
        return Placement(item=self.item, position=(x, y, z), rotation=self.rotation)


@dataclass
class PackingState:
    """Everything one packing run owns: free spaces, packed items and the floor."""

    container: Container
    settings: PackingSettings
    spaces: FreeSpaceTracker
    packed: list[PackedItem] = field(default_factory=list)

    @classmethod
    def for_container(cls, container: Container, settings: PackingSettings) -> "PackingState":
        return cls(
            container=container,
            settings=settings,
            spaces=FreeSpaceTracker.for_container(container, epsilon=settings.epsilon),
        )

    @property
    def floor_y(self) -> float:
        return self.container.floor_y

    @property
    def extents(self) -> Vector3:
        """Container size along (X, Y, Z): depth, height, width."""
        c = self.container
        return float(c.depth), float(c.height), float(c.width)

    def bounds(self, axis: int) -> tuple[float, float]:
        half = self.extents[axis] / 2
        return -half, half
