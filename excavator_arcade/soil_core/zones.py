"""
Zone Registry
=============

Static circular target pits, each requiring one soil color.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.geometry import Vec3


@dataclass(frozen=True)
class Zone:
    """A pit on the ground plane. Immutable once created."""
    x: float
    z: float
    radius: float
    color: int

    def planar_distance(self, position: Vec3) -> float:
        """Ground-plane distance from the pit center, ignoring height."""
        return position.planar_distance_to(self.x, self.z)

    def contains(self, position: Vec3) -> bool:
        """True if the position lies strictly inside the pit radius."""
        return self.planar_distance(position) < self.radius

    def accepts(self, color: int) -> bool:
        return color == self.color


class ZoneRegistry:
    """Holds the pits of the current level."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._default_radius = config.zones.radius
        self._zones: List[Zone] = []

    @property
    def zones(self) -> List[Zone]:
        return self._zones

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self) -> Iterator[Zone]:
        return iter(self._zones)

    def add_zone(
        self,
        x: float,
        z: float,
        color: int,
        radius: Optional[float] = None
    ) -> Zone:
        """
        Register a pit.

        Args:
            x, z: Pit center on the ground plane.
            color: Required color tag.
            radius: Pit radius. Uses config default if None.

        Returns:
            The created Zone.
        """
        zone = Zone(
            x=x,
            z=z,
            radius=self._default_radius if radius is None else radius,
            color=color
        )
        self._zones.append(zone)
        return zone

    def clear(self) -> None:
        """Remove all pits."""
        self._zones = []
