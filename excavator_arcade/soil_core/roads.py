"""
Road Network
============

Static axis-aligned road rectangles the excavator must stay on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from excavator_arcade.soil_core.config_loader import GameConfig, RoadConfig, get_config


@dataclass(frozen=True)
class RoadSegment:
    """A road rectangle centered at (x, z)."""
    x: float
    z: float
    width: float    # Extent along x
    length: float   # Extent along z

    @property
    def min_x(self) -> float:
        return self.x - self.width / 2

    @property
    def max_x(self) -> float:
        return self.x + self.width / 2

    @property
    def min_z(self) -> float:
        return self.z - self.length / 2

    @property
    def max_z(self) -> float:
        return self.z + self.length / 2

    def contains(self, x: float, z: float) -> bool:
        """Inclusive bounds check."""
        return self.min_x <= x <= self.max_x and self.min_z <= z <= self.max_z

    @staticmethod
    def from_config(road: RoadConfig) -> "RoadSegment":
        return RoadSegment(road.x, road.z, road.width, road.length)


class RoadNetwork:
    """Union of road segments."""

    def __init__(self, segments: Iterable[RoadSegment]):
        self._segments: List[RoadSegment] = list(segments)

    @classmethod
    def from_config(cls, config: Optional[GameConfig] = None) -> "RoadNetwork":
        if config is None:
            config = get_config()
        return cls(RoadSegment.from_config(r) for r in config.roads)

    @property
    def segments(self) -> List[RoadSegment]:
        return self._segments

    def __iter__(self) -> Iterator[RoadSegment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def is_on_road(self, x: float, z: float) -> bool:
        """True if the ground point (x, z) lies on any segment."""
        return any(seg.contains(x, z) for seg in self._segments)
