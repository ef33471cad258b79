"""
Geometry
========

Minimal mutable 3-vector used for particle positions and velocities.

World axes: x/z span the ground plane, y points up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import math


@dataclass
class Vec3:
    """Mutable 3D vector."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def zero() -> "Vec3":
        return Vec3(0.0, 0.0, 0.0)

    def copy(self) -> "Vec3":
        return Vec3(self.x, self.y, self.z)

    def set(self, x: float, y: float, z: float) -> "Vec3":
        """Overwrite all components in place."""
        self.x = x
        self.y = y
        self.z = z
        return self

    def add_scaled(self, other: "Vec3", scale: float) -> "Vec3":
        """In-place ``self += other * scale``."""
        self.x += other.x * scale
        self.y += other.y * scale
        self.z += other.z * scale
        return self

    def distance_to(self, other: "Vec3") -> float:
        """Euclidean distance in 3D."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def planar_distance_to(self, x: float, z: float) -> float:
        """Distance on the ground plane, ignoring height."""
        dx = self.x - x
        dz = self.z - z
        return math.sqrt(dx * dx + dz * dz)

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)
