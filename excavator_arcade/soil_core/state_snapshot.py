"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations
and renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TYPE_CHECKING
import numpy as np

from excavator_arcade.soil_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from excavator_arcade.soil_core.effector import EffectorState
    from excavator_arcade.soil_core.soil_system import SoilSystem


@dataclass
class GameSnapshot:
    """
    Game state at the end of a frame.

    Particle and zone arrays are fixed-size with masking for variable counts.
    """
    # Level state
    level: int
    time_left: float
    correct_count: int
    target_count: int
    particle_count: int
    attached_count: int

    # Excavator
    base_x: float
    base_z: float
    heading: float
    bucket_position: Tuple[float, float, float]
    scoop_active: bool

    # Particle arrays (MAX_PARTICLES,)
    particle_x: np.ndarray
    particle_y: np.ndarray
    particle_z: np.ndarray
    particle_color: np.ndarray        # int32 0xRRGGBB, -1 for padding
    particle_attached: np.ndarray     # bool
    particle_mask: np.ndarray         # bool

    # Zone arrays (MAX_ZONES,)
    zone_x: np.ndarray
    zone_z: np.ndarray
    zone_radius: np.ndarray
    zone_color: np.ndarray
    zone_count: np.ndarray            # matching particles per zone
    zone_mask: np.ndarray

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "level": np.array(self.level, dtype=np.int32),
            "time_left": np.array(self.time_left, dtype=np.float32),
            "correct_count": np.array(self.correct_count, dtype=np.int32),
            "target_count": np.array(self.target_count, dtype=np.int32),
            "particle_count": np.array(self.particle_count, dtype=np.int32),
            "attached_count": np.array(self.attached_count, dtype=np.int32),

            "base_position": np.array([self.base_x, self.base_z], dtype=np.float32),
            "heading": np.array(self.heading, dtype=np.float32),
            "bucket_position": np.array(self.bucket_position, dtype=np.float32),
            "scoop_active": np.array(int(self.scoop_active), dtype=np.int8),

            "particle_x": self.particle_x,
            "particle_y": self.particle_y,
            "particle_z": self.particle_z,
            "particle_color": self.particle_color,
            "particle_attached": self.particle_attached.astype(np.int8),
            "particle_mask": self.particle_mask.astype(np.int8),

            "zone_x": self.zone_x,
            "zone_z": self.zone_z,
            "zone_radius": self.zone_radius,
            "zone_color": self.zone_color,
            "zone_count": self.zone_count,
            "zone_mask": self.zone_mask.astype(np.int8),
        }


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_particles = config.observation.max_particles
        self._max_zones = config.observation.max_zones

    @property
    def max_particles(self) -> int:
        return self._max_particles

    @property
    def max_zones(self) -> int:
        return self._max_zones

    def build(
        self,
        soil: "SoilSystem",
        effector: "EffectorState",
        level: int,
        time_left: float,
        target_count: int,
        base_x: float,
        base_z: float,
        heading: float
    ) -> GameSnapshot:
        """
        Build a snapshot of the current frame.

        Particles past max_particles are dropped from the arrays but still
        counted in particle_count.
        """
        n = self._max_particles
        px = np.zeros(n, dtype=np.float32)
        py = np.zeros(n, dtype=np.float32)
        pz = np.zeros(n, dtype=np.float32)
        pcolor = np.full(n, -1, dtype=np.int32)
        pattached = np.zeros(n, dtype=bool)
        pmask = np.zeros(n, dtype=bool)

        attached_count = 0
        for i, particle in enumerate(soil.particles):
            if particle.is_attached:
                attached_count += 1
            if i >= n:
                continue
            px[i] = particle.position.x
            py[i] = particle.position.y
            pz[i] = particle.position.z
            pcolor[i] = particle.color
            pattached[i] = particle.is_attached
            pmask[i] = True

        m = self._max_zones
        zx = np.zeros(m, dtype=np.float32)
        zz = np.zeros(m, dtype=np.float32)
        zr = np.zeros(m, dtype=np.float32)
        zcolor = np.full(m, -1, dtype=np.int32)
        zcount = np.zeros(m, dtype=np.int32)
        zmask = np.zeros(m, dtype=bool)

        counts = soil.zone_counts()
        for i, zone in enumerate(soil.zones):
            if i >= m:
                break
            zx[i] = zone.x
            zz[i] = zone.z
            zr[i] = zone.radius
            zcolor[i] = zone.color
            zcount[i] = counts[i]
            zmask[i] = True

        return GameSnapshot(
            level=level,
            time_left=time_left,
            correct_count=int(sum(counts)),
            target_count=target_count,
            particle_count=len(soil.particles),
            attached_count=attached_count,
            base_x=base_x,
            base_z=base_z,
            heading=heading,
            bucket_position=effector.position.as_tuple(),
            scoop_active=effector.scoop_active,
            particle_x=px,
            particle_y=py,
            particle_z=pz,
            particle_color=pcolor,
            particle_attached=pattached,
            particle_mask=pmask,
            zone_x=zx,
            zone_z=zz,
            zone_radius=zr,
            zone_color=zcolor,
            zone_count=zcount,
            zone_mask=zmask,
        )
