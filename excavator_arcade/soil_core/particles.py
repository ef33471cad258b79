"""
Particle Store
==============

Owns the soil particles: spawning piles, slot-addressed access and clearing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union
import math
import random

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.geometry import Vec3


class ParticleState(Enum):
    """Attachment state of a soil particle."""
    FREE = "free"
    ATTACHED = "attached"


@dataclass
class FreeState:
    """On or above the ground and subject to gravity."""
    velocity: Vec3 = field(default_factory=Vec3.zero)
    grounded: bool = True

    @property
    def kind(self) -> ParticleState:
        return ParticleState.FREE


@dataclass
class AttachedState:
    """Riding in the bucket. Position is driven by the effector."""

    @property
    def kind(self) -> ParticleState:
        return ParticleState.ATTACHED


@dataclass
class SoilParticle:
    """
    A single unit of soil.

    The slot is the particle's index in its ParticleStore and stays stable
    until the store is cleared.
    """
    slot: int
    position: Vec3
    color: int
    state: Union[FreeState, AttachedState] = field(default_factory=FreeState)

    @property
    def kind(self) -> ParticleState:
        return self.state.kind

    @property
    def is_attached(self) -> bool:
        return isinstance(self.state, AttachedState)

    @property
    def is_free(self) -> bool:
        return isinstance(self.state, FreeState)

    @property
    def velocity(self) -> Vec3:
        """Current velocity. Attached particles report a zero vector."""
        if isinstance(self.state, FreeState):
            return self.state.velocity
        return Vec3.zero()

    @property
    def grounded(self) -> bool:
        if isinstance(self.state, FreeState):
            return self.state.grounded
        return False

    def attach(self) -> None:
        """Free -> Attached."""
        self.state = AttachedState()

    def release(self) -> None:
        """Attached -> Free, starting from rest at the current position."""
        self.state = FreeState(velocity=Vec3.zero(), grounded=False)

    def __repr__(self) -> str:
        p = self.position
        return (
            f"SoilParticle(slot={self.slot}, pos=({p.x:.2f}, {p.y:.2f}, {p.z:.2f}), "
            f"color=#{self.color:06x}, {self.kind.value})"
        )


class ParticleStore:
    """
    Arena of soil particles addressed by slot index.

    Handles:
    - Pile spawning (random scatter within a disc)
    - Slot lookup and iteration
    - Bulk clearing on level load/reset
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize an empty store.

        Args:
            config: Game configuration. Uses default if None.
            rng: Random source for pile scatter. Unseeded if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else random.Random()
        self._pile_radius = config.soil.pile_radius
        self._pile_height = config.soil.pile_height
        self._particles: List[SoilParticle] = []

    @property
    def particles(self) -> List[SoilParticle]:
        """All particles in slot order."""
        return self._particles

    @property
    def rng(self) -> random.Random:
        return self._rng

    @rng.setter
    def rng(self, value: random.Random) -> None:
        self._rng = value

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[SoilParticle]:
        return iter(self._particles)

    def get(self, slot: int) -> SoilParticle:
        """Get a particle by slot."""
        return self._particles[slot]

    def spawn_particle(self, x: float, y: float, z: float, color: int) -> SoilParticle:
        """
        Place a single free particle at an exact position.

        Args:
            x, y, z: World position.
            color: Color tag.

        Returns:
            The created particle.
        """
        particle = SoilParticle(
            slot=len(self._particles),
            position=Vec3(x, y, z),
            color=color,
            state=FreeState()
        )
        self._particles.append(particle)
        return particle

    def spawn_pile(
        self,
        center_x: float,
        center_z: float,
        count: int,
        color: int
    ) -> List[int]:
        """
        Scatter ``count`` particles over a disc around (center_x, center_z).

        Angle is uniform in [0, 2*pi), distance from the center uniform in
        [0, pile_radius) and height uniform in [0, pile_height). Every particle
        starts free with zero velocity.

        Returns:
            Slots of the new particles.
        """
        slots = []
        for _ in range(count):
            angle = self._rng.random() * math.pi * 2
            radius = self._rng.random() * self._pile_radius
            px = center_x + math.cos(angle) * radius
            pz = center_z + math.sin(angle) * radius
            py = self._rng.random() * self._pile_height
            slots.append(self.spawn_particle(px, py, pz, color).slot)
        return slots

    @property
    def attached_count(self) -> int:
        return sum(1 for p in self._particles if p.is_attached)

    def count_by_color(self) -> Dict[int, int]:
        """Number of particles per color tag."""
        counts: Dict[int, int] = {}
        for p in self._particles:
            counts[p.color] = counts.get(p.color, 0) + 1
        return counts

    def clear(self) -> None:
        """Remove all particles."""
        self._particles = []
