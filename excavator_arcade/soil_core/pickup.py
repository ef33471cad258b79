"""
Pickup/Release State Machine
============================

Decides, per particle and per frame, whether soil enters or leaves the bucket.

Transitions:
    Free -> Attached: scoop active, distance to the scoop point below the
                      pickup radius and particle height below the max height.
    Attached -> Free: scoop released. Velocity restarts at zero.
    Attached (scoop held): teleported to the scoop point plus jitter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import random

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.effector import EffectorState
from excavator_arcade.soil_core.geometry import Vec3
from excavator_arcade.soil_core.particles import ParticleStore, SoilParticle


@dataclass
class PickupEvent:
    """A sampled pickup that should trigger debris and the dig sound."""
    slot: int
    position: Vec3
    color: int

    def __repr__(self) -> str:
        p = self.position
        return f"PickupEvent(slot={self.slot}, pos=({p.x:.2f}, {p.y:.2f}, {p.z:.2f}))"


@dataclass
class InteractionResult:
    """Transitions made during one state machine update."""
    attached: List[int] = field(default_factory=list)
    released: List[int] = field(default_factory=list)
    events: List[PickupEvent] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.attached or self.released)


class PickupStateMachine:
    """
    Attach/detach logic between the particles and the bucket.

    Each particle is visited once per update using the state it had when the
    update began, so a particle scooped this frame starts following the
    bucket on the next frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        pickup_radius: Optional[float] = None,
        max_height: Optional[float] = None,
        carry_jitter: Optional[float] = None,
        effect_chance: Optional[float] = None
    ):
        """
        Args:
            config: Game configuration. Uses default if None.
            rng: Random source for jitter and effect sampling.
            pickup_radius: Override for soil.pickup_radius.
            max_height: Override for soil.pickup_max_height.
            carry_jitter: Override for soil.carry_jitter.
            effect_chance: Override for soil.pickup_effect_chance.
        """
        if config is None:
            config = get_config()

        soil = config.soil
        self._rng = rng if rng is not None else random.Random()
        self._pickup_radius = soil.pickup_radius if pickup_radius is None else pickup_radius
        self._max_height = soil.pickup_max_height if max_height is None else max_height
        self._carry_jitter = soil.carry_jitter if carry_jitter is None else carry_jitter
        self._effect_chance = soil.pickup_effect_chance if effect_chance is None else effect_chance

    @property
    def rng(self) -> random.Random:
        return self._rng

    @rng.setter
    def rng(self, value: random.Random) -> None:
        self._rng = value

    @property
    def effect_chance(self) -> float:
        return self._effect_chance

    def can_pick_up(self, particle: SoilParticle, effector: EffectorState) -> bool:
        """True if a free particle would be scooped by this effector state."""
        return (
            effector.scoop_active
            and particle.is_free
            and particle.position.distance_to(effector.position) < self._pickup_radius
            and particle.position.y < self._max_height
        )

    def update(self, store: ParticleStore, effector: EffectorState) -> InteractionResult:
        """
        Run one frame of attach/detach decisions.

        Args:
            store: Particles to update.
            effector: Read-only scoop point and intent.

        Returns:
            InteractionResult with the slots that changed state and any
            sampled pickup events.
        """
        result = InteractionResult()

        for particle in store:
            if particle.is_attached:
                if not effector.scoop_active:
                    particle.release()
                    result.released.append(particle.slot)
                else:
                    self._follow(particle, effector.position)
            elif self.can_pick_up(particle, effector):
                particle.attach()
                result.attached.append(particle.slot)
                if self._rng.random() < self._effect_chance:
                    result.events.append(PickupEvent(
                        slot=particle.slot,
                        position=particle.position.copy(),
                        color=particle.color
                    ))

        return result

    def _follow(self, particle: SoilParticle, target: Vec3) -> None:
        """Snap an attached particle to the scoop point with per-axis wobble."""
        j = self._carry_jitter
        particle.position.set(
            target.x + self._rng.uniform(-j, j),
            target.y + self._rng.uniform(-j, j),
            target.z + self._rng.uniform(-j, j)
        )
