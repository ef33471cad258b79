"""
Ambient Effect Emitter
======================

Short-lived dig debris spawned on pickup events. Purely cosmetic: nothing
here is visible to the zone evaluator or the level rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import random

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.geometry import Vec3
from excavator_arcade.soil_core.physics import integrate_ballistic


@dataclass
class EffectParticle:
    """A debris fleck."""
    position: Vec3
    velocity: Vec3
    life: float
    color: int
    scale: float = 1.0


class EffectEmitter:
    """Spawns, ages and removes debris flecks."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Args:
            config: Game configuration. Uses default if None.
            rng: Random source for offsets and velocities.
        """
        if config is None:
            config = get_config()

        fx = config.effects
        self._rng = rng if rng is not None else random.Random()
        self._burst_count = fx.burst_count
        self._lifetime = fx.lifetime
        self._spawn_offset = fx.spawn_offset
        self._horizontal_speed = fx.horizontal_speed
        self._upward_speed = fx.upward_speed
        self._gravity = config.physics.gravity
        self._particles: List[EffectParticle] = []

    @property
    def particles(self) -> List[EffectParticle]:
        return self._particles

    @property
    def rng(self) -> random.Random:
        return self._rng

    @rng.setter
    def rng(self, value: random.Random) -> None:
        self._rng = value

    def __len__(self) -> int:
        return len(self._particles)

    def burst(self, position: Vec3, color: int) -> List[EffectParticle]:
        """
        Spawn one burst of debris around a pickup point.

        Returns:
            The new effect particles.
        """
        rng = self._rng
        off = self._spawn_offset
        hs = self._horizontal_speed
        spawned = []
        for _ in range(self._burst_count):
            p = EffectParticle(
                position=Vec3(
                    position.x + rng.uniform(-off, off),
                    position.y,
                    position.z + rng.uniform(-off, off)
                ),
                velocity=Vec3(
                    rng.uniform(-hs, hs),
                    rng.uniform(0.0, self._upward_speed),
                    rng.uniform(-hs, hs)
                ),
                life=self._lifetime,
                color=color,
                scale=self._lifetime
            )
            spawned.append(p)
        self._particles.extend(spawned)
        return spawned

    def update(self, dt: float) -> None:
        """Age every fleck; expired ones are removed, the rest fall freely."""
        alive = []
        for p in self._particles:
            p.life -= dt
            if p.life <= 0:
                continue
            integrate_ballistic(p.position, p.velocity, self._gravity, dt)
            p.scale = p.life
            alive.append(p)
        self._particles = alive

    def clear(self) -> None:
        self._particles = []
