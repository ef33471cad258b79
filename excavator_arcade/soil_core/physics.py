"""
Physics Stepper
===============

Gravity integration for free soil particles with an inelastic floor.
"""

from __future__ import annotations

from typing import Optional

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.geometry import Vec3
from excavator_arcade.soil_core.particles import FreeState, ParticleStore


def integrate_ballistic(position: Vec3, velocity: Vec3, gravity: float, dt: float) -> None:
    """Semi-implicit Euler step: velocity first, then position. No floor."""
    velocity.y += gravity * dt
    position.add_scaled(velocity, dt)


class PhysicsStepper:
    """
    Advances free particles under gravity.

    Only particles above the floor are integrated. A step that would take a
    particle below the floor is clamped to the floor and its whole velocity
    zeroed, with no bounce and no sub-step refinement. Attached particles are
    skipped; the pickup state machine moves them.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        gravity: Optional[float] = None,
        floor_y: Optional[float] = None
    ):
        """
        Args:
            config: Game configuration. Uses default if None.
            gravity: Override for config physics.gravity.
            floor_y: Override for config physics.floor_y.
        """
        if config is None:
            config = get_config()

        self._gravity = config.physics.gravity if gravity is None else gravity
        self._floor_y = config.physics.floor_y if floor_y is None else floor_y

    @property
    def gravity(self) -> float:
        return self._gravity

    @property
    def floor_y(self) -> float:
        return self._floor_y

    def step(self, store: ParticleStore, dt: float) -> int:
        """
        Advance every free particle by one frame.

        Args:
            store: Particles to advance.
            dt: Frame delta in seconds.

        Returns:
            Number of particles that hit the floor during this step.
        """
        landed = 0
        for particle in store:
            state = particle.state
            if not isinstance(state, FreeState):
                continue
            if particle.position.y <= self._floor_y:
                state.grounded = True
                continue

            integrate_ballistic(particle.position, state.velocity, self._gravity, dt)

            if particle.position.y < self._floor_y:
                particle.position.y = self._floor_y
                state.velocity.set(0.0, 0.0, 0.0)
                state.grounded = True
                landed += 1
        return landed
