"""
Soil System
===========

Per-frame orchestration of the soil simulation:

    effector state -> physics step -> pickup/release -> debris -> evaluation

``step`` is a pure function of the current state, the frame delta, the
effector state and the injected random source. Nothing here depends on a
render loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union
import random

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.effector import EffectorState
from excavator_arcade.soil_core.effects import EffectEmitter
from excavator_arcade.soil_core.evaluator import ZoneEvaluator, ZoneViolation
from excavator_arcade.soil_core.palette import Palette, get_palette
from excavator_arcade.soil_core.particles import ParticleStore
from excavator_arcade.soil_core.physics import PhysicsStepper
from excavator_arcade.soil_core.pickup import PickupEvent, PickupStateMachine
from excavator_arcade.soil_core.zones import Zone, ZoneRegistry


PickupListener = Callable[[PickupEvent], None]


@dataclass
class FrameResult:
    """What happened during one soil step."""
    attached: List[int] = field(default_factory=list)
    released: List[int] = field(default_factory=list)
    events: List[PickupEvent] = field(default_factory=list)
    landed: int = 0


class SoilSystem:
    """
    Owns the particles, the pits and the debris of the current level.

    Handles:
    - Pile and pit creation, bulk clearing
    - Frame stepping against the effector
    - Progress/failure queries
    - Pickup notifications (dig sound, debris)
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize soil system.

        Args:
            config: Game configuration. Uses default if None.
            rng: Random source shared by every stochastic subsystem.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else random.Random()
        self._palette = get_palette(config)

        self._store = ParticleStore(config, self._rng)
        self._zones = ZoneRegistry(config)
        self._physics = PhysicsStepper(config)
        self._pickup = PickupStateMachine(config, self._rng)
        self._evaluator = ZoneEvaluator()
        self._effects = EffectEmitter(config, self._rng)

        self._listeners: List[PickupListener] = []

    @property
    def particles(self) -> ParticleStore:
        return self._store

    @property
    def zones(self) -> ZoneRegistry:
        return self._zones

    @property
    def effects(self) -> EffectEmitter:
        return self._effects

    @property
    def physics(self) -> PhysicsStepper:
        return self._physics

    @property
    def pickup(self) -> PickupStateMachine:
        return self._pickup

    @property
    def palette(self) -> Palette:
        return self._palette

    def reseed(self, seed: Optional[int]) -> None:
        """Replace the shared random source."""
        self._rng = random.Random(seed)
        self._store.rng = self._rng
        self._pickup.rng = self._rng
        self._effects.rng = self._rng

    def add_pickup_listener(self, listener: PickupListener) -> None:
        """Register a callback for sampled pickup events (e.g. dig sound)."""
        self._listeners.append(listener)

    def remove_pickup_listener(self, listener: PickupListener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Level construction
    # ------------------------------------------------------------------

    def spawn_pile(
        self,
        center_x: float,
        center_z: float,
        count: Optional[int] = None,
        color: Union[str, int] = "brown"
    ) -> List[int]:
        """
        Scatter a pile of soil.

        Args:
            center_x, center_z: Pile center on the ground plane.
            count: Number of particles. Uses soil.default_pile_count if None.
            color: Palette name or color tag.

        Returns:
            Slots of the new particles.
        """
        if count is None:
            count = self._config.soil.default_pile_count
        return self._store.spawn_pile(center_x, center_z, count, self._palette.resolve(color))

    def create_zone(self, x: float, z: float, color: Union[str, int]) -> Zone:
        """Register a pit requiring ``color``."""
        return self._zones.add_zone(x, z, self._palette.resolve(color))

    def clear(self) -> None:
        """Discard all particles, pits and debris."""
        self._store.clear()
        self._zones.clear()
        self._effects.clear()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self, dt: float, effector: EffectorState) -> FrameResult:
        """
        Advance the soil by one frame.

        Args:
            dt: Frame delta in seconds.
            effector: Scoop point and intent for this frame. Never mutated.

        Returns:
            FrameResult describing the transitions made.
        """
        landed = self._physics.step(self._store, dt)
        interaction = self._pickup.update(self._store, effector)

        for event in interaction.events:
            self._effects.burst(event.position, event.color)
            for listener in self._listeners:
                listener(event)

        self._effects.update(dt)

        return FrameResult(
            attached=interaction.attached,
            released=interaction.released,
            events=interaction.events,
            landed=landed
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def count_correct(self) -> int:
        """Particles inside a pit of their own color."""
        return self._evaluator.count_correct(self._store, self._zones)

    def zone_counts(self) -> List[int]:
        return self._evaluator.zone_counts(self._store, self._zones)

    def find_violation(self) -> Optional[ZoneViolation]:
        return self._evaluator.find_violation(self._store, self._zones)

    def detect_failure(self) -> bool:
        """True if any free particle rests in a pit of another color."""
        return self._evaluator.detect_failure(self._store, self._zones)

    def get_render_data(self) -> Dict[str, Any]:
        """
        Read-only view of particles, pits and debris for a renderer.

        Returns:
            Dict of plain lists and tuples.
        """
        return {
            "particles": [
                {
                    "slot": p.slot,
                    "position": p.position.as_tuple(),
                    "color": p.color,
                    "attached": p.is_attached,
                }
                for p in self._store
            ],
            "zones": [
                {"x": z.x, "z": z.z, "radius": z.radius, "color": z.color}
                for z in self._zones
            ],
            "effects": [
                {"position": e.position.as_tuple(), "color": e.color, "scale": e.scale}
                for e in self._effects.particles
            ],
            "particle_size": self._config.soil.particle_size,
            "effect_size": self._config.effects.size,
        }
