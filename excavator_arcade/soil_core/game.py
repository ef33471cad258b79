"""
Core Game
=========

Main game orchestrator combining excavator kinematics, the soil simulation,
roads, the level timer and the level rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import random

from excavator_arcade.soil_core.config_loader import GameConfig, LevelConfig, get_config
from excavator_arcade.soil_core.effector import EffectorState, ExcavatorControls, ExcavatorKinematics
from excavator_arcade.soil_core.roads import RoadNetwork
from excavator_arcade.soil_core.rules import LevelRules, LevelTimer, TerminationResult
from excavator_arcade.soil_core.soil_system import FrameResult, PickupListener, SoilSystem
from excavator_arcade.soil_core.state_snapshot import GameSnapshot, SnapshotBuilder


@dataclass
class StepResult:
    """Result of a single simulated frame."""
    snapshot: GameSnapshot
    completed: bool
    failed: bool
    termination_reason: str
    correct_count: int
    delta_correct: int
    frame: FrameResult

    @property
    def is_over(self) -> bool:
        return self.completed or self.failed


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Excavator kinematics (effector pose)
    - Soil particles, pits and debris
    - Road adherence
    - Level timer
    - Completion/failure rules
    - State snapshots

    One step = one frame of ``physics.dt`` seconds.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        level: Optional[int] = None,
        debug: bool = False
    ):
        """
        Initialize game and load the starting level.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            level: Starting level number. Uses the first configured level if None.
            debug: If True, prints level transitions.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._debug = debug

        # Initialize subsystems
        self._soil = SoilSystem(config, random.Random(seed))
        self._excavator = ExcavatorKinematics(config)
        self._roads = RoadNetwork.from_config(config)
        self._rules = LevelRules(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Optional sound/UI hooks
        self.on_countdown_tick: Optional[Callable[[int], None]] = None
        self.on_level_complete: Optional[Callable[[int], None]] = None
        self.on_level_failed: Optional[Callable[[int, str], None]] = None

        # Level state
        self._level: int = config.levels[0].id if level is None else level
        self._level_config: LevelConfig = config.levels[0]
        self._timer: LevelTimer = self._rules.make_timer(self._level_config.time_limit)
        self._effector: EffectorState = self._excavator.effector_state(False)
        self._correct_count: int = 0
        self._frames: int = 0
        self._completed: bool = False
        self._failed: bool = False
        self._termination_reason: str = ""

        self.load_level(self._level)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def soil(self) -> SoilSystem:
        """Soil simulation."""
        return self._soil

    @property
    def excavator(self) -> ExcavatorKinematics:
        return self._excavator

    @property
    def roads(self) -> RoadNetwork:
        return self._roads

    @property
    def effector(self) -> EffectorState:
        """Effector state used by the last frame."""
        return self._effector

    @property
    def level(self) -> int:
        """Current level number."""
        return self._level

    @property
    def level_config(self) -> LevelConfig:
        """Layout in use for the current level."""
        return self._level_config

    @property
    def objective(self) -> str:
        return self._level_config.objective

    @property
    def target_count(self) -> int:
        return self._level_config.target_count

    @property
    def time_left(self) -> float:
        return self._timer.time_left

    @property
    def timer(self) -> LevelTimer:
        return self._timer

    @property
    def correct_count(self) -> int:
        """Particles in matching pits as of the last frame."""
        return self._correct_count

    @property
    def frames(self) -> int:
        """Frames simulated since the level was loaded."""
        return self._frames

    @property
    def is_complete(self) -> bool:
        return self._completed

    @property
    def is_failed(self) -> bool:
        return self._failed

    @property
    def is_over(self) -> bool:
        """True if the level has been completed or failed."""
        return self._completed or self._failed

    @property
    def termination_reason(self) -> str:
        """Reason for level end, or empty string."""
        return self._termination_reason

    def add_pickup_listener(self, listener: PickupListener) -> None:
        """Forwarded to the soil system (dig sound hook)."""
        self._soil.add_pickup_listener(listener)

    def load_level(self, level: int) -> GameSnapshot:
        """
        Clear the field and build a level.

        Unknown level numbers reuse the first configured layout but keep
        their number.

        Args:
            level: Level number.

        Returns:
            Initial snapshot of the level.
        """
        if self._config.has_level(level):
            level_config = self._config.get_level(level)
        else:
            level_config = self._config.levels[0]

        self._level = level
        self._level_config = level_config

        self._soil.clear()
        self._excavator.reset()

        for pile in level_config.piles:
            self._soil.spawn_pile(pile.x, pile.z, pile.count, pile.color)
        for pit in level_config.pits:
            self._soil.create_zone(pit.x, pit.z, pit.color)

        self._timer = self._rules.make_timer(level_config.time_limit)
        self._effector = self._excavator.effector_state(False)
        self._correct_count = self._soil.count_correct()
        self._frames = 0
        self._completed = False
        self._failed = False
        self._termination_reason = ""

        if self._debug:
            print(f"[DEBUG] Level {level} loaded (layout {level_config.id})")
            print(f"[DEBUG]   Particles: {len(self._soil.particles)}, pits: {len(self._soil.zones)}")
            print(f"[DEBUG]   Target: {level_config.target_count}, time: {level_config.time_limit}s")

        return self._build_snapshot()

    def reset(self, seed: Optional[int] = None, level: Optional[int] = None) -> GameSnapshot:
        """
        Reseed and reload a level.

        Args:
            seed: New random seed. Keeps the current random stream if None.
            level: Level to load. Reloads the current level if None.

        Returns:
            Initial snapshot.
        """
        if seed is not None:
            self._seed = seed
            self._soil.reseed(seed)
        return self.load_level(self._level if level is None else level)

    def restart_level(self) -> GameSnapshot:
        return self.load_level(self._level)

    def next_level(self) -> GameSnapshot:
        return self.load_level(self._level + 1)

    def step(self, controls: Optional[ExcavatorControls] = None) -> StepResult:
        """
        Simulate one frame.

        Args:
            controls: Operator input held this frame. No input if None.

        Returns:
            StepResult with new state and metadata.
        """
        if self.is_over:
            # Level already ended, return current state
            return StepResult(
                snapshot=self._build_snapshot(),
                completed=self._completed,
                failed=self._failed,
                termination_reason=self._termination_reason,
                correct_count=self._correct_count,
                delta_correct=0,
                frame=FrameResult()
            )

        if controls is None:
            controls = ExcavatorControls()

        dt = self._config.physics.dt
        correct_before = self._correct_count

        self._excavator.update(controls, dt)
        self._effector = self._excavator.effector_state(controls.scoop)

        frame = self._soil.step(dt, self._effector)
        self._frames += 1

        second = self._timer.tick(dt)
        if second is not None and self._timer.in_warning and self.on_countdown_tick is not None:
            self.on_countdown_tick(second)

        result = self._check_termination()
        self._completed = result.completed
        self._failed = result.failed
        self._termination_reason = result.reason

        if self._completed:
            if self._debug:
                print(f"[DEBUG] Level {self._level} complete after {self._frames} frames")
            if self.on_level_complete is not None:
                self.on_level_complete(self._level)
        elif self._failed:
            if self._debug:
                print(f"[DEBUG] Level {self._level} FAILED: {self._termination_reason}")
            if self.on_level_failed is not None:
                self.on_level_failed(self._level, self._termination_reason)

        return StepResult(
            snapshot=self._build_snapshot(),
            completed=self._completed,
            failed=self._failed,
            termination_reason=self._termination_reason,
            correct_count=self._correct_count,
            delta_correct=self._correct_count - correct_before,
            frame=frame
        )

    def _check_termination(self) -> TerminationResult:
        """Check all level conditions and refresh the progress count."""
        violation = self._soil.find_violation()
        if violation is not None and self._debug:
            print(f"[DEBUG] {violation}")

        self._correct_count = self._soil.count_correct()
        bx, bz = self._excavator.base_position

        return self._rules.check(
            timer=self._timer,
            wrong_color=violation is not None,
            on_road=self._roads.is_on_road(bx, bz),
            correct_count=self._correct_count,
            target_count=self._level_config.target_count
        )

    def _build_snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        bx, bz = self._excavator.base_position
        return self._snapshot_builder.build(
            soil=self._soil,
            effector=self._effector,
            level=self._level,
            time_left=self._timer.time_left,
            target_count=self._level_config.target_count,
            base_x=bx,
            base_z=bz,
            heading=self._excavator.heading
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "level": self._level,
            "objective": self._level_config.objective,
            "correct_count": self._correct_count,
            "target_count": self._level_config.target_count,
            "time_left": self._timer.time_left,
            "frames": self._frames,
            "attached_count": self._soil.particles.attached_count,
            "completed": self._completed,
            "failed": self._failed,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with soil render state, roads, excavator pose and HUD values.
        """
        data = self._soil.get_render_data()
        bucket = self._effector.position
        data.update({
            "roads": [
                (seg.min_x, seg.min_z, seg.max_x, seg.max_z)
                for seg in self._roads
            ],
            "base_x": self._excavator.x,
            "base_z": self._excavator.z,
            "heading": self._excavator.heading,
            "cab_yaw": self._excavator.cab_yaw,
            "bucket": bucket.as_tuple(),
            "scoop_active": self._effector.scoop_active,
            "level": self._level,
            "objective": self._level_config.objective,
            "time_left": self._timer.time_left,
            "display_seconds": self._timer.display_seconds,
            "countdown_warning": self._timer.in_warning,
            "correct_count": self._correct_count,
            "target_count": self._level_config.target_count,
            "completed": self._completed,
            "failed": self._failed,
            "terminated_reason": self._termination_reason,
        })
        return data
