"""
Effector Pose Provider
======================

Excavator kinematics: drive, slew, boom/stick/bucket joints and the world
position of the scoop point. The soil simulation only ever sees the
read-only EffectorState produced here.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional, Sequence, Tuple
import math

import numpy as np

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.geometry import Vec3


@dataclass(frozen=True)
class EffectorState:
    """Scoop point and scoop intent for one frame."""
    position: Vec3
    scoop_active: bool

    @staticmethod
    def at(x: float, y: float, z: float, scoop_active: bool) -> "EffectorState":
        return EffectorState(Vec3(x, y, z), scoop_active)


@dataclass(frozen=True)
class ExcavatorControls:
    """Operator intents held during a frame."""
    forward: bool = False
    backward: bool = False
    turn_left: bool = False
    turn_right: bool = False
    cab_left: bool = False
    cab_right: bool = False
    boom_up: bool = False
    boom_down: bool = False
    stick_in: bool = False
    stick_out: bool = False
    scoop: bool = False

    @staticmethod
    def from_array(action: Sequence) -> "ExcavatorControls":
        """Build controls from a binary vector ordered as CONTROL_NAMES."""
        if len(action) != len(CONTROL_NAMES):
            raise ValueError(
                f"Expected {len(CONTROL_NAMES)} control flags, got {len(action)}"
            )
        return ExcavatorControls(*(bool(a) for a in action))

    def to_array(self) -> np.ndarray:
        return np.array([getattr(self, name) for name in CONTROL_NAMES], dtype=np.int8)

    @property
    def is_driving(self) -> bool:
        return self.forward or self.backward or self.turn_left or self.turn_right

    @property
    def is_arm_moving(self) -> bool:
        return (
            self.boom_up or self.boom_down or self.stick_in or self.stick_out
            or self.cab_left or self.cab_right or self.scoop
        )


CONTROL_NAMES: Tuple[str, ...] = tuple(f.name for f in fields(ExcavatorControls))


def _translation(offset: Sequence[float]) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = offset
    return m


def _rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    m = np.eye(4)
    m[1, 1], m[1, 2] = c, -s
    m[2, 1], m[2, 2] = s, c
    return m


def _rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    m = np.eye(4)
    m[0, 0], m[0, 2] = c, s
    m[2, 0], m[2, 2] = -s, c
    return m


class ExcavatorKinematics:
    """
    Joint-space model of the excavator.

    Frame chain (each offset in its parent frame):
        world -> base (x, base_height, z), yaw = heading
              -> cab (cab_offset), yaw = cab_yaw
              -> boom (boom_pivot), pitch = boom
              -> stick (stick_pivot), pitch = stick
              -> bucket (bucket_pivot), pitch = bucket
              -> scoop point (scoop_offset)

    The base drives along its local +z axis. Boom down and stick in both
    increase the respective pitch, lowering the bucket toward the ground.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._cfg = config.excavator
        self.reset()

    def reset(self) -> None:
        """Return to the start pose."""
        cfg = self._cfg
        self.x = cfg.start_x
        self.z = cfg.start_z
        self.heading = 0.0
        self.cab_yaw = 0.0
        self.boom = cfg.boom_start
        self.stick = cfg.stick_start
        self.bucket = cfg.bucket_start

    @property
    def base_position(self) -> Tuple[float, float]:
        """Base (x, z) on the ground plane."""
        return (self.x, self.z)

    def update(self, controls: ExcavatorControls, dt: float) -> None:
        """
        Apply one frame of operator input.

        Args:
            controls: Held intents.
            dt: Frame delta in seconds.
        """
        cfg = self._cfg

        # Drive along heading
        drive = 0.0
        if controls.forward:
            drive += cfg.drive_speed * dt
        if controls.backward:
            drive -= cfg.drive_speed * dt
        if drive:
            self.x += math.sin(self.heading) * drive
            self.z += math.cos(self.heading) * drive

        limit = cfg.world_limit
        self.x = max(-limit, min(limit, self.x))
        self.z = max(-limit, min(limit, self.z))

        if controls.turn_left:
            self.heading += cfg.rotate_speed * dt
        if controls.turn_right:
            self.heading -= cfg.rotate_speed * dt

        if controls.cab_left:
            self.cab_yaw += cfg.rotate_speed * dt
        if controls.cab_right:
            self.cab_yaw -= cfg.rotate_speed * dt

        if controls.boom_up:
            self.boom -= cfg.arm_speed * dt
        if controls.boom_down:
            self.boom += cfg.arm_speed * dt

        if controls.stick_in:
            self.stick += cfg.arm_speed * dt
        if controls.stick_out:
            self.stick -= cfg.arm_speed * dt

        # Bucket curls while scooping and relaxes back toward zero otherwise
        curl = cfg.arm_speed * dt * cfg.scoop_speed_factor
        if controls.scoop:
            self.bucket += curl
        elif self.bucket > 0:
            self.bucket -= curl

        self.boom = max(cfg.boom_min, min(cfg.boom_max, self.boom))
        self.stick = max(cfg.stick_min, min(cfg.stick_max, self.stick))

    def _scoop_transform(self) -> np.ndarray:
        cfg = self._cfg
        return (
            _translation((self.x, cfg.base_height, self.z))
            @ _rotation_y(self.heading)
            @ _translation(cfg.cab_offset)
            @ _rotation_y(self.cab_yaw)
            @ _translation(cfg.boom_pivot)
            @ _rotation_x(self.boom)
            @ _translation(cfg.stick_pivot)
            @ _rotation_x(self.stick)
            @ _translation(cfg.bucket_pivot)
            @ _rotation_x(self.bucket)
            @ _translation(cfg.scoop_offset)
        )

    def bucket_world_position(self) -> Vec3:
        """World position of the scoop point."""
        origin = self._scoop_transform() @ np.array([0.0, 0.0, 0.0, 1.0])
        return Vec3(float(origin[0]), float(origin[1]), float(origin[2]))

    def effector_state(self, scoop_active: bool) -> EffectorState:
        """Package the current scoop point with the scoop intent."""
        return EffectorState(self.bucket_world_position(), scoop_active)
