"""
Soil Core - The simulation heart of the excavator game.

This module provides the soil particle simulation, the level controller,
the Gymnasium environment wrapper and all supporting systems (kinematics,
pits, roads, rules, debris).

Main exports:
- SoilSystem: Particle store, pits, physics, pickup and zone evaluation
- CoreGame: Level controller driving the excavator and the soil each frame
- ExcavatorEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from excavator_arcade.soil_core.config_loader import GameConfig, load_config, get_config
from excavator_arcade.soil_core.geometry import Vec3
from excavator_arcade.soil_core.palette import Palette, get_palette
from excavator_arcade.soil_core.particles import (
    ParticleState,
    FreeState,
    AttachedState,
    SoilParticle,
    ParticleStore,
)
from excavator_arcade.soil_core.zones import Zone, ZoneRegistry
from excavator_arcade.soil_core.physics import PhysicsStepper
from excavator_arcade.soil_core.effector import (
    CONTROL_NAMES,
    EffectorState,
    ExcavatorControls,
    ExcavatorKinematics,
)
from excavator_arcade.soil_core.pickup import PickupEvent, PickupStateMachine
from excavator_arcade.soil_core.evaluator import ZoneEvaluator, ZoneViolation
from excavator_arcade.soil_core.effects import EffectEmitter, EffectParticle
from excavator_arcade.soil_core.soil_system import SoilSystem, FrameResult
from excavator_arcade.soil_core.roads import RoadNetwork, RoadSegment
from excavator_arcade.soil_core.rules import LevelRules, LevelTimer, TerminationResult
from excavator_arcade.soil_core.game import CoreGame, StepResult
from excavator_arcade.soil_core.env_gym import ExcavatorEnv

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "Vec3",
    "Palette",
    "get_palette",
    "ParticleState",
    "FreeState",
    "AttachedState",
    "SoilParticle",
    "ParticleStore",
    "Zone",
    "ZoneRegistry",
    "PhysicsStepper",
    "CONTROL_NAMES",
    "EffectorState",
    "ExcavatorControls",
    "ExcavatorKinematics",
    "PickupEvent",
    "PickupStateMachine",
    "ZoneEvaluator",
    "ZoneViolation",
    "EffectEmitter",
    "EffectParticle",
    "SoilSystem",
    "FrameResult",
    "RoadNetwork",
    "RoadSegment",
    "LevelRules",
    "LevelTimer",
    "TerminationResult",
    "CoreGame",
    "StepResult",
    "ExcavatorEnv",
]
