"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml


@dataclass(frozen=True)
class PhysicsConfig:
    """Gravity and floor settings shared by soil and effect particles."""
    gravity: float   # Vertical acceleration (units/s^2, negative is down)
    floor_y: float   # Lowest y a free particle may rest at
    dt: float        # Fixed frame delta in seconds


@dataclass(frozen=True)
class SoilConfig:
    """Pile spawning and pickup parameters."""
    pile_radius: float
    pile_height: float
    default_pile_count: int
    pickup_radius: float
    pickup_max_height: float
    carry_jitter: float
    pickup_effect_chance: float
    particle_size: float


@dataclass(frozen=True)
class ZoneConfig:
    """Target pit geometry."""
    radius: float


@dataclass(frozen=True)
class EffectsConfig:
    """Cosmetic dig debris parameters."""
    burst_count: int
    lifetime: float
    spawn_offset: float
    horizontal_speed: float
    upward_speed: float
    size: float


@dataclass(frozen=True)
class ExcavatorConfig:
    """Excavator drive limits and arm geometry."""
    start_x: float
    start_z: float
    base_height: float
    drive_speed: float
    rotate_speed: float
    arm_speed: float
    scoop_speed_factor: float
    world_limit: float
    boom_min: float
    boom_max: float
    stick_min: float
    stick_max: float
    boom_start: float
    stick_start: float
    bucket_start: float
    cab_offset: Tuple[float, float, float]
    boom_pivot: Tuple[float, float, float]
    stick_pivot: Tuple[float, float, float]
    bucket_pivot: Tuple[float, float, float]
    scoop_offset: Tuple[float, float, float]


@dataclass(frozen=True)
class RoadConfig:
    """A single axis-aligned road rectangle."""
    x: float
    z: float
    width: float    # Extent along x
    length: float   # Extent along z


@dataclass(frozen=True)
class TimerConfig:
    """Level timer settings."""
    countdown_warning_seconds: int


@dataclass(frozen=True)
class ObservationConfig:
    """Snapshot and rendering sizes."""
    max_particles: int
    max_zones: int
    image_width: int
    image_height: int
    view_extent: float


@dataclass(frozen=True)
class PileConfig:
    """A soil pile placed when a level loads."""
    x: float
    z: float
    count: int
    color: int


@dataclass(frozen=True)
class PitConfig:
    """A target pit placed when a level loads."""
    x: float
    z: float
    color: int


@dataclass(frozen=True)
class LevelConfig:
    """Layout, time limit and win threshold for one level."""
    id: int
    objective: str
    time_limit: float
    target_count: int
    piles: Tuple[PileConfig, ...]
    pits: Tuple[PitConfig, ...]

    @property
    def particle_count(self) -> int:
        """Total particles spawned by this level."""
        return sum(p.count for p in self.piles)


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    physics: PhysicsConfig
    soil: SoilConfig
    zones: ZoneConfig
    effects: EffectsConfig
    excavator: ExcavatorConfig
    roads: Tuple[RoadConfig, ...]
    timer: TimerConfig
    palette: Tuple[Tuple[str, int], ...]
    observation: ObservationConfig
    levels: Tuple[LevelConfig, ...]

    @property
    def palette_map(self) -> Dict[str, int]:
        """Color name -> 24-bit color tag."""
        return dict(self.palette)

    @property
    def num_levels(self) -> int:
        return len(self.levels)

    def get_level(self, level_id: int) -> LevelConfig:
        """Get level config by ID."""
        for level in self.levels:
            if level.id == level_id:
                return level
        raise ValueError(f"Invalid level ID: {level_id}")

    def has_level(self, level_id: int) -> bool:
        return any(level.id == level_id for level in self.levels)


def _parse_vec3(data: List, name: str) -> Tuple[float, float, float]:
    """Parse an [x, y, z] offset from YAML."""
    if len(data) != 3:
        raise ValueError(f"{name} must have 3 values [x, y, z], got {data}")
    return (float(data[0]), float(data[1]), float(data[2]))


def _parse_color(value, palette: Dict[str, int]) -> int:
    """Resolve a palette name or a raw integer color."""
    if isinstance(value, str):
        if value not in palette:
            raise ValueError(f"Unknown palette color: {value!r}")
        return palette[value]
    return int(value)


def _parse_road(road_data: List) -> RoadConfig:
    """Parse a road rectangle from YAML."""
    if len(road_data) != 4:
        raise ValueError(f"Road must have 4 values [x, z, width, length], got {road_data}")
    return RoadConfig(
        x=float(road_data[0]),
        z=float(road_data[1]),
        width=float(road_data[2]),
        length=float(road_data[3])
    )


def _parse_level(level_data: dict, palette: Dict[str, int]) -> LevelConfig:
    """Parse a single level layout from YAML."""
    piles = tuple(
        PileConfig(
            x=float(p["x"]),
            z=float(p["z"]),
            count=int(p["count"]),
            color=_parse_color(p["color"], palette)
        )
        for p in level_data.get("piles", [])
    )
    pits = tuple(
        PitConfig(
            x=float(p["x"]),
            z=float(p["z"]),
            color=_parse_color(p["color"], palette)
        )
        for p in level_data.get("pits", [])
    )
    return LevelConfig(
        id=int(level_data["id"]),
        objective=str(level_data.get("objective", "")),
        time_limit=float(level_data["time_limit"]),
        target_count=int(level_data["target_count"]),
        piles=piles,
        pits=pits
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.physics.dt <= 0:
        raise ValueError(f"physics.dt must be positive, got {config.physics.dt}")

    if config.zones.radius <= 0:
        raise ValueError(f"zones.radius must be positive, got {config.zones.radius}")

    if not 0.0 <= config.soil.pickup_effect_chance <= 1.0:
        raise ValueError(
            f"soil.pickup_effect_chance must be in [0, 1], "
            f"got {config.soil.pickup_effect_chance}"
        )

    for road in config.roads:
        if road.width <= 0 or road.length <= 0:
            raise ValueError(f"Road extents must be positive, got {road}")

    if not config.levels:
        raise ValueError("At least one level must be defined")

    seen = set()
    for level in config.levels:
        if level.id in seen:
            raise ValueError(f"Duplicate level ID: {level.id}")
        seen.add(level.id)
        if level.time_limit <= 0:
            raise ValueError(f"Level {level.id} time_limit must be positive")
        if level.particle_count > config.observation.max_particles:
            raise ValueError(
                f"Level {level.id} spawns {level.particle_count} particles, more than "
                f"observation.max_particles ({config.observation.max_particles})"
            )
        if len(level.pits) > config.observation.max_zones:
            raise ValueError(
                f"Level {level.id} has {len(level.pits)} pits, more than "
                f"observation.max_zones ({config.observation.max_zones})"
            )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    # Palette first so piles and pits can refer to colors by name
    palette_map = {str(name): int(value) for name, value in raw["palette"].items()}

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        floor_y=float(physics_data["floor_y"]),
        dt=float(physics_data.get("dt", 0.016))
    )

    soil_data = raw["soil"]
    soil = SoilConfig(
        pile_radius=float(soil_data["pile_radius"]),
        pile_height=float(soil_data.get("pile_height", 1.0)),
        default_pile_count=int(soil_data.get("default_pile_count", 50)),
        pickup_radius=float(soil_data["pickup_radius"]),
        pickup_max_height=float(soil_data["pickup_max_height"]),
        carry_jitter=float(soil_data.get("carry_jitter", 0.25)),
        pickup_effect_chance=float(soil_data.get("pickup_effect_chance", 0.3)),
        particle_size=float(soil_data.get("particle_size", 0.3))
    )

    zones = ZoneConfig(radius=float(raw["zones"]["radius"]))

    fx_data = raw.get("effects", {})
    effects = EffectsConfig(
        burst_count=int(fx_data.get("burst_count", 5)),
        lifetime=float(fx_data.get("lifetime", 1.0)),
        spawn_offset=float(fx_data.get("spawn_offset", 0.25)),
        horizontal_speed=float(fx_data.get("horizontal_speed", 1.0)),
        upward_speed=float(fx_data.get("upward_speed", 3.0)),
        size=float(fx_data.get("size", 0.1))
    )

    ex_data = raw["excavator"]
    excavator = ExcavatorConfig(
        start_x=float(ex_data.get("start_x", 0.0)),
        start_z=float(ex_data.get("start_z", 0.0)),
        base_height=float(ex_data["base_height"]),
        drive_speed=float(ex_data["drive_speed"]),
        rotate_speed=float(ex_data["rotate_speed"]),
        arm_speed=float(ex_data["arm_speed"]),
        scoop_speed_factor=float(ex_data.get("scoop_speed_factor", 2.0)),
        world_limit=float(ex_data["world_limit"]),
        boom_min=float(ex_data["boom_min"]),
        boom_max=float(ex_data["boom_max"]),
        stick_min=float(ex_data["stick_min"]),
        stick_max=float(ex_data["stick_max"]),
        boom_start=float(ex_data["boom_start"]),
        stick_start=float(ex_data["stick_start"]),
        bucket_start=float(ex_data["bucket_start"]),
        cab_offset=_parse_vec3(ex_data["cab_offset"], "cab_offset"),
        boom_pivot=_parse_vec3(ex_data["boom_pivot"], "boom_pivot"),
        stick_pivot=_parse_vec3(ex_data["stick_pivot"], "stick_pivot"),
        bucket_pivot=_parse_vec3(ex_data["bucket_pivot"], "bucket_pivot"),
        scoop_offset=_parse_vec3(ex_data["scoop_offset"], "scoop_offset")
    )

    roads = tuple(_parse_road(r) for r in raw.get("roads", []))

    timer = TimerConfig(
        countdown_warning_seconds=int(raw.get("timer", {}).get("countdown_warning_seconds", 10))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_particles=int(obs_data.get("max_particles", 150)),
        max_zones=int(obs_data.get("max_zones", 8)),
        image_width=int(obs_data.get("image_width", 400)),
        image_height=int(obs_data.get("image_height", 400)),
        view_extent=float(obs_data.get("view_extent", 20.0))
    )

    levels = tuple(_parse_level(level, palette_map) for level in raw.get("levels", []))

    config = GameConfig(
        physics=physics,
        soil=soil,
        zones=zones,
        effects=effects,
        excavator=excavator,
        roads=roads,
        timer=timer,
        palette=tuple(palette_map.items()),
        observation=observation,
        levels=levels
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
