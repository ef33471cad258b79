"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the excavator game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from excavator_arcade.soil_core.config_loader import GameConfig, load_config
from excavator_arcade.soil_core.effector import CONTROL_NAMES, ExcavatorControls
from excavator_arcade.soil_core.game import CoreGame
from excavator_arcade.soil_core.state_snapshot import GameSnapshot


class ExcavatorEnv(gym.Env):
    """
    Excavator soil-sorting game as a Gymnasium environment.

    Action Space:
        MultiBinary(len(CONTROL_NAMES))
        One flag per held control, ordered as CONTROL_NAMES.

    Observation Space:
        Dict of level scalars, excavator pose and padded particle/pit arrays.

    Reward:
        Always 0.0. Use info["delta_correct"] or info["correct_count"].

    Termination:
        terminated when the level is completed or failed; never truncated.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        level: Optional[int] = None,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize excavator environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            level: Level to play. Uses the first configured level if None.
            image_width: Override render width.
            image_height: Override render height.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._debug = debug
        self._start_level = level

        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        self._game = CoreGame(config=self._config, level=level, debug=debug)
        self._renderer = None

        self.action_space = spaces.MultiBinary(len(CONTROL_NAMES))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] ExcavatorEnv initialized")
            print(f"[DEBUG]   Levels: {self._config.num_levels}")
            print(f"[DEBUG]   Frame dt: {self._config.physics.dt}")
            print(f"[DEBUG]   Max particles: {self._config.observation.max_particles}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_p = self._config.observation.max_particles
        max_z = self._config.observation.max_zones
        limit = self._config.excavator.world_limit
        max_time = max(level.time_limit for level in self._config.levels)
        color_max = 0xFFFFFF

        return spaces.Dict({
            "level": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "time_left": spaces.Box(low=0, high=max_time, shape=(), dtype=np.float32),
            "correct_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "target_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "particle_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "attached_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),

            "base_position": spaces.Box(low=-limit, high=limit, shape=(2,), dtype=np.float32),
            "heading": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "bucket_position": spaces.Box(low=-np.inf, high=np.inf, shape=(3,), dtype=np.float32),
            "scoop_active": spaces.Discrete(2),

            "particle_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_p,), dtype=np.float32),
            "particle_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_p,), dtype=np.float32),
            "particle_z": spaces.Box(low=-np.inf, high=np.inf, shape=(max_p,), dtype=np.float32),
            "particle_color": spaces.Box(low=-1, high=color_max, shape=(max_p,), dtype=np.int32),
            "particle_attached": spaces.MultiBinary(max_p),
            "particle_mask": spaces.MultiBinary(max_p),

            "zone_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_z,), dtype=np.float32),
            "zone_z": spaces.Box(low=-np.inf, high=np.inf, shape=(max_z,), dtype=np.float32),
            "zone_radius": spaces.Box(low=0, high=np.inf, shape=(max_z,), dtype=np.float32),
            "zone_color": spaces.Box(low=-1, high=color_max, shape=(max_z,), dtype=np.int32),
            "zone_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(max_z,), dtype=np.int32),
            "zone_mask": spaces.MultiBinary(max_z),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Optional {"level": int} to choose the level.

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        level = (options or {}).get("level", self._start_level)
        snapshot = self._game.reset(seed=seed, level=level)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_correct"] = 0

        return obs, info

    def step(
        self,
        action: np.ndarray
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: Binary control vector ordered as CONTROL_NAMES.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        controls = ExcavatorControls.from_array(np.asarray(action).reshape(-1).tolist())

        result = self._game.step(controls)

        obs = self._snapshot_to_obs(result.snapshot)

        # Reward is always 0.0 - agents compute their own
        reward = 0.0

        info = self._game.get_info()
        info["delta_correct"] = result.delta_correct
        info["pickups"] = len(result.frame.attached)
        info["drops"] = len(result.frame.released)

        if self._debug and result.is_over:
            print(f"[DEBUG] Level over: {result.termination_reason} "
                  f"(correct={result.correct_count}/{self._game.target_count})")

        return obs, reward, result.is_over, False, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict()

    def _render_to_array(self) -> np.ndarray:
        """Render field to RGB array."""
        if self._renderer is None:
            from excavator_arcade.soil_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

        return self._renderer.render(
            self._game.get_render_data(),
            self._img_width,
            self._img_height
        )

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
