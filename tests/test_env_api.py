"""
Tests for Gymnasium environment API.
"""

import pytest
import numpy as np

from excavator_arcade.soil_core.config_loader import load_config
from excavator_arcade.soil_core.effector import CONTROL_NAMES
from excavator_arcade.soil_core.env_gym import ExcavatorEnv


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def env():
    env = ExcavatorEnv()
    yield env
    env.close()


def no_op():
    return np.zeros(len(CONTROL_NAMES), dtype=np.int8)


class TestExcavatorEnv:
    """Test single environment API."""

    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        result = env.reset(seed=42)

        assert isinstance(result, tuple)
        assert len(result) == 2

        obs, info = result
        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["delta_correct"] == 0

    def test_observation_structure(self, env):
        """Observation should have expected keys and shapes."""
        obs, _ = env.reset(seed=42)

        assert set(obs.keys()) == set(env.observation_space.spaces.keys())

        max_p = env.config.observation.max_particles
        max_z = env.config.observation.max_zones
        assert obs["particle_x"].shape == (max_p,)
        assert obs["particle_mask"].shape == (max_p,)
        assert obs["zone_x"].shape == (max_z,)
        assert obs["base_position"].shape == (2,)
        assert obs["bucket_position"].shape == (3,)
        assert int(obs["particle_count"]) == 30
        assert int(obs["particle_mask"].sum()) == 30

    def test_step_returns_five_values(self, env):
        """Step should return (obs, reward, terminated, truncated, info)."""
        env.reset(seed=42)

        result = env.step(no_op())

        assert isinstance(result, tuple)
        assert len(result) == 5

        obs, reward, terminated, truncated, info = result
        assert isinstance(obs, dict)
        assert reward == 0.0
        assert terminated is False
        assert truncated is False
        assert "delta_correct" in info
        assert "pickups" in info

    def test_action_space(self, env):
        assert env.action_space.n == len(CONTROL_NAMES)
        env.reset(seed=1)
        env.step(env.action_space.sample())

    def test_bad_action(self, env):
        env.reset(seed=1)
        with pytest.raises(ValueError):
            env.step(np.zeros(3, dtype=np.int8))

    def test_reset_level_option(self, env):
        obs, info = env.reset(seed=0, options={"level": 3})

        assert info["level"] == 3
        assert int(obs["level"]) == 3
        assert int(obs["particle_count"]) == 100
        assert int(obs["zone_mask"].sum()) == 5

    def test_drive_off_road_terminates(self, env):
        env.reset(seed=0)
        action = no_op()
        action[CONTROL_NAMES.index("forward")] = 1

        terminated = False
        info = {}
        for _ in range(100):
            _, _, terminated, _, info = env.step(action)
            if terminated:
                break

        assert terminated
        assert info["failed"]
        assert info["terminated_reason"] == "off_road"

    def test_determinism(self):
        a = ExcavatorEnv()
        b = ExcavatorEnv()
        obs_a, _ = a.reset(seed=9)
        obs_b, _ = b.reset(seed=9)

        np.testing.assert_array_equal(obs_a["particle_x"], obs_b["particle_x"])
        np.testing.assert_array_equal(obs_a["particle_z"], obs_b["particle_z"])


class TestRender:
    """Test rgb_array rendering."""

    def test_rgb_array(self):
        env = ExcavatorEnv(render_mode="rgb_array", image_width=64, image_height=48)
        env.reset(seed=0)

        frame = env.render()

        assert frame.shape == (48, 64, 3)
        assert frame.dtype == np.uint8
        env.close()

    def test_headless_render(self, env):
        env.reset(seed=0)
        assert env.render() is None
