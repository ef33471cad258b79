"""
Tests for the per-frame soil orchestration.
"""

import random

import pytest

from excavator_arcade.soil_core.config_loader import load_config
from excavator_arcade.soil_core.effector import EffectorState
from excavator_arcade.soil_core.soil_system import SoilSystem


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self._value = value

    def random(self):
        return self._value


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def soil(config):
    return SoilSystem(config, random.Random(5))


IDLE = EffectorState.at(0.0, 10.0, 0.0, False)


class TestLevelConstruction:
    """Test piles and pits."""

    def test_spawn_pile_default_count(self, soil):
        slots = soil.spawn_pile(0.0, 0.0)
        assert len(slots) == 50

    def test_spawn_pile_by_name(self, soil):
        soil.spawn_pile(0.0, 0.0, 10, "red")
        assert all(p.color == 0xFF0000 for p in soil.particles)

    def test_unknown_color_name(self, soil):
        with pytest.raises(ValueError):
            soil.create_zone(0.0, 0.0, "orange")

    def test_clear_everything(self, soil):
        soil.spawn_pile(0.0, 0.0, 10)
        soil.create_zone(0.0, 0.0, "brown")
        soil.effects.burst(soil.particles.get(0).position, 0x8B4513)

        soil.clear()

        assert len(soil.particles) == 0
        assert len(soil.zones) == 0
        assert len(soil.effects) == 0


class TestStep:
    """Test frame ordering."""

    def test_empty_step(self, soil):
        frame = soil.step(0.016, IDLE)

        assert frame.attached == []
        assert frame.released == []
        assert frame.landed == 0
        assert soil.count_correct() == 0
        assert not soil.detect_failure()

    def test_pile_settles(self, soil):
        soil.spawn_pile(0.0, 0.0, 20)

        for _ in range(200):
            soil.step(0.016, IDLE)

        for p in soil.particles:
            assert p.position.y <= 1.0
            assert p.position.y >= 0.0
            assert p.grounded

    def test_scoop_carry_and_drop(self, soil):
        """Scoop, carry over a pit, drop, settle inside it."""
        soil.create_zone(-5.0, 0.0, "brown")
        p = soil.particles.spawn_particle(0.0, 0.15, 0.0, 0x8B4513)

        frame = soil.step(0.016, EffectorState.at(0.0, 1.0, 0.0, True))
        assert frame.attached == [p.slot]
        assert p.position.as_tuple() == (0.0, 0.15, 0.0)

        soil.step(0.016, EffectorState.at(-5.0, 3.0, 0.0, True))
        assert abs(p.position.x + 5.0) <= 0.25
        assert soil.count_correct() == 1

        frame = soil.step(0.016, EffectorState.at(-5.0, 3.0, 0.0, False))
        assert frame.released == [p.slot]
        y_released = p.position.y

        soil.step(0.016, IDLE)
        assert p.position.y < y_released

        for _ in range(200):
            soil.step(0.016, IDLE)
        assert p.position.y == 0.15
        assert soil.count_correct() == 1
        assert not soil.detect_failure()

    def test_listener_and_debris_on_event(self, config):
        soil = SoilSystem(config, FixedRandom(0.0))
        events = []
        soil.add_pickup_listener(events.append)
        soil.particles.spawn_particle(0.0, 0.15, 0.0, 0x8B4513)

        frame = soil.step(0.016, EffectorState.at(0.0, 1.0, 0.0, True))

        assert len(frame.events) == 1
        assert events == frame.events
        assert len(soil.effects) == 5

    def test_remove_listener(self, config):
        soil = SoilSystem(config, FixedRandom(0.0))
        events = []
        soil.add_pickup_listener(events.append)
        soil.remove_pickup_listener(events.append)
        soil.particles.spawn_particle(0.0, 0.15, 0.0, 0x8B4513)

        soil.step(0.016, EffectorState.at(0.0, 1.0, 0.0, True))

        assert events == []

    def test_debris_invisible_to_evaluation(self, config):
        soil = SoilSystem(config, FixedRandom(0.0))
        soil.create_zone(0.0, 0.0, "red")
        soil.particles.spawn_particle(0.0, 0.15, 0.0, 0xFF0000)

        soil.step(0.016, EffectorState.at(0.0, 1.0, 0.0, True))

        assert len(soil.effects) == 5
        assert soil.count_correct() == 1

    def test_reseed_reproducible(self, config):
        a = SoilSystem(config, random.Random(1))
        b = SoilSystem(config, random.Random(2))
        b.reseed(1)

        a.spawn_pile(0.0, 0.0, 10)
        b.spawn_pile(0.0, 0.0, 10)

        assert [p.position.as_tuple() for p in a.particles] == \
            [p.position.as_tuple() for p in b.particles]


class TestRenderData:
    """Test the read-only render view."""

    def test_render_data_contents(self, soil):
        soil.spawn_pile(0.0, 0.0, 3, "blue")
        soil.create_zone(1.0, 2.0, "blue")

        data = soil.get_render_data()

        assert len(data["particles"]) == 3
        assert data["particles"][0]["color"] == 0x0000FF
        assert data["particles"][0]["attached"] is False
        assert data["zones"] == [{"x": 1.0, "z": 2.0, "radius": 2.0, "color": 0x0000FF}]
        assert data["effects"] == []

    def test_render_data_is_a_copy(self, soil):
        soil.spawn_pile(0.0, 0.0, 1)
        data = soil.get_render_data()
        data["particles"].clear()

        assert len(soil.particles) == 1
