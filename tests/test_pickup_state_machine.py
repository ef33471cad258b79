"""
Tests for the pickup/release state machine.
"""

import random

import pytest

from excavator_arcade.soil_core.config_loader import load_config
from excavator_arcade.soil_core.effector import EffectorState
from excavator_arcade.soil_core.particles import ParticleStore
from excavator_arcade.soil_core.physics import PhysicsStepper
from excavator_arcade.soil_core.pickup import PickupStateMachine


BROWN = 0x8B4513


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
def store(config):
    return ParticleStore(config, random.Random(0))


@pytest.fixture
def machine(config):
    return PickupStateMachine(config, random.Random(0))


class TestAttach:
    """Test Free -> Attached."""

    def test_attach_when_close_and_low(self, store, machine):
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)

        result = machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        assert p.is_attached
        assert result.attached == [p.slot]
        assert result.changed

    def test_never_attach_without_intent(self, store, machine):
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)

        result = machine.update(store, EffectorState.at(0.0, 0.15, 0.0, False))

        assert p.is_free
        assert not result.changed

    def test_out_of_reach(self, store, machine):
        """Distance is measured in 3D and must be below the radius."""
        far = store.spawn_particle(2.0, 0.15, 0.0, BROWN)
        edge = store.spawn_particle(0.0, 0.15, 1.5, BROWN)

        machine.update(store, EffectorState.at(0.0, 0.15, 0.0, True))

        assert far.is_free
        assert edge.is_free

    def test_height_limit(self, store, machine):
        """Particles at or above the max height cannot be scooped."""
        high = store.spawn_particle(0.0, 2.0, 0.0, BROWN)
        low = store.spawn_particle(0.0, 1.99, 0.0, BROWN)

        machine.update(store, EffectorState.at(0.0, 2.0, 0.0, True))

        assert high.is_free
        assert low.is_attached

    def test_can_pick_up_matches_update(self, store, machine):
        p = store.spawn_particle(0.5, 0.5, 0.5, BROWN)
        effector = EffectorState.at(0.0, 0.0, 0.0, True)

        assert machine.can_pick_up(p, effector)
        machine.update(store, effector)
        assert not machine.can_pick_up(p, effector)

    def test_attached_this_frame_not_moved(self, store, machine):
        """Newly scooped soil starts following on the next update."""
        p = store.spawn_particle(0.3, 0.15, 0.2, BROWN)

        machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        assert p.is_attached
        assert p.position.as_tuple() == (0.3, 0.15, 0.2)

    def test_effector_not_mutated(self, store, machine):
        store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        effector = EffectorState.at(0.0, 1.0, 0.0, True)

        machine.update(store, effector)
        machine.update(store, effector)

        assert effector.position.as_tuple() == (0.0, 1.0, 0.0)


class TestCarry:
    """Test Attached with the scoop held."""

    def test_follow_with_jitter(self, store, machine):
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        for _ in range(20):
            machine.update(store, EffectorState.at(3.0, 4.0, 5.0, True))
            assert p.is_attached
            assert abs(p.position.x - 3.0) <= 0.25
            assert abs(p.position.y - 4.0) <= 0.25
            assert abs(p.position.z - 5.0) <= 0.25

    def test_carried_soil_stays_attached_out_of_reach(self, store, machine):
        """Carried soil follows regardless of distance or height."""
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        result = machine.update(store, EffectorState.at(30.0, 10.0, -30.0, True))

        assert p.is_attached
        assert not result.changed

    def test_zero_jitter_snaps(self, store, config):
        machine = PickupStateMachine(config, random.Random(0), carry_jitter=0.0)
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        machine.update(store, EffectorState.at(1.0, 2.0, 3.0, True))

        assert p.position.as_tuple() == (1.0, 2.0, 3.0)


class TestRelease:
    """Test Attached -> Free."""

    def test_release_on_intent_false(self, store, machine):
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))
        machine.update(store, EffectorState.at(2.0, 3.0, 2.0, True))
        held_at = p.position.copy()

        result = machine.update(store, EffectorState.at(2.0, 3.0, 2.0, False))

        assert p.is_free
        assert result.released == [p.slot]
        assert p.velocity.is_zero()
        assert p.position == held_at

    def test_released_particle_falls_from_rest(self, store, machine, config):
        """After release, gravity integration starts from zero velocity."""
        physics = PhysicsStepper(config)
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))
        machine.update(store, EffectorState.at(0.0, 3.0, 0.0, True))
        machine.update(store, EffectorState.at(0.0, 3.0, 0.0, False))
        y0 = p.position.y

        physics.step(store, 0.016)

        assert p.velocity.y == pytest.approx(-9.8 * 0.016)
        assert p.position.y == pytest.approx(y0 - 9.8 * 0.016 * 0.016)

    def test_released_below_floor_rests(self, store, config):
        """Soil dropped from a bucket at ground level is not lifted to the floor."""
        machine = PickupStateMachine(config, FixedRandom(0.0))
        physics = PhysicsStepper(config)
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        machine.update(store, EffectorState.at(0.0, 0.15, 0.0, True))
        machine.update(store, EffectorState.at(0.0, 0.15, 0.0, True))
        assert p.position.y == pytest.approx(-0.1)

        machine.update(store, EffectorState.at(0.0, 0.15, 0.0, False))
        physics.step(store, 0.016)

        assert p.is_free
        assert p.position.y == pytest.approx(-0.1)
        assert p.velocity.is_zero()

    def test_release_all_at_once(self, store, machine):
        store.spawn_pile(0.0, 0.0, 10, BROWN)
        machine.update(store, EffectorState.at(0.0, 0.5, 0.0, True))
        attached = store.attached_count

        result = machine.update(store, EffectorState.at(0.0, 0.5, 0.0, False))

        assert attached > 0
        assert len(result.released) == attached
        assert store.attached_count == 0


class TestPickupEvents:
    """Test sampled pickup events."""

    def test_event_when_roll_below_chance(self, store, config):
        machine = PickupStateMachine(config, FixedRandom(0.1))
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)

        result = machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        assert len(result.events) == 1
        event = result.events[0]
        assert event.slot == p.slot
        assert event.color == BROWN
        assert event.position.as_tuple() == (0.0, 0.15, 0.0)

    def test_no_event_when_roll_above_chance(self, store, config):
        machine = PickupStateMachine(config, FixedRandom(0.5))
        p = store.spawn_particle(0.0, 0.15, 0.0, BROWN)

        result = machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        assert p.is_attached
        assert result.events == []

    def test_event_position_is_a_copy(self, store, config):
        machine = PickupStateMachine(config, FixedRandom(0.0))
        store.spawn_particle(0.0, 0.15, 0.0, BROWN)
        result = machine.update(store, EffectorState.at(0.0, 1.0, 0.0, True))

        machine.update(store, EffectorState.at(4.0, 4.0, 4.0, True))

        assert result.events[0].position.as_tuple() == (0.0, 0.15, 0.0)

    def test_chance_override(self, store, config):
        machine = PickupStateMachine(config, FixedRandom(0.0), effect_chance=0.0)
        store.spawn_pile(0.0, 0.0, 5, BROWN)

        result = machine.update(store, EffectorState.at(0.0, 0.5, 0.0, True))

        assert result.attached
        assert result.events == []
