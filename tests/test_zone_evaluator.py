"""
Tests for pits and win/failure evaluation.
"""

import random

import pytest

from excavator_arcade.soil_core.config_loader import load_config
from excavator_arcade.soil_core.evaluator import ZoneEvaluator
from excavator_arcade.soil_core.geometry import Vec3
from excavator_arcade.soil_core.particles import ParticleStore
from excavator_arcade.soil_core.zones import Zone, ZoneRegistry


RED = 0xFF0000
BLUE = 0x0000FF


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def store(config):
    return ParticleStore(config, random.Random(0))


@pytest.fixture
def registry(config):
    return ZoneRegistry(config)


@pytest.fixture
def evaluator():
    return ZoneEvaluator()


class TestZone:
    """Test pit geometry."""

    def test_default_radius(self, registry):
        zone = registry.add_zone(1.0, 2.0, RED)
        assert zone.radius == 2.0
        assert len(registry) == 1

    def test_contains_is_planar_and_strict(self):
        zone = Zone(0.0, 0.0, 2.0, RED)

        assert zone.contains(Vec3(0.0, 50.0, 0.0))
        assert zone.contains(Vec3(1.99, 0.15, 0.0))
        assert not zone.contains(Vec3(2.0, 0.15, 0.0))

    def test_accepts(self):
        zone = Zone(0.0, 0.0, 2.0, RED)
        assert zone.accepts(RED)
        assert not zone.accepts(BLUE)

    def test_clear(self, registry):
        registry.add_zone(0.0, 0.0, RED)
        registry.clear()
        assert len(registry) == 0


class TestCountCorrect:
    """Test win progress."""

    def test_matching_particle_at_center(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)
        store.spawn_particle(0.0, 0.15, 0.0, RED)

        assert evaluator.count_correct(store, registry) == 1

    def test_wrong_color_not_counted(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, BLUE)
        store.spawn_particle(0.0, 0.15, 0.0, RED)

        assert evaluator.count_correct(store, registry) == 0

    def test_outside_not_counted(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)
        store.spawn_particle(3.0, 0.15, 0.0, RED)

        assert evaluator.count_correct(store, registry) == 0

    def test_attached_particles_count(self, store, registry, evaluator):
        """Carried soil over its pit counts toward progress."""
        registry.add_zone(0.0, 0.0, RED)
        p = store.spawn_particle(0.5, 3.0, 0.0, RED)
        p.attach()

        assert evaluator.count_correct(store, registry) == 1

    def test_moving_into_pit_never_decreases(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)
        p = store.spawn_particle(10.0, 0.15, 0.0, RED)
        store.spawn_particle(0.0, 0.15, 0.5, RED)

        before = evaluator.count_correct(store, registry)
        p.position.set(0.0, 0.15, 0.0)
        after = evaluator.count_correct(store, registry)

        assert before == 1
        assert after == 2

    def test_rescan_is_idempotent(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)
        store.spawn_pile(0.0, 0.0, 20, RED)

        first = evaluator.count_correct(store, registry)
        assert evaluator.count_correct(store, registry) == first
        assert first == 20

    def test_overlapping_pits_double_count(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)
        registry.add_zone(1.0, 0.0, RED)
        store.spawn_particle(0.5, 0.15, 0.0, RED)

        assert evaluator.zone_counts(store, registry) == [1, 1]
        assert evaluator.count_correct(store, registry) == 2

    def test_zone_counts_per_pit(self, store, registry, evaluator):
        registry.add_zone(-5.0, 0.0, RED)
        registry.add_zone(5.0, 0.0, BLUE)
        store.spawn_particle(-5.0, 0.15, 0.0, RED)
        store.spawn_particle(-5.0, 0.15, 1.0, RED)
        store.spawn_particle(5.0, 0.15, 0.0, BLUE)

        assert evaluator.zone_counts(store, registry) == [2, 1]


class TestDetectFailure:
    """Test wrong-color detection."""

    def test_wrong_color_in_pit(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, BLUE)
        store.spawn_particle(0.0, 0.15, 0.0, RED)

        assert evaluator.detect_failure(store, registry)

    def test_single_violation_is_enough(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)
        store.spawn_pile(0.0, 0.0, 20, RED)
        intruder = store.spawn_particle(0.2, 0.15, 0.2, BLUE)

        violation = evaluator.find_violation(store, registry)

        assert violation is not None
        assert violation.particle is intruder
        assert violation.zone_index == 0

    def test_matching_colors_no_failure(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)
        store.spawn_pile(0.0, 0.0, 20, RED)

        assert not evaluator.detect_failure(store, registry)

    def test_carried_soil_exempt(self, store, registry, evaluator):
        """Soil in the bucket over a wrong pit is not a failure."""
        registry.add_zone(0.0, 0.0, BLUE)
        p = store.spawn_particle(0.0, 3.0, 0.0, RED)
        p.attach()

        assert not evaluator.detect_failure(store, registry)

        p.release()
        assert evaluator.detect_failure(store, registry)

    def test_wrong_color_outside_pit(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, BLUE)
        store.spawn_particle(2.5, 0.15, 0.0, RED)

        assert not evaluator.detect_failure(store, registry)


class TestEmptyCollections:
    """Empty stores and registries are harmless."""

    def test_no_particles(self, store, registry, evaluator):
        registry.add_zone(0.0, 0.0, RED)

        assert evaluator.count_correct(store, registry) == 0
        assert not evaluator.detect_failure(store, registry)

    def test_no_zones(self, store, registry, evaluator):
        store.spawn_pile(0.0, 0.0, 10, RED)

        assert evaluator.count_correct(store, registry) == 0
        assert evaluator.zone_counts(store, registry) == []
        assert evaluator.find_violation(store, registry) is None
