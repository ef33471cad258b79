"""
Zone Evaluator
==============

Scans particles against pits to produce win progress and failure detection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from excavator_arcade.soil_core.particles import ParticleStore, SoilParticle
from excavator_arcade.soil_core.zones import Zone, ZoneRegistry


@dataclass
class ZoneViolation:
    """A free particle resting in a pit of another color."""
    zone_index: int
    zone: Zone
    particle: SoilParticle

    def __repr__(self) -> str:
        return (
            f"ZoneViolation(zone={self.zone_index}, slot={self.particle.slot}, "
            f"expected=#{self.zone.color:06x}, got=#{self.particle.color:06x})"
        )


class ZoneEvaluator:
    """
    Win-progress and failure predicates over (zone, particle) pairs.

    Progress counts every particle inside a matching pit, attached or not.
    A particle inside two overlapping matching pits is counted twice; level
    layouts keep pits apart. Failure only considers free particles, so soil
    carried over a wrong pit is never a failure until it is dropped.
    """

    def zone_counts(self, store: ParticleStore, registry: ZoneRegistry) -> List[int]:
        """Matching particles inside each pit, in registry order."""
        counts = []
        for zone in registry:
            n = 0
            for particle in store:
                if zone.accepts(particle.color) and zone.contains(particle.position):
                    n += 1
            counts.append(n)
        return counts

    def count_correct(self, store: ParticleStore, registry: ZoneRegistry) -> int:
        """Total matching particles across all pits."""
        return sum(self.zone_counts(store, registry))

    def find_violation(
        self,
        store: ParticleStore,
        registry: ZoneRegistry
    ) -> Optional[ZoneViolation]:
        """First free particle found inside a pit of a different color."""
        for zone_index, zone in enumerate(registry):
            for particle in store:
                if particle.is_attached:
                    continue
                if not zone.accepts(particle.color) and zone.contains(particle.position):
                    return ZoneViolation(zone_index, zone, particle)
        return None

    def detect_failure(self, store: ParticleStore, registry: ZoneRegistry) -> bool:
        """True if any free particle sits in a pit of the wrong color."""
        return self.find_violation(store, registry) is not None
