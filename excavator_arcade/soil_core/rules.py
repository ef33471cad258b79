"""
Level Rules
===========

Handles the level timer and the completion/failure conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import math

from excavator_arcade.soil_core.config_loader import GameConfig, get_config


# Termination reasons
REASON_TIME_UP = "time_up"
REASON_WRONG_COLOR = "wrong_color"
REASON_OFF_ROAD = "off_road"
REASON_TARGET_REACHED = "target_reached"


@dataclass
class TerminationResult:
    """Result of a level rule check."""
    completed: bool
    failed: bool
    reason: str

    @property
    def is_over(self) -> bool:
        return self.completed or self.failed

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def level_complete() -> "TerminationResult":
        return TerminationResult(True, False, REASON_TARGET_REACHED)

    @staticmethod
    def failure(reason: str) -> "TerminationResult":
        return TerminationResult(False, True, reason)


class LevelTimer:
    """
    Countdown for a single level.

    The displayed value is the remaining time rounded up to whole seconds.
    """

    def __init__(self, time_limit: float, warning_seconds: int = 10):
        """
        Args:
            time_limit: Seconds available for the level.
            warning_seconds: Final seconds that trigger countdown ticks.
        """
        self._time_limit = time_limit
        self._warning_seconds = warning_seconds
        self._time_left = time_limit

    @property
    def time_left(self) -> float:
        return self._time_left

    @property
    def time_limit(self) -> float:
        return self._time_limit

    @property
    def display_seconds(self) -> int:
        return int(math.ceil(self._time_left))

    @property
    def expired(self) -> bool:
        return self._time_left <= 0

    @property
    def in_warning(self) -> bool:
        """True during the final countdown window."""
        return 0 < self.display_seconds <= self._warning_seconds

    def reset(self, time_limit: Optional[float] = None) -> None:
        if time_limit is not None:
            self._time_limit = time_limit
        self._time_left = self._time_limit

    def tick(self, dt: float) -> Optional[int]:
        """
        Consume ``dt`` seconds.

        Returns:
            The new displayed second if it changed this tick, else None.
        """
        before = self.display_seconds
        self._time_left = max(0.0, self._time_left - dt)
        after = self.display_seconds
        return after if after != before else None


class LevelRules:
    """
    Combined completion/failure check.

    Checked in order: timeout, wrong color in a pit, excavator off the road,
    target reached. The first hit decides the outcome.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._warning_seconds = config.timer.countdown_warning_seconds

    @property
    def warning_seconds(self) -> int:
        return self._warning_seconds

    def make_timer(self, time_limit: float) -> LevelTimer:
        return LevelTimer(time_limit, self._warning_seconds)

    def check(
        self,
        timer: LevelTimer,
        wrong_color: bool,
        on_road: bool,
        correct_count: int,
        target_count: int
    ) -> TerminationResult:
        """
        Check all level conditions.

        Args:
            timer: The level timer.
            wrong_color: True if any free particle rests in a wrong pit.
            on_road: True if the excavator base is on a road.
            correct_count: Particles in matching pits.
            target_count: Count needed to complete the level.

        Returns:
            TerminationResult indicating level state.
        """
        if timer.expired:
            return TerminationResult.failure(REASON_TIME_UP)

        if wrong_color:
            return TerminationResult.failure(REASON_WRONG_COLOR)

        if not on_road:
            return TerminationResult.failure(REASON_OFF_ROAD)

        if correct_count >= target_count:
            return TerminationResult.level_complete()

        return TerminationResult.none()
