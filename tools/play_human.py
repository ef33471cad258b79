"""
Human Play Mode
================

Drive the excavator with the keyboard and watch the field from above.

Controls:
    - W/S: Drive forward/backward
    - A/D: Turn the tracks
    - Q/E: Swing the cab
    - Up/Down: Raise/lower the boom
    - Left/Right: Stick in/out
    - Space: Scoop (hold to carry, release to dump)
    - N: Next level (after completing one)
    - R: Restart level
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--level LEVEL] [--size SIZE]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from excavator_arcade.soil_core.config_loader import load_config, GameConfig
from excavator_arcade.soil_core.effector import ExcavatorControls
from excavator_arcade.soil_core.game import CoreGame
from excavator_arcade.soil_core.pickup import PickupEvent
from excavator_arcade.soil_core.render_solid import SolidRenderer


REASON_TEXT = {
    "time_up": "Time's up!",
    "wrong_color": "Wrong color in a pit!",
    "off_road": "You drove off the road!",
}


def read_controls(pressed) -> ExcavatorControls:
    """Map held keys to operator intents."""
    return ExcavatorControls(
        forward=bool(pressed[pygame.K_w]),
        backward=bool(pressed[pygame.K_s]),
        turn_left=bool(pressed[pygame.K_a]),
        turn_right=bool(pressed[pygame.K_d]),
        cab_left=bool(pressed[pygame.K_q]),
        cab_right=bool(pressed[pygame.K_e]),
        boom_up=bool(pressed[pygame.K_UP]),
        boom_down=bool(pressed[pygame.K_DOWN]),
        stick_in=bool(pressed[pygame.K_LEFT]),
        stick_out=bool(pressed[pygame.K_RIGHT]),
        scoop=bool(pressed[pygame.K_SPACE]),
    )


class HumanPlayer:
    """
    Real-time keyboard play. The simulation advances in fixed frames of
    ``physics.dt`` driven by a wall-clock accumulator.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        level: Optional[int] = None,
        window_size: int = 720,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._window_size = window_size
        self._target_fps = target_fps
        self._hud_height = 70

        self._game = CoreGame(config=config, seed=seed, level=level)
        self._game.on_countdown_tick = self._on_countdown_tick
        self._game.on_level_complete = self._on_level_complete
        self._game.on_level_failed = self._on_level_failed
        self._game.add_pickup_listener(self._on_dig)
        self._digs = 0

        pygame.init()
        self._screen = pygame.display.set_mode((window_size, window_size + self._hud_height))
        pygame.display.set_caption("Excavator Arcade")
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 42)
        self._font_medium = pygame.font.Font(None, 28)
        self._font_small = pygame.font.Font(None, 20)

        self._renderer = SolidRenderer(config)

        self._running = True
        self._frame_dt = config.physics.dt
        self._accumulator = 0.0
        self._last_time = time.time()

    def run(self) -> int:
        """Run the game loop. Returns the last level reached."""
        print("=== Excavator Arcade ===")
        print("WASD drive, Q/E swing, arrows move the arm, Space scoops")
        print("R to restart, N for next level, ESC to quit")
        print()
        self._announce_level()

        while self._running:
            self._handle_events()
            if not self._game.is_over:
                self._update()
            self._render()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.level

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._game.restart_level()
                    self._announce_level()
                elif event.key == pygame.K_n and self._game.is_complete:
                    self._game.next_level()
                    self._announce_level()

    def _update(self) -> None:
        """Advance as many fixed frames as wall-clock time allows."""
        current_time = time.time()
        self._accumulator += current_time - self._last_time
        self._last_time = current_time

        # Limit to prevent spiral
        if self._accumulator > 0.2:
            self._accumulator = 0.2

        controls = read_controls(pygame.key.get_pressed())
        while self._accumulator >= self._frame_dt and not self._game.is_over:
            self._accumulator -= self._frame_dt
            self._game.step(controls)

    def _announce_level(self) -> None:
        self._accumulator = 0.0
        self._last_time = time.time()
        self._digs = 0
        print(f"\n=== Level {self._game.level} ===")
        print(self._game.objective)

    def _on_countdown_tick(self, second: int) -> None:
        print(f"  {second}...")

    def _on_dig(self, event: PickupEvent) -> None:
        self._digs += 1

    def _on_level_complete(self, level: int) -> None:
        print(f"\nLEVEL {level} COMPLETE - {self._game.correct_count}/{self._game.target_count}")

    def _on_level_failed(self, level: int, reason: str) -> None:
        print(f"\nLEVEL {level} FAILED - {REASON_TEXT.get(reason, reason)}")

    def _render(self) -> None:
        """Draw the field and the HUD."""
        render_data = self._game.get_render_data()
        img = self._renderer.render(render_data, self._window_size, self._window_size)

        # surfarray expects (width, height, 3)
        field = pygame.surfarray.make_surface(img.swapaxes(0, 1))
        self._screen.fill((30, 30, 30))
        self._screen.blit(field, (0, self._hud_height))

        self._draw_hud(render_data)
        if render_data["completed"] or render_data["failed"]:
            self._draw_banner(render_data)

        pygame.display.flip()

    def _draw_hud(self, render_data: dict) -> None:
        text_color = (240, 240, 240)
        timer_color = (255, 80, 80) if render_data["countdown_warning"] else text_color

        level = self._font_medium.render(f"Level {render_data['level']}", True, text_color)
        self._screen.blit(level, (12, 10))

        objective = self._font_small.render(render_data["objective"], True, (190, 190, 190))
        self._screen.blit(objective, (12, 40))

        progress = self._font_medium.render(
            f"{render_data['correct_count']} / {render_data['target_count']}", True, text_color
        )
        self._screen.blit(progress, (self._window_size // 2 - progress.get_width() // 2, 10))

        timer = self._font_large.render(f"{render_data['display_seconds']}", True, timer_color)
        self._screen.blit(timer, (self._window_size - timer.get_width() - 12, 10))

        digs = self._font_small.render(f"digs: {self._digs}", True, (190, 190, 190))
        self._screen.blit(digs, (self._window_size - digs.get_width() - 12, 46))

    def _draw_banner(self, render_data: dict) -> None:
        overlay = pygame.Surface((self._window_size, self._window_size), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 140))
        self._screen.blit(overlay, (0, self._hud_height))

        if render_data["completed"]:
            title, hint, color = "LEVEL COMPLETE", "N: next level   R: replay", (120, 255, 120)
        else:
            reason = REASON_TEXT.get(render_data["terminated_reason"], "")
            title, hint, color = "LEVEL FAILED", f"{reason}   R: retry", (255, 120, 120)

        center_y = self._hud_height + self._window_size // 2
        text = self._font_large.render(title, True, color)
        self._screen.blit(text, (self._window_size // 2 - text.get_width() // 2, center_y - 30))
        sub = self._font_medium.render(hint, True, (240, 240, 240))
        self._screen.blit(sub, (self._window_size // 2 - sub.get_width() // 2, center_y + 15))


def main():
    parser = argparse.ArgumentParser(description="Play the excavator game interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--level", type=int, default=None, help="Starting level")
    parser.add_argument("--size", type=int, default=720, help="Field size in pixels (default: 720)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")

    args = parser.parse_args()

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            level=args.level,
            window_size=args.size,
            target_fps=args.fps
        )
        level = player.run()
        print(f"\nReached level {level}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
