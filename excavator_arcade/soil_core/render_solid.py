"""
Solid Renderer
==============

Fast numpy-based top-down renderer: ground, roads, pits, soil, debris and
the excavator drawn as flat shapes. Used for rgb_array observations and by
the human play tool.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import math
import numpy as np

from excavator_arcade.soil_core.config_loader import GameConfig, get_config
from excavator_arcade.soil_core.palette import Palette


class SolidRenderer:
    """
    Renders the field seen from above.

    World +x maps to image right and world +z maps to image up. The view is
    a square of side ``2 * view_extent`` centered on the world origin.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._extent = config.observation.view_extent

        self._ground_color = np.array([92, 64, 51], dtype=np.uint8)
        self._road_color = np.array([85, 85, 85], dtype=np.uint8)
        self._body_color = np.array([251, 191, 36], dtype=np.uint8)
        self._track_color = np.array([31, 41, 55], dtype=np.uint8)
        self._bucket_idle = np.array([156, 163, 175], dtype=np.uint8)
        self._bucket_active = np.array([255, 255, 255], dtype=np.uint8)

    def _to_image(self, x: float, z: float, width: int, height: int) -> Tuple[int, int]:
        """World ground point -> pixel (col, row)."""
        span = 2 * self._extent
        col = int((x + self._extent) / span * width)
        row = int(height - (z + self._extent) / span * height)
        return col, row

    def _scale(self, width: int) -> float:
        """Pixels per world unit."""
        return width / (2 * self._extent)

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._ground_color
        scale = self._scale(width)

        for min_x, min_z, max_x, max_z in render_data.get("roads", []):
            c0, r1 = self._to_image(min_x, min_z, width, height)
            c1, r0 = self._to_image(max_x, max_z, width, height)
            self._fill_rect(img, c0, r0, c1, r1, self._road_color)

        for zone in render_data["zones"]:
            cx, cy = self._to_image(zone["x"], zone["z"], width, height)
            radius = int(zone["radius"] * scale)
            color = np.array(Palette.rgb(zone["color"]), dtype=np.uint8)
            # Pits are drawn half-blended into the ground
            fill = ((color.astype(np.uint16) + self._ground_color) // 2).astype(np.uint8)
            self._draw_circle(img, cx, cy, radius, fill)
            self._draw_circle_outline(img, cx, cy, radius, color, 2)

        half = max(1, int(render_data.get("particle_size", 0.3) * scale / 2))
        # Carried soil drawn last so it sits on top
        particles = sorted(render_data["particles"], key=lambda p: p["attached"])
        for particle in particles:
            x, _, z = particle["position"]
            cx, cy = self._to_image(x, z, width, height)
            color = np.array(Palette.rgb(particle["color"]), dtype=np.uint8)
            self._fill_rect(img, cx - half, cy - half, cx + half, cy + half, color)

        fx_size = render_data.get("effect_size", 0.1) * scale
        for fleck in render_data.get("effects", []):
            x, _, z = fleck["position"]
            cx, cy = self._to_image(x, z, width, height)
            r = max(1, int(fx_size * fleck["scale"]))
            color = np.array(Palette.rgb(fleck["color"]), dtype=np.uint8)
            self._fill_rect(img, cx - r, cy - r, cx + r, cy + r, color)

        if "base_x" in render_data:
            self._draw_excavator(img, render_data, scale, width, height)

        return img

    def _draw_excavator(
        self,
        img: np.ndarray,
        render_data: Dict[str, Any],
        scale: float,
        width: int,
        height: int
    ) -> None:
        """Body as a disc with a heading tick, bucket as a small disc."""
        bx, bz = render_data["base_x"], render_data["base_z"]
        cx, cy = self._to_image(bx, bz, width, height)
        body_r = max(2, int(1.2 * scale))
        self._draw_circle(img, cx, cy, body_r, self._body_color)
        self._draw_circle_outline(img, cx, cy, body_r, self._track_color, 2)

        heading = render_data.get("heading", 0.0)
        tip_x = bx + math.sin(heading) * 1.6
        tip_z = bz + math.cos(heading) * 1.6
        tx, ty = self._to_image(tip_x, tip_z, width, height)
        self._draw_circle(img, tx, ty, max(1, int(0.3 * scale)), self._track_color)

        x, _, z = render_data["bucket"]
        kx, ky = self._to_image(x, z, width, height)
        color = self._bucket_active if render_data.get("scoop_active") else self._bucket_idle
        self._draw_circle(img, kx, ky, max(2, int(0.5 * scale)), color)

    def _fill_rect(
        self,
        img: np.ndarray,
        c0: int,
        r0: int,
        c1: int,
        r1: int,
        color: np.ndarray
    ) -> None:
        """Fill an inclusive pixel rectangle, clipped to the image."""
        height, width = img.shape[:2]
        r_min, r_max = max(0, min(r0, r1)), min(height, max(r0, r1) + 1)
        c_min, c_max = max(0, min(c0, c1)), min(width, max(c0, c1) + 1)
        if r_min >= r_max or c_min >= c_max:
            return
        img[r_min:r_max, c_min:c_max] = color

    def _draw_circle(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray
    ) -> None:
        """Draw a filled circle using numpy."""
        height, width = img.shape[:2]

        # Calculate bounding box
        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)

        if y_min >= y_max or x_min >= x_max:
            return

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max),
            np.arange(x_min, x_max),
            indexing='ij'
        )
        mask = (xx - cx)**2 + (yy - cy)**2 <= radius**2
        img[y_min:y_max, x_min:x_max][mask] = color

    def _draw_circle_outline(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray,
        thickness: int = 1
    ) -> None:
        """Draw circle outline."""
        height, width = img.shape[:2]

        outer_r = radius
        inner_r = max(0, radius - thickness)

        y_min = max(0, cy - outer_r)
        y_max = min(height, cy + outer_r + 1)
        x_min = max(0, cx - outer_r)
        x_max = min(width, cx + outer_r + 1)

        if y_min >= y_max or x_min >= x_max:
            return

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max),
            np.arange(x_min, x_max),
            indexing='ij'
        )
        dist_sq = (xx - cx)**2 + (yy - cy)**2

        # Ring mask
        mask = (dist_sq <= outer_r**2) & (dist_sq >= inner_r**2)
        img[y_min:y_max, x_min:x_max][mask] = color

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
