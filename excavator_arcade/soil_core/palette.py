"""
Palette
=======

Provides convenient access to the soil color tags loaded from config.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple, Union

from excavator_arcade.soil_core.config_loader import GameConfig, get_config


class Palette:
    """
    The fixed set of soil colors.

    Colors are stored as 24-bit integers (0xRRGGBB) and are compared by value,
    so a particle's color tag and a pit's required color match only when the
    integers are equal.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize palette from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._by_name: Dict[str, int] = config.palette_map
        self._by_color: Dict[int, str] = {v: k for k, v in self._by_name.items()}

    def __getitem__(self, name: str) -> int:
        return self.resolve(name)

    def __contains__(self, color: Union[str, int]) -> bool:
        if isinstance(color, str):
            return color in self._by_name
        return color in self._by_color

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)

    def resolve(self, color: Union[str, int]) -> int:
        """
        Turn a palette name or raw color into a color tag.

        Raises:
            ValueError: If a name is not in the palette.
        """
        if isinstance(color, str):
            if color not in self._by_name:
                raise ValueError(f"Unknown palette color: {color!r}")
            return self._by_name[color]
        return int(color)

    def name_of(self, color: int) -> str:
        """Palette name for a color tag, or its hex string if unnamed."""
        return self._by_color.get(color, f"#{color:06x}")

    @staticmethod
    def rgb(color: int) -> Tuple[int, int, int]:
        """Split a 24-bit color into (r, g, b)."""
        return ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)

    def __repr__(self) -> str:
        return f"Palette({', '.join(self._by_name)})"


# Module-level singleton
_cached_palette: Optional[Palette] = None


def get_palette(config: Optional[GameConfig] = None) -> Palette:
    """
    Get the palette singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        Palette instance.
    """
    global _cached_palette
    if _cached_palette is None or config is not None:
        _cached_palette = Palette(config)
    return _cached_palette
