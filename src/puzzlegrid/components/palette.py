from dataclasses import dataclass, field
from typing import List, Tuple

from puzzlegrid.constants import DEFAULT_TILE_COLORS

Color = Tuple[int, int, int]


@dataclass(slots=True)
class Palette:
    """Canonical tile type definitions stored on a single entity.

    Type ids are indexes into ``colors``.
    """
    colors: List[Color] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("palette needs at least one color")

    @classmethod
    def for_size(cls, size: int) -> "Palette":
        # Colors repeat once the palette outgrows the defaults.
        if size <= 0:
            raise ValueError(f"palette size must be positive, got {size}")
        return cls([DEFAULT_TILE_COLORS[i % len(DEFAULT_TILE_COLORS)] for i in range(size)])

    @property
    def size(self) -> int:
        return len(self.colors)

    def color_for(self, type_id: int) -> Color:
        return self.colors[type_id]
