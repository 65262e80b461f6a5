from dataclasses import dataclass

@dataclass(slots=True)
class TileType:
    """Per-tile type assignment.

    type_id indexes the Palette; it decides matching and tint only, never position.
    """
    type_id: int
