from dataclasses import dataclass

@dataclass(slots=True)
class GridPosition:
    """Logical cell currently owned by the tile (kept in sync by GridStore.set)."""
    x: int
    y: int
