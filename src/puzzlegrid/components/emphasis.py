from dataclasses import dataclass

@dataclass(slots=True)
class Emphasis:
    """Transient scale applied to a tile during a move; removed when the move settles."""
    scale: float
