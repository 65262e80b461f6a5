from dataclasses import dataclass

@dataclass(slots=True)
class Transform:
    """Current visual position in grid units; differs from GridPosition while animating."""
    x: float
    y: float
