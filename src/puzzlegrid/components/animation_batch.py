from dataclasses import dataclass, field
from typing import List, Tuple

Vec2 = Tuple[float, float]


@dataclass(slots=True)
class Transition:
    entity: int
    start: Vec2
    end: Vec2


@dataclass(slots=True)
class AnimationBatch:
    """Transitions advanced together over one duration."""

    kind: str
    duration: float
    transitions: List[Transition] = field(default_factory=list)
    elapsed: float = 0.0
    complete: bool = False

    @property
    def progress(self) -> float:
        if self.complete:
            return 1.0
        if self.duration <= 0:
            return 0.0
        return min(max(self.elapsed / self.duration, 0.0), 1.0)
