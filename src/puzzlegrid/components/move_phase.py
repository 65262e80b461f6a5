from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MoveState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    CLEARING = "clearing"
    COLLAPSING = "collapsing"
    REFILLING = "refilling"
    SETTLING = "settling"


@dataclass(slots=True)
class MovePhase:
    """Tracks the in-flight move shared across systems."""

    state: MoveState = MoveState.IDLE
    pending_batch: Optional[int] = None
    cleared_count: int = 0
