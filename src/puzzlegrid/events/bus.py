from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems alive even when nobody else holds the system.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_TILE_ACTIVATED = "tile_activated"            # payload: x=int, y=int


# ============================================================================
# MOVE RESOLUTION
# ============================================================================
EVENT_MOVE_STATE_CHANGED = "move_state_changed"    # payload: previous=MoveState, state=MoveState
EVENT_GROUP_FOUND = "group_found"                  # payload: cells=[(x,y),...], type_id=int, size=int
EVENT_MOVE_REJECTED = "move_rejected"              # payload: x, y, reason=str
EVENT_TILES_CLEARED = "tiles_cleared"              # payload: cells=[(x,y),...], type_id=int
EVENT_MOVE_RESOLVED = "move_resolved"              # payload: cleared_count=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...]
EVENT_MOVE_SETTLED = "move_settled"                # payload: cleared_count=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: attempts=int


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, batch_entity=int, count=int
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, batch_entity=int


# ============================================================================
# SCORE & MOVE BUDGET
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_MOVES_CHANGED = "moves_changed"              # payload: moves_left=int
EVENT_GAME_OVER = "game_over"                      # payload: score=int
