from __future__ import annotations

import logging

from esper import World

from puzzlegrid.components.score import ScoreState
from puzzlegrid.config import GridConfig
from puzzlegrid.events.bus import (EventBus, EVENT_MOVE_RESOLVED, EVENT_SCORE_CHANGED,
                                   EVENT_MOVES_CHANGED, EVENT_GAME_OVER)

logger = logging.getLogger(__name__)


def get_score_state(world: World) -> ScoreState | None:
    for _, state in world.get_component(ScoreState):
        return state
    return None


class ScoreSystem:
    """Move budget and score bookkeeping driven by EVENT_MOVE_RESOLVED."""

    def __init__(self, world: World, event_bus: EventBus, config: GridConfig):
        self.world = world
        self.event_bus = event_bus
        self.config = config
        self.state_entity = self.world.create_entity(ScoreState(moves_left=config.move_budget))
        self.event_bus.subscribe(EVENT_MOVE_RESOLVED, self.on_move_resolved)

    @property
    def state(self) -> ScoreState:
        return self.world.component_for_entity(self.state_entity, ScoreState)

    def reset(self) -> None:
        state = self.state
        state.score = 0
        state.moves_left = self.config.move_budget
        state.game_over = False

    def on_move_resolved(self, sender, **kwargs):
        cleared = kwargs.get('cleared_count', 0)
        state = self.state
        if state.game_over:
            return
        self.add_score(cleared * self.config.points_per_tile)
        self.use_move()

    def add_score(self, amount: int) -> None:
        state = self.state
        state.score += amount
        logger.info("Score: %d", state.score)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=amount)

    def use_move(self) -> None:
        state = self.state
        state.moves_left -= 1
        logger.info("Moves left: %d", state.moves_left)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_left=state.moves_left)
        if state.moves_left <= 0 and not state.game_over:
            state.game_over = True
            logger.info("Game over with score %d", state.score)
            self.event_bus.emit(EVENT_GAME_OVER, score=state.score)
