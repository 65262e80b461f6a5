from __future__ import annotations

import logging
import random
from typing import Iterable

from esper import World

from puzzlegrid.components.animation_batch import Transition
from puzzlegrid.components.emphasis import Emphasis
from puzzlegrid.components.move_phase import MovePhase, MoveState
from puzzlegrid.components.visual import Visual
from puzzlegrid.config import GridConfig
from puzzlegrid.constants import MOVING_TILE_SCALE, SETTLED_TILE_SCALE
from puzzlegrid.errors import BelowThreshold, EmptySeed, OutOfBounds
from puzzlegrid.events.bus import (EventBus, EVENT_TILE_ACTIVATED, EVENT_ANIMATION_COMPLETE,
                                   EVENT_MOVE_STATE_CHANGED, EVENT_GROUP_FOUND, EVENT_MOVE_REJECTED,
                                   EVENT_TILES_CLEARED, EVENT_MOVE_RESOLVED, EVENT_GRAVITY_APPLIED,
                                   EVENT_REFILL_COMPLETED, EVENT_MOVE_SETTLED)
from puzzlegrid.factories.tiles import TileFactory
from puzzlegrid.rendering.presentation import Presentation
from puzzlegrid.systems.animation import AnimationDriver
from puzzlegrid.systems.board import BoardSystem
from puzzlegrid.systems.cascade import (apply_clear, apply_collapse, apply_refill, ensure_clearable,
                                        plan_clear, plan_collapse, plan_refill)
from puzzlegrid.systems.grid_store import GridStore
from puzzlegrid.systems.group_detector import Group, find_connected_group

logger = logging.getLogger(__name__)

COLLAPSE_BATCH = "collapse"
REFILL_BATCH = "refill"


def get_or_create_move_phase(world: World) -> MovePhase:
    """Return the shared MovePhase component, creating it if absent."""
    existing = list(world.get_component(MovePhase))
    if existing:
        return existing[0][1]
    phase = MovePhase()
    world.create_entity(phase)
    return phase


class MoveScheduler:
    """Single-flight move pipeline: detect, validate, clear, collapse, refill, settle.

    Only ``on_tile_activated`` starts a move, and only from IDLE. Collapse and
    refill are animated one after the other; the scheduler advances when the
    AnimationDriver reports the batch it started as complete.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        grid: GridStore,
        driver: AnimationDriver,
        factory: TileFactory,
        board: BoardSystem,
        presentation: Presentation,
        config: GridConfig,
        rng: random.Random,
    ):
        self.world = world
        self.event_bus = event_bus
        self.grid = grid
        self.driver = driver
        self.factory = factory
        self.board = board
        self.presentation = presentation
        self.config = config
        self.rng = rng
        self.phase = get_or_create_move_phase(world)
        self.event_bus.subscribe(EVENT_TILE_ACTIVATED, self.on_tile_activated_event)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)

    @property
    def state(self) -> MoveState:
        return self.phase.state

    @property
    def idle(self) -> bool:
        return self.phase.state is MoveState.IDLE

    def on_tile_activated_event(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        self.on_tile_activated(x, y)

    def on_tile_activated(self, x: int, y: int) -> bool:
        """Start a move at (x, y); returns True when the move was accepted."""
        if not self.idle:
            logger.debug("Ignoring activation at (%s, %s) while %s", x, y, self.state.value)
            return False
        self._transition(MoveState.RESOLVING)
        try:
            group = find_connected_group(self.grid, (x, y))
            ensure_clearable(group, self.config.min_group_size)
        except (EmptySeed, BelowThreshold) as exc:
            logger.debug("Rejected activation at (%s, %s): %s", x, y, exc)
            self._transition(MoveState.IDLE)
            self.event_bus.emit(EVENT_MOVE_REJECTED, x=x, y=y, reason=exc.reason)
            return False
        except OutOfBounds:
            self._transition(MoveState.IDLE)
            raise
        self.event_bus.emit(EVENT_GROUP_FOUND, cells=list(group.cells), type_id=group.type_id, size=len(group))
        self._clear(group)
        self._collapse()
        return True

    def on_animation_complete(self, sender, **kwargs):
        batch = kwargs.get('batch_entity')
        if batch is None or batch != self.phase.pending_batch:
            return
        self.phase.pending_batch = None
        if self.state is MoveState.COLLAPSING:
            self._refill()
        elif self.state is MoveState.REFILLING:
            self._settle()

    def reset(self) -> None:
        """Drop any in-flight move and return to IDLE (engine shutdown only)."""
        self.phase.pending_batch = None
        self.phase.cleared_count = 0
        self._reset_emphasis()
        if not self.idle:
            self._transition(MoveState.IDLE)

    def _clear(self, group: Group) -> None:
        self._transition(MoveState.CLEARING)
        plan = plan_clear(self.grid, group)
        apply_clear(self.grid, plan, self.factory)
        self.phase.cleared_count = len(plan)
        self.event_bus.emit(EVENT_TILES_CLEARED, cells=list(plan.cells), type_id=group.type_id)
        self.event_bus.emit(EVENT_MOVE_RESOLVED, cleared_count=len(plan))

    def _collapse(self) -> None:
        self._transition(MoveState.COLLAPSING)
        plan = plan_collapse(self.grid)
        apply_collapse(self.grid, plan)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=len(plan))
        transitions = [
            Transition(entity=move.tile, start=_as_point(move.source), end=_as_point(move.target))
            for move in plan.moves
        ]
        self._emphasize(t.entity for t in transitions)
        self.phase.pending_batch = self.driver.run(COLLAPSE_BATCH, transitions, self.config.collapse_duration)

    def _refill(self) -> None:
        self._transition(MoveState.REFILLING)
        plan = plan_refill(self.grid, self.rng, self.board.palette.size, self.config.refill_spawn_offset)
        tiles = apply_refill(self.grid, plan, self.factory)
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=[spawn.target for spawn in plan.spawns])
        transitions = [
            Transition(entity=tile, start=spawn.spawn, end=_as_point(spawn.target))
            for tile, spawn in zip(tiles, plan.spawns)
        ]
        self._emphasize(tiles)
        self.phase.pending_batch = self.driver.run(REFILL_BATCH, transitions, self.config.refill_duration)

    def _settle(self) -> None:
        self._transition(MoveState.SETTLING)
        self._reset_emphasis()
        cleared = self.phase.cleared_count
        self.phase.cleared_count = 0
        self._transition(MoveState.IDLE)
        self.event_bus.emit(EVENT_MOVE_SETTLED, cleared_count=cleared)

    def _emphasize(self, tiles: Iterable[int]) -> None:
        for tile in tiles:
            self.world.add_component(tile, Emphasis(scale=MOVING_TILE_SCALE))
            visual = self.world.try_component(tile, Visual)
            if visual is not None:
                self.presentation.set_visual_scale(visual.handle, MOVING_TILE_SCALE)

    def _reset_emphasis(self) -> None:
        for tile, _ in list(self.world.get_component(Emphasis)):
            visual = self.world.try_component(tile, Visual)
            if visual is not None:
                self.presentation.set_visual_scale(visual.handle, SETTLED_TILE_SCALE)
            self.world.remove_component(tile, Emphasis)

    def _transition(self, state: MoveState) -> None:
        previous = self.phase.state
        self.phase.state = state
        logger.debug("Move state %s -> %s", previous.value, state.value)
        self.event_bus.emit(EVENT_MOVE_STATE_CHANGED, previous=previous, state=state)


def _as_point(cell) -> tuple[float, float]:
    return float(cell[0]), float(cell[1])
