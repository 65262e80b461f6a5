from __future__ import annotations

import logging
import random

from esper import World

from puzzlegrid.components.palette import Palette
from puzzlegrid.config import GridConfig
from puzzlegrid.events.bus import EventBus, EVENT_TICK, EVENT_TILE_ACTIVATED
from puzzlegrid.factories.tiles import TileFactory
from puzzlegrid.rendering.presentation import HeadlessPresentation, Presentation
from puzzlegrid.systems.animation import AnimationDriver
from puzzlegrid.systems.board import BoardSystem
from puzzlegrid.systems.grid_store import GridStore
from puzzlegrid.systems.move_scheduler import MoveScheduler
from puzzlegrid.systems.scoring import ScoreSystem

logger = logging.getLogger(__name__)


class EngineContext:
    """Owns the world, grid and systems of one puzzle session.

    Constructed once by the host application and passed to whatever needs it.
    ``initialize`` populates the board; ``shutdown`` tears every tile down.
    """

    def __init__(
        self,
        config: GridConfig | None = None,
        *,
        event_bus: EventBus | None = None,
        presentation: Presentation | None = None,
        rng: random.Random | None = None,
        palette: Palette | None = None,
    ):
        self.config = config or GridConfig()
        self.event_bus = event_bus or EventBus()
        self.presentation = presentation if presentation is not None else HeadlessPresentation()
        self.rng = rng or random.Random(self.config.seed)
        self.palette = palette or Palette.for_size(self.config.palette_size)
        if self.palette.size != self.config.palette_size:
            raise ValueError(
                f"palette has {self.palette.size} colors but config asks for {self.config.palette_size}"
            )
        self.world = World()
        self.world.create_entity(self.palette)

        self.grid = GridStore(self.world, self.config.width, self.config.height)
        self.tile_factory = TileFactory(self.world, self.presentation)
        self.animation = AnimationDriver(self.world, self.event_bus, self.presentation)
        self.board = BoardSystem(
            self.world, self.event_bus, self.grid, self.tile_factory, self.palette, self.config, self.rng
        )
        self.scheduler = MoveScheduler(
            self.world,
            self.event_bus,
            self.grid,
            self.animation,
            self.tile_factory,
            self.board,
            self.presentation,
            self.config,
            self.rng,
        )
        self.scoring = ScoreSystem(self.world, self.event_bus, self.config)
        self.initialized = False

    def initialize(self) -> None:
        if self.initialized:
            return
        self.board.populate()
        try:
            self.board.ensure_playable()
        except RuntimeError:
            logger.exception("Starting board has no valid move")
        self.scoring.reset()
        self.initialized = True
        logger.info(
            "Initialized %dx%d board with %d tile types",
            self.config.width, self.config.height, self.palette.size,
        )

    def shutdown(self) -> None:
        if not self.initialized:
            return
        self.animation.cancel_all()
        self.scheduler.reset()
        self.board.clear()
        self.initialized = False
        logger.info("Engine shut down")

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def activate(self, x: int, y: int) -> None:
        self.event_bus.emit(EVENT_TILE_ACTIVATED, x=x, y=y)
