from __future__ import annotations

import logging
import random
from typing import List

from esper import World

from puzzlegrid.components.board import Board
from puzzlegrid.components.palette import Palette
from puzzlegrid.config import GridConfig
from puzzlegrid.constants import RESHUFFLE_ATTEMPTS
from puzzlegrid.events.bus import EventBus, EVENT_BOARD_RESHUFFLED
from puzzlegrid.factories.tiles import TileFactory
from puzzlegrid.systems.grid_store import GridStore
from puzzlegrid.systems.group_detector import has_valid_move

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns board population and stalemate recovery."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        grid: GridStore,
        factory: TileFactory,
        palette: Palette,
        config: GridConfig,
        rng: random.Random,
    ):
        self.world = world
        self.event_bus = event_bus
        self.grid = grid
        self.factory = factory
        self.palette = palette
        self.config = config
        self.rng = rng
        self.board_entity = self.world.create_entity(Board(width=grid.width, height=grid.height))

    def populate(self) -> List[int]:
        """Fill every empty cell with a uniformly random tile.

        Pre-existing groups are fine here: they are the moves on offer.
        """
        created: List[int] = []
        for x, y in self.grid.cells():
            if not self.grid.is_empty(x, y):
                continue
            tile = self.factory.spawn(self.rng.randrange(self.palette.size), (x, y))
            self.grid.set(x, y, tile)
            created.append(tile)
        logger.debug("Populated %d cells", len(created))
        return created

    def clear(self) -> None:
        for (x, y), tile in list(self.grid.tiles()):
            self.grid.set(x, y, None)
            self.factory.destroy(tile)

    def ensure_playable(self) -> bool:
        """Reroll tile types until a clearable group exists; True when a reroll happened."""
        if not self.config.reshuffle_on_stalemate:
            return False
        min_size = self.config.min_group_size
        if has_valid_move(self.grid, min_size):
            return False
        tiles = [tile for _, tile in self.grid.tiles()]
        for attempt in range(1, RESHUFFLE_ATTEMPTS + 1):
            for tile in tiles:
                self.factory.retype(tile, self.rng.randrange(self.palette.size))
            if has_valid_move(self.grid, min_size):
                logger.info("Board had no valid move; reshuffled after %d attempt(s)", attempt)
                self.event_bus.emit(EVENT_BOARD_RESHUFFLED, attempts=attempt)
                return True
        raise RuntimeError("Unable to reshuffle board into a layout with a valid move")
