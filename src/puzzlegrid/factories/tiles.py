from __future__ import annotations

import logging
from typing import Optional, Tuple

from esper import World

from puzzlegrid.components.grid_position import GridPosition
from puzzlegrid.components.tile import TileType
from puzzlegrid.components.transform import Transform
from puzzlegrid.components.visual import Visual
from puzzlegrid.rendering.presentation import Presentation

logger = logging.getLogger(__name__)


class TileFactory:
    """Builds tile entities that already carry their type, cell, transform and visual."""

    def __init__(self, world: World, presentation: Presentation):
        self.world = world
        self.presentation = presentation

    def spawn(
        self,
        type_id: int,
        cell: Tuple[int, int],
        position: Optional[Tuple[float, float]] = None,
    ) -> int:
        x, y = cell
        px, py = position if position is not None else (float(x), float(y))
        handle = self.presentation.spawn_visual(type_id, (px, py))
        ent = self.world.create_entity(
            TileType(type_id),
            GridPosition(x, y),
            Transform(px, py),
            Visual(handle),
        )
        return ent

    def destroy(self, tile: int) -> None:
        if not self.world.entity_exists(tile):
            return
        visual = self.world.try_component(tile, Visual)
        if visual is not None:
            self.presentation.destroy_visual(visual.handle)
        self.world.delete_entity(tile, immediate=True)

    def retype(self, tile: int, type_id: int) -> None:
        self.world.component_for_entity(tile, TileType).type_id = type_id
        visual = self.world.try_component(tile, Visual)
        if visual is not None:
            self.presentation.set_visual_color(visual.handle, type_id)
