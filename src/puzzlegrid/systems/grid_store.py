from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from esper import World

from puzzlegrid.components.grid_position import GridPosition
from puzzlegrid.components.tile import TileType
from puzzlegrid.errors import OutOfBounds

Cell = Tuple[int, int]


class GridStore:
    """Canonical width x height mapping from cell to tile entity.

    ``y == 0`` is the bottom row. A cell holds a tile entity id or ``None``.
    """

    def __init__(self, world: World, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"grid must be at least 1x1, got {width}x{height}")
        self.world = world
        self.width = width
        self.height = height
        self._cells: List[List[Optional[int]]] = [[None] * height for _ in range(width)]
        self._where: Dict[int, Cell] = {}

    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)

    def get(self, x: int, y: int) -> Optional[int]:
        self._check(x, y)
        return self._cells[x][y]

    def set(self, x: int, y: int, tile: Optional[int]) -> None:
        self._check(x, y)
        if tile is not None:
            current = self._where.get(tile)
            if current is not None and current != (x, y):
                raise ValueError(f"tile {tile} already occupies {current}")
        previous = self._cells[x][y]
        if previous is not None and previous != tile:
            if tile is not None:
                raise ValueError(f"cell {(x, y)} already holds tile {previous}")
            self._where.pop(previous, None)
        self._cells[x][y] = tile
        if tile is None:
            return
        self._where[tile] = (x, y)
        if self.world.entity_exists(tile):
            position = self.world.try_component(tile, GridPosition)
            if position is None:
                self.world.add_component(tile, GridPosition(x, y))
            else:
                position.x = x
                position.y = y

    def is_empty(self, x: int, y: int) -> bool:
        return self.get(x, y) is None

    def type_at(self, x: int, y: int) -> Optional[int]:
        tile = self.get(x, y)
        if tile is None:
            return None
        return self.world.component_for_entity(tile, TileType).type_id

    def position_of(self, tile: int) -> Optional[Cell]:
        return self._where.get(tile)

    def cells(self) -> Iterator[Cell]:
        """Every coordinate, column by column from the bottom up."""
        for x in range(self.width):
            for y in range(self.height):
                yield x, y

    def tiles(self) -> Iterator[Tuple[Cell, int]]:
        for x, y in self.cells():
            tile = self._cells[x][y]
            if tile is not None:
                yield (x, y), tile

    def empty_cells(self) -> List[Cell]:
        return [(x, y) for x, y in self.cells() if self._cells[x][y] is None]

    def occupied_count(self) -> int:
        return len(self._where)

    def snapshot(self) -> Tuple[Tuple[Optional[int], ...], ...]:
        """Immutable copy of the tile ids, indexed ``[x][y]``."""
        return tuple(tuple(column) for column in self._cells)

    def type_snapshot(self) -> Tuple[Tuple[Optional[int], ...], ...]:
        return tuple(
            tuple(self.type_at(x, y) for y in range(self.height)) for x in range(self.width)
        )
