from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple

from puzzlegrid.constants import MIN_GROUP_SIZE, REFILL_SPAWN_OFFSET
from puzzlegrid.errors import BelowThreshold
from puzzlegrid.factories.tiles import TileFactory
from puzzlegrid.systems.grid_store import Cell, GridStore
from puzzlegrid.systems.group_detector import Group

Vec2 = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class ClearPlan:
    cells: Tuple[Cell, ...]
    tiles: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True, slots=True)
class CollapseMove:
    tile: int
    source: Cell
    target: Cell


@dataclass(frozen=True, slots=True)
class CollapsePlan:
    moves: Tuple[CollapseMove, ...]

    def __len__(self) -> int:
        return len(self.moves)


@dataclass(frozen=True, slots=True)
class RefillSpawn:
    type_id: int
    spawn: Vec2
    target: Cell


@dataclass(frozen=True, slots=True)
class RefillPlan:
    spawns: Tuple[RefillSpawn, ...]

    def __len__(self) -> int:
        return len(self.spawns)


def validate(group: Group, min_size: int = MIN_GROUP_SIZE) -> bool:
    return len(group) >= min_size


def ensure_clearable(group: Group, min_size: int = MIN_GROUP_SIZE) -> Group:
    if not validate(group, min_size):
        raise BelowThreshold(len(group), min_size)
    return group


def plan_clear(grid: GridStore, group: Group) -> ClearPlan:
    """Cells of ``group`` that will become empty."""
    cells: List[Cell] = []
    tiles: List[int] = []
    for x, y in group.cells:
        tile = grid.get(x, y)
        if tile is None:
            continue
        cells.append((x, y))
        tiles.append(tile)
    return ClearPlan(cells=tuple(cells), tiles=tuple(tiles))


def plan_collapse(grid: GridStore) -> CollapsePlan:
    """Stable per-column compaction toward row 0.

    Each column is scanned bottom to top with a write cursor; every occupied
    cell lands on the cursor row and the cursor advances, so surviving tiles
    keep their order and every gap ends up above them.
    """
    width, height = grid.dimensions()
    moves: List[CollapseMove] = []
    for x in range(width):
        write_row = 0
        for y in range(height):
            tile = grid.get(x, y)
            if tile is None:
                continue
            if y != write_row:
                moves.append(CollapseMove(tile=tile, source=(x, y), target=(x, write_row)))
            write_row += 1
    return CollapsePlan(moves=tuple(moves))


def plan_refill(
    grid: GridStore,
    rng: random.Random,
    palette_size: int,
    spawn_offset: float = REFILL_SPAWN_OFFSET,
) -> RefillPlan:
    """New tiles for every empty cell, drawn uniformly from the palette.

    Cells are visited column by column from the bottom up so a given RNG state
    always yields the same assignment. The lowest new tile of a column starts
    ``spawn_offset`` rows above the top row; the ones above it queue up one row
    apart.
    """
    if palette_size <= 0:
        raise ValueError(f"palette_size must be positive, got {palette_size}")
    width, height = grid.dimensions()
    top_row = height - 1
    spawns: List[RefillSpawn] = []
    for x in range(width):
        first_empty = None
        for y in range(height):
            if grid.get(x, y) is not None:
                continue
            if first_empty is None:
                first_empty = y
            spawn_y = top_row + spawn_offset + (y - first_empty)
            type_id = rng.randrange(palette_size)
            spawns.append(RefillSpawn(type_id=type_id, spawn=(float(x), float(spawn_y)), target=(x, y)))
    return RefillPlan(spawns=tuple(spawns))


def apply_clear(grid: GridStore, plan: ClearPlan, factory: TileFactory) -> None:
    for (x, y), tile in zip(plan.cells, plan.tiles):
        grid.set(x, y, None)
        factory.destroy(tile)


def apply_collapse(grid: GridStore, plan: CollapsePlan) -> None:
    # Moves are ordered bottom-up per column, so every target is already vacant.
    for move in plan.moves:
        grid.set(*move.source, None)
        grid.set(*move.target, move.tile)


def apply_refill(grid: GridStore, plan: RefillPlan, factory: TileFactory) -> List[int]:
    created: List[int] = []
    for spawn in plan.spawns:
        tile = factory.spawn(spawn.type_id, spawn.target, spawn.spawn)
        grid.set(*spawn.target, tile)
        created.append(tile)
    return created
