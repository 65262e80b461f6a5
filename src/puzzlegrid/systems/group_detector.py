from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Tuple

from puzzlegrid.errors import EmptySeed
from puzzlegrid.systems.grid_store import Cell, GridStore

NEIGHBOR_OFFSETS: Tuple[Cell, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


@dataclass(frozen=True, slots=True)
class Group:
    """Maximal 4-connected set of same-type tiles; cells are in BFS order, seed first."""

    type_id: int
    cells: Tuple[Cell, ...]
    tiles: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, cell: object) -> bool:
        return cell in self.cells

    @property
    def seed(self) -> Cell:
        return self.cells[0]


def find_connected_group(grid: GridStore, seed: Cell) -> Group:
    """Breadth-first flood fill from ``seed`` over equal-type 4-neighbours.

    Raises OutOfBounds for a seed outside the grid and EmptySeed for an empty
    seed cell. A lone tile yields a group of size 1.
    """
    x, y = seed
    seed_tile = grid.get(x, y)
    if seed_tile is None:
        raise EmptySeed(x, y)
    type_id = grid.type_at(x, y)
    width, height = grid.dimensions()
    visited = [[False] * height for _ in range(width)]
    visited[x][y] = True
    queue: Deque[Cell] = deque([(x, y)])
    cells: List[Cell] = []
    tiles: List[int] = []
    while queue:
        cx, cy = queue.popleft()
        cells.append((cx, cy))
        tiles.append(grid.get(cx, cy))
        enqueue_matching_neighbors(grid, visited, queue, (cx, cy), type_id)
    return Group(type_id=type_id, cells=tuple(cells), tiles=tuple(tiles))


def enqueue_matching_neighbors(
    grid: GridStore,
    visited: List[List[bool]],
    queue: Deque[Cell],
    cell: Cell,
    type_id: int,
) -> None:
    """Queue in-bounds, unvisited, occupied neighbours of ``cell`` that share ``type_id``."""
    x, y = cell
    for dx, dy in NEIGHBOR_OFFSETS:
        nx, ny = x + dx, y + dy
        if not grid.in_bounds(nx, ny) or visited[nx][ny]:
            continue
        if grid.type_at(nx, ny) != type_id:
            continue
        visited[nx][ny] = True
        queue.append((nx, ny))


def find_all_groups(grid: GridStore) -> List[Group]:
    """Partition every occupied cell into maximal groups."""
    seen: set[Cell] = set()
    groups: List[Group] = []
    for cell, _ in grid.tiles():
        if cell in seen:
            continue
        group = find_connected_group(grid, cell)
        seen.update(group.cells)
        groups.append(group)
    return groups


def has_valid_move(grid: GridStore, min_size: int) -> bool:
    return any(len(group) >= min_size for group in find_all_groups(grid))
