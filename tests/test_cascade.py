import random

import pytest

from puzzlegrid.components.grid_position import GridPosition
from puzzlegrid.errors import BelowThreshold
from puzzlegrid.systems.cascade import (
    apply_clear,
    apply_collapse,
    apply_refill,
    ensure_clearable,
    plan_clear,
    plan_collapse,
    plan_refill,
    validate,
)
from puzzlegrid.systems.group_detector import find_connected_group
from tests.helpers import make_engine


def _column(grid, x):
    return [grid.get(x, y) for y in range(grid.height)]


def test_validate_uses_minimum_group_size():
    engine = make_engine([[1, 1, 2]])
    pair = find_connected_group(engine.grid, (0, 0))
    single = find_connected_group(engine.grid, (2, 0))
    assert validate(pair)
    assert not validate(single)
    assert not validate(pair, min_size=3)
    with pytest.raises(BelowThreshold):
        ensure_clearable(single, 2)
    assert ensure_clearable(pair, 2) is pair


def test_plan_clear_is_pure():
    engine = make_engine([[1, 1, 2]])
    group = find_connected_group(engine.grid, (0, 0))
    before = engine.grid.snapshot()
    plan = plan_clear(engine.grid, group)
    assert set(plan.cells) == {(0, 0), (1, 0)}
    assert len(plan) == 2
    assert engine.grid.snapshot() == before


def test_apply_clear_empties_cells_and_destroys_tiles():
    engine = make_engine([[1, 1, 2]])
    group = find_connected_group(engine.grid, (0, 0))
    plan = plan_clear(engine.grid, group)
    apply_clear(engine.grid, plan, engine.tile_factory)
    assert engine.grid.get(0, 0) is None and engine.grid.get(1, 0) is None
    assert engine.grid.get(2, 0) is not None
    for tile in plan.tiles:
        assert not engine.world.entity_exists(tile)


def test_collapse_compacts_each_column_preserving_order():
    engine = make_engine([
        [None, 1, 2],
        [3, None, 2],
        [None, 4, None],
        [1, None, 2],
        [None, 0, 3],
    ])
    grid = engine.grid
    survivors = {x: [t for t in _column(grid, x) if t is not None] for x in range(3)}
    before = grid.snapshot()

    plan = plan_collapse(grid)
    assert grid.snapshot() == before
    for move in plan.moves:
        assert move.source[0] == move.target[0]
        assert move.target[1] < move.source[1]

    apply_collapse(grid, plan)
    for x in range(3):
        column = _column(grid, x)
        count = len(survivors[x])
        assert column[:count] == survivors[x]
        assert all(t is None for t in column[count:])
    for x, y in grid.cells():
        tile = grid.get(x, y)
        if tile is not None:
            position = engine.world.component_for_entity(tile, GridPosition)
            assert (position.x, position.y) == (x, y)


def test_collapse_on_full_or_single_row_grid_is_noop():
    assert len(plan_collapse(make_engine([[1, 2, 3]]).grid)) == 0
    assert len(plan_collapse(make_engine(width=4, height=4).grid)) == 0


def test_refill_targets_every_empty_cell_with_spawns_above_the_board():
    engine = make_engine([
        [1, 2, 3],
        [1, None, 3],
        [None, None, 3],
    ])
    plan = plan_refill(engine.grid, random.Random(1), palette_size=5, spawn_offset=1.5)
    targets = [spawn.target for spawn in plan.spawns]
    assert targets == [(0, 2), (1, 1), (1, 2)]
    spawn_by_target = {spawn.target: spawn.spawn for spawn in plan.spawns}
    assert spawn_by_target[(0, 2)] == (0.0, 3.5)
    assert spawn_by_target[(1, 1)] == (1.0, 3.5)
    assert spawn_by_target[(1, 2)] == (1.0, 4.5)
    assert all(0 <= spawn.type_id < 5 for spawn in plan.spawns)


def test_refill_is_deterministic_for_a_seed():
    layout = [
        [1, 2, 3, 4],
        [2, None, 4, None],
        [None, None, 1, None],
    ]
    first = make_engine(layout)
    second = make_engine(layout)
    plan_a = plan_refill(first.grid, random.Random(99), palette_size=5)
    plan_b = plan_refill(second.grid, random.Random(99), palette_size=5)
    assert [s.type_id for s in plan_a.spawns] == [s.type_id for s in plan_b.spawns]
    assert [s.target for s in plan_a.spawns] == [s.target for s in plan_b.spawns]


def test_clear_collapse_refill_fills_the_board():
    engine = make_engine([
        [1, 1, 2, 3],
        [1, 4, 2, 3],
        [4, 4, 1, 1],
    ])
    grid = engine.grid
    group = find_connected_group(grid, (0, 0))
    apply_clear(grid, plan_clear(grid, group), engine.tile_factory)
    apply_collapse(grid, plan_collapse(grid))
    created = apply_refill(grid, plan_refill(grid, engine.rng, 5), engine.tile_factory)
    assert len(created) == 3
    assert grid.occupied_count() == 12
    assert not grid.empty_cells()


def test_refill_rejects_empty_palette():
    engine = make_engine([[None, 1]])
    with pytest.raises(ValueError):
        plan_refill(engine.grid, random.Random(0), palette_size=0)
