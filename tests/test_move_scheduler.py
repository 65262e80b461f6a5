import pytest

from puzzlegrid.components.animation_batch import AnimationBatch
from puzzlegrid.components.emphasis import Emphasis
from puzzlegrid.components.move_phase import MoveState
from puzzlegrid.components.transform import Transform
from puzzlegrid.errors import OutOfBounds
from puzzlegrid.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_RESHUFFLED,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_RESOLVED,
    EVENT_MOVE_SETTLED,
    EVENT_MOVE_STATE_CHANGED,
    EVENT_TILE_ACTIVATED,
)
from tests.helpers import drive, make_engine


def _record(bus, event):
    received = []
    bus.subscribe(event, lambda sender, **payload: received.append(payload))
    return received


def test_three_by_one_row_clears_and_refills():
    engine = make_engine([[2, 2, 2]])
    bus = engine.event_bus
    resolved = _record(bus, EVENT_MOVE_RESOLVED)
    old_tiles = {engine.grid.get(x, 0) for x in range(3)}

    assert engine.scheduler.on_tile_activated(1, 0) is True
    drive(bus, 60)

    assert engine.scheduler.state is MoveState.IDLE
    assert resolved == [{"cleared_count": 3}]
    new_tiles = {engine.grid.get(x, 0) for x in range(3)}
    assert None not in new_tiles
    assert new_tiles.isdisjoint(old_tiles)
    assert engine.grid.occupied_count() == 3


def test_lone_tile_is_rejected_without_mutation():
    engine = make_engine([
        [0, 1, 0],
        [1, 0, 1],
    ])
    bus = engine.event_bus
    resolved = _record(bus, EVENT_MOVE_RESOLVED)
    rejected = _record(bus, EVENT_MOVE_REJECTED)
    before = engine.grid.snapshot()

    assert engine.scheduler.on_tile_activated(1, 1) is False
    drive(bus, 30)

    assert engine.grid.snapshot() == before
    assert not resolved
    assert rejected == [{"x": 1, "y": 1, "reason": "below_threshold"}]
    assert engine.scheduler.state is MoveState.IDLE
    assert engine.scoring.state.moves_left == engine.config.move_budget


def test_empty_cell_activation_returns_to_idle():
    engine = make_engine([[1, None, 1]])
    rejected = _record(engine.event_bus, EVENT_MOVE_REJECTED)
    assert engine.scheduler.on_tile_activated(1, 0) is False
    assert rejected[0]["reason"] == "empty_seed"
    assert engine.scheduler.idle


def test_out_of_bounds_activation_raises_but_engine_stays_usable():
    engine = make_engine([[1, 1, 2]])
    with pytest.raises(OutOfBounds):
        engine.scheduler.on_tile_activated(5, 0)
    assert engine.scheduler.idle
    assert engine.scheduler.on_tile_activated(0, 0) is True


def test_states_follow_the_move_pipeline():
    engine = make_engine([[2, 2, 1]])
    states = _record(engine.event_bus, EVENT_MOVE_STATE_CHANGED)
    engine.activate(0, 0)
    drive(engine.event_bus, 60)
    assert [entry["state"] for entry in states] == [
        MoveState.RESOLVING,
        MoveState.CLEARING,
        MoveState.COLLAPSING,
        MoveState.REFILLING,
        MoveState.SETTLING,
        MoveState.IDLE,
    ]


COLLAPSE_LAYOUT = [
    [1, 2],
    [1, 3],
    [4, 5],
]


def test_activation_while_collapsing_is_ignored():
    engine = make_engine(COLLAPSE_LAYOUT, palette_size=6)
    bus = engine.event_bus
    resolved = _record(bus, EVENT_MOVE_RESOLVED)
    survivor = engine.grid.get(0, 2)

    assert engine.scheduler.on_tile_activated(0, 0) is True
    assert engine.scheduler.state is MoveState.COLLAPSING
    drive(bus, 2)
    assert engine.scheduler.state is MoveState.COLLAPSING

    grid_before = engine.grid.snapshot()
    batches_before = [(ent, batch.kind, batch.elapsed) for ent, batch in engine.world.get_component(AnimationBatch)]
    pending_before = engine.scheduler.phase.pending_batch

    assert engine.scheduler.on_tile_activated(1, 0) is False
    bus.emit(EVENT_TILE_ACTIVATED, x=1, y=1)

    assert engine.grid.snapshot() == grid_before
    assert [(ent, batch.kind, batch.elapsed) for ent, batch in engine.world.get_component(AnimationBatch)] == batches_before
    assert engine.scheduler.phase.pending_batch == pending_before
    assert engine.scheduler.state is MoveState.COLLAPSING
    assert len(resolved) == 1

    drive(bus, 60)
    assert engine.scheduler.idle
    assert engine.grid.get(0, 0) == survivor
    transform = engine.world.component_for_entity(survivor, Transform)
    assert (transform.x, transform.y) == (0.0, 0.0)
    assert engine.grid.occupied_count() == 6


def test_refill_starts_only_after_collapse_completes():
    engine = make_engine(COLLAPSE_LAYOUT, palette_size=6)
    bus = engine.event_bus
    timeline = []
    bus.subscribe(EVENT_ANIMATION_START, lambda s, **k: timeline.append(("start", k["kind"])))
    bus.subscribe(EVENT_ANIMATION_COMPLETE, lambda s, **k: timeline.append(("complete", k["kind"])))

    engine.activate(0, 0)
    drive(bus, 60)

    assert timeline == [
        ("start", "collapse"),
        ("complete", "collapse"),
        ("start", "refill"),
        ("complete", "refill"),
    ]


# Column 1 keeps a pair of 2s that a move in column 0 cannot touch.
SIDE_PAIR_LAYOUT = [
    [1, 2],
    [1, 2],
    [4, 5],
]


def test_settle_resets_emphasis_and_accepts_next_move():
    engine = make_engine(SIDE_PAIR_LAYOUT, palette_size=6)
    bus = engine.event_bus
    settled = _record(bus, EVENT_MOVE_SETTLED)

    engine.activate(0, 0)
    assert list(engine.world.get_component(Emphasis))
    drive(bus, 60)

    assert settled == [{"cleared_count": 2}]
    assert not list(engine.world.get_component(Emphasis))
    assert all(record.scale == 1.0 for record in engine.presentation.visuals.values())
    assert len(engine.presentation.visuals) == 6

    assert engine.scheduler.on_tile_activated(1, 0) is True
    assert engine.scheduler.state is MoveState.COLLAPSING
    drive(bus, 60)
    assert settled[-1] == {"cleared_count": 2}
    assert engine.scheduler.idle


def test_presentation_tracks_cleared_and_spawned_visuals():
    engine = make_engine([[3, 3, 1]])
    destroyed_before = len(engine.presentation.destroyed)
    engine.activate(0, 0)
    assert len(engine.presentation.destroyed) == destroyed_before + 2
    drive(engine.event_bus, 60)
    assert len(engine.presentation.visuals) == 3


@pytest.mark.parametrize("seed", range(20))
def test_settle_keeps_refilled_types_with_reshuffle_enabled(seed):
    engine = make_engine([[2, 2, 2]], seed=seed, reshuffle_on_stalemate=True)
    bus = engine.event_bus
    reshuffled = _record(bus, EVENT_BOARD_RESHUFFLED)
    refilled = []
    bus.subscribe(
        EVENT_ANIMATION_START,
        lambda s, **k: refilled.append(engine.grid.type_snapshot()) if k["kind"] == "refill" else None,
    )

    engine.activate(1, 0)
    drive(bus, 60)

    assert engine.scheduler.idle
    assert reshuffled == []
    assert refilled == [engine.grid.type_snapshot()]
