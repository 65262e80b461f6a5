from puzzlegrid.events.bus import (
    EVENT_GAME_OVER,
    EVENT_MOVE_RESOLVED,
    EVENT_MOVES_CHANGED,
    EVENT_SCORE_CHANGED,
)
from puzzlegrid.systems.scoring import get_score_state
from tests.helpers import drive, make_engine


def test_score_state_starts_with_full_budget():
    engine = make_engine(move_budget=5)
    state = get_score_state(engine.world)
    assert state is engine.scoring.state
    assert (state.score, state.moves_left, state.game_over) == (0, 5, False)


def test_resolved_move_scores_per_tile_and_spends_a_move():
    engine = make_engine(move_budget=5, points_per_tile=10)
    bus = engine.event_bus
    scores, moves = [], []
    bus.subscribe(EVENT_SCORE_CHANGED, lambda s, **kw: scores.append(kw))
    bus.subscribe(EVENT_MOVES_CHANGED, lambda s, **kw: moves.append(kw))

    bus.emit(EVENT_MOVE_RESOLVED, cleared_count=4)

    assert scores == [{"score": 40, "delta": 40}]
    assert moves == [{"moves_left": 4}]


def test_game_over_fires_once_and_freezes_score():
    engine = make_engine(move_budget=2)
    bus = engine.event_bus
    over = []
    bus.subscribe(EVENT_GAME_OVER, lambda s, **kw: over.append(kw))

    bus.emit(EVENT_MOVE_RESOLVED, cleared_count=2)
    bus.emit(EVENT_MOVE_RESOLVED, cleared_count=3)
    bus.emit(EVENT_MOVE_RESOLVED, cleared_count=9)

    state = engine.scoring.state
    assert over == [{"score": 50}]
    assert state.game_over is True
    assert state.score == 50
    assert state.moves_left == 0


def test_real_move_updates_score():
    engine = make_engine([[4, 4, 4, 1]])
    engine.activate(0, 0)
    drive(engine.event_bus, 60)
    state = engine.scoring.state
    assert state.score == 3 * engine.config.points_per_tile
    assert state.moves_left == engine.config.move_budget - 1


def test_rejected_move_costs_nothing():
    engine = make_engine([[4, 1, 4]])
    engine.activate(0, 0)
    state = engine.scoring.state
    assert state.score == 0
    assert state.moves_left == engine.config.move_budget


def test_reset_restores_budget():
    engine = make_engine(move_budget=1)
    engine.event_bus.emit(EVENT_MOVE_RESOLVED, cleared_count=2)
    assert engine.scoring.state.game_over
    engine.scoring.reset()
    state = engine.scoring.state
    assert (state.score, state.moves_left, state.game_over) == (0, 1, False)
