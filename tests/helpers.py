from __future__ import annotations

from typing import Optional, Sequence

from puzzlegrid.config import GridConfig
from puzzlegrid.engine import EngineContext
from puzzlegrid.events.bus import EventBus, EVENT_TICK


def drive(bus: EventBus, ticks: int, dt: float = 0.02) -> None:
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


def apply_layout(engine: EngineContext, layout: Sequence[Sequence[Optional[int]]]) -> None:
    """Overwrite tile types in place; ``layout[y][x]`` with the bottom row first.

    ``None`` removes the tile at that cell.
    """
    for y, row in enumerate(layout):
        for x, type_id in enumerate(row):
            tile = engine.grid.get(x, y)
            if type_id is None:
                if tile is not None:
                    engine.grid.set(x, y, None)
                    engine.tile_factory.destroy(tile)
                continue
            if tile is None:
                tile = engine.tile_factory.spawn(type_id, (x, y))
                engine.grid.set(x, y, tile)
            else:
                engine.tile_factory.retype(tile, type_id)


def make_engine(layout: Sequence[Sequence[Optional[int]]] | None = None, **overrides) -> EngineContext:
    """Initialized headless engine, optionally forced to ``layout``.

    Stalemate reshuffling is off unless requested so layouts stay as written.
    """
    params = {"seed": 7, "reshuffle_on_stalemate": False}
    if layout is not None:
        types = [t for row in layout for t in row if t is not None]
        params["width"] = len(layout[0])
        params["height"] = len(layout)
        params["palette_size"] = max(5, max(types, default=0) + 1)
    params.update(overrides)
    engine = EngineContext(GridConfig(**params))
    engine.initialize()
    if layout is not None:
        apply_layout(engine, layout)
    return engine
