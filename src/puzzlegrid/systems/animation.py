from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from esper import World

from puzzlegrid.components.animation_batch import AnimationBatch, Transition, Vec2
from puzzlegrid.components.transform import Transform
from puzzlegrid.components.visual import Visual
from puzzlegrid.events.bus import (EventBus, EVENT_TICK, EVENT_ANIMATION_START,
                                   EVENT_ANIMATION_COMPLETE)
from puzzlegrid.rendering.presentation import Presentation

logger = logging.getLogger(__name__)


def smoothstep(a: float) -> float:
    a = min(max(a, 0.0), 1.0)
    return a * a * (3.0 - 2.0 * a)


def lerp(start: Vec2, end: Vec2, t: float) -> Vec2:
    return (
        start[0] + (end[0] - start[0]) * t,
        start[1] + (end[1] - start[1]) * t,
    )


class AnimationDriver:
    """Drives timing of animation batches; each batch is its own entity.

    All transitions of a batch move in lockstep. Completion is announced with
    EVENT_ANIMATION_COMPLETE carrying the batch entity returned by ``run``.
    """

    def __init__(self, world: World, event_bus: EventBus, presentation: Presentation):
        self.world = world
        self.event_bus = event_bus
        self.presentation = presentation
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    def run(self, kind: str, transitions: Iterable[Transition], duration: float) -> int:
        batch = AnimationBatch(kind=kind, duration=max(0.0, float(duration)), transitions=list(transitions))
        ent = self.world.create_entity(batch)
        for transition in batch.transitions:
            self._apply(transition.entity, transition.start)
        logger.debug("Started %s batch %d with %d transitions", kind, ent, len(batch.transitions))
        self.event_bus.emit(EVENT_ANIMATION_START, kind=kind, batch_entity=ent, count=len(batch.transitions))
        return ent

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        self.advance(dt)

    def advance(self, dt: float) -> bool:
        """Step every running batch by ``dt``; True once nothing is in flight."""
        for ent, batch in list(self.world.get_component(AnimationBatch)):
            if batch.complete or not self.world.entity_exists(ent):
                continue
            if self.step(batch, dt):
                self._finish(ent, batch)
        return not self.busy

    def step(self, batch: AnimationBatch, dt: float) -> bool:
        if batch.complete:
            return True
        batch.elapsed += dt
        # A batch with nothing to move still yields once before completing.
        if not batch.transitions or batch.duration <= 0 or batch.elapsed >= batch.duration:
            for transition in batch.transitions:
                self._apply(transition.entity, transition.end)
            batch.complete = True
            return True
        eased = smoothstep(batch.progress)
        for transition in batch.transitions:
            self._apply(transition.entity, lerp(transition.start, transition.end, eased))
        return False

    @property
    def busy(self) -> bool:
        return any(not batch.complete for _, batch in self.world.get_component(AnimationBatch))

    def active_batches(self) -> List[Tuple[int, AnimationBatch]]:
        return [(ent, batch) for ent, batch in self.world.get_component(AnimationBatch) if not batch.complete]

    def cancel_all(self) -> None:
        """Drop every batch without snapping or announcing completion."""
        for ent, _ in list(self.world.get_component(AnimationBatch)):
            self.world.delete_entity(ent, immediate=True)

    def _apply(self, entity: int, position: Vec2) -> None:
        # Tiles can be destroyed while a batch still references them.
        if not self.world.entity_exists(entity):
            return
        transform = self.world.try_component(entity, Transform)
        if transform is None:
            return
        transform.x, transform.y = position
        visual = self.world.try_component(entity, Visual)
        if visual is not None:
            self.presentation.set_visual_position(visual.handle, position)

    def _finish(self, ent: int, batch: AnimationBatch) -> None:
        self.world.delete_entity(ent, immediate=True)
        logger.debug("Completed %s batch %d", batch.kind, ent)
        self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=batch.kind, batch_entity=ent)
