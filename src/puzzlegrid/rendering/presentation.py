from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Tuple

Vec2 = Tuple[float, float]


class Presentation(Protocol):
    """Visual operations the engine drives; handles are opaque to the engine."""

    def spawn_visual(self, type_id: int, position: Vec2) -> Any: ...

    def destroy_visual(self, handle: Any) -> None: ...

    def set_visual_position(self, handle: Any, position: Vec2) -> None: ...

    def set_visual_scale(self, handle: Any, value: float) -> None: ...

    def set_visual_color(self, handle: Any, type_id: int) -> None: ...


@dataclass(slots=True)
class VisualRecord:
    type_id: int
    position: Vec2
    scale: float = 1.0


class HeadlessPresentation:
    """Keeps visuals in memory; used by tests and headless runs.

    Operations on destroyed handles are ignored, mirroring a sprite that has
    already left its sprite list.
    """

    def __init__(self):
        self.visuals: Dict[int, VisualRecord] = {}
        self.destroyed: List[int] = []
        self._next_handle = 1

    def spawn_visual(self, type_id: int, position: Vec2) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.visuals[handle] = VisualRecord(type_id=type_id, position=(float(position[0]), float(position[1])))
        return handle

    def destroy_visual(self, handle: int) -> None:
        if self.visuals.pop(handle, None) is not None:
            self.destroyed.append(handle)

    def set_visual_position(self, handle: int, position: Vec2) -> None:
        record = self.visuals.get(handle)
        if record is not None:
            record.position = (float(position[0]), float(position[1]))

    def set_visual_scale(self, handle: int, value: float) -> None:
        record = self.visuals.get(handle)
        if record is not None:
            record.scale = value

    def set_visual_color(self, handle: int, type_id: int) -> None:
        record = self.visuals.get(handle)
        if record is not None:
            record.type_id = type_id
