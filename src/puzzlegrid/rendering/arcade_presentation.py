from __future__ import annotations

from typing import Any, Dict, Tuple

import arcade

from puzzlegrid.components.palette import Palette
from puzzlegrid.constants import TILE_PADDING
from puzzlegrid.ui.layout import compute_board_geometry, grid_to_screen

Vec2 = Tuple[float, float]

# Circle textures are built once at this radius and scaled to the current tile size.
TEXTURE_RADIUS = 32


class ArcadePresentation:
    """Tinted circle sprites positioned in grid units and laid out to the window."""

    def __init__(self, window, palette: Palette, cols: int, rows: int):
        self.window = window
        self.palette = palette
        self.cols = cols
        self.rows = rows
        self._sprites = arcade.SpriteList()
        self._by_handle: Dict[int, Any] = {}
        self._positions: Dict[int, Vec2] = {}
        self._scales: Dict[int, float] = {}
        self._next_handle = 1
        self._last_window_size = (window.width, window.height)
        self._geometry = compute_board_geometry(window.width, window.height, cols, rows)

    def spawn_visual(self, type_id: int, position: Vec2) -> int:
        handle = self._next_handle
        self._next_handle += 1
        sprite = arcade.SpriteCircle(TEXTURE_RADIUS, arcade.color.WHITE)
        sprite.color = self.palette.color_for(type_id)
        self._sprites.append(sprite)
        self._by_handle[handle] = sprite
        self._positions[handle] = position
        self._scales[handle] = 1.0
        self._place(handle)
        return handle

    def destroy_visual(self, handle: int) -> None:
        sprite = self._by_handle.pop(handle, None)
        self._positions.pop(handle, None)
        self._scales.pop(handle, None)
        if sprite is not None:
            sprite.remove_from_sprite_lists()

    def set_visual_position(self, handle: int, position: Vec2) -> None:
        if handle not in self._by_handle:
            return
        self._positions[handle] = position
        self._place(handle)

    def set_visual_scale(self, handle: int, value: float) -> None:
        if handle not in self._by_handle:
            return
        self._scales[handle] = value
        self._place(handle)

    def set_visual_color(self, handle: int, type_id: int) -> None:
        sprite = self._by_handle.get(handle)
        if sprite is not None:
            sprite.color = self.palette.color_for(type_id)

    def notify_resize(self, width: int, height: int) -> None:
        self._last_window_size = (width, height)
        self._geometry = compute_board_geometry(width, height, self.cols, self.rows)
        for handle in self._by_handle:
            self._place(handle)

    def draw(self) -> None:
        if (self.window.width, self.window.height) != self._last_window_size:
            self.notify_resize(self.window.width, self.window.height)
        self._sprites.draw()

    def _place(self, handle: int) -> None:
        sprite = self._by_handle[handle]
        tile_size, start_x, start_y = self._geometry
        sprite.center_x, sprite.center_y = grid_to_screen(self._positions[handle], tile_size, start_x, start_y)
        draw_size = max(tile_size - TILE_PADDING, 4)
        sprite.scale = draw_size / (2 * TEXTURE_RADIUS) * self._scales[handle]
