from __future__ import annotations

from esper import World

from puzzlegrid.constants import HUD_FONT_SIZE, HUD_MARGIN, HUD_TEXT_COLOR
from puzzlegrid.systems.scoring import get_score_state


class HudRenderer:
    """Score and remaining-move line along the top edge of the window."""

    def __init__(self, world: World, window):
        self.world = world
        self.window = window

    def text(self) -> str:
        state = get_score_state(self.world)
        if state is None:
            return ""
        line = f"Score: {state.score}    Moves: {state.moves_left}"
        if state.game_over:
            line += "    Game Over"
        return line

    def render(self, arcade) -> None:
        line = self.text()
        if not line:
            return
        arcade.draw_text(
            line,
            HUD_MARGIN,
            self.window.height - HUD_MARGIN - HUD_FONT_SIZE,
            HUD_TEXT_COLOR,
            HUD_FONT_SIZE,
        )
