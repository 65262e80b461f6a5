from esper import World

from puzzlegrid.components.board import Board
from puzzlegrid.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_TILE_ACTIVATED
from puzzlegrid.systems.scoring import get_score_state
from puzzlegrid.ui.layout import compute_board_geometry, screen_to_cell

LEFT_BUTTON = 1


class InputSystem:
    """Translates left mouse presses on the board into EVENT_TILE_ACTIVATED."""

    def __init__(self, event_bus: EventBus, window, world: World):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button')
        if x is None or y is None:
            return
        if button != LEFT_BUTTON:
            return
        if self._game_over():
            return
        board = self._board()
        if board is None:
            return
        tile_size, start_x, start_y = compute_board_geometry(
            self.window.width, self.window.height, board.width, board.height
        )
        cell = screen_to_cell(x, y, tile_size, start_x, start_y, board.width, board.height)
        if cell is None:
            return
        self.event_bus.emit(EVENT_TILE_ACTIVATED, x=cell[0], y=cell[1])

    def _board(self) -> Board | None:
        for _, board in self.world.get_component(Board):
            return board
        return None

    def _game_over(self) -> bool:
        state = get_score_state(self.world)
        return state is not None and state.game_over
