GRID_WIDTH = 6
GRID_HEIGHT = 6
PALETTE_SIZE = 5
MIN_GROUP_SIZE = 2

# Rows above the top of the board where a refilled tile starts its drop.
REFILL_SPAWN_OFFSET = 1.0
COLLAPSE_DURATION = 0.25
REFILL_DURATION = 0.25

MOVE_BUDGET = 20
POINTS_PER_TILE = 10

# Board layout (pixels). Tile size follows the window.
BOTTOM_MARGIN = 20
TILE_PADDING = 4
MIN_TILE_SIZE = 20
BOARD_MAX_WIDTH_PCT = 0.75   # board may consume up to 75% of window width
BOARD_MAX_HEIGHT_PCT = 0.80  # leave room above the board for the HUD line

# Scale applied to tiles while they fall; reset to 1.0 when the move settles.
MOVING_TILE_SCALE = 0.92
SETTLED_TILE_SCALE = 1.0

# Attempts BoardSystem makes to reroll a board that has no valid move.
RESHUFFLE_ATTEMPTS = 200

# Red, blue, green, yellow, magenta first; the rest cycle in for larger palettes.
DEFAULT_TILE_COLORS = [
    (220, 60, 60),
    (70, 90, 200),
    (70, 170, 80),
    (225, 205, 70),
    (200, 70, 190),
    (70, 180, 180),
    (230, 140, 50),
]

HUD_FONT_SIZE = 16
HUD_TEXT_COLOR = (235, 235, 235)
HUD_MARGIN = 12
