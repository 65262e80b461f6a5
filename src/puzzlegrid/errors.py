class GridError(Exception):
    """Base class for failures raised by the grid engine."""

    reason = "grid_error"


class OutOfBounds(GridError, IndexError):
    """A coordinate falls outside the grid."""

    reason = "out_of_bounds"

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"cell ({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class EmptySeed(GridError):
    """Group search was started from a cell without a tile."""

    reason = "empty_seed"

    def __init__(self, x: int, y: int):
        super().__init__(f"cell ({x}, {y}) is empty")
        self.x = x
        self.y = y


class BelowThreshold(GridError):
    """Group is too small to be cleared."""

    reason = "below_threshold"

    def __init__(self, size: int, minimum: int):
        super().__init__(f"group of {size} is below the minimum of {minimum}")
        self.size = size
        self.minimum = minimum
