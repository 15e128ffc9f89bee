"""
Exceptions raised by the Minefield engine.

Every error is raised before the board is mutated, so a failed call
leaves the board exactly as it was.
"""


# ============================================================================
# Base Error
# ============================================================================

class MinefieldError(Exception):
    """Base class for all engine errors."""


# ============================================================================
# Specific Errors
# ============================================================================

class InvalidDimensions(MinefieldError, ValueError):
    """Board width or height is not a positive integer."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(
            f"Board dimensions must be positive (got {width}x{height})"
        )


class OutOfBounds(MinefieldError, IndexError):
    """
    Coordinates lie outside the board.

    Attributes:
        x: Requested column.
        y: Requested row.
        width: Board width.
        height: Board height.
    """

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(
            f"Position ({x}, {y}) is outside the {width}x{height} board"
        )


class TooManyMines(MinefieldError, ValueError):
    """Requested mine count exceeds the number of placeable cells."""

    def __init__(self, requested: int, capacity: int) -> None:
        self.requested = requested
        self.capacity = capacity
        super().__init__(
            f"Too many mines (requested {requested}, max {capacity})"
        )
