"""
Minefield: rules engine for Minesweeper-style grid games.

Provides board state, deferred mine placement, flood-fill revealing
and win/lose detection. Rendering, input and sessions belong to the host.
"""
from .cell import Cell, CellState
from .board import (
    Board,
    BoardConfig,
    GameState,
    Position,
    create,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
)
from .errors import MinefieldError, InvalidDimensions, OutOfBounds, TooManyMines

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "GameState",
    "Position",
    "create",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "MinefieldError",
    "InvalidDimensions",
    "OutOfBounds",
    "TooManyMines",
]
