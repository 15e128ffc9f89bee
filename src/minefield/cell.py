"""
Cell module for the Minefield engine.

Represents a single grid unit with its opened/mined/flagged state.
Cells know nothing about their position or the board that owns them.
"""
from dataclasses import dataclass
from enum import Enum, auto


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        opened: Whether the cell has been revealed.
        mined: Whether this cell contains a mine.
        flagged: Whether the player has marked the cell.
    """

    opened: bool = False
    mined: bool = False
    flagged: bool = False

    def open(self) -> bool:
        """
        Open this cell.

        Returns:
            True if the cell went from closed to opened, False if it was
            already opened or is flagged.
        """
        if self.opened or self.flagged:
            return False
        self.opened = True
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is opened.
        """
        if self.opened:
            return False
        self.flagged = not self.flagged
        return True

    @property
    def can_open(self) -> bool:
        """Check if cell is closed and unflagged."""
        return not self.opened and not self.flagged

    @property
    def state(self) -> CellState:
        """Visual state derived from the opened and flagged bits."""
        if self.opened:
            return CellState.REVEALED
        if self.flagged:
            return CellState.FLAGGED
        return CellState.HIDDEN
