"""
Board module for the Minefield engine.

Implements the game board with deferred mine placement, flood-fill
revealing, flagging and win/lose queries.
"""
import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Iterator, List, NamedTuple, Optional, Sequence, Set

import numpy as np

from .cell import Cell
from .errors import InvalidDimensions, OutOfBounds, TooManyMines


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MINE_CHAR = "*"
SAFE_CHAR = "."


class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


class Position(NamedTuple):
    """Zero-based grid coordinates: x indexes width, y indexes height."""

    x: int
    y: int


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place on the first reveal.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise InvalidDimensions(self.width, self.height)
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        # Best case is a corner click, which keeps at most 2x2 cells clear
        max_mines = (
            self.width * self.height
            - min(self.width, 2) * min(self.height, 2)
        )
        if self.num_mines > max_mines:
            raise TooManyMines(self.num_mines, max_mines)


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Owns the grid of cells. Mines are placed on the first reveal, never
    in the 3x3 neighbourhood of the revealed cell. Win and loss are
    recomputed from the grid on every query; the board keeps accepting
    reveals after a loss and leaves it to the caller to stop.

    A board has no internal locking. Hosts that share one between
    threads must serialize calls to it.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Default mine count for the first reveal.
        seed: Seed for mine placement, or None for OS entropy.
    """

    width: int
    height: int
    num_mines: Optional[int] = None
    seed: Optional[int] = None
    _grid: List[List[Cell]] = field(
        default_factory=list, init=False, repr=False
    )
    _rng: random.Random = field(init=False, repr=False, compare=False)
    _pending_first_reveal: bool = field(default=True, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate dimensions and initialize the grid."""
        if self.width < 1 or self.height < 1:
            raise InvalidDimensions(self.width, self.height)
        if self.num_mines is not None and self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        self._rng = random.Random(self.seed)
        self._init_grid()

    @classmethod
    def from_config(
        cls, config: BoardConfig, seed: Optional[int] = None
    ) -> "Board":
        """Create an unseeded board sized and mined per ``config``."""
        return cls(
            config.width, config.height,
            num_mines=config.num_mines, seed=seed,
        )

    @classmethod
    def from_layout(cls, rows: Sequence[str]) -> "Board":
        """
        Create a board with a fixed mine layout.

        Each string is one row; ``*`` marks a mine and ``.`` a safe
        cell. The returned board counts as already seeded, so the first
        reveal does not place any further mines.

        Args:
            rows: Row strings, all of the same length.

        Returns:
            Board with mines at the marked positions.
        """
        height = len(rows)
        width = len(rows[0]) if rows else 0
        if width < 1 or height < 1:
            raise InvalidDimensions(width, height)
        if any(len(row) != width for row in rows):
            raise ValueError("Layout rows must all have the same length")

        board = cls(width, height)
        for y, row in enumerate(rows):
            for x, char in enumerate(row):
                if char == MINE_CHAR:
                    board._grid[y][x].mined = True
                elif char != SAFE_CHAR:
                    raise ValueError(f"Unknown layout character {char!r}")
        board.num_mines = len(board.mine_positions())
        board._pending_first_reveal = False
        return board

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.width)]
            for _ in range(self.height)
        ]

    def place_mines(self, count: int, safe_x: int, safe_y: int) -> None:
        """
        Place mines randomly outside the 3x3 area around a safe cell.

        Does nothing once mines have been placed. Rejects the request
        without touching the board if ``count`` exceeds the number of
        eligible cells.

        Args:
            count: Number of mines to place.
            safe_x: Column of the cell to keep clear.
            safe_y: Row of the cell to keep clear.
        """
        self._check_position(safe_x, safe_y)
        if not self._pending_first_reveal:
            return
        if count < 0:
            raise ValueError("Number of mines cannot be negative")

        positions = self._get_valid_mine_positions(Position(safe_x, safe_y))
        if count > len(positions):
            raise TooManyMines(count, len(positions))

        for x, y in self._rng.sample(positions, count):
            self._grid[y][x].mined = True
        self._pending_first_reveal = False
        self.num_mines = count
        logger.debug(
            "Placed %d of %d possible mines around safe cell (%d, %d)",
            count, len(positions), safe_x, safe_y,
        )

    def _get_valid_mine_positions(self, safe: Position) -> List[Position]:
        """Get all positions outside the safe cell's neighbourhood."""
        safe_zone = set(self._get_neighbors(safe.x, safe.y))
        safe_zone.add(safe)
        return [pos for pos in self._positions() if pos not in safe_zone]

    def _count_adjacent_mines(self, x: int, y: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_x, neighbor_y in self._get_neighbors(x, y):
            if self._grid[neighbor_y][neighbor_x].mined:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, x: int, y: int) -> List[Position]:
        """
        Get valid neighboring cell positions.

        Args:
            x: Column index of center cell.
            y: Row index of center cell.

        Returns:
            List of in-bounds positions around the cell, excluding it.
        """
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self._is_valid_position(new_x, new_y):
                    neighbors.append(Position(new_x, new_y))
        return neighbors

    def _is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_position(self, x: int, y: int) -> None:
        """Raise OutOfBounds unless position is within board bounds."""
        if not self._is_valid_position(x, y):
            raise OutOfBounds(x, y, self.width, self.height)

    def _positions(self) -> Iterator[Position]:
        """Iterate over every position in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    def _cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        for row in self._grid:
            yield from row

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(
        self, x: int, y: int, mine_count: Optional[int] = None
    ) -> Set[Position]:
        """
        Reveal a cell at the given position.

        On the first reveal, places mines avoiding this cell and its
        neighbours. If the cell has no adjacent mines, the reveal spreads
        to its neighbours until it reaches numbered cells.

        Args:
            x: Column index to reveal.
            y: Row index to reveal.
            mine_count: Mines to place if this is the first reveal.
                Defaults to the board's ``num_mines``; ignored afterwards.

        Returns:
            Positions opened by this call, empty if nothing changed.
        """
        self._check_position(x, y)

        if self._pending_first_reveal:
            self._handle_first_reveal(x, y, mine_count)

        cell = self._grid[y][x]
        if not cell.can_open:
            return set()

        if cell.mined:
            cell.open()
            logger.debug("Opened mine at (%d, %d)", x, y)
            return {Position(x, y)}

        opened = self._flood_fill(Position(x, y))
        logger.debug("Reveal at (%d, %d) opened %d cells", x, y, len(opened))
        return opened

    def _handle_first_reveal(
        self, x: int, y: int, mine_count: Optional[int]
    ) -> None:
        """Handle first reveal: place mines around the clicked cell."""
        count = mine_count if mine_count is not None else self.num_mines
        if count is None:
            raise ValueError("A mine count is required for the first reveal")
        self.place_mines(count, x, y)

    def _flood_fill(self, start: Position) -> Set[Position]:
        """Open the zero-adjacency region around start plus its border."""
        opened = set()
        pending = [start]
        while pending:
            pos = pending.pop()
            cell = self._grid[pos.y][pos.x]
            if cell.mined or not cell.open():
                continue
            opened.add(pos)
            if self._count_adjacent_mines(pos.x, pos.y) == 0:
                pending.extend(
                    neighbor
                    for neighbor in self._get_neighbors(pos.x, pos.y)
                    if self._grid[neighbor.y][neighbor.x].can_open
                )
        return opened

    def toggle_flag(self, x: int, y: int) -> None:
        """
        Toggle flag on a cell.

        Opened cells cannot be flagged; the call is then a no-op.

        Args:
            x: Column index.
            y: Row index.
        """
        self._check_position(x, y)
        self._grid[y][x].toggle_flag()

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def pending_first_reveal(self) -> bool:
        """Check if mines are still waiting for the first reveal."""
        return self._pending_first_reveal

    def mines_around(self, x: int, y: int) -> int:
        """Count mines among the up to 8 neighbours of a cell."""
        self._check_position(x, y)
        return self._count_adjacent_mines(x, y)

    def cell_state(self, x: int, y: int) -> Cell:
        """Get a detached copy of the cell at position."""
        self._check_position(x, y)
        return replace(self._grid[y][x])

    def is_game_over(self) -> bool:
        """Check if any opened cell is a mine."""
        return any(cell.opened and cell.mined for cell in self._cells())

    def is_game_clear(self) -> bool:
        """Check if every non-mine cell is opened."""
        return all(cell.mined or cell.opened for cell in self._cells())

    @property
    def game_state(self) -> GameState:
        """Get current game state; a loss outranks a clear board."""
        if self.is_game_over():
            return GameState.LOST
        if self.is_game_clear():
            return GameState.WON
        return GameState.PLAYING

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self.game_state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self.game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self.game_state == GameState.LOST

    def mine_positions(self) -> Set[Position]:
        """Get every mined position, for showing mines after a loss."""
        return {
            pos for pos in self._positions()
            if self._grid[pos.y][pos.x].mined
        }

    def closed_positions(self) -> List[Position]:
        """
        Get positions that can still be revealed.

        Returns:
            Positions that are neither opened nor flagged, row-major.
        """
        return [
            pos for pos in self._positions()
            if self._grid[pos.y][pos.x].can_open
        ]

    def flag_count(self) -> int:
        """Count flagged cells."""
        return sum(1 for cell in self._cells() if cell.flagged)

    def observation(self) -> np.ndarray:
        """
        Get board state as a numpy array for renderers and agents.

        Returns:
            Array of shape (height, width) indexed [y, x] where:
                -1 = hidden
                -2 = flagged
                0-8 = opened with adjacent count
                9 = opened mine
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for x, y in self._positions():
            obs[y, x] = self._observe_cell(x, y)
        return obs

    def _observe_cell(self, x: int, y: int) -> int:
        """Encode a single cell for the observation array."""
        cell = self._grid[y][x]
        if cell.flagged:
            return -2
        if not cell.opened:
            return -1
        if cell.mined:
            return 9
        return self._count_adjacent_mines(x, y)

    def render(self, show_mines: bool = False) -> str:
        """
        Render board as a text grid.

        Args:
            show_mines: Also mark unopened, unflagged mines.

        Returns:
            One line per row, cells separated by single spaces.
        """
        lines = []
        for y in range(self.height):
            row = [
                self._render_cell(x, y, show_mines)
                for x in range(self.width)
            ]
            lines.append(" ".join(row))
        return "\n".join(lines)

    def _render_cell(self, x: int, y: int, show_mines: bool) -> str:
        """Render a single cell as one character."""
        cell = self._grid[y][x]
        if cell.opened:
            if cell.mined:
                return MINE_CHAR
            count = self._count_adjacent_mines(x, y)
            return str(count) if count else " "
        if cell.flagged:
            return "F"
        if show_mines and cell.mined:
            return MINE_CHAR
        return SAFE_CHAR


# ============================================================================
# Construction Helper
# ============================================================================

def create(
    width: int,
    height: int,
    *,
    num_mines: Optional[int] = None,
    seed: Optional[int] = None,
) -> Board:
    """
    Create a new board with no mines placed yet.

    Args:
        width: Number of columns, at least 1.
        height: Number of rows, at least 1.
        num_mines: Default mine count for the first reveal.
        seed: Seed for reproducible mine placement.

    Returns:
        Fresh board awaiting its first reveal.
    """
    return Board(width, height, num_mines=num_mines, seed=seed)
