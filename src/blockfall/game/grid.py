from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

import numpy as np

if TYPE_CHECKING:
    from .pieces import Tetromino


BOARD_WIDTH = 10
BOARD_HEIGHT = 20

# Presentation hints for renderers; the engine itself never uses them.
CELL_SIZE = 30
PREVIEW_SIZE = 4


@dataclass(frozen=True)
class Cell:
    filled: bool = False
    color: str = ""


EMPTY_CELL = Cell()

Row = List[Cell]
Grid = List[Row]


@dataclass
class ClearResult:
    new_board: Grid
    lines_cleared: int


def _empty_row(width: int) -> Row:
    return [EMPTY_CELL] * width


def create_empty_board(width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> Grid:
    """Return a ``height`` x ``width`` grid of empty cells.

    Cells are immutable, so rows may hold the same ``EMPTY_CELL`` value; every
    row is its own list.
    """
    return [_empty_row(width) for _ in range(height)]


def check_collision(grid: Grid, piece: "Tetromino", dx: int = 0, dy: int = 0) -> bool:
    """True if ``piece`` shifted by (dx, dy) leaves the board or hits a filled cell.

    Rows above the board (negative y) are allowed so pieces can spawn
    partially hidden; only the walls and the floor bound them.
    """
    height = len(grid)
    width = len(grid[0]) if height else 0
    for x, y in piece.cells(dx, dy):
        if x < 0 or x >= width or y >= height:
            return True
        if y >= 0 and grid[y][x].filled:
            return True
    return False


def merge_tetromino(grid: Grid, piece: "Tetromino") -> Grid:
    """Return a copy of ``grid`` with the occupied cells of ``piece`` filled."""
    board = [list(row) for row in grid]
    locked = Cell(filled=True, color=piece.color)
    height = len(board)
    for x, y in piece.cells():
        # Cells still above the top edge have nowhere to go.
        if 0 <= y < height and 0 <= x < len(board[y]):
            board[y][x] = locked
    return board


def is_row_full(row: Row) -> bool:
    return all(cell.filled for cell in row)


def clear_lines(grid: Grid) -> ClearResult:
    """Drop every full row and pad the top with as many empty rows."""
    kept = [list(row) for row in grid if not is_row_full(row)]
    cleared = len(grid) - len(kept)
    width = len(grid[0]) if grid else 0
    new_rows = [_empty_row(width) for _ in range(cleared)]
    return ClearResult(new_board=new_rows + kept, lines_cleared=cleared)


def board_to_array(grid: Grid) -> np.ndarray:
    """0/1 int8 occupancy matrix of ``grid`` (rows top to bottom)."""
    return np.array([[int(cell.filled) for cell in row] for row in grid], dtype=np.int8).reshape(
        len(grid), len(grid[0]) if grid else 0
    )


def get_max_height(grid: Grid) -> int:
    # y=0 is top; find first non-empty from top
    occupancy = board_to_array(grid)
    non_empty_rows = np.where(np.any(occupancy != 0, axis=1))[0]
    if non_empty_rows.size == 0:
        return 0
    return len(grid) - int(non_empty_rows[0])


def count_holes(grid: Grid) -> int:
    """Empty cells with at least one filled cell above them in the same column."""
    occupancy = board_to_array(grid)
    holes = 0
    for x in range(occupancy.shape[1]):
        seen_block = False
        for cell in occupancy[:, x]:
            if cell != 0:
                seen_block = True
            elif seen_block:
                holes += 1
    return holes
