"""Game module for Blockfall.

Exports the rule engine and the session built on top of it:
- grid: Cell/Grid model, collision, merging and line clearing
- pieces: TetrominoType catalog, piece factory and rotation
- rules: ScoringRules and the score/level/speed helpers
- core: TetrisGame session and its Action set
"""

from .grid import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    CELL_SIZE,
    EMPTY_CELL,
    PREVIEW_SIZE,
    Cell,
    ClearResult,
    Grid,
    board_to_array,
    check_collision,
    clear_lines,
    create_empty_board,
    merge_tetromino,
)
from .pieces import (
    TETROMINOES,
    Position,
    Shape,
    Tetromino,
    TetrominoDef,
    TetrominoType,
    get_random_tetromino,
    rotate_tetromino,
    spawn_tetromino,
)
from .rules import ScoringRules, calculate_level, calculate_score, get_drop_speed
from .core import Action, GameConfig, TetrisGame

__all__ = [
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "CELL_SIZE",
    "EMPTY_CELL",
    "PREVIEW_SIZE",
    "Cell",
    "ClearResult",
    "Grid",
    "board_to_array",
    "check_collision",
    "clear_lines",
    "create_empty_board",
    "merge_tetromino",
    "TETROMINOES",
    "Position",
    "Shape",
    "Tetromino",
    "TetrominoDef",
    "TetrominoType",
    "get_random_tetromino",
    "rotate_tetromino",
    "spawn_tetromino",
    "ScoringRules",
    "calculate_level",
    "calculate_score",
    "get_drop_speed",
    "Action",
    "GameConfig",
    "TetrisGame",
]
