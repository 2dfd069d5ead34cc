from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .grid import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    Grid,
    board_to_array,
    check_collision,
    clear_lines,
    create_empty_board,
    merge_tetromino,
)
from .pieces import Tetromino, get_random_tetromino, rotate_tetromino
from .rules import ScoringRules


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


@dataclass
class GameConfig:
    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        # The I piece needs a 4-wide box to spawn.
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")


class TetrisGame:
    """Headless game session built on the pure engine functions.

    The session owns the settled board, the falling piece and the preview
    piece. Every board update replaces ``self.board`` with a new grid, so a
    reference taken by a renderer stays valid. Gravity timing is left to the
    host: call :meth:`tick` every :attr:`drop_interval` milliseconds.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.board: Grid = create_empty_board(self.config.width, self.config.height)
        self.current_piece: Optional[Tetromino] = None
        self.next_piece: Optional[Tetromino] = None
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.pieces_placed = 0
        self.game_over = False
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.board = create_empty_board(self.config.width, self.config.height)
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.pieces_placed = 0
        self.game_over = False
        self.current_piece = None
        self.next_piece = self._random_piece()
        self._spawn_piece()

    @property
    def drop_interval(self) -> int:
        return self.rules.drop_interval(self.level)

    def _random_piece(self) -> Tetromino:
        return get_random_tetromino(self.rng, self.config.width)

    def _spawn_piece(self) -> None:
        assert self.next_piece is not None
        self.current_piece = self.next_piece
        self.next_piece = self._random_piece()
        # Immediate collision check: if overlaps, game over
        if check_collision(self.board, self.current_piece, 0, 0):
            self.game_over = True

    def move(self, dx: int) -> bool:
        if self.current_piece is None or self.game_over:
            return False
        if check_collision(self.board, self.current_piece, dx, 0):
            return False
        self.current_piece = self.current_piece.moved(dx, 0)
        return True

    def rotate(self, clockwise: bool = True) -> bool:
        if self.current_piece is None or self.game_over:
            return False
        rotated = self.current_piece.with_shape(rotate_tetromino(self.current_piece, clockwise))
        if check_collision(self.board, rotated, 0, 0):
            return False
        self.current_piece = rotated
        return True

    def drop_distance(self) -> int:
        """Rows the current piece can fall before it would collide."""
        if self.current_piece is None:
            return 0
        distance = 0
        while not check_collision(self.board, self.current_piece, 0, distance + 1):
            distance += 1
        return distance

    def soft_drop(self) -> int:
        """Move the piece down one row, or lock it if it cannot fall.

        Returns the number of lines cleared by a resulting lock (0 if the
        piece merely moved).
        """
        if self.current_piece is None or self.game_over:
            return 0
        if not check_collision(self.board, self.current_piece, 0, 1):
            self.current_piece = self.current_piece.moved(0, 1)
            return 0
        return self._lock_piece()

    def hard_drop(self) -> int:
        """Drop to the floor and lock; returns lines cleared."""
        if self.current_piece is None or self.game_over:
            return 0
        self.current_piece = self.current_piece.moved(0, self.drop_distance())
        return self._lock_piece()

    def tick(self) -> int:
        """One gravity step."""
        return self.soft_drop()

    def _lock_piece(self) -> int:
        assert self.current_piece is not None
        merged = merge_tetromino(self.board, self.current_piece)
        result = clear_lines(merged)
        lines = result.lines_cleared
        self.board = result.new_board
        # Points use the level in force before this clear.
        self.score += self.rules.score_for_lines(lines, self.level)
        self.lines_cleared_total += lines
        self.level = self.rules.level_for_lines(self.lines_cleared_total)
        self.pieces_placed += 1
        self.current_piece = None
        self._spawn_piece()
        return lines

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, Dict[str, Any]]:
        if self.game_over:
            return self.get_state(), 0, True, self.get_info()

        lines = 0
        if action == Action.LEFT:
            self.move(-1)
        elif action == Action.RIGHT:
            self.move(1)
        elif action == Action.ROTATE_CW:
            self.rotate(clockwise=True)
        elif action == Action.ROTATE_CCW:
            self.rotate(clockwise=False)
        elif action == Action.SOFT_DROP:
            lines = self.soft_drop()
        elif action == Action.HARD_DROP:
            lines = self.hard_drop()
        elif action == Action.NONE:
            pass

        return self.get_state(), lines, self.game_over, self.get_info()

    def valid_actions(self) -> Dict[Action, bool]:
        """Which actions would change the game right now."""
        valid = {action: False for action in Action}
        piece = self.current_piece
        if piece is None or self.game_over:
            return valid
        valid[Action.LEFT] = not check_collision(self.board, piece, -1, 0)
        valid[Action.RIGHT] = not check_collision(self.board, piece, 1, 0)
        valid[Action.ROTATE_CW] = not check_collision(self.board, piece.with_shape(rotate_tetromino(piece)), 0, 0)
        valid[Action.ROTATE_CCW] = not check_collision(
            self.board, piece.with_shape(rotate_tetromino(piece, clockwise=False)), 0, 0
        )
        valid[Action.SOFT_DROP] = True
        valid[Action.HARD_DROP] = True
        valid[Action.NONE] = True
        return valid

    def get_info(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "lines_cleared_total": self.lines_cleared_total,
            "pieces_placed": self.pieces_placed,
            "drop_interval": self.drop_interval,
        }

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = board_to_array(self.board)
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                if 0 <= y < self.config.height and 0 <= x < self.config.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.current_piece.kind)
        return state
