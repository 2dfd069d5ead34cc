from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np

from .grid import BOARD_WIDTH


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = List[List[int]]


@dataclass(frozen=True)
class TetrominoDef:
    shape: Shape
    color: str


# Square matrices only: rotation is a plain quarter turn of the whole box.
TETROMINOES: Dict[TetrominoType, TetrominoDef] = {
    TetrominoType.I: TetrominoDef(
        shape=[[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]],
        color="#00f0f0",
    ),
    TetrominoType.O: TetrominoDef(shape=[[1, 1], [1, 1]], color="#f0f000"),
    TetrominoType.T: TetrominoDef(shape=[[0, 1, 0], [1, 1, 1], [0, 0, 0]], color="#a000f0"),
    TetrominoType.S: TetrominoDef(shape=[[0, 1, 1], [1, 1, 0], [0, 0, 0]], color="#00f000"),
    TetrominoType.Z: TetrominoDef(shape=[[1, 1, 0], [0, 1, 1], [0, 0, 0]], color="#f00000"),
    TetrominoType.J: TetrominoDef(shape=[[1, 0, 0], [1, 1, 1], [0, 0, 0]], color="#0000f0"),
    TetrominoType.L: TetrominoDef(shape=[[0, 0, 1], [1, 1, 1], [0, 0, 0]], color="#f0a000"),
}


@dataclass(frozen=True)
class Position:
    x: int
    y: int


@dataclass(frozen=True)
class Tetromino:
    kind: TetrominoType
    shape: Shape
    color: str
    position: Position

    def cells(self, dx: int = 0, dy: int = 0) -> List[Tuple[int, int]]:
        """Absolute (x, y) of every occupied cell, shifted by (dx, dy)."""
        origin_x = self.position.x + dx
        origin_y = self.position.y + dy
        cells: List[Tuple[int, int]] = []
        for row, line in enumerate(self.shape):
            for col, value in enumerate(line):
                if value:
                    cells.append((origin_x + col, origin_y + row))
        return cells

    def moved(self, dx: int, dy: int) -> "Tetromino":
        return replace(self, position=Position(self.position.x + dx, self.position.y + dy))

    def with_shape(self, shape: Shape) -> "Tetromino":
        return replace(self, shape=shape)


def copy_shape(shape: Shape) -> Shape:
    return [list(row) for row in shape]


def spawn_tetromino(kind: TetrominoType, width: int = BOARD_WIDTH) -> Tetromino:
    """Place a fresh ``kind`` piece on the top row, horizontally centred."""
    definition = TETROMINOES[kind]
    shape = copy_shape(definition.shape)
    x = max(0, (width - len(shape[0])) // 2)
    return Tetromino(kind=kind, shape=shape, color=definition.color, position=Position(x, 0))


def get_random_tetromino(rng: Optional[random.Random] = None, width: int = BOARD_WIDTH) -> Tetromino:
    kind = (rng or random).choice(list(TetrominoType))
    return spawn_tetromino(kind, width)


def rotate_tetromino(piece: Tetromino, clockwise: bool = True) -> Shape:
    """Quarter-turn of ``piece.shape``; the piece itself is left alone.

    No bounds checking happens here, callers pair this with
    ``check_collision`` before accepting the new shape.
    """
    k = -1 if clockwise else 1
    return np.rot90(np.asarray(piece.shape, dtype=np.int8), k).tolist()
