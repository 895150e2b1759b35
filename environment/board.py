"""Sparse piece board for GridWorld.

The board knows nothing about game rules. It stores named pieces on an
N×N grid and can render itself two ways:
  - text (for humans / ANSI render mode)
  - a flat one-hot array (for the Q-network)

Plane order in the array is the order pieces were first added. A piece
replaced through `add_piece` keeps its first plane.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from .constants import EMPTY_CODE

Position = Tuple[int, int]


@dataclass(slots=True)
class Piece:
    name: str
    code: str
    pos: Position


class GridBoard:
    def __init__(self, size: int):
        self.size = int(size)
        self.pieces: Dict[str, Piece] = {}

    def add_piece(self, name: str, code: str, pos: Position) -> None:
        self.pieces[name] = Piece(name=name, code=code, pos=(int(pos[0]), int(pos[1])))

    def move_piece(self, name: str, pos: Position) -> None:
        self.pieces[name].pos = (int(pos[0]), int(pos[1]))

    def position(self, name: str) -> Position:
        return self.pieces[name].pos

    def in_bounds(self, pos: Position) -> bool:
        r, c = pos
        return 0 <= r < self.size and 0 <= c < self.size

    def render(self) -> str:
        lines = []
        for r in range(self.size):
            row = ""
            for c in range(self.size):
                code = EMPTY_CODE
                for piece in self.pieces.values():
                    if piece.pos == (r, c):
                        code = piece.code
                        break
                row += f" {code} "
            lines.append(row)
        return "\n".join(lines)

    def render_array(self) -> np.ndarray:
        """Flat float32 vector of shape (size*size*num_pieces,)."""
        size = self.size
        planes = np.zeros((len(self.pieces), size, size), dtype=np.float32)
        for i, piece in enumerate(self.pieces.values()):
            r, c = piece.pos
            planes[i, r, c] = 1.0
        return planes.reshape(-1)

    def __len__(self) -> int:
        return len(self.pieces)
