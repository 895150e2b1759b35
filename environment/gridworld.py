"""GridWorld rules on top of GridBoard.

Pieces
------
  Player  the agent
  Goal    +10 and the game is won
  Pit     -10 and the game is lost
  Wall    blocks movement

Every other step costs -1, which pushes the agent toward short paths.

Layouts
-------
  static  Player(0,3) Goal(0,0) Pit(0,1) Wall(1,1)
  player  static Goal/Pit/Wall, Player placed at random
  random  all four pieces placed at random

Randomized layouts are retried until `validate_board()` passes, up to
`max_attempts` times; after that an InvalidLayoutError is raised.

The world never ends a game on its own. Deciding when an episode is over
belongs to the caller (env wrapper / training loop).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .board import GridBoard, Position
from .constants import (
    ACTION_DELTAS,
    PIECE_CODES, PIECE_ORDER, PLAYER, GOAL, PIT, WALL,
    REWARD_GOAL, REWARD_PIT, REWARD_STEP,
    MODE_STATIC, MODE_PLAYER, MODES,
    MIN_SIZE, STATIC_LAYOUT,
)
from .errors import ConfigurationError, InvalidLayoutError


class MoveStatus(Enum):
    VALID = 0
    BLOCKED = 1
    LETHAL = 2


CARDINAL_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class GridWorld:
    def __init__(
        self,
        size: int = 4,
        mode: str = MODE_STATIC,
        rng: Optional[np.random.Generator] = None,
        max_attempts: int = 1000,
    ):
        if mode not in MODES:
            raise ConfigurationError(f"unknown mode {mode!r}, expected one of {MODES}")

        self.size = max(MIN_SIZE, int(size))
        self.mode = mode
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = int(max_attempts)
        self.board = GridBoard(self.size)

        if mode == MODE_STATIC:
            self._init_static()
        elif mode == MODE_PLAYER:
            self._init_player()
        else:
            self._init_random()

    # -------------------- Initialization --------------------

    def _random_pos(self) -> Position:
        r, c = self.rng.integers(0, self.size, size=2)
        return int(r), int(c)

    def _init_static(self) -> None:
        for name in PIECE_ORDER:
            self.board.add_piece(name, PIECE_CODES[name], STATIC_LAYOUT[name])

    def _init_player(self) -> None:
        self._init_static()
        for _ in range(self.max_attempts):
            self.board.move_piece(PLAYER, self._random_pos())
            if self.validate_board():
                return
        raise InvalidLayoutError(self.mode, self.max_attempts)

    def _init_random(self) -> None:
        for _ in range(self.max_attempts):
            for name in PIECE_ORDER:
                self.board.add_piece(name, PIECE_CODES[name], self._random_pos())
            if self.validate_board():
                return
        raise InvalidLayoutError(self.mode, self.max_attempts)

    # -------------------- Rules --------------------

    def validate_move(self, piece: str, direction: Tuple[int, int]) -> MoveStatus:
        r, c = self.board.position(piece)
        candidate = (r + direction[0], c + direction[1])

        # Pit takes precedence over Wall and bounds
        if candidate == self.board.position(PIT):
            return MoveStatus.LETHAL
        if candidate == self.board.position(WALL) or not self.board.in_bounds(candidate):
            return MoveStatus.BLOCKED
        return MoveStatus.VALID

    def _corners(self) -> Tuple[Position, ...]:
        last = self.size - 1
        return ((0, 0), (0, last), (last, 0), (last, last))

    def validate_board(self) -> bool:
        positions = [self.board.position(name) for name in PIECE_ORDER]
        if len(set(positions)) < len(positions):
            return False

        corners = self._corners()
        for name in (PLAYER, GOAL):
            if self.board.position(name) not in corners:
                continue
            if not any(
                self.validate_move(name, d) == MoveStatus.VALID for d in CARDINAL_DIRECTIONS
            ):
                return False

        return True

    def make_move(self, action: int) -> MoveStatus:
        direction = ACTION_DELTAS[int(action)]
        status = self.validate_move(PLAYER, direction)
        if status != MoveStatus.BLOCKED:
            r, c = self.board.position(PLAYER)
            self.board.move_piece(PLAYER, (r + direction[0], c + direction[1]))
        return status

    def reward(self) -> float:
        player = self.board.position(PLAYER)
        if player == self.board.position(PIT):
            return REWARD_PIT
        if player == self.board.position(GOAL):
            return REWARD_GOAL
        return REWARD_STEP

    # -------------------- Views --------------------

    @property
    def player_pos(self) -> Position:
        return self.board.position(PLAYER)

    def state(self) -> np.ndarray:
        return self.board.render_array()

    def display(self) -> str:
        return self.board.render()
