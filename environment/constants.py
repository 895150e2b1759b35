"""Constants for the GridWorld Q-learning environment."""

from __future__ import annotations

from typing import Dict, Tuple

# Actions
UP: int = 0
DOWN: int = 1
LEFT: int = 2
RIGHT: int = 3

ACTION_NAMES: Dict[int, str] = {
    UP: "UP",
    DOWN: "DOWN",
    LEFT: "LEFT",
    RIGHT: "RIGHT",
}

# (d_row, d_col); positions are (row, col) with row 0 at the top
ACTION_DELTAS: Dict[int, Tuple[int, int]] = {
    UP: (-1, 0),
    DOWN: (1, 0),
    LEFT: (0, -1),
    RIGHT: (0, 1),
}

# Pieces
PLAYER: str = "Player"
GOAL: str = "Goal"
PIT: str = "Pit"
WALL: str = "Wall"

# Plane order of the one-hot board array
PIECE_ORDER: Tuple[str, ...] = (PLAYER, GOAL, PIT, WALL)

PIECE_CODES: Dict[str, str] = {
    PLAYER: "P",
    GOAL: "+",
    PIT: "-",
    WALL: "W",
}

EMPTY_CODE: str = "."

# Rewards
REWARD_GOAL: float = 10.0
REWARD_PIT: float = -10.0
REWARD_STEP: float = -1.0

# Initialization modes
MODE_STATIC: str = "static"
MODE_PLAYER: str = "player"
MODE_RANDOM: str = "random"
MODES: Tuple[str, ...] = (MODE_STATIC, MODE_PLAYER, MODE_RANDOM)

MIN_SIZE: int = 4

STATIC_LAYOUT: Dict[str, Tuple[int, int]] = {
    PLAYER: (0, 3),
    GOAL: (0, 0),
    PIT: (0, 1),
    WALL: (1, 1),
}

METADATA = {
    "render_modes": ["ansi"],
    "render_fps": 4,
}
