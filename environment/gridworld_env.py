"""GridWorld Gymnasium environment (thin wrapper around GridWorld)."""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .constants import (
    UP, DOWN, LEFT, RIGHT,
    ACTION_DELTAS,
    PIECE_ORDER,
    REWARD_STEP,
    MODE_STATIC, MIN_SIZE,
    METADATA,
)
from .gridworld import GridWorld, MoveStatus


class GridWorldEnv(gym.Env):
    # constants
    UP = UP
    DOWN = DOWN
    LEFT = LEFT
    RIGHT = RIGHT
    ACTION_DELTAS = ACTION_DELTAS

    metadata = METADATA

    def __init__(
        self,
        size: int = 4,
        mode: str = MODE_STATIC,
        max_moves: int | None = 50,
        max_attempts: int = 1000,
        render_mode: str | None = None,
    ):
        self.size = max(MIN_SIZE, int(size))
        self.mode = mode
        self.max_moves = None if max_moves is None else int(max_moves)
        self.max_attempts = int(max_attempts)
        self.render_mode = render_mode

        # Episode state
        self.moves: int = 0
        self.world: GridWorld | None = None

        self.feature_dim = self.size * self.size * len(PIECE_ORDER)
        self.action_space = spaces.Discrete(len(ACTION_DELTAS))
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(self.feature_dim,), dtype=np.float32
        )

    """
    Start a new game.

    options:
        mode: override the initialization mode for this episode only

    Returns:
        observation: flat one-hot board array
        info: Dict with player position and move count
    """
    def reset(self, seed: int | None = None, options: dict | None = None
    ) -> tuple[np.ndarray, Dict[str, Any]]:

        super().reset(seed=seed)

        mode = (options or {}).get("mode", self.mode)
        self.moves = 0
        self.world = GridWorld(
            size=self.size,
            mode=mode,
            rng=self.np_random,
            max_attempts=self.max_attempts,
        )

        return self.world.state(), self._get_info()

    def _get_info(self, status: Optional[MoveStatus] = None) -> Dict[str, Any]:
        assert self.world is not None
        return {
            "player_pos": self.world.player_pos,
            "moves": int(self.moves),
            "move_status": status,
        }

    def step(self, action: int) -> tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        assert self.world is not None, "call reset() before step()"
        assert self.action_space.contains(action), f"Invalid action: {action}"

        self.moves += 1
        status = self.world.make_move(int(action))
        reward = self.world.reward()

        terminated = reward != REWARD_STEP
        truncated = self.max_moves is not None and self.moves > self.max_moves

        return self.world.state(), reward, terminated, truncated, self._get_info(status)

    def render(self) -> str | None:
        assert self.world is not None
        if self.render_mode == "ansi":
            return self.world.display()
        return None
