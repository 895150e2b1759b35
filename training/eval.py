"""Evaluation loop.

Evaluation should be isolated from training so you can:
  - run it from scripts
  - run it right after training without clutter
  - watch single games with `display=True`

The policy is greedy (argmax, no exploration) and nothing is learned.
A game is a WIN only if the Goal is reached within `max_moves`; the Pit
or running out of moves is a LOSS.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from environment import GridWorldEnv
from environment.constants import ACTION_NAMES

from .encoder import StateEncoder
from .network import QFunction


class GameOutcome(Enum):
    WIN = "win"
    LOSS = "loss"


def play_game(
    q_fn: QFunction,
    encoder: StateEncoder,
    *,
    grid_size: int = 4,
    mode: str = "static",
    max_moves: int = 15,
    env: Optional[GridWorldEnv] = None,
    seed: Optional[int] = None,
    display: bool = False,
) -> tuple[GameOutcome, int]:
    """Play one greedy game. Returns (outcome, moves made)."""
    if env is None:
        env = GridWorldEnv(size=grid_size, mode=mode, max_moves=None, render_mode="ansi")

    obs, _ = env.reset(seed=seed)
    if display:
        print("Initial state:")
        print(env.world.display())

    moves = 0
    while moves < int(max_moves):
        state = encoder.encode(obs)
        action = int(np.argmax(q_fn.predict(state)))
        if display:
            print(f"Move #{moves}: taking action {ACTION_NAMES[action]}")

        obs, reward, terminated, _, _ = env.step(action)
        moves += 1
        if display:
            print(env.world.display())

        if terminated:
            if reward > 0:
                if display:
                    print(f"Game won! Reward: {reward}")
                return GameOutcome.WIN, moves
            if display:
                print(f"Game lost. Reward: {reward}")
            return GameOutcome.LOSS, moves

    if display:
        print("Game lost; too many moves.")
    return GameOutcome.LOSS, moves


def evaluate(
    q_fn: QFunction,
    encoder: StateEncoder,
    *,
    n_games: int = 1000,
    grid_size: int = 4,
    mode: str = "static",
    max_moves: int = 15,
    seed: Optional[int] = None,
    display: bool = False,
) -> dict:
    """Greedy evaluation over `n_games` fresh games.

    Returns a dictionary so callers can log whatever they care about.
    """
    env = GridWorldEnv(size=grid_size, mode=mode, max_moves=None, render_mode="ansi")

    wins = 0
    moves_list: list[int] = []

    for i in range(int(n_games)):
        outcome, moves = play_game(
            q_fn,
            encoder,
            max_moves=max_moves,
            env=env,
            seed=seed if i == 0 else None,
            display=display,
        )
        wins += int(outcome == GameOutcome.WIN)
        moves_list.append(moves)

    env.close()

    return {
        "games": int(n_games),
        "wins": int(wins),
        "win_rate": wins / max(1, int(n_games)),
        "avg_moves": float(np.mean(moves_list)) if moves_list else 0.0,
    }
