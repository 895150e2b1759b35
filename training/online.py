"""Plain online Q-learning (no replay, no target network).

The baseline the replay/target version is compared against. Every step
updates the network on exactly the transition it just produced:

    y = r + gamma * max_a' Q(s2, a')   while the game goes on (r == step cost)
    y = r                              on Goal / Pit

Only the taken action's Q-value is pulled toward y.
"""

from __future__ import annotations

import time

import numpy as np

try:
    import torch
    import torch.nn.functional as F
except ImportError as e:  # pragma: no cover
    raise ImportError("PyTorch is required. Install with: pip install torch") from e

from environment import GridWorldEnv
from environment.constants import REWARD_STEP

from .core import select_action
from .encoder import StateEncoder
from .network import QFunction
from .schedules import linear_epsilon


def online_update(q_fn: QFunction, s: np.ndarray, action: int, reward: float,
                  s2: np.ndarray, gamma: float) -> float:
    device = q_fn.device
    q_vals = q_fn(torch.tensor(s, dtype=torch.float32, device=device).unsqueeze(0)).squeeze(0)

    y = float(reward)
    if reward == REWARD_STEP:
        y += gamma * float(np.max(q_fn.predict(s2)))

    target = torch.tensor(y, dtype=torch.float32, device=device)
    loss = F.mse_loss(q_vals[int(action)], target, reduction="sum")
    return q_fn.train_step(loss)


def train_online(
    q_fn: QFunction,
    encoder: StateEncoder,
    rng: np.random.Generator,
    *,
    grid_size: int = 4,
    mode: str = "static",
    max_moves: int = 50,
    n_epochs: int = 1000,
    eps_start: float = 1.0,
    eps_floor: float = 0.1,
    gamma: float = 0.9,
    log_interval: int = 100,
) -> dict:
    """Train for `n_epochs` episodes.

    `losses` in the result holds one (episode, mean loss) point per episode.
    """
    env = GridWorldEnv(size=grid_size, mode=mode, max_moves=max_moves)

    losses: list[tuple[float, float]] = []
    global_step = 0
    wins = 0
    eps = float(eps_start)

    start_time = time.time()

    for ep in range(1, int(n_epochs) + 1):
        obs, _ = env.reset(seed=int(rng.integers(2**31 - 1)) if ep == 1 else None)
        s = encoder.encode(obs)
        done = False
        ep_losses: list[float] = []

        while not done:
            global_step += 1

            action = select_action(q_fn, s, eps, rng, int(env.action_space.n))
            next_obs, reward, terminated, truncated, _ = env.step(action)
            s2 = encoder.encode(next_obs)

            ep_losses.append(online_update(q_fn, s, action, reward, s2, gamma))

            s = s2
            done = bool(terminated or truncated)
            if terminated and reward > 0:
                wins += 1

        losses.append((float(ep), float(np.mean(ep_losses))))
        eps = linear_epsilon(eps, n_epochs, eps_floor)

        if log_interval > 0 and ep % int(log_interval) == 0:
            print(
                f"  Ep {ep:>5d}/{n_epochs} │ "
                f"ε={eps:.4f} │ "
                f"Loss={losses[-1][1]:.4f} │ "
                f"Wins={wins:>5d}"
            )

    env.close()

    return {
        "episodes": int(n_epochs),
        "global_step": int(global_step),
        "updates": int(global_step),
        "epsilon": float(eps),
        "wins": int(wins),
        "losses": losses,
        "elapsed": float(time.time() - start_time),
    }
