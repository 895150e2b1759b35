"""Core Q-learning loop with experience replay and a target network.

Design goals
------------
- Keep the control flow readable.
- Separate concerns:
    * env interaction
    * replay storage
    * network update
    * target synchronization

Per step:
  1) action-values from the online net (no grad) -> epsilon-greedy action
  2) env step, done = reward > 0
  3) push transition
  4) once the buffer outgrows batch_size: sample, one update on the online net
       target = r + gamma * (1 - done) * max_a' Q_target(s2, a')
  5) every `sync_frequency` global steps: copy online -> target

An episode ends when the reward is not the step cost (Goal / Pit) or the
move cap is exceeded. Epsilon decays once per episode.
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass

import numpy as np

try:
    import torch
    import torch.nn.functional as F
except ImportError as e:  # pragma: no cover
    raise ImportError("PyTorch is required. Install with: pip install torch") from e

from environment import GridWorldEnv

from .encoder import StateEncoder
from .network import QFunction
from .replay import ReplayBuffer, Transition, stack_batch
from .schedules import linear_epsilon


@dataclass
class TrainState:
    """Mutable state carried across a training run."""

    q_fn: QFunction
    target_fn: QFunction
    replay: ReplayBuffer
    encoder: StateEncoder
    rng: np.random.Generator

    global_step: int = 0
    updates: int = 0


def select_action(q_fn: QFunction, s: np.ndarray, epsilon: float, rng: np.random.Generator,
                  n_actions: int = 4) -> int:
    """Epsilon-greedy action selection."""
    if rng.random() < epsilon:
        return int(rng.integers(n_actions))
    return int(np.argmax(q_fn.predict(s)))


def dqn_update(state: TrainState, batch_size: int, gamma: float, use_target: bool = True) -> float:
    """Sample a mini-batch and take one optimizer step on the online net."""
    q_fn = state.q_fn
    device = q_fn.device

    bs, ba, br, bs2, bdone = stack_batch(state.replay.sample(batch_size))

    bs_t = torch.tensor(bs, dtype=torch.float32, device=device)
    ba_t = torch.tensor(ba, dtype=torch.long, device=device).unsqueeze(1)
    br_t = torch.tensor(br, dtype=torch.float32, device=device)
    bs2_t = torch.tensor(bs2, dtype=torch.float32, device=device)
    bdone_t = torch.tensor(bdone, dtype=torch.float32, device=device)

    # Q(s,a) for the actions actually taken.
    q_vals = q_fn(bs_t).gather(1, ba_t).squeeze(1)

    with torch.no_grad():
        bootstrap = state.target_fn if use_target else q_fn
        next_q = bootstrap(bs2_t).max(dim=1).values
        target_q = br_t + gamma * (1.0 - bdone_t) * next_q

    loss = F.mse_loss(q_vals, target_q, reduction="sum")
    state.updates += 1
    return q_fn.train_step(loss)


def train_dqn(
    state: TrainState,
    *,
    # Environment
    grid_size: int = 4,
    mode: str = "static",
    max_moves: int = 50,
    # Training
    n_epochs: int = 1000,
    # Exploration
    eps_start: float = 1.0,
    eps_floor: float = 0.1,
    # DQN
    gamma: float = 0.9,
    batch_size: int = 200,
    sync_frequency: int = 500,
    # Logging
    log_interval: int = 100,
) -> dict:
    """Train for `n_epochs` episodes (one new game per episode).

    `sync_frequency <= 0` disables the target network; targets then
    bootstrap from the online network itself.

    Returns summary dict:
      episodes, global_step, updates, epsilon, wins, losses, elapsed
    """
    env = GridWorldEnv(size=grid_size, mode=mode, max_moves=max_moves)

    q_fn = state.q_fn
    replay = state.replay
    encoder = state.encoder
    rng = state.rng
    use_target = int(sync_frequency) > 0

    # Rolling stats for logs.
    recent_losses = deque(maxlen=500)
    losses: list[tuple[float, float]] = []
    wins = 0
    eps = float(eps_start)

    start_time = time.time()

    for ep in range(1, int(n_epochs) + 1):
        # The env draws its layouts from a generator seeded off ours.
        obs, _ = env.reset(seed=int(rng.integers(2**31 - 1)) if ep == 1 else None)
        s = encoder.encode(obs)
        done = False

        while not done:
            state.global_step += 1

            # --- Action selection (epsilon-greedy) ---------------------------
            action = select_action(q_fn, s, eps, rng, int(env.action_space.n))

            # --- Env step -----------------------------------------------------
            next_obs, reward, terminated, truncated, _ = env.step(action)
            s2 = encoder.encode(next_obs)

            # --- Store transition --------------------------------------------
            replay.push(Transition(s=s, a=action, r=float(reward), s2=s2, done=reward > 0))

            # --- Learning update ---------------------------------------------
            if replay.can_sample(batch_size):
                loss = dqn_update(state, batch_size, gamma, use_target)
                recent_losses.append(loss)
                losses.append((float(state.updates), loss))

            # --- Hard update target network every N steps --------------------
            if use_target and state.global_step % int(sync_frequency) == 0:
                state.target_fn.load_from(q_fn)

            s = s2
            done = bool(terminated or truncated)
            if terminated and reward > 0:
                wins += 1

        eps = linear_epsilon(eps, n_epochs, eps_floor)

        # --- Logging ----------------------------------------------------------
        if log_interval > 0 and ep % int(log_interval) == 0:
            avg_loss = float(np.mean(recent_losses)) if recent_losses else 0.0
            print(
                f"  Ep {ep:>5d}/{n_epochs} │ "
                f"ε={eps:.4f} │ "
                f"Loss={avg_loss:.4f} │ "
                f"Wins={wins:>5d} │ "
                f"buf={len(replay):>5d}"
            )

    env.close()
    elapsed = float(time.time() - start_time)

    return {
        "episodes": int(n_epochs),
        "global_step": int(state.global_step),
        "updates": int(state.updates),
        "epsilon": float(eps),
        "wins": int(wins),
        "losses": losses,
        "elapsed": elapsed,
    }
