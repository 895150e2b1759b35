"""Checkpoint save/load.

We save enough state to resume training or to evaluate later:
  - online Q-network weights
  - target network weights (if any)
  - optimizer state
  - episode counter / global step
  - epsilon value (useful for logging)
  - the network shape and grid settings, so `eval.py` can rebuild it
"""

from __future__ import annotations

import os
from typing import Any

try:
    import torch
except ImportError as e:  # pragma: no cover
    raise ImportError("PyTorch is required. Install with: pip install torch") from e

from .network import QFunction


def save_checkpoint(
    filepath: str,
    *,
    episode: int,
    q_fn: QFunction,
    target_fn: QFunction | None,
    epsilon: float,
    global_step: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Save a training checkpoint."""
    os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)

    data: dict[str, Any] = {
        "episode": int(episode),
        "q_state_dict": q_fn.state_dict(),
        "optimizer_state_dict": q_fn.optimizer.state_dict(),
        "epsilon": float(epsilon),
        "global_step": int(global_step),
    }
    if target_fn is not None:
        data["target_state_dict"] = target_fn.state_dict()
    if extra:
        data.update(extra)

    torch.save(data, filepath)


def read_checkpoint(filepath: str, device: torch.device | None = None) -> dict[str, Any]:
    return torch.load(filepath, map_location=device or "cpu", weights_only=True)


def load_checkpoint(filepath: str, q_fn: QFunction, target_fn: QFunction | None = None,
                    device: torch.device | None = None) -> dict[str, Any]:
    """Load checkpoint and restore weights/optimizer.

    Returns:
        ckpt dict (caller can read episode/global_step/etc.)
    """
    ckpt = read_checkpoint(filepath, device)

    q_fn.load_state_dict(ckpt["q_state_dict"])
    q_fn.optimizer.load_state_dict(ckpt["optimizer_state_dict"])
    if target_fn is not None:
        target_fn.load_state_dict(ckpt.get("target_state_dict", ckpt["q_state_dict"]))
    return ckpt
