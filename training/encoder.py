"""State encoding for GridWorld.

The environment observation is already a flat one-hot board array. The
network would happily memorize those exact patterns, so every state handed
to it gets a little independent uniform noise:

    state = board_array + U(0, 1) * noise_scale

This encoder is intentionally *pure*:
  - it does not touch PyTorch
  - it does not own any model parameters
"""

from __future__ import annotations

from typing import Optional

import numpy as np


class StateEncoder:
    """Adds small uniform noise to a flat board observation."""

    def __init__(
        self,
        feature_dim: int,
        noise_scale: float = 0.1,
        rng: Optional[np.random.Generator] = None,
    ):
        self.feature_dim = int(feature_dim)
        self.noise_scale = float(noise_scale)
        self.rng = rng if rng is not None else np.random.default_rng()

    def encode(self, obs: np.ndarray) -> np.ndarray:
        """Return a 1D float32 feature vector of length `feature_dim`."""
        obs = np.asarray(obs, dtype=np.float32)
        assert obs.shape == (self.feature_dim,), f"expected ({self.feature_dim},), got {obs.shape}"
        noise = self.rng.random(self.feature_dim, dtype=np.float32) * self.noise_scale
        return obs + noise
