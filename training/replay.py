"""Replay buffer utilities.

Why this file exists
--------------------
The replay buffer is an algorithm component and should *not* live inside
the training loop. Keeping it here makes the loop easier to read and lets
the unit tests exercise eviction and sampling on their own.

Transitions are stored as NumPy arrays / Python primitives so that:
  - replay is device-agnostic (CPU/GPU doesn't matter)
  - torch tensors are created only at the update step
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

import numpy as np


class InsufficientReplayDataError(ValueError):
    """Sampling was requested before the buffer outgrew the batch size."""


@dataclass(frozen=True, slots=True)
class Transition:
    """A single experience tuple."""

    s: np.ndarray
    a: int
    r: float
    s2: np.ndarray
    done: bool


class ReplayBuffer:
    """Fixed-size FIFO replay buffer."""

    def __init__(self, capacity: int, rng: Optional[np.random.Generator] = None):
        self.capacity = int(capacity)
        self._buf: deque[Transition] = deque(maxlen=self.capacity)
        self.rng = rng if rng is not None else np.random.default_rng()

    def push(self, t: Transition) -> None:
        self._buf.append(t)

    def can_sample(self, batch_size: int) -> bool:
        return len(self._buf) > int(batch_size)

    def sample(self, batch_size: int) -> List[Transition]:
        """Uniform random sample without replacement.

        Raises:
            ValueError: if `batch_size` is not positive.
            InsufficientReplayDataError: if the buffer holds `batch_size`
                transitions or fewer.
        """
        batch_size = int(batch_size)
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if not self.can_sample(batch_size):
            raise InsufficientReplayDataError(
                f"need more than {batch_size} transitions, buffer has {len(self._buf)}"
            )
        idx = self.rng.choice(len(self._buf), size=batch_size, replace=False)
        return [self._buf[int(i)] for i in idx]

    def __len__(self) -> int:
        return len(self._buf)

    def __iter__(self) -> Iterator[Transition]:
        return iter(self._buf)


def stack_batch(batch: Sequence[Transition]):
    """Collate transitions into arrays.

    Returns:
        s:   (B, D) float32
        a:   (B,)   int64
        r:   (B,)   float32
        s2:  (B, D) float32
        done:(B,)   float32 (1.0 if done else 0.0)
    """
    s = np.stack([b.s for b in batch]).astype(np.float32, copy=False)
    a = np.array([b.a for b in batch], dtype=np.int64)
    r = np.array([b.r for b in batch], dtype=np.float32)
    s2 = np.stack([b.s2 for b in batch]).astype(np.float32, copy=False)
    done = np.array([b.done for b in batch], dtype=np.float32)
    return s, a, r, s2, done
