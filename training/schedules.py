"""Schedules (epsilon, etc.)."""

from __future__ import annotations


def linear_epsilon(epsilon: float, epochs: int, floor: float = 0.1) -> float:
    """One step of linear epsilon decay.

    Called once per episode. Subtracts 1/epochs while epsilon is above
    `floor` and never returns less than `floor`.
    """
    epsilon = float(epsilon)
    if epsilon > floor:
        epsilon -= 1.0 / max(1, int(epochs))
    return float(max(floor, epsilon))
