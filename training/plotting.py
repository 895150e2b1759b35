"""Loss-curve plotting."""

from __future__ import annotations

import os
from typing import Sequence, Tuple

import matplotlib.pyplot as plt


def render_scatter(
    path: str,
    points: Sequence[Tuple[float, float]],
    x_range: Tuple[float, float],
    y_range: Tuple[float, float],
    x_label: str,
    y_label: str,
) -> None:
    """Write a scatter plot of (x, y) points to `path`."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    fig, ax = plt.subplots(figsize=(10, 6))
    if points:
        xs, ys = zip(*points)
        ax.scatter(xs, ys, s=1.0, color="#DD3355")
    ax.set_xlim(*x_range)
    ax.set_ylim(*y_range)
    ax.set_xlabel(x_label)
    ax.set_ylabel(y_label)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close(fig)


def plot_losses(path: str, losses: Sequence[Tuple[float, float]], x_label: str = "update") -> None:
    """Scatter the loss curve with axis ranges fitted to the data."""
    if losses:
        xs = [p[0] for p in losses]
        ys = [p[1] for p in losses]
        x_range = (min(xs) - 1.0, max(xs) + 1.0)
        pad = max(1e-6, 0.05 * (max(ys) - min(ys)))
        y_range = (min(ys) - pad, max(ys) + pad)
    else:
        x_range, y_range = (0.0, 1.0), (0.0, 1.0)

    render_scatter(path, losses, x_range, y_range, x_label, "loss")
