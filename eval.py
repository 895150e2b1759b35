"""
Evaluation Script for GridWorld Q-learning
==========================================

Load a trained checkpoint and watch the agent play, or just collect the
win rate.

Usage:
    python eval.py --checkpoint checkpoints/dqn_static.pt
    python eval.py --checkpoint checkpoints/dqn_random.pt --games 5 --display
    python eval.py --checkpoint checkpoints/online_static.pt --mode player
"""

from __future__ import annotations

import argparse

import numpy as np

try:
    import torch
except ImportError:
    print("PyTorch is required. Install with: pip install torch")
    raise

from config import ENV_CONFIG, AGENT_CONFIG, TRAIN_CONFIG

from environment import GridWorldEnv
from training.checkpoint import read_checkpoint
from training.encoder import StateEncoder
from training.eval import evaluate
from training.network import build_q_function


def run_eval(args: argparse.Namespace) -> dict:
    device = torch.device("cpu")
    ckpt = read_checkpoint(args.checkpoint, device)

    size = int(ckpt.get("size", ENV_CONFIG["size"]))
    mode = args.mode or ckpt.get("mode", ENV_CONFIG["mode"])
    hidden = tuple(ckpt.get("hidden", AGENT_CONFIG["hidden"]))
    noise_scale = float(ckpt.get("noise_scale", ENV_CONFIG["noise_scale"]))

    rng = np.random.default_rng(args.seed)
    feature_dim = GridWorldEnv(size=size).feature_dim
    encoder = StateEncoder(feature_dim, noise_scale=noise_scale, rng=rng)
    q_fn = build_q_function(feature_dim, n_actions=AGENT_CONFIG["n_actions"], hidden=hidden, device=device)
    q_fn.load_state_dict(ckpt["q_state_dict"])
    q_fn.net.eval()

    print("=" * 60)
    print(f"  EVALUATION — {args.checkpoint}")
    print("=" * 60)
    print(f"  Algo:      {ckpt.get('algo', '?')}")
    print(f"  Trained:   {ckpt.get('episode', '?')} episodes, {ckpt.get('global_step', '?')} steps")
    print(f"  Grid:      {size}×{size} ({mode})")
    print(f"  Games:     {args.games} (max {args.max_moves} moves)")
    print("=" * 60 + "\n")

    result = evaluate(
        q_fn,
        encoder,
        n_games=args.games,
        grid_size=size,
        mode=mode,
        max_moves=args.max_moves,
        seed=args.seed,
        display=args.display,
    )

    print(f"\nGames played: {result['games']}, # of wins: {result['wins']}")
    print(f"Win percentage: {result['win_rate']*100:.1f}%")
    print(f"Average moves: {result['avg_moves']:.1f}")
    return result


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Evaluate a trained GridWorld Q-network")
    p.add_argument("--checkpoint", type=str, required=True, help="Path to a .pt checkpoint")
    p.add_argument("--games", type=int, default=TRAIN_CONFIG["test_games"], help="Number of games")
    p.add_argument("--mode", type=str, default=None, choices=["static", "player", "random"],
                   help="Override the board mode stored in the checkpoint")
    p.add_argument("--max-moves", type=int, default=ENV_CONFIG["eval_max_moves"])
    p.add_argument("--display", action="store_true", help="Print every board and move")
    p.add_argument("--seed", type=int, default=TRAIN_CONFIG["seed"])
    return p


if __name__ == "__main__":
    run_eval(build_parser().parse_args())
