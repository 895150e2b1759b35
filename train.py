"""Q-learning training for GridWorld.

This is a *thin* CLI entry point.

All of the "beef" lives in `training/`:
  - replay buffer:     training/replay.py
  - encoder:           training/encoder.py
  - network:           training/network.py
  - epsilon schedule:  training/schedules.py
  - replay + target:   training/core.py
  - online baseline:   training/online.py
  - evaluation:        training/eval.py
  - checkpoints:       training/checkpoint.py
  - loss plots:        training/plotting.py

So when you read this file, you should mostly see:
  1) parse args
  2) create the Q-function (+ target + buffer)
  3) call train_dqn() or train_online(), then evaluate greedily
"""

from __future__ import annotations

import argparse
import os
import random

import numpy as np

try:
    import torch
except ImportError:
    print("PyTorch is required. Install with: pip install torch")
    raise

from config import ENV_CONFIG, AGENT_CONFIG, TRAIN_CONFIG, PATHS

from environment import GridWorldEnv
from training.checkpoint import save_checkpoint
from training.core import TrainState, train_dqn
from training.encoder import StateEncoder
from training.eval import evaluate
from training.network import build_q_function
from training.online import train_online
from training.plotting import plot_losses
from training.replay import ReplayBuffer


def train(args: argparse.Namespace) -> dict:
    """Train one agent, evaluate it greedily, save checkpoint + loss plot."""

    # --- Reproducibility seeds ----------------------------------------------
    random.seed(args.seed)
    np.random.seed(args.seed)
    torch.manual_seed(args.seed)
    rng = np.random.default_rng(args.seed)

    device = torch.device("cuda" if torch.cuda.is_available() and not args.cpu else "cpu")

    # --- Encoder + networks --------------------------------------------------
    feature_dim = GridWorldEnv(size=args.size).feature_dim
    encoder = StateEncoder(feature_dim, noise_scale=args.noise_scale, rng=rng)
    hidden = tuple(AGENT_CONFIG["hidden"])
    q_fn = build_q_function(
        feature_dim,
        n_actions=AGENT_CONFIG["n_actions"],
        hidden=hidden,
        lr=args.lr,
        device=device,
    )
    use_target = args.algo == "dqn" and args.sync_frequency > 0

    # --- Pretty run header ---------------------------------------------------
    param_count = sum(p.numel() for p in q_fn.parameters())
    print("=" * 70)
    print(f"  Q-LEARNING — GridWorld ({args.algo})")
    print("=" * 70)
    print(f"  Device:            {device}")
    print(f"  State dim:         {feature_dim}")
    print(f"  Network params:    {param_count:,}")
    print(f"  Grid:              {args.size}×{args.size} ({args.mode})")
    print(f"  Epochs:            {args.epochs}")
    print(f"  Learning rate:     {args.lr}")
    print(f"  Gamma:             {args.gamma}")
    if args.algo == "dqn":
        print(f"  Replay:            {args.replay_size} (batch {args.batch_size})")
        print(f"  Target network:    {'every ' + str(args.sync_frequency) + ' steps' if use_target else 'OFF'}")
    print(f"  Epsilon:           {args.eps_start} → {args.eps_floor}")
    print("=" * 70 + "\n")

    # --- Train ---------------------------------------------------------------
    target_fn = None
    if args.algo == "dqn":
        target_fn = q_fn.clone()
        ts = TrainState(
            q_fn=q_fn,
            target_fn=target_fn,
            replay=ReplayBuffer(args.replay_size, rng=rng),
            encoder=encoder,
            rng=rng,
        )
        result = train_dqn(
            ts,
            grid_size=args.size,
            mode=args.mode,
            max_moves=args.max_moves,
            n_epochs=args.epochs,
            eps_start=args.eps_start,
            eps_floor=args.eps_floor,
            gamma=args.gamma,
            batch_size=args.batch_size,
            sync_frequency=args.sync_frequency,
            log_interval=args.log_interval,
        )
        if not use_target:
            target_fn = None
    else:
        result = train_online(
            q_fn,
            encoder,
            rng,
            grid_size=args.size,
            mode=args.mode,
            max_moves=args.max_moves,
            n_epochs=args.epochs,
            eps_start=args.eps_start,
            eps_floor=args.eps_floor,
            gamma=args.gamma,
            log_interval=args.log_interval,
        )

    print("\n" + "=" * 70)
    print("  TRAINING COMPLETE")
    print("=" * 70)
    print(f"  Episodes:     {result['episodes']}")
    print(f"  Global steps: {result['global_step']:,}")
    print(f"  Updates:      {result['updates']:,}")
    print(f"  Train wins:   {result['wins']}")
    print(f"  Time:         {result['elapsed']:.1f}s ({result['elapsed']/60:.1f} min)")

    # --- Final evaluation ---------------------------------------------------
    final = None
    if args.test_games > 0:
        print(f"\n  ── Final Evaluation ({args.test_games} games, greedy) ──")
        final = evaluate(
            q_fn,
            encoder,
            n_games=args.test_games,
            grid_size=args.size,
            mode=args.mode,
            max_moves=args.eval_max_moves,
            seed=int(rng.integers(2**31 - 1)),
        )
        print(f"  Games played: {final['games']}, # of wins: {final['wins']}")
        print(f"  Win percentage: {final['win_rate']*100:.1f}% │ AvgMoves={final['avg_moves']:.1f}")

    # --- Save ----------------------------------------------------------------
    ckpt_path = os.path.join(args.save_dir, f"{args.algo}_{args.mode}.pt")
    save_checkpoint(
        ckpt_path,
        episode=result["episodes"],
        q_fn=q_fn,
        target_fn=target_fn,
        epsilon=result["epsilon"],
        global_step=result["global_step"],
        extra={
            "algo": args.algo,
            "size": int(args.size),
            "mode": args.mode,
            "hidden": list(hidden),
            "noise_scale": float(args.noise_scale),
        },
    )
    print(f"  [Model → {ckpt_path}]")

    if not args.no_plot:
        plot_path = os.path.join(args.plots_dir, f"{args.algo}_{args.mode}_loss.png")
        x_label = "update" if args.algo == "dqn" else "epoch"
        plot_losses(plot_path, result["losses"], x_label=x_label)
        print(f"  [Loss plot → {plot_path}]")

    return {"train": result, "eval": final}


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Q-learning for GridWorld",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python train.py                          # Replay + target network, static board
  python train.py --mode random            # Fully randomized boards
  python train.py --algo online            # Plain online Q-learning
  python train.py --sync-frequency 0       # Replay without a target network
  python train.py --epochs 5000 --test-games 200
""",
    )

    # Mode
    mode = p.add_argument_group("Training Mode")
    mode.add_argument("--algo", type=str, default="dqn", choices=["dqn", "online"],
                      help="dqn = replay + target network, online = one update per step")

    # Environment
    env = p.add_argument_group("Environment")
    env.add_argument("--size", type=int, default=ENV_CONFIG["size"], help="Board size (min 4)")
    env.add_argument("--mode", type=str, default=ENV_CONFIG["mode"],
                     choices=["static", "player", "random"], help="Board initialization mode")
    env.add_argument("--max-moves", type=int, default=ENV_CONFIG["max_moves"], help="Move cap per episode")
    env.add_argument("--noise-scale", type=float, default=ENV_CONFIG["noise_scale"], help="State noise scale")

    # Hyperparameters
    dqn = p.add_argument_group("Q-learning Hyperparameters")
    dqn.add_argument("--lr", type=float, default=AGENT_CONFIG["learning_rate"], help="Learning rate")
    dqn.add_argument("--gamma", type=float, default=AGENT_CONFIG["discount_factor"], help="Discount factor")
    dqn.add_argument("--batch-size", type=int, default=AGENT_CONFIG["batch_size"], help="Replay batch size")
    dqn.add_argument("--replay-size", type=int, default=AGENT_CONFIG["replay_size"], help="Buffer capacity")
    dqn.add_argument("--sync-frequency", type=int, default=AGENT_CONFIG["sync_frequency"],
                     help="Steps between target updates (0 disables the target network)")

    # Exploration
    exp = p.add_argument_group("Exploration")
    exp.add_argument("--eps-start", type=float, default=AGENT_CONFIG["epsilon"], help="Initial epsilon")
    exp.add_argument("--eps-floor", type=float, default=AGENT_CONFIG["epsilon_min"], help="Minimum epsilon")

    # Training
    trn = p.add_argument_group("Training")
    trn.add_argument("--epochs", type=int, default=TRAIN_CONFIG["n_epochs"], help="Training episodes")

    # Evaluation
    ev = p.add_argument_group("Evaluation")
    ev.add_argument("--test-games", type=int, default=TRAIN_CONFIG["test_games"])
    ev.add_argument("--eval-max-moves", type=int, default=ENV_CONFIG["eval_max_moves"])

    # Logging & saving
    log = p.add_argument_group("Logging & Saving")
    log.add_argument("--log-interval", type=int, default=TRAIN_CONFIG["log_interval"])
    log.add_argument("--save-dir", type=str, default=PATHS["save_dir"])
    log.add_argument("--plots-dir", type=str, default=PATHS["plots_dir"])
    log.add_argument("--no-plot", action="store_true", help="Skip the loss plot")

    # Misc
    misc = p.add_argument_group("Misc")
    misc.add_argument("--seed", type=int, default=TRAIN_CONFIG["seed"])
    misc.add_argument("--cpu", action="store_true", help="Force CPU")

    return p


if __name__ == "__main__":
    train(build_parser().parse_args())
