"""
Main entry point for GridWorld Q-learning.
==========================================

Commands:
    manual  - Play manually in the terminal (default)
    train   - Train an agent (same flags as train.py)
    eval    - Evaluate a checkpoint (same flags as eval.py)

Usage:
    python main.py                          # Play manually (default)
    python main.py manual --mode random     # Play on a random board
    python main.py train --epochs 2000      # Train
    python main.py eval --checkpoint checkpoints/dqn_static.pt
    python main.py --help                   # Show help

"""

from __future__ import annotations

import argparse
import sys

from config import ENV_CONFIG


def manual_command(args):
    """Run manual control mode."""
    from play_manual import play_text_mode

    play_text_mode(
        size=args.size or ENV_CONFIG["size"],
        mode=args.mode or ENV_CONFIG["mode"],
        max_moves=args.max_moves or ENV_CONFIG["max_moves"],
    )


def train_command(argv):
    """Run training."""
    from train import build_parser, train

    train(build_parser().parse_args(argv))


def eval_command(argv):
    """Run evaluation."""
    from eval import build_parser, run_eval

    run_eval(build_parser().parse_args(argv))


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)

    # train/eval own their flags; hand the rest of the command line over.
    if argv and argv[0] == "train":
        return train_command(argv[1:])
    if argv and argv[0] == "eval":
        return eval_command(argv[1:])

    parser = argparse.ArgumentParser(
        description="GridWorld Q-learning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                    # Play manually in text mode
  python main.py train              # Train with replay + target network
  python main.py train --algo online
  python main.py eval --checkpoint checkpoints/dqn_static.pt --display
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    subparsers.add_parser("train", help="Train an agent (see train.py --help)")
    subparsers.add_parser("eval", help="Evaluate a checkpoint (see eval.py --help)")

    manual_parser = subparsers.add_parser("manual", help="Manual control mode")
    manual_parser.add_argument(
        "--size",
        type=int,
        default=None,
        help=f"Board size (default: {ENV_CONFIG['size']})",
    )
    manual_parser.add_argument(
        "--mode",
        type=str,
        default=None,
        choices=["static", "player", "random"],
        help=f"Board initialization mode (default: {ENV_CONFIG['mode']})",
    )
    manual_parser.add_argument(
        "--max-moves",
        type=int,
        default=None,
        help=f"Move cap per game (default: {ENV_CONFIG['max_moves']})",
    )
    manual_parser.set_defaults(func=manual_command)

    args = parser.parse_args(argv)

    # Default to manual mode if no command specified
    if args.command is None:
        args = argparse.Namespace(size=None, mode=None, max_moves=None, func=manual_command)

    args.func(args)


if __name__ == "__main__":
    main()
