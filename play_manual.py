"""
Manual play for GridWorld (text mode).
======================================

Commands: w/up, s/down, a/left, d/right, r/reset, q/quit
"""

from __future__ import annotations

from config import ENV_CONFIG
from environment import GridWorldEnv


def play_text_mode(size: int = 4, mode: str = "static", max_moves: int = 50):
    """
    Play in text mode.
    Uses input() for commands.
    """
    env = GridWorldEnv(size=size, mode=mode, max_moves=max_moves, render_mode="ansi")

    action_map = {
        'w': GridWorldEnv.UP,
        'up': GridWorldEnv.UP,
        's': GridWorldEnv.DOWN,
        'down': GridWorldEnv.DOWN,
        'a': GridWorldEnv.LEFT,
        'left': GridWorldEnv.LEFT,
        'd': GridWorldEnv.RIGHT,
        'right': GridWorldEnv.RIGHT,
    }

    print("\n" + "=" * 60)
    print("GRIDWORLD - TEXT MODE")
    print("=" * 60)
    print("P = player, + = goal, - = pit, W = wall")
    print("Commands: w/up, s/down, a/left, d/right, r/reset, q/quit")
    print("=" * 60 + "\n")

    _, info = env.reset()
    episode_reward = 0.0
    finished = False

    print(env.render())
    print(f"\nPlayer: {info['player_pos']}")

    while True:
        cmd = input("\nAction: ").strip().lower()

        if cmd in ('q', 'quit', 'exit'):
            break

        if cmd in ('r', 'reset'):
            _, info = env.reset()
            episode_reward = 0.0
            finished = False
            print("\n--- Reset ---")
            print(env.render())
            continue

        if finished:
            print("Game over. Use r/reset or q/quit")
            continue

        if cmd not in action_map:
            print("Invalid command. Use: w/up, s/down, a/left, d/right, r/reset, q/quit")
            continue

        _, reward, terminated, truncated, info = env.step(action_map[cmd])
        episode_reward += reward

        print(env.render())
        print(f"\nPlayer: {info['player_pos']} ({info['move_status'].name})")
        print(f"Move {info['moves']}, Reward: {reward:.1f}, Total: {episode_reward:.1f}")

        if terminated:
            finished = True
            if reward > 0:
                print("\n*** GOAL REACHED! ***")
            else:
                print("\n*** FELL INTO THE PIT ***")
        elif truncated:
            finished = True
            print("\n*** MAX MOVES REACHED ***")

    env.close()


if __name__ == "__main__":
    play_text_mode(
        size=ENV_CONFIG["size"],
        mode=ENV_CONFIG["mode"],
        max_moves=ENV_CONFIG["max_moves"],
    )
