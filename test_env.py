from __future__ import annotations

import numpy as np
import pytest

from environment import (
    ConfigurationError,
    GridBoard,
    GridWorld,
    GridWorldEnv,
    InvalidLayoutError,
    MoveStatus,
)
from environment.constants import (
    UP, DOWN, LEFT, RIGHT,
    PLAYER, GOAL, PIT, WALL,
    PIECE_ORDER,
)


def place(world: GridWorld, **positions):
    for name, pos in positions.items():
        world.board.move_piece(name.capitalize(), pos)


# -------------------- Board --------------------

def test_render_array_is_one_hot_per_piece():
    world = GridWorld(4, "static")
    arr = world.board.render_array()

    assert arr.shape == (4 * 4 * 4,)
    assert arr.dtype == np.float32
    planes = arr.reshape(4, 4, 4)
    for plane, name in zip(planes, PIECE_ORDER):
        assert plane.sum() == 1.0
        r, c = world.board.position(name)
        assert plane[r, c] == 1.0


def test_render_array_plane_order_is_stable_after_replace():
    board = GridBoard(4)
    board.add_piece("A", "a", (0, 0))
    board.add_piece("B", "b", (1, 1))
    board.add_piece("A", "a", (3, 3))

    planes = board.render_array().reshape(2, 4, 4)
    assert planes[0, 3, 3] == 1.0
    assert planes[1, 1, 1] == 1.0


def test_render_text():
    lines = GridWorld(4, "static").display().splitlines()
    assert len(lines) == 4
    assert lines[0].split() == ["+", "-", ".", "P"]
    assert lines[1].split() == [".", "W", ".", "."]
    assert lines[3].split() == [".", ".", ".", "."]


def test_render_text_shared_cell_shows_first_piece():
    board = GridBoard(4)
    board.add_piece("Player", "P", (2, 2))
    board.add_piece("Goal", "+", (2, 2))
    assert board.render().splitlines()[2].split() == [".", ".", "P", "."]


# -------------------- World setup --------------------

def test_size_is_clamped_to_four():
    world = GridWorld(2, "static")
    assert world.size == 4
    assert world.board.render_array().shape == (64,)


def test_unknown_mode_is_rejected():
    with pytest.raises(ConfigurationError):
        GridWorld(4, "sideways")


def test_static_layout():
    world = GridWorld(4, "static")
    assert world.board.position(PLAYER) == (0, 3)
    assert world.board.position(GOAL) == (0, 0)
    assert world.board.position(PIT) == (0, 1)
    assert world.board.position(WALL) == (1, 1)
    assert world.validate_board()


@pytest.mark.parametrize("mode", ["player", "random"])
def test_randomized_layouts_are_valid(mode):
    for seed in range(25):
        world = GridWorld(4, mode, rng=np.random.default_rng(seed))
        assert world.validate_board()


def test_player_mode_keeps_other_pieces_fixed():
    world = GridWorld(5, "player", rng=np.random.default_rng(3))
    assert world.board.position(GOAL) == (0, 0)
    assert world.board.position(PIT) == (0, 1)
    assert world.board.position(WALL) == (1, 1)


def test_same_seed_same_layout():
    a = GridWorld(4, "random", rng=np.random.default_rng(11))
    b = GridWorld(4, "random", rng=np.random.default_rng(11))
    assert np.array_equal(a.state(), b.state())


class StuckRng:
    """Always returns the same cell, so every random layout collides."""

    def integers(self, low, high, size=None):
        return np.zeros(size, dtype=np.int64)


@pytest.mark.parametrize("mode", ["player", "random"])
def test_retry_budget_raises(mode):
    with pytest.raises(InvalidLayoutError) as exc:
        GridWorld(4, mode, rng=StuckRng(), max_attempts=5)
    assert exc.value.attempts == 5


# -------------------- Moves --------------------

@pytest.mark.parametrize(
    "action, expected",
    [
        (UP, (1, 3)),
        (DOWN, (3, 3)),
        (LEFT, (2, 2)),
        (RIGHT, (2, 4)),
    ],
)
def test_action_deltas(action, expected):
    world = GridWorld(5, "static")
    place(world, player=(2, 3))
    assert world.make_move(action) == MoveStatus.VALID
    assert world.player_pos == expected


def test_wall_blocks_move():
    world = GridWorld(4, "static")
    place(world, player=(1, 2))
    assert world.make_move(LEFT) == MoveStatus.BLOCKED
    assert world.player_pos == (1, 2)


@pytest.mark.parametrize("action", [UP, RIGHT])
def test_board_edge_blocks_move(action):
    world = GridWorld(4, "static")
    assert world.make_move(action) == MoveStatus.BLOCKED
    assert world.player_pos == (0, 3)


def test_lethal_move_is_applied():
    world = GridWorld(4, "static")
    place(world, player=(0, 2))
    assert world.validate_move(PLAYER, (0, -1)) == MoveStatus.LETHAL
    world.make_move(LEFT)
    assert world.player_pos == (0, 1)
    assert world.reward() == -10.0


def test_pit_checked_before_wall():
    world = GridWorld(4, "static")
    place(world, pit=(0, 2), wall=(0, 2))
    assert world.validate_move(PLAYER, (0, -1)) == MoveStatus.LETHAL


# -------------------- Board validation --------------------

@pytest.mark.parametrize("other", [GOAL, PIT, WALL])
def test_shared_position_is_invalid(other):
    world = GridWorld(4, "static")
    world.board.move_piece(other, world.board.position(PLAYER))
    assert not world.validate_board()


def test_goal_on_wall_is_invalid():
    world = GridWorld(4, "static")
    place(world, goal=(1, 1))
    assert not world.validate_board()


def test_trapped_player_corner_top_left():
    world = GridWorld(5, "static")
    place(world, player=(0, 0), wall=(0, 1), pit=(1, 0), goal=(4, 4))
    assert not world.validate_board()

    place(world, goal=(0, 0), player=(4, 4))
    assert not world.validate_board()


def test_trapped_player_corner_top_right():
    world = GridWorld(5, "static")
    place(world, player=(0, 4), wall=(0, 3), pit=(1, 4))
    assert not world.validate_board()

    place(world, goal=(0, 4), player=(0, 0))
    assert not world.validate_board()


def test_trapped_corner_bottom_left_and_right():
    world = GridWorld(5, "static")
    place(world, player=(4, 0), wall=(4, 1), pit=(3, 0), goal=(0, 0))
    assert not world.validate_board()

    place(world, player=(4, 4), wall=(3, 4), pit=(4, 3), goal=(0, 0))
    assert not world.validate_board()


def test_corner_with_an_exit_is_valid():
    world = GridWorld(5, "static")
    place(world, player=(4, 4), wall=(3, 4), pit=(0, 1), goal=(0, 0))
    assert world.validate_board()


# -------------------- Reward --------------------

def test_reward_cases():
    world = GridWorld(4, "static")
    pit = world.board.position(PIT)
    goal = world.board.position(GOAL)

    for r in range(4):
        for c in range(4):
            world.board.move_piece(PLAYER, (r, c))
            reward = world.reward()
            if (r, c) == pit:
                assert reward == -10.0
            elif (r, c) == goal:
                assert reward == 10.0
            else:
                assert reward == -1.0


# -------------------- Scenarios --------------------

def test_left_three_times_reaches_goal():
    world = GridWorld(4, "static")
    for action in (LEFT, LEFT, LEFT):
        world.make_move(action)
    assert world.player_pos == (0, 0)
    assert world.reward() == 10.0


def test_down_then_left():
    world = GridWorld(4, "static")
    world.make_move(DOWN)
    world.make_move(LEFT)
    assert world.player_pos == (1, 2)
    assert world.reward() == -1.0


# -------------------- Gym env --------------------

def test_env_reset_and_spaces():
    env = GridWorldEnv(size=4, mode="static")
    obs, info = env.reset(seed=0)
    assert obs.shape == (64,)
    assert env.observation_space.contains(obs)
    assert info["player_pos"] == (0, 3)
    assert info["moves"] == 0
    assert env.action_space.n == 4


def test_env_terminates_on_pit():
    env = GridWorldEnv(size=4, mode="static")
    env.reset(seed=0)

    _, reward, terminated, truncated, _ = env.step(LEFT)
    assert (reward, terminated, truncated) == (-1.0, False, False)

    _, reward, terminated, _, info = env.step(LEFT)
    assert reward == -10.0
    assert terminated
    assert info["move_status"] == MoveStatus.LETHAL


def test_env_truncates_after_move_cap():
    env = GridWorldEnv(size=4, mode="static", max_moves=3)
    env.reset(seed=0)

    for _ in range(3):
        _, _, terminated, truncated, info = env.step(UP)
        assert not terminated and not truncated
        assert info["move_status"] == MoveStatus.BLOCKED

    _, _, _, truncated, _ = env.step(UP)
    assert truncated


def test_env_seed_is_reproducible():
    a, _ = GridWorldEnv(mode="random").reset(seed=123)
    b, _ = GridWorldEnv(mode="random").reset(seed=123)
    assert np.array_equal(a, b)


def test_env_mode_override():
    env = GridWorldEnv(mode="static")
    env.reset(seed=1, options={"mode": "random"})
    assert env.world.mode == "random"


def test_env_ansi_render():
    env = GridWorldEnv(render_mode="ansi")
    env.reset(seed=0)
    assert "P" in env.render()
