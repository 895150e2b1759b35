from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from training.replay import (
    InsufficientReplayDataError,
    ReplayBuffer,
    Transition,
    stack_batch,
)


def make_transition(i: int, dim: int = 4, done: bool = False) -> Transition:
    s = np.full(dim, float(i), dtype=np.float32)
    return Transition(s=s, a=i % 4, r=float(-i), s2=s + 1.0, done=done)


def test_fifo_keeps_last_three_of_five():
    buf = ReplayBuffer(3)
    pushed = [make_transition(i) for i in range(5)]
    for t in pushed:
        buf.push(t)

    assert len(buf) == 3
    assert list(buf) == pushed[2:]


@pytest.mark.parametrize("capacity, extra", [(1, 1), (4, 3), (10, 25)])
def test_oldest_transitions_are_evicted(capacity, extra):
    buf = ReplayBuffer(capacity)
    pushed = [make_transition(i) for i in range(capacity + extra)]
    for t in pushed:
        buf.push(t)

    assert len(buf) == capacity
    kept = list(buf)
    for old in pushed[:extra]:
        assert all(old is not t for t in kept)


def test_sample_needs_more_than_batch_size():
    buf = ReplayBuffer(10)
    for i in range(3):
        buf.push(make_transition(i))

    assert not buf.can_sample(3)
    with pytest.raises(InsufficientReplayDataError):
        buf.sample(3)

    with pytest.raises(InsufficientReplayDataError):
        ReplayBuffer(10).sample(1)


@pytest.mark.parametrize("batch_size", [0, -1])
def test_sample_rejects_non_positive_batch_size(batch_size):
    buf = ReplayBuffer(10)
    for i in range(5):
        buf.push(make_transition(i))

    with pytest.raises(ValueError, match="positive"):
        buf.sample(batch_size)


def test_sample_is_without_replacement():
    buf = ReplayBuffer(10, rng=np.random.default_rng(0))
    for i in range(6):
        buf.push(make_transition(i))

    batch = buf.sample(5)
    assert len(batch) == 5
    assert len({id(t) for t in batch}) == 5
    assert all(any(t is kept for kept in buf) for t in batch)


def test_sample_is_reproducible_with_seeded_rng():
    def actions(seed):
        buf = ReplayBuffer(20, rng=np.random.default_rng(seed))
        for i in range(20):
            buf.push(make_transition(i))
        return [t.r for t in buf.sample(8)]

    assert actions(7) == actions(7)


def test_transition_is_immutable():
    t = make_transition(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        t.r = 5.0


def test_stack_batch_shapes():
    batch = [make_transition(i, dim=6, done=(i == 2)) for i in range(3)]
    s, a, r, s2, done = stack_batch(batch)

    assert s.shape == (3, 6) and s.dtype == np.float32
    assert s2.shape == (3, 6) and s2.dtype == np.float32
    assert a.dtype == np.int64 and a.tolist() == [0, 1, 2]
    assert r.tolist() == [0.0, -1.0, -2.0]
    assert done.tolist() == [0.0, 0.0, 1.0]
