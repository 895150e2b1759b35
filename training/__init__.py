"""Q-learning for GridWorld: replay, networks, loops, evaluation."""
