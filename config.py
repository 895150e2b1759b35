"""
Configuration for GridWorld Q-learning
======================================
"""

# Environment Configuration
ENV_CONFIG = {
    "size": 4,                     # 4x4 board (smaller values are clamped to 4)
    "mode": "static",              # static | player | random
    "max_moves": 50,               # Moves per training episode before giving up
    "eval_max_moves": 15,          # Moves per evaluation game before it counts as a loss
    "max_layout_attempts": 1000,   # Retries for randomized layouts
    "noise_scale": 0.1,            # Uniform noise added to every encoded state
}

# Q-network Hyperparameters
AGENT_CONFIG = {
    "n_actions": 4,                # Actions: 0=UP, 1=DOWN, 2=LEFT, 3=RIGHT
    "hidden": (150, 100),          # Hidden layer widths
    "learning_rate": 1e-3,         # Adam learning rate
    "discount_factor": 0.9,        # Gamma: discount factor
    "epsilon": 1.0,                # Initial exploration rate
    "epsilon_min": 0.1,            # Floor for epsilon
    "batch_size": 200,             # Replay buffer sample size
    "replay_size": 1000,           # Replay buffer capacity
    "sync_frequency": 500,         # Steps between target network updates
}

# Training Configuration
TRAIN_CONFIG = {
    "n_epochs": 1000,              # Training episodes (one new game each)
    "log_interval": 100,           # Print stats every N episodes
    "test_games": 1000,            # Greedy games played after training
    "seed": 42,
}

# Paths
PATHS = {
    "save_dir": "./checkpoints",
    "plots_dir": "./plots",
}
