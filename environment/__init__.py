"""GridWorld environment: board, rules and the Gymnasium wrapper."""

from .board import GridBoard, Piece
from .errors import ConfigurationError, InvalidLayoutError
from .gridworld import GridWorld, MoveStatus
from .gridworld_env import GridWorldEnv

__all__ = [
    "ConfigurationError",
    "GridBoard",
    "GridWorld",
    "GridWorldEnv",
    "InvalidLayoutError",
    "MoveStatus",
    "Piece",
]
