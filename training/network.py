"""Neural network definitions for Q-learning.

Keep networks in their own module so:
  - training loops stay readable
  - you can swap architectures without touching the algorithm code

`QFunction` is what the loops actually talk to. It bundles a module with
its optimizer and exposes the small contract the algorithms need:

  predict(state)   action-values for one state, no gradient tracking
  forward(states)  batched action-values, with gradients
  train_step(loss) one Adam update
  clone()          independent deep copy without an optimizer (target network)
  load_from(other) copy parameter values from another QFunction
"""

from __future__ import annotations

import copy

import numpy as np

try:
    import torch
    import torch.nn as nn
    import torch.optim as optim
except ImportError as e:  # pragma: no cover
    raise ImportError("PyTorch is required. Install with: pip install torch") from e


class QNetwork(nn.Module):
    """Small MLP Q-network.

    Input:  size*size*4 (flattened one-hot board)
    Output: n_actions (default 4)
    """

    def __init__(self, input_dim: int, n_actions: int = 4, hidden: tuple[int, int] = (150, 100)):
        super().__init__()
        h1, h2 = int(hidden[0]), int(hidden[1])
        self.net = nn.Sequential(
            nn.Linear(int(input_dim), h1),
            nn.ReLU(),
            nn.Linear(h1, h2),
            nn.ReLU(),
            nn.Linear(h2, int(n_actions)),
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.net(x)


class QFunction:
    def __init__(
        self,
        net: nn.Module,
        lr: float = 1e-3,
        device: torch.device | None = None,
        trainable: bool = True,
    ):
        self.device = device if device is not None else torch.device("cpu")
        self.net = net.to(self.device)
        self.lr = float(lr)
        self.optimizer = optim.Adam(self.net.parameters(), lr=self.lr) if trainable else None

    def forward(self, states: torch.Tensor) -> torch.Tensor:
        return self.net(states)

    __call__ = forward

    @torch.no_grad()
    def predict(self, state: np.ndarray) -> np.ndarray:
        st = torch.tensor(state, dtype=torch.float32, device=self.device).unsqueeze(0)
        return self.net(st).squeeze(0).cpu().numpy()

    def train_step(self, loss: torch.Tensor) -> float:
        if self.optimizer is None:
            raise RuntimeError("train_step called on a QFunction built without an optimizer")
        self.optimizer.zero_grad(set_to_none=True)
        loss.backward()
        self.optimizer.step()
        return float(loss.item())

    def clone(self) -> "QFunction":
        twin = QFunction(copy.deepcopy(self.net), lr=self.lr, device=self.device, trainable=False)
        twin.net.eval()
        return twin

    def load_from(self, other: "QFunction") -> None:
        self.net.load_state_dict(other.net.state_dict())

    def parameters(self):
        return self.net.parameters()

    def state_dict(self) -> dict:
        return self.net.state_dict()

    def load_state_dict(self, state: dict) -> None:
        self.net.load_state_dict(state)


def build_q_function(
    input_dim: int,
    *,
    n_actions: int = 4,
    hidden: tuple[int, int] = (150, 100),
    lr: float = 1e-3,
    device: torch.device | None = None,
) -> QFunction:
    return QFunction(QNetwork(input_dim, n_actions, hidden), lr=lr, device=device)
