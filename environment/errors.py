"""Exceptions raised while building GridWorld layouts."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised for an unknown initialization mode."""


class InvalidLayoutError(RuntimeError):
    """Raised when no valid randomized layout was found within the retry budget."""

    def __init__(self, mode: str, attempts: int):
        super().__init__(f"no valid '{mode}' layout after {attempts} attempts")
        self.mode = mode
        self.attempts = attempts
