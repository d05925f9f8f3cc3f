"""Utilities for phenoci."""

from .determinism import make_rng, spawn_streams
from .logging import setup_logging
from .validation import InvalidInputError, ValidationError

__all__ = [
    "setup_logging",
    "make_rng",
    "spawn_streams",
    "InvalidInputError",
    "ValidationError",
]
