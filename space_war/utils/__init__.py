"""Utility functions and constants for Space War."""

from .constants import (
    DIE_SIDES,
    FACTORY_COST,
    MAX_COMBAT_ROUNDS,
    STARTING_RESOURCES,
)
from .rng import GameRNG
from .serialization import serialize_state

__all__ = [
    "DIE_SIDES",
    "FACTORY_COST",
    "MAX_COMBAT_ROUNDS",
    "STARTING_RESOURCES",
    "GameRNG",
    "serialize_state",
]
