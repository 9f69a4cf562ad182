"""Game engine components."""

from .combat import CombatResult, resolve_combat
from .galaxy import build_galaxy, default_galaxy
from .turn_controller import CommandResult, GameController

__all__ = [
    "build_galaxy",
    "CombatResult",
    "CommandResult",
    "default_galaxy",
    "GameController",
    "resolve_combat",
]
