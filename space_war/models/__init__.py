"""Data models for Space War."""

from .command import (
    BuildFactory,
    Command,
    EndTurn,
    JoinGame,
    MoveFleet,
    PurchaseUnits,
    ResolveCombat,
    StartGame,
)
from .fleet import Fleet
from .game import GameState, TurnPhase, new_game_state
from .player import Player
from .purchase import PendingPurchase
from .star_system import StarSystem
from .unit import UNIT_CATALOG, Unit, UnitSpec, UnitType, get_unit_spec

__all__ = [
    "BuildFactory",
    "Command",
    "EndTurn",
    "Fleet",
    "GameState",
    "JoinGame",
    "MoveFleet",
    "PendingPurchase",
    "Player",
    "PurchaseUnits",
    "ResolveCombat",
    "StarSystem",
    "StartGame",
    "TurnPhase",
    "UNIT_CATALOG",
    "Unit",
    "UnitSpec",
    "UnitType",
    "get_unit_spec",
    "new_game_state",
]
