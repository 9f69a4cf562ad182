"""Typed command variants accepted by the GameController.

Commands are built at the transport boundary from loosely shaped payloads
and validate their own shape here, so the engine only ever sees
well-formed input. Rule checks (whose turn, which phase, affordability)
happen later, in the engine.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .unit import UnitType


def _require_name(value: str, field_name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")


def _require_count(value: int) -> None:
    # bool is an int subclass; True must not pass as a count of 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid count: {value!r} (must be an integer)")
    if value <= 0:
        raise ValueError(f"Invalid count: {value} (must be > 0)")


@dataclass(frozen=True)
class JoinGame:
    """Register a player by display name."""

    player_name: str

    def __post_init__(self):
        _require_name(self.player_name, "player_name")


@dataclass(frozen=True)
class StartGame:
    """Assign home systems and begin the first turn."""


@dataclass(frozen=True)
class PurchaseUnits:
    """Queue units for delivery at a shipyard system."""

    player_name: str
    unit_type: UnitType
    count: int
    system_id: str

    def __post_init__(self):
        _require_name(self.player_name, "player_name")
        _require_name(self.system_id, "system_id")
        if not isinstance(self.unit_type, UnitType):
            raise ValueError(f"Invalid unit type: {self.unit_type!r}")
        _require_count(self.count)


@dataclass(frozen=True)
class BuildFactory:
    """Build a shipyard at an owned system."""

    player_name: str
    system_id: str

    def __post_init__(self):
        _require_name(self.player_name, "player_name")
        _require_name(self.system_id, "system_id")


@dataclass(frozen=True)
class MoveFleet:
    """Move the named units one hop between adjacent systems."""

    player_name: str
    from_system_id: str
    to_system_id: str
    unit_ids: Tuple[str, ...]

    def __post_init__(self):
        _require_name(self.player_name, "player_name")
        _require_name(self.from_system_id, "from_system_id")
        _require_name(self.to_system_id, "to_system_id")
        if self.from_system_id == self.to_system_id:
            raise ValueError(f"Cannot move units from a system to itself: {self.from_system_id}")
        if not isinstance(self.unit_ids, (list, tuple)):
            raise ValueError(f"unit_ids must be a list of IDs, got {self.unit_ids!r}")
        if not self.unit_ids:
            raise ValueError("unit_ids cannot be empty")
        for unit_id in self.unit_ids:
            _require_name(unit_id, "unit_ids entry")
        # Accept a list but store an immutable tuple
        object.__setattr__(self, "unit_ids", tuple(self.unit_ids))


@dataclass(frozen=True)
class ResolveCombat:
    """Fight out the battle at a contested system."""

    system_id: str
    player_name: Optional[str] = None

    def __post_init__(self):
        _require_name(self.system_id, "system_id")
        if self.player_name is not None:
            _require_name(self.player_name, "player_name")


@dataclass(frozen=True)
class EndTurn:
    """Advance the current player's turn to its next phase."""

    player_name: str

    def __post_init__(self):
        _require_name(self.player_name, "player_name")


Command = Union[
    JoinGame,
    StartGame,
    PurchaseUnits,
    BuildFactory,
    MoveFleet,
    ResolveCombat,
    EndTurn,
]
