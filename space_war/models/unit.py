"""Unit catalog and unit data model."""

from dataclasses import dataclass
from enum import Enum


class UnitType(Enum):
    """Kinds of military unit a player can purchase."""

    FIGHTER = "fighter"
    DESTROYER = "destroyer"
    CRUISER = "cruiser"
    BATTLESHIP = "battleship"
    CARRIER = "carrier"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class UnitSpec:
    """Static stats for one unit kind.

    A unit scores a hit in combat when its d6 roll is less than or equal
    to attack. movement is the number of hops allowed per movement phase.
    """

    name: str
    cost: int
    attack: int
    defense: int
    movement: int


UNIT_CATALOG: dict[UnitType, UnitSpec] = {
    UnitType.FIGHTER: UnitSpec(name="Fighter", cost=6, attack=3, defense=3, movement=2),
    UnitType.DESTROYER: UnitSpec(name="Destroyer", cost=8, attack=3, defense=4, movement=2),
    UnitType.CRUISER: UnitSpec(name="Cruiser", cost=12, attack=4, defense=4, movement=2),
    UnitType.BATTLESHIP: UnitSpec(name="Battleship", cost=18, attack=4, defense=5, movement=1),
    UnitType.CARRIER: UnitSpec(name="Carrier", cost=14, attack=2, defense=4, movement=1),
    UnitType.TRANSPORT: UnitSpec(name="Transport", cost=7, attack=1, defense=1, movement=2),
}


def get_unit_spec(unit_type: UnitType) -> UnitSpec:
    """Look up the catalog entry for a unit kind."""
    return UNIT_CATALOG[unit_type]


@dataclass
class Unit:
    """A single ship belonging to a fleet.

    movement_remaining is reset to the kind's full allowance when the
    owner enters the movement phase and drops by one per hop.
    """

    id: str  # Unique identifier (e.g., "u-0007")
    type: UnitType
    movement_remaining: int = 0

    def __post_init__(self):
        """Validate unit data after initialization."""
        if not isinstance(self.type, UnitType):
            raise ValueError(f"Invalid unit type: {self.type!r}")
        if self.movement_remaining < 0:
            raise ValueError(
                f"Invalid movement_remaining: {self.movement_remaining} (must be >= 0)"
            )

    @property
    def spec(self) -> UnitSpec:
        return UNIT_CATALOG[self.type]
