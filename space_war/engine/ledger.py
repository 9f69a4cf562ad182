"""Fleet ledger queries and bookkeeping.

Helpers shared by movement, deployment and combat for looking up fleets
by (owner, system), merging units into them, recomputing presence-based
ownership, and pruning fleets that have run out of units.
"""

from typing import List, Optional

from ..errors import InvariantViolation
from ..models.fleet import Fleet
from ..models.game import GameState
from ..models.star_system import StarSystem
from ..models.unit import Unit, UnitType
from ..utils.constants import FLEET_ID_INFIX, UNIT_ID_PREFIX


def fleets_at(state: GameState, system_id: str) -> List[Fleet]:
    """Return the non-empty fleets stationed at a system, in ledger order."""
    return [f for f in state.fleets if f.location_system_id == system_id and f.units]


def find_fleet(state: GameState, owner_id: str, system_id: str) -> Optional[Fleet]:
    """Return the owner's fleet at a system, if there is one."""
    for fleet in state.fleets:
        if fleet.owner_id == owner_id and fleet.location_system_id == system_id:
            return fleet
    return None


def get_or_create_fleet(state: GameState, owner_id: str, system_id: str) -> Fleet:
    """Return the owner's fleet at a system, creating an empty one if absent."""
    fleet = find_fleet(state, owner_id, system_id)
    if fleet is None:
        fleet = Fleet(
            id=new_fleet_id(state, owner_id),
            owner_id=owner_id,
            location_system_id=system_id,
        )
        state.fleets.append(fleet)
    return fleet


def new_fleet_id(state: GameState, owner_id: str) -> str:
    serial = state.next_serial(f"fleet:{owner_id}")
    return f"{owner_id}-{FLEET_ID_INFIX}{serial:03d}"


def new_unit(state: GameState, unit_type: UnitType, movement_remaining: int = 0) -> Unit:
    """Create a unit with a fresh ID. The caller places it in a fleet."""
    serial = state.next_serial("unit")
    return Unit(
        id=f"{UNIT_ID_PREFIX}-{serial:04d}",
        type=unit_type,
        movement_remaining=movement_remaining,
    )


def owners_at(state: GameState, system_id: str) -> List[str]:
    """Distinct owners with units at a system, in order of first appearance."""
    owners: List[str] = []
    for fleet in fleets_at(state, system_id):
        if fleet.owner_id not in owners:
            owners.append(fleet.owner_id)
    return owners


def is_contested(state: GameState, system_id: str) -> bool:
    return len(owners_at(state, system_id)) > 1


def contested_systems(state: GameState) -> List[str]:
    """IDs of all systems hosting units from more than one owner."""
    return [s.id for s in state.systems if is_contested(state, s.id)]


def units_owned(state: GameState, player_id: str) -> int:
    """Total units a player controls across all fleets."""
    return sum(len(f.units) for f in state.fleets if f.owner_id == player_id)


def units_owned_at(state: GameState, player_id: str, system_id: str) -> List[Unit]:
    units: List[Unit] = []
    for fleet in fleets_at(state, system_id):
        if fleet.owner_id == player_id:
            units.extend(fleet.units)
    return units


def update_system_ownership(state: GameState, system: StarSystem) -> Optional[str]:
    """Apply conquest-by-presence to one system.

    A single owner present with units takes the system. A contested or
    empty system keeps its previous owner.

    Returns:
        The system's owner after the update
    """
    owners = owners_at(state, system.id)
    if len(owners) == 1:
        system.owner_id = owners[0]
    return system.owner_id


def prune_empty_fleets(state: GameState) -> int:
    """Remove fleets with no units from the ledger.

    Returns:
        Number of fleets removed
    """
    before = len(state.fleets)
    state.fleets = [f for f in state.fleets if f.units]
    return before - len(state.fleets)


def check_ledger_invariants(state: GameState) -> None:
    """Assert the structural invariants of the fleet ledger.

    Raises:
        InvariantViolation: If a unit appears in two fleets, an (owner,
            system) pair has two fleets, or a fleet sits at an unknown
            system
    """
    system_ids = {s.id for s in state.systems}
    seen_units = set()
    seen_pairs = set()
    for fleet in state.fleets:
        if fleet.location_system_id not in system_ids:
            raise InvariantViolation(
                f"Fleet {fleet.id} is at unknown system {fleet.location_system_id}"
            )
        pair = (fleet.owner_id, fleet.location_system_id)
        if pair in seen_pairs:
            raise InvariantViolation(f"Duplicate fleet for owner/system {pair}")
        seen_pairs.add(pair)
        for unit in fleet.units:
            if unit.id in seen_units:
                raise InvariantViolation(f"Unit {unit.id} appears in more than one fleet")
            seen_units.add(unit.id)
