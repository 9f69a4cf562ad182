"""Fleet movement across hyperlanes.

This module handles:
1. Movement budget reset when a player enters the movement phase
2. Single-hop moves of explicitly named units between adjacent systems
3. Merging moved units into the destination fleet
4. Conquest-by-presence at the destination

A unit with more than one movement point can travel further in the same
phase, but only through additional move commands (one hop each).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..errors import IllegalStateError, InvalidAdjacencyError, NotFoundError
from ..models.game import GameState
from ..models.unit import Unit
from .ledger import (
    fleets_at,
    get_or_create_fleet,
    is_contested,
    prune_empty_fleets,
    update_system_ownership,
)

logger = logging.getLogger(__name__)


@dataclass
class MoveResult:
    """Record of a completed move.

    Attributes:
        from_system_id: Source system
        to_system_id: Destination system
        moved_unit_ids: Units that made the hop
        skipped_unit_ids: Requested units that were ineligible
        owner_before: Destination owner before the move
        owner_after: Destination owner after the move
        contested: Whether the destination now hosts more than one owner
    """

    from_system_id: str
    to_system_id: str
    moved_unit_ids: List[str]
    skipped_unit_ids: List[str]
    owner_before: Optional[str]
    owner_after: Optional[str]
    contested: bool


def reset_movement(state: GameState, player_id: str) -> int:
    """Restore every unit the player owns to its full movement allowance.

    Returns:
        Number of units reset
    """
    count = 0
    for fleet in state.fleets:
        if fleet.owner_id != player_id:
            continue
        for unit in fleet.units:
            unit.movement_remaining = unit.spec.movement
            count += 1
    return count


def move_fleet(
    state: GameState,
    player_id: str,
    from_system_id: str,
    to_system_id: str,
    unit_ids: Iterable[str],
) -> MoveResult:
    """Move the named units one hop from one system to an adjacent one.

    Only units that belong to the player, sit at the source, and have
    movement left are moved; other requested IDs are skipped. Each moved
    unit spends exactly one movement point.

    Args:
        state: Current game state
        player_id: Player issuing the move
        from_system_id: Source system
        to_system_id: Destination system (must be adjacent)
        unit_ids: IDs of the units to move

    Returns:
        MoveResult describing what moved

    Raises:
        NotFoundError: If a system is unknown, the player has no units at
            the source, or none of the requested IDs are the player's
            units there
        InvalidAdjacencyError: If the systems are not connected
        IllegalStateError: If every requested unit is out of movement
    """
    source = state.get_system(from_system_id)
    dest = state.get_system(to_system_id)
    if not source.is_adjacent(dest.id):
        raise InvalidAdjacencyError(
            f"{source.name} is not connected to {dest.name}",
            {"from": source.id, "to": dest.id},
        )

    own_fleets = [f for f in fleets_at(state, source.id) if f.owner_id == player_id]
    if not own_fleets:
        raise NotFoundError(f"You have no units at {source.name}", {"system": source.id})

    requested = list(dict.fromkeys(unit_ids))
    available = {u.id: (fleet, u) for fleet in own_fleets for u in fleet.units}
    known = [uid for uid in requested if uid in available]
    if not known:
        raise NotFoundError(
            f"None of the requested units are yours at {source.name}",
            {"units": requested},
        )

    eligible = [uid for uid in known if available[uid][1].movement_remaining > 0]
    if not eligible:
        raise IllegalStateError(
            "None of the requested units have movement remaining",
            {"units": known},
        )

    owner_before = dest.owner_id
    moving: List[Unit] = []
    for uid in eligible:
        fleet, unit = available[uid]
        fleet.units.remove(unit)
        unit.movement_remaining -= 1
        moving.append(unit)

    dest_fleet = get_or_create_fleet(state, player_id, dest.id)
    dest_fleet.units.extend(moving)
    prune_empty_fleets(state)

    owner_after = update_system_ownership(state, dest)
    contested = is_contested(state, dest.id)

    skipped = [uid for uid in requested if uid not in eligible]
    logger.info(
        f"{player_id} moves {len(moving)} unit(s) {source.name} -> {dest.name}"
        + (f", skipped {skipped}" if skipped else "")
        + (" (contested)" if contested else "")
    )

    return MoveResult(
        from_system_id=source.id,
        to_system_id=dest.id,
        moved_unit_ids=eligible,
        skipped_unit_ids=skipped,
        owner_before=owner_before,
        owner_after=owner_after,
        contested=contested,
    )
