"""Income, purchasing, factory construction and deployment.

This module handles the economic side of a turn:
1. Income collection when a player's turn begins
2. Unit purchases during the purchase phase (paid now, delivered later)
3. Shipyard (factory) construction during the purchase phase
4. Deployment of queued purchases when the player leaves the deploy phase

Every function validates completely before mutating state, so a raised
GameError leaves the match untouched.
"""

import logging
from dataclasses import dataclass
from typing import List

from ..errors import (
    IllegalStateError,
    InsufficientResourceError,
    InvalidQuantityError,
)
from ..models.game import GameState
from ..models.purchase import PendingPurchase
from ..models.star_system import StarSystem
from ..models.unit import UnitType, get_unit_spec
from ..utils.constants import FACTORY_COST, PURCHASE_ID_PREFIX
from .ledger import get_or_create_fleet, new_unit

logger = logging.getLogger(__name__)


@dataclass
class DeploymentReport:
    """Outcome of materializing one player's pending purchases.

    Attributes:
        deployed: Units created, keyed by system ID
        refunded: Credits returned for orders whose system changed hands
    """

    deployed: dict[str, int]
    refunded: int


def calculate_income(state: GameState, player_id: str) -> int:
    """Sum of resource values of every system the player owns."""
    return sum(s.resource_value for s in state.systems if s.owner_id == player_id)


def collect_income(state: GameState, player_id: str) -> int:
    """Credit a player with their income.

    Args:
        state: Current game state
        player_id: Player receiving income

    Returns:
        Amount credited
    """
    player = state.get_player(player_id)
    income = calculate_income(state, player_id)
    player.resources += income
    logger.info(
        f"{player.display_name} collects {income} income (balance {player.resources})"
    )
    return income


def purchase_units(
    state: GameState,
    player_id: str,
    unit_type: UnitType,
    count: int,
    system_id: str,
) -> PendingPurchase:
    """Pay for units and queue them for delivery at a shipyard system.

    Args:
        state: Current game state
        player_id: Buyer
        unit_type: Kind of unit to buy
        count: Number of units (positive integer)
        system_id: Owned shipyard system where the units will appear

    Returns:
        The queued PendingPurchase

    Raises:
        InvalidQuantityError: If count is not a positive integer
        NotFoundError: If the system does not exist
        IllegalStateError: If the player does not own the system or it has
            no shipyard
        InsufficientResourceError: If the total cost exceeds the balance
    """
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidQuantityError(f"Purchase count must be a positive integer, got {count!r}")

    player = state.get_player(player_id)
    system = state.get_system(system_id)
    _require_owned(system, player_id)
    if not system.has_shipyard:
        raise IllegalStateError(f"{system.name} has no shipyard", {"system": system.id})

    total_cost = get_unit_spec(unit_type).cost * count
    if total_cost > player.resources:
        raise InsufficientResourceError(
            f"Cannot afford {count} {unit_type.value}",
            {"cost": total_cost, "balance": player.resources},
        )

    player.resources -= total_cost
    purchase = PendingPurchase(
        id=f"{PURCHASE_ID_PREFIX}-{state.next_serial('purchase'):03d}",
        player_id=player_id,
        system_id=system_id,
        unit_type=unit_type,
        count=count,
    )
    state.pending_purchases.append(purchase)

    logger.info(
        f"{player.display_name} orders {count} {unit_type.value} at {system.name} "
        f"for {total_cost} (balance {player.resources})"
    )
    return purchase


def build_factory(state: GameState, player_id: str, system_id: str) -> StarSystem:
    """Build a shipyard at a system the player owns.

    Raises:
        NotFoundError: If the system does not exist
        IllegalStateError: If the player does not own the system or it
            already has a shipyard
        InsufficientResourceError: If the player cannot pay FACTORY_COST
    """
    player = state.get_player(player_id)
    system = state.get_system(system_id)
    _require_owned(system, player_id)
    if system.has_shipyard:
        raise IllegalStateError(f"{system.name} already has a shipyard", {"system": system.id})
    if player.resources < FACTORY_COST:
        raise InsufficientResourceError(
            "Cannot afford a factory",
            {"cost": FACTORY_COST, "balance": player.resources},
        )

    player.resources -= FACTORY_COST
    system.has_shipyard = True
    logger.info(
        f"{player.display_name} builds a shipyard at {system.name} (balance {player.resources})"
    )
    return system


def deploy_pending_purchases(state: GameState, player_id: str) -> DeploymentReport:
    """Materialize one player's pending purchases into units.

    New units join the player's fleet at the target system with zero
    movement remaining. Orders whose system is no longer owned by the
    player are refunded instead. Other players' orders are untouched.

    Args:
        state: Current game state
        player_id: Player whose queue is consumed

    Returns:
        DeploymentReport with per-system unit counts and any refund
    """
    player = state.get_player(player_id)
    mine: List[PendingPurchase] = [p for p in state.pending_purchases if p.player_id == player_id]
    deployed: dict[str, int] = {}
    refunded = 0

    for purchase in mine:
        system = state.get_system(purchase.system_id)
        if system.owner_id != player_id:
            refund = get_unit_spec(purchase.unit_type).cost * purchase.count
            player.resources += refund
            refunded += refund
            logger.warning(
                f"{player.display_name} no longer owns {system.name}; "
                f"refunding {refund} for {purchase.count} {purchase.unit_type.value}"
            )
            continue

        fleet = get_or_create_fleet(state, player_id, system.id)
        for _ in range(purchase.count):
            fleet.units.append(new_unit(state, purchase.unit_type))
        deployed[system.id] = deployed.get(system.id, 0) + purchase.count

    state.pending_purchases = [p for p in state.pending_purchases if p.player_id != player_id]

    if deployed:
        logger.info(f"{player.display_name} deploys units: {deployed}")
    return DeploymentReport(deployed=deployed, refunded=refunded)


def _require_owned(system: StarSystem, player_id: str) -> None:
    if system.owner_id != player_id:
        raise IllegalStateError(
            f"You do not control {system.name}",
            {"system": system.id, "owner": system.owner_id},
        )
