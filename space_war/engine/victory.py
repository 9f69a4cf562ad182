"""Elimination and victory evaluation.

Runs after combat resolution and after deployment:
1. Mark newly eliminated players: those owning no systems, or owning no
   shipyard system while controlling no units
2. If no winner is set yet:
   - Exactly one player left standing -> that player wins
   - Otherwise, a player owning every shipyard system -> that player wins

A winner, once set, is never cleared.
"""

import logging
from typing import List

from ..models.game import GameState
from .ledger import units_owned

logger = logging.getLogger(__name__)


def is_defeated(state: GameState, player_id: str) -> bool:
    """Check the elimination condition for one player."""
    owned = [s for s in state.systems if s.owner_id == player_id]
    if not owned:
        return True
    has_shipyard = any(s.has_shipyard for s in owned)
    return not has_shipyard and units_owned(state, player_id) == 0


def process_eliminations(state: GameState) -> List[str]:
    """Mark players who can no longer act as eliminated.

    Returns:
        IDs of players eliminated by this call
    """
    newly_eliminated = []
    for player in state.players:
        if state.is_eliminated(player.id):
            continue
        if is_defeated(state, player.id):
            state.eliminated_player_ids.append(player.id)
            newly_eliminated.append(player.id)
            logger.info(f"{player.display_name} ({player.id}) has been eliminated")
    return newly_eliminated


def check_victory(state: GameState) -> bool:
    """Set state.winner_player_id if a victory condition holds.

    Returns:
        True if the match has a winner, False otherwise
    """
    if state.winner_player_id is not None:
        return True

    remaining = [p for p in state.players if not state.is_eliminated(p.id)]
    if len(remaining) == 1:
        state.winner_player_id = remaining[0].id
        logger.info(f"{remaining[0].display_name} wins as the last player standing")
        return True

    shipyard_owners = {s.owner_id for s in state.systems if s.has_shipyard}
    if len(shipyard_owners) == 1:
        owner = next(iter(shipyard_owners))
        if owner is not None and not state.is_eliminated(owner):
            state.winner_player_id = owner
            logger.info(f"{state.get_player(owner).display_name} wins by holding every shipyard")
            return True

    return False


def evaluate_elimination_and_victory(state: GameState) -> List[str]:
    """Run elimination then victory checks.

    Returns:
        IDs of players eliminated by this evaluation
    """
    newly_eliminated = process_eliminations(state)
    check_victory(state)
    return newly_eliminated
