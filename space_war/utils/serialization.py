"""Game state serialization for broadcast.

Converts the GameState aggregate into the JSON-compatible snapshot that
collaborators publish after every command. Keys follow the client wire
format (camelCase), and every nested collection is rendered in full.
"""

from typing import Any

from ..models.fleet import Fleet
from ..models.game import GameState
from ..models.player import Player
from ..models.purchase import PendingPurchase
from ..models.star_system import StarSystem
from ..models.unit import Unit


def serialize_state(state: GameState) -> dict[str, Any]:
    """Convert GameState to a JSON-compatible dictionary.

    Args:
        state: Game state to serialize

    Returns:
        Snapshot dictionary (a fresh structure; safe to mutate or send)
    """
    return {
        "id": state.id,
        "players": [_serialize_player(p) for p in state.players],
        "systems": [_serialize_system(s) for s in state.systems],
        "fleets": [_serialize_fleet(f) for f in state.fleets],
        "pendingPurchases": [_serialize_purchase(p) for p in state.pending_purchases],
        "currentPlayerId": state.current_player_id,
        "phase": state.phase.value,
        "round": state.round,
        "lastCombatLog": list(state.last_combat_log),
        "winnerPlayerId": state.winner_player_id,
        "eliminatedPlayerIds": list(state.eliminated_player_ids),
    }


def _serialize_player(player: Player) -> dict[str, Any]:
    """Convert Player to dictionary."""
    return {
        "id": player.id,
        "displayName": player.display_name,
        "resources": player.resources,
        "homeSystems": list(player.home_systems),
    }


def _serialize_system(system: StarSystem) -> dict[str, Any]:
    """Convert StarSystem to dictionary."""
    return {
        "id": system.id,
        "name": system.name,
        "ownerId": system.owner_id,
        "resourceValue": system.resource_value,
        "connectedSystems": list(system.connected_systems),
        "hasShipyard": system.has_shipyard,
    }


def _serialize_fleet(fleet: Fleet) -> dict[str, Any]:
    """Convert Fleet to dictionary."""
    return {
        "id": fleet.id,
        "ownerId": fleet.owner_id,
        "locationSystemId": fleet.location_system_id,
        "units": [_serialize_unit(u) for u in fleet.units],
    }


def _serialize_unit(unit: Unit) -> dict[str, Any]:
    """Convert Unit to dictionary."""
    return {
        "id": unit.id,
        "type": unit.type.value,
        "movementRemaining": unit.movement_remaining,
    }


def _serialize_purchase(purchase: PendingPurchase) -> dict[str, Any]:
    """Convert PendingPurchase to dictionary."""
    return {
        "id": purchase.id,
        "playerId": purchase.player_id,
        "systemId": purchase.system_id,
        "unitType": purchase.unit_type.value,
        "count": purchase.count,
    }
