"""Galaxy graph construction and home system assignment.

The default galaxy is a fixed twelve-system map. Lanes are declared once
as undirected pairs, so the adjacency lists built from them are
symmetric by construction; validate_galaxy checks the same property for
systems built any other way.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

from ..errors import IllegalStateError
from ..models.game import GameState
from ..models.star_system import StarSystem

logger = logging.getLogger(__name__)

# (id, name, resource value, shipyard)
DEFAULT_SYSTEMS: List[Tuple[str, str, int, bool]] = [
    ("sys-1", "Sol", 3, True),
    ("sys-2", "Alpha Centauri", 2, False),
    ("sys-3", "Vega", 2, False),
    ("sys-4", "Sirius", 3, True),
    ("sys-5", "Procyon", 1, False),
    ("sys-6", "Betelgeuse", 2, False),
    ("sys-7", "Deneb", 2, False),
    ("sys-8", "Rigel", 1, False),
    ("sys-9", "Polaris", 2, False),
    ("sys-10", "Altair", 3, True),
    ("sys-11", "Bellatrix", 1, False),
    ("sys-12", "Capella", 3, True),
]

# Undirected hyperlanes
DEFAULT_LANES: List[Tuple[str, str]] = [
    ("sys-1", "sys-2"),
    ("sys-1", "sys-3"),
    ("sys-2", "sys-3"),
    ("sys-2", "sys-4"),
    ("sys-2", "sys-6"),
    ("sys-3", "sys-5"),
    ("sys-3", "sys-7"),
    ("sys-4", "sys-6"),
    ("sys-4", "sys-8"),
    ("sys-5", "sys-7"),
    ("sys-5", "sys-10"),
    ("sys-6", "sys-7"),
    ("sys-6", "sys-8"),
    ("sys-6", "sys-9"),
    ("sys-7", "sys-9"),
    ("sys-7", "sys-10"),
    ("sys-8", "sys-12"),
    ("sys-9", "sys-11"),
    ("sys-9", "sys-12"),
    ("sys-10", "sys-11"),
    ("sys-11", "sys-12"),
]


def build_galaxy(
    definitions: Iterable[Tuple[str, str, int, bool]],
    lanes: Iterable[Tuple[str, str]],
) -> List[StarSystem]:
    """Build unowned star systems from a definition table and lane list.

    Args:
        definitions: (id, name, resource_value, has_shipyard) per system
        lanes: Undirected (system_a, system_b) pairs

    Returns:
        Systems in definition order with symmetric adjacency lists

    Raises:
        ValueError: If a lane references an unknown system or the
            resulting graph fails validation
    """
    systems = [
        StarSystem(
            id=system_id,
            name=name,
            owner_id=None,
            resource_value=resource_value,
            has_shipyard=has_shipyard,
        )
        for system_id, name, resource_value, has_shipyard in definitions
    ]
    by_id = {s.id: s for s in systems}

    for a, b in lanes:
        if a not in by_id or b not in by_id:
            raise ValueError(f"Lane {a}-{b} references an unknown system")
        if a == b:
            raise ValueError(f"Lane {a}-{b} connects a system to itself")
        if b not in by_id[a].connected_systems:
            by_id[a].connected_systems.append(b)
        if a not in by_id[b].connected_systems:
            by_id[b].connected_systems.append(a)

    validate_galaxy(systems)
    return systems


def default_galaxy() -> List[StarSystem]:
    """Build a fresh copy of the standard twelve-system galaxy."""
    return build_galaxy(DEFAULT_SYSTEMS, DEFAULT_LANES)


def validate_galaxy(systems: Sequence[StarSystem]) -> None:
    """Check that the galaxy graph is well formed.

    Raises:
        ValueError: On duplicate IDs, dangling references, self-loops or
            asymmetric adjacency
    """
    by_id = {}
    for system in systems:
        if system.id in by_id:
            raise ValueError(f"Duplicate system id: {system.id}")
        by_id[system.id] = system

    for system in systems:
        for neighbor_id in system.connected_systems:
            neighbor = by_id.get(neighbor_id)
            if neighbor is None:
                raise ValueError(f"System {system.id} lists unknown neighbor {neighbor_id}")
            if neighbor_id == system.id:
                raise ValueError(f"System {system.id} is connected to itself")
            if system.id not in neighbor.connected_systems:
                raise ValueError(
                    f"Asymmetric lane: {system.id} lists {neighbor_id} but not the reverse"
                )


def assign_home_systems(state: GameState) -> None:
    """Give each player, in join order, the next unowned shipyard system.

    Raises:
        IllegalStateError: If there are more players than shipyard systems.
            Nothing is assigned in that case.
    """
    candidates = [s for s in state.systems if s.has_shipyard and s.owner_id is None]
    if len(state.players) > len(candidates):
        raise IllegalStateError(
            "Not enough shipyard systems for every player",
            {"players": len(state.players), "shipyards": len(candidates)},
        )

    for player, system in zip(state.players, candidates):
        system.owner_id = player.id
        player.home_systems = [system.id]
        logger.info(f"Assigned home system {system.name} ({system.id}) to {player.display_name}")
