"""Combat resolution at a contested system.

Combat is triggered explicitly, one system at a time, during the combat
phase. Each owner present forms one side made of all their units at the
system. Rounds repeat until at most one side has units left, or until
MAX_COMBAT_ROUNDS is reached:

1. Every surviving unit rolls one d6 and hits on a roll <= its attack.
2. Each hit removes one unit from another living side. A side's hits are
   dealt round-robin over its enemies, so one hit never costs two units.
   Casualties come off the end of the side's unit list.
3. A narrative log line records hits and survivors per side.

Afterwards the fleets at the system are replaced with one consolidated
fleet per surviving side. A sole survivor takes the system; mutual
destruction and unresolved stalemates leave ownership unchanged.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..errors import IllegalStateError
from ..models.fleet import Fleet
from ..models.game import GameState
from ..models.unit import Unit
from ..utils.constants import DIE_SIDES, MAX_COMBAT_ROUNDS
from .ledger import fleets_at, new_fleet_id, prune_empty_fleets

logger = logging.getLogger(__name__)

OUTCOME_VICTORY = "victory"
OUTCOME_MUTUAL_DESTRUCTION = "mutual_destruction"
OUTCOME_UNRESOLVED = "unresolved"


@dataclass
class CombatRound:
    """One simultaneous exchange of dice.

    Attributes:
        number: 1-based round number
        hits: Hits scored by each side this round
        losses: Units each side lost this round
        survivors: Units each side has left after the round
    """

    number: int
    hits: Dict[str, int]
    losses: Dict[str, int]
    survivors: Dict[str, int]


@dataclass
class CombatResult:
    """Record of a resolved combat.

    Attributes:
        system_id: ID of system where combat occurred
        system_name: Name of system where combat occurred
        outcome: "victory", "mutual_destruction" or "unresolved"
        winner: Owner ID of the sole surviving side, or None
        initial_units: Units per side before the first round
        surviving_units: Units per side after the last round
        control_before: System owner before combat
        control_after: System owner after combat
        rounds: Per-round detail
        log: Narrative lines, also stored on GameState.last_combat_log
    """

    system_id: str
    system_name: str
    outcome: str
    winner: Optional[str]
    initial_units: Dict[str, int]
    surviving_units: Dict[str, int]
    control_before: Optional[str]
    control_after: Optional[str]
    rounds: List[CombatRound] = field(default_factory=list)
    log: List[str] = field(default_factory=list)

    @property
    def losses(self) -> Dict[str, int]:
        return {
            owner: self.initial_units[owner] - self.surviving_units.get(owner, 0)
            for owner in self.initial_units
        }


def resolve_combat(
    state: GameState,
    system_id: str,
    rng,
    max_rounds: int = MAX_COMBAT_ROUNDS,
) -> CombatResult:
    """Fight out the battle at one contested system.

    Args:
        state: Current game state (mutated in place)
        system_id: System to resolve
        rng: Dice source exposing roll_die(sides) -> int, e.g. GameRNG
        max_rounds: Round cap guaranteeing termination

    Returns:
        CombatResult describing the battle

    Raises:
        NotFoundError: If the system does not exist
        IllegalStateError: If fewer than two owners have units there
    """
    system = state.get_system(system_id)

    sides: Dict[str, List[Unit]] = {}
    for fleet in fleets_at(state, system.id):
        sides.setdefault(fleet.owner_id, []).extend(fleet.units)
    if len(sides) < 2:
        raise IllegalStateError(
            f"No combat at {system.name}: fewer than two sides present",
            {"system": system.id},
        )

    names = {owner: state.get_player(owner).display_name for owner in sides}
    initial = {owner: len(units) for owner, units in sides.items()}
    control_before = system.owner_id

    log = [
        f"Combat at {system.name}: "
        + " vs ".join(f"{names[o]} ({initial[o]} units)" for o in sides)
    ]
    rounds: List[CombatRound] = []

    while _alive_count(sides) >= 2 and len(rounds) < max_rounds:
        combat_round = _fight_round(sides, rng, len(rounds) + 1)
        rounds.append(combat_round)
        log.append(_format_round(combat_round, names))
        logger.debug(f"{system.name}: {log[-1]}")

    survivors = {owner: units for owner, units in sides.items() if units}
    if len(survivors) >= 2:
        outcome = OUTCOME_UNRESOLVED
        winner = None
        log.append(
            f"Combat at {system.name} unresolved after {len(rounds)} rounds; "
            + ", ".join(f"{names[o]} holds {len(u)}" for o, u in survivors.items())
        )
    elif len(survivors) == 1:
        outcome = OUTCOME_VICTORY
        winner = next(iter(survivors))
        system.owner_id = winner
        log.append(
            f"{names[winner]} wins at {system.name} with {len(survivors[winner])} units remaining"
        )
    else:
        outcome = OUTCOME_MUTUAL_DESTRUCTION
        winner = None
        log.append(f"Mutual destruction at {system.name}: no units survive")

    _replace_fleets(state, system.id, survivors)
    state.last_combat_log = log

    logger.info(log[-1])

    return CombatResult(
        system_id=system.id,
        system_name=system.name,
        outcome=outcome,
        winner=winner,
        initial_units=initial,
        surviving_units={owner: len(units) for owner, units in sides.items()},
        control_before=control_before,
        control_after=system.owner_id,
        rounds=rounds,
        log=log,
    )


def _alive_count(sides: Dict[str, List[Unit]]) -> int:
    return sum(1 for units in sides.values() if units)


def _fight_round(sides: Dict[str, List[Unit]], rng, number: int) -> CombatRound:
    """Roll for every surviving unit, then apply casualties simultaneously."""
    alive = [owner for owner, units in sides.items() if units]

    hits = {}
    for owner in alive:
        hits[owner] = sum(1 for unit in sides[owner] if rng.roll_die(DIE_SIDES) <= unit.spec.attack)

    losses = _allocate_hits(sides, alive, hits)
    for owner, lost in losses.items():
        if lost:
            del sides[owner][-lost:]

    return CombatRound(
        number=number,
        hits=hits,
        losses=losses,
        survivors={owner: len(sides[owner]) for owner in alive},
    )


def _allocate_hits(
    sides: Dict[str, List[Unit]], alive: List[str], hits: Dict[str, int]
) -> Dict[str, int]:
    """Turn each side's hits into casualties among the other living sides.

    A side's hits are dealt one at a time, round-robin over its enemies
    starting with the side seated after it, skipping enemies that have no
    unit left to lose this round. Each hit removes exactly one unit; hits
    left over once every enemy is used up are wasted.

    Returns:
        Units each living side loses this round
    """
    losses = {owner: 0 for owner in alive}
    for index, attacker in enumerate(alive):
        enemies = alive[index + 1:] + alive[:index]
        remaining = hits[attacker]
        while remaining:
            targets = [o for o in enemies if losses[o] < len(sides[o])]
            if not targets:
                break
            for target in targets[:remaining]:
                losses[target] += 1
            remaining -= min(remaining, len(targets))
    return losses


def _format_round(combat_round: CombatRound, names: Dict[str, str]) -> str:
    scored = ", ".join(
        f"{names[o]} scores {h} hit{'s' if h != 1 else ''}" for o, h in combat_round.hits.items()
    )
    remaining = ", ".join(f"{names[o]} {n}" for o, n in combat_round.survivors.items())
    return f"Round {combat_round.number}: {scored}. Survivors: {remaining}"


def _replace_fleets(state: GameState, system_id: str, survivors: Dict[str, List[Unit]]) -> None:
    """Discard every fleet at the system and add one per surviving side."""
    state.fleets = [f for f in state.fleets if f.location_system_id != system_id]
    for owner, units in survivors.items():
        state.fleets.append(
            Fleet(
                id=new_fleet_id(state, owner),
                owner_id=owner,
                location_system_id=system_id,
                units=list(units),
            )
        )
    prune_empty_fleets(state)
