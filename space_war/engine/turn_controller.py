"""Turn and phase state machine.

The GameController owns one match's GameState and is the only entry
point for mutating it. Each command is handled in three steps:

1. Gate: the match must be live, and turn commands must come from the
   current player in the phase that command belongs to
2. Delegate: hand off to the economy, movement or combat subsystem
3. Evaluate: after combat and deployment, run elimination/victory checks

A command that fails any check raises a GameError inside the handler,
which handle() turns into a logged, silent rejection. Handlers validate
before they mutate, so a rejected command leaves the state exactly as it
was. Each player's turn cycles purchase -> movement -> combat -> deploy,
then passes to the next player in join order.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from ..errors import (
    AuthorizationError,
    GameError,
    IllegalStateError,
    InvalidQuantityError,
    InvariantViolation,
    NotFoundError,
    PhaseError,
)
from ..models.command import (
    BuildFactory,
    Command,
    EndTurn,
    JoinGame,
    MoveFleet,
    PurchaseUnits,
    ResolveCombat,
    StartGame,
)
from ..models.game import GameState, TurnPhase, new_game_state
from ..models.player import Player
from ..models.star_system import StarSystem
from ..models.unit import UnitType
from ..utils.constants import PLAYER_ID_PREFIX, STARTING_RESOURCES
from ..utils.rng import GameRNG
from ..utils.serialization import serialize_state
from .combat import CombatResult, resolve_combat
from .economy import build_factory, collect_income, deploy_pending_purchases, purchase_units
from .galaxy import assign_home_systems, default_galaxy, validate_galaxy
from .ledger import check_ledger_invariants, contested_systems
from .movement import move_fleet, reset_movement
from .victory import evaluate_elimination_and_victory

logger = logging.getLogger(__name__)

# Phase each turn command is restricted to
COMMAND_PHASES: Dict[type, TurnPhase] = {
    PurchaseUnits: TurnPhase.PURCHASE,
    BuildFactory: TurnPhase.PURCHASE,
    MoveFleet: TurnPhase.MOVEMENT,
    ResolveCombat: TurnPhase.COMBAT,
}


@dataclass
class CommandResult:
    """Outcome of one command.

    Attributes:
        accepted: False if the command was rejected and state is unchanged
        command: Command class name
        error: The rejection reason, when not accepted
        detail: Subsystem result for accepted commands (e.g. CombatResult)
    """

    accepted: bool
    command: str
    error: Optional[GameError] = None
    detail: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "accepted": self.accepted,
            "command": self.command,
            "error": self.error.to_dict() if self.error else None,
        }


class GameController:
    """Single writer for one match.

    Commands must be delivered one at a time; the controller does no
    locking of its own.
    """

    def __init__(self, state: GameState, rng: Optional[GameRNG] = None):
        """Take ownership of a match.

        Args:
            state: Match state to drive
            rng: Dice source for combat. Defaults to an entropy-seeded GameRNG.

        Raises:
            ValueError: If the galaxy graph is malformed
        """
        validate_galaxy(state.systems)
        self.state = state
        self.rng = rng if rng is not None else GameRNG()

        self._command_handlers: Dict[type, Callable[[Any], Any]] = {
            JoinGame: self._handle_join,
            StartGame: self._handle_start,
            PurchaseUnits: self._handle_purchase,
            BuildFactory: self._handle_build_factory,
            MoveFleet: self._handle_move,
            ResolveCombat: self._handle_resolve_combat,
            EndTurn: self._handle_end_turn,
        }
        self._phase_advancers: Dict[TurnPhase, Callable[[], TurnPhase]] = {
            TurnPhase.PURCHASE: self._advance_from_purchase,
            TurnPhase.MOVEMENT: self._advance_from_movement,
            TurnPhase.COMBAT: self._advance_from_combat,
            TurnPhase.DEPLOY: self._advance_from_deploy,
        }
        missing = [phase for phase in TurnPhase if phase not in self._phase_advancers]
        if missing:
            raise InvariantViolation(f"No advance handler for phases {missing}")

    @classmethod
    def new_match(
        cls,
        game_id: str,
        systems: Optional[Sequence[StarSystem]] = None,
        rng: Optional[GameRNG] = None,
    ) -> "GameController":
        """Create a controller for a fresh, unstarted match.

        Args:
            game_id: Match identifier
            systems: Galaxy to play on (default twelve-system map if None)
            rng: Dice source for combat
        """
        galaxy = list(systems) if systems is not None else default_galaxy()
        return cls(new_game_state(game_id, galaxy), rng=rng)

    # =========================================================================
    # COMMAND DISPATCH
    # =========================================================================

    def handle(self, command: Command) -> CommandResult:
        """Apply one command to the match.

        GameErrors are caught and reported as rejections; nothing else is.
        """
        name = type(command).__name__
        handler = self._command_handlers.get(type(command))
        if handler is None:
            raise InvariantViolation(f"No handler for command type {name}")

        try:
            if self.state.finished:
                raise IllegalStateError(
                    "The match is over", {"winner": self.state.winner_player_id}
                )
            detail = handler(command)
        except GameError as e:
            logger.warning(f"Rejected {name}: {e}")
            return CommandResult(accepted=False, command=name, error=e)

        check_ledger_invariants(self.state)
        return CommandResult(accepted=True, command=name, detail=detail)

    def snapshot(self) -> dict[str, Any]:
        """Serialized view of the current state for broadcast."""
        return serialize_state(self.state)

    # =========================================================================
    # CONVENIENCE API
    # Build a typed command from plain arguments and handle it
    # =========================================================================

    def join(self, player_name: str) -> CommandResult:
        return self.submit(JoinGame, player_name)

    def start(self) -> CommandResult:
        return self.submit(StartGame)

    def purchase_units(
        self, player_name: str, unit_type: Union[UnitType, str], count: int, system_id: str
    ) -> CommandResult:
        try:
            kind = UnitType(unit_type)
        except ValueError:
            return self._reject(PurchaseUnits, NotFoundError(f"Unknown unit type '{unit_type}'"))
        return self.submit(PurchaseUnits, player_name, kind, count, system_id)

    def build_factory(self, player_name: str, system_id: str) -> CommandResult:
        return self.submit(BuildFactory, player_name, system_id)

    def move_fleet(
        self, player_name: str, from_system_id: str, to_system_id: str, unit_ids: Sequence[str]
    ) -> CommandResult:
        return self.submit(MoveFleet, player_name, from_system_id, to_system_id, unit_ids)

    def resolve_combat(
        self, system_id: str, *, player_name: Optional[str] = None
    ) -> CommandResult:
        """Resolve combat at a system.

        player_name is keyword-only since, unlike the other turn commands,
        the caller is optional here. When given it must be the current player.
        """
        return self.submit(ResolveCombat, system_id, player_name)

    def end_turn(self, player_name: str) -> CommandResult:
        return self.submit(EndTurn, player_name)

    def submit(self, command_cls: type, *args: Any) -> CommandResult:
        """Construct a command and handle it, rejecting malformed arguments."""
        try:
            command = command_cls(*args)
        except ValueError as e:
            return self._reject(command_cls, InvalidQuantityError(str(e)))
        return self.handle(command)

    def _reject(self, command_cls: type, error: GameError) -> CommandResult:
        logger.warning(f"Rejected {command_cls.__name__}: {error}")
        return CommandResult(accepted=False, command=command_cls.__name__, error=error)

    # =========================================================================
    # AUTHORIZATION
    # =========================================================================

    def _authorize(self, player_name: str, required_phase: Optional[TurnPhase]) -> Player:
        """Check the player exists, holds the turn, and the phase matches.

        Raises:
            IllegalStateError: If the match has not started
            NotFoundError: If no player has this name
            AuthorizationError: If it is not this player's turn
            PhaseError: If the current phase differs from required_phase
        """
        if not self.state.started:
            raise IllegalStateError("The match has not started")
        player = self.state.get_player_by_name(player_name)
        if player.id != self.state.current_player_id:
            raise AuthorizationError(
                f"It is not {player.display_name}'s turn",
                {"current": self.state.current_player_id},
            )
        if required_phase is not None and self.state.phase is not required_phase:
            raise PhaseError(
                f"Not allowed during the {self.state.phase.value} phase",
                {"required": required_phase.value},
            )
        return player

    # =========================================================================
    # COMMAND HANDLERS
    # =========================================================================

    def _handle_join(self, command: JoinGame) -> Player:
        existing = self.state.find_player_by_name(command.player_name)
        if existing is not None:
            logger.info(f"{existing.display_name} rejoined as {existing.id}")
            return existing
        if self.state.started:
            raise IllegalStateError("New players cannot join a match in progress")

        player = Player(
            id=f"{PLAYER_ID_PREFIX}{len(self.state.players) + 1}",
            display_name=command.player_name,
            resources=STARTING_RESOURCES,
        )
        self.state.players.append(player)
        logger.info(f"{player.display_name} joined as {player.id}")
        return player

    def _handle_start(self, command: StartGame) -> None:
        if self.state.started:
            raise IllegalStateError("The match has already started")
        if not self.state.players:
            raise IllegalStateError("At least one player must join before starting")
        if any(s.owner_id is not None for s in self.state.systems):
            raise IllegalStateError("Systems are already owned")

        assign_home_systems(self.state)
        first = self.state.players[0]
        self.state.current_player_id = first.id
        self.state.phase = TurnPhase.PURCHASE
        self.state.round = 1
        collect_income(self.state, first.id)
        logger.info(f"Match {self.state.id} started with {len(self.state.players)} player(s)")

    def _handle_purchase(self, command: PurchaseUnits):
        player = self._authorize(command.player_name, COMMAND_PHASES[PurchaseUnits])
        return purchase_units(
            self.state, player.id, command.unit_type, command.count, command.system_id
        )

    def _handle_build_factory(self, command: BuildFactory):
        player = self._authorize(command.player_name, COMMAND_PHASES[BuildFactory])
        return build_factory(self.state, player.id, command.system_id)

    def _handle_move(self, command: MoveFleet):
        player = self._authorize(command.player_name, COMMAND_PHASES[MoveFleet])
        return move_fleet(
            self.state,
            player.id,
            command.from_system_id,
            command.to_system_id,
            command.unit_ids,
        )

    def _handle_resolve_combat(self, command: ResolveCombat) -> CombatResult:
        required = COMMAND_PHASES[ResolveCombat]
        if command.player_name is not None:
            self._authorize(command.player_name, required)
        elif not self.state.started:
            raise IllegalStateError("The match has not started")
        elif self.state.phase is not required:
            raise PhaseError(
                f"Not allowed during the {self.state.phase.value} phase",
                {"required": required.value},
            )

        result = resolve_combat(self.state, command.system_id, self.rng)
        evaluate_elimination_and_victory(self.state)
        return result

    def _handle_end_turn(self, command: EndTurn) -> TurnPhase:
        self._authorize(command.player_name, None)
        advance = self._phase_advancers[self.state.phase]
        before = self.state.phase
        after = advance()
        logger.info(
            f"{command.player_name}: {before.value} -> {after.value} (round {self.state.round})"
        )
        return after

    # =========================================================================
    # PHASE TRANSITIONS
    # Each returns the phase the match is in afterwards
    # =========================================================================

    def _advance_from_purchase(self) -> TurnPhase:
        reset_movement(self.state, self.state.current_player_id)
        self.state.phase = TurnPhase.MOVEMENT
        return self.state.phase

    def _advance_from_movement(self) -> TurnPhase:
        self.state.phase = TurnPhase.COMBAT
        return self.state.phase

    def _advance_from_combat(self) -> TurnPhase:
        contested = contested_systems(self.state)
        if contested:
            raise IllegalStateError(
                "Resolve all combat before deploying", {"contested": contested}
            )
        self.state.phase = TurnPhase.DEPLOY
        return self.state.phase

    def _advance_from_deploy(self) -> TurnPhase:
        deploy_pending_purchases(self.state, self.state.current_player_id)
        evaluate_elimination_and_victory(self.state)
        if self.state.finished:
            logger.info(f"Match {self.state.id} won by {self.state.winner_player_id}")
            return self.state.phase

        next_id, wrapped = self._next_player()
        if wrapped:
            self.state.round += 1
        self.state.current_player_id = next_id
        self.state.phase = TurnPhase.PURCHASE
        collect_income(self.state, next_id)
        return self.state.phase

    def _next_player(self) -> Tuple[str, bool]:
        """Find who plays next, skipping eliminated players.

        Returns:
            (player ID, whether play wrapped back past the first player)
        """
        order = [p.id for p in self.state.players]
        current_index = order.index(self.state.current_player_id)
        candidates = [
            (current_index + offset) % len(order) for offset in range(1, len(order) + 1)
        ]
        for index in candidates:
            if not self.state.is_eliminated(order[index]):
                return order[index], index <= current_index
        # Everyone is out; keep rotating so the match cannot deadlock
        index = candidates[0]
        return order[index], index <= current_index
