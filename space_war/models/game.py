"""Game state container."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..errors import NotFoundError
from .fleet import Fleet
from .player import Player
from .purchase import PendingPurchase
from .star_system import StarSystem


class TurnPhase(Enum):
    """Phases of one player's turn, in cycle order."""

    PURCHASE = "purchase"
    MOVEMENT = "movement"
    COMBAT = "combat"
    DEPLOY = "deploy"


@dataclass
class GameState:
    """Root aggregate for one match.

    Exactly one instance exists per match. It is owned by the
    GameController and mutated in place by every engine subsystem; the
    serialized form of this object is what gets broadcast to clients.
    """

    id: str  # Match identifier
    players: list[Player] = field(default_factory=list)  # In join order
    systems: list[StarSystem] = field(default_factory=list)
    fleets: list[Fleet] = field(default_factory=list)
    pending_purchases: list[PendingPurchase] = field(default_factory=list)
    current_player_id: Optional[str] = None  # None until the match starts
    phase: TurnPhase = TurnPhase.PURCHASE
    round: int = 0  # 1 on start, +1 each time play returns to the first player
    last_combat_log: list[str] = field(default_factory=list)  # Most recent combat only
    winner_player_id: Optional[str] = None
    eliminated_player_ids: list[str] = field(default_factory=list)
    id_counters: dict[str, int] = field(default_factory=dict)  # Not part of the snapshot

    def __post_init__(self):
        """Validate game data after initialization."""
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.round < 0:
            raise ValueError(f"Invalid round: {self.round} (must be >= 0)")

    @property
    def started(self) -> bool:
        return self.current_player_id is not None

    @property
    def finished(self) -> bool:
        return self.winner_player_id is not None

    def next_serial(self, key: str) -> int:
        """Return the next serial number for an ID namespace (1-based)."""
        self.id_counters[key] = self.id_counters.get(key, 0) + 1
        return self.id_counters[key]

    def get_player(self, player_id: str) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise NotFoundError(f"Unknown player '{player_id}'")

    def find_player_by_name(self, display_name: str) -> Optional[Player]:
        for player in self.players:
            if player.display_name == display_name:
                return player
        return None

    def get_player_by_name(self, display_name: str) -> Player:
        player = self.find_player_by_name(display_name)
        if player is None:
            raise NotFoundError(f"Unknown player '{display_name}'")
        return player

    def get_system(self, system_id: str) -> StarSystem:
        for system in self.systems:
            if system.id == system_id:
                return system
        raise NotFoundError(f"Unknown system '{system_id}'")

    def is_eliminated(self, player_id: str) -> bool:
        return player_id in self.eliminated_player_ids


def new_game_state(game_id: str, systems: list[StarSystem]) -> GameState:
    """Create an unstarted match over the given galaxy."""
    return GameState(id=game_id, systems=systems)
