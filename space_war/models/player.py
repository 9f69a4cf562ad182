"""Player data model."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class Player:
    """A participant in the match.

    Players are created on first join and never removed. Losing players
    are recorded in GameState.eliminated_player_ids instead.
    """

    id: str  # "p1", "p2", ...
    display_name: str  # Name used to join and to issue commands
    resources: int  # Spendable balance
    home_systems: List[str] = field(default_factory=list)  # Systems assigned at start

    def __post_init__(self):
        """Validate player data after initialization."""
        if not self.display_name:
            raise ValueError("display_name cannot be empty")
        if self.resources < 0:
            raise ValueError(f"Invalid resources: {self.resources} (must be >= 0)")
