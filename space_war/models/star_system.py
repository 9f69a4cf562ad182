"""Star system data model."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class StarSystem:
    """Represents a node of the galaxy graph.

    Systems are fixed at game setup. Only owner_id and has_shipyard change
    during a match. Adjacency is symmetric: if A lists B, B lists A.
    """

    id: str  # Unique identifier (e.g., "sys-3")
    name: str  # Human-readable name
    owner_id: Optional[str]  # Owning player ID, or None
    resource_value: int  # Income yielded to the owner each turn
    connected_systems: List[str] = field(default_factory=list)  # Adjacent system IDs
    has_shipyard: bool = False  # Factory present (units may be purchased here)

    def __post_init__(self):
        """Validate system data after initialization."""
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.resource_value < 0:
            raise ValueError(
                f"Invalid resource_value: {self.resource_value} (must be >= 0)"
            )
        if self.id in self.connected_systems:
            raise ValueError(f"System {self.id} cannot be connected to itself")

    def is_adjacent(self, other_id: str) -> bool:
        return other_id in self.connected_systems
