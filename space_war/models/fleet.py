"""Fleet data model for ships stationed at a system."""

from dataclasses import dataclass, field
from typing import List

from .unit import Unit


@dataclass
class Fleet:
    """One owner's units at one system.

    The engine keeps at most one fleet per (owner, system) pair: movement
    and deployment merge into the existing fleet instead of creating a
    second one. Fleets left with no units are pruned from the ledger.
    """

    id: str  # Unique identifier (e.g., "p1-f003")
    owner_id: str  # Owning player ID
    location_system_id: str  # System the fleet is stationed at
    units: List[Unit] = field(default_factory=list)

    def __post_init__(self):
        """Validate fleet data after initialization."""
        if not self.owner_id:
            raise ValueError("owner_id cannot be empty")
        if not self.location_system_id:
            raise ValueError("location_system_id cannot be empty")

    @property
    def is_empty(self) -> bool:
        return not self.units
