"""Pending purchase data model."""

from dataclasses import dataclass

from .unit import UnitType


@dataclass
class PendingPurchase:
    """Units paid for during the purchase phase but not yet built.

    Consumed at the owning player's deploy step, when the units appear in
    that player's fleet at the target system.
    """

    id: str  # Unique identifier (e.g., "order-004")
    player_id: str  # Buyer
    system_id: str  # Shipyard system the units will appear at
    unit_type: UnitType
    count: int  # Number of units ordered (must be > 0)

    def __post_init__(self):
        """Validate purchase data after initialization."""
        if self.count <= 0:
            raise ValueError(f"Invalid count: {self.count} (must be > 0)")
