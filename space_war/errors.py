"""Error hierarchy for rejected game commands.

Every rule violation raised by the engine derives from GameError. The
controller catches GameError at its dispatch point and turns it into a
silent rejection, so none of these ever reach the transport layer.

InvariantViolation is different: it marks a programming defect (a unit
in two fleets, a phase with no handler) and is allowed to propagate.
"""

from typing import Any

__all__ = [
    "GameError",
    "AuthorizationError",
    "PhaseError",
    "NotFoundError",
    "InsufficientResourceError",
    "InvalidAdjacencyError",
    "InvalidQuantityError",
    "IllegalStateError",
    "InvariantViolation",
]


class GameError(Exception):
    """Base exception for all rejected commands.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error description
        context: Extra key/value pairs for the diagnostic log
    """

    code: str = "GAME_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class AuthorizationError(GameError):
    """Command issued by the wrong player or out of turn."""

    code = "AUTHORIZATION"


class PhaseError(GameError):
    """Command not valid in the current turn phase."""

    code = "PHASE"


class NotFoundError(GameError):
    """Unknown player, system or unit reference."""

    code = "NOT_FOUND"


class InsufficientResourceError(GameError):
    """Cost exceeds the player's resource balance."""

    code = "INSUFFICIENT_RESOURCES"


class InvalidAdjacencyError(GameError):
    """Movement between systems that are not connected."""

    code = "INVALID_ADJACENCY"


class InvalidQuantityError(GameError):
    """Non-positive or non-integer count, or a malformed command."""

    code = "INVALID_QUANTITY"


class IllegalStateError(GameError):
    """Command not valid in the current match state."""

    code = "ILLEGAL_STATE"


class InvariantViolation(AssertionError):
    """Internal consistency check failed. Indicates a bug, not a bad command."""
