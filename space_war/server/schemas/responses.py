"""Pydantic response schemas for API endpoints."""

from pydantic import BaseModel


class GameStateResponse(BaseModel):
    """Response containing current game state."""

    gameId: str  # noqa: N815
    state: dict


class CreateGameResponse(BaseModel):
    """Response after creating a new match."""

    gameId: str  # noqa: N815
    seed: int | None
    state: dict


class CommandResponse(BaseModel):
    """Response after submitting a command.

    state is always present: a rejected command returns the unchanged state.
    """

    accepted: bool
    command: str | None = None
    error: dict | None = None
    state: dict
