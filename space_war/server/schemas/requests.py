"""Pydantic request schemas for API endpoints.

Command messages arrive as loosely shaped JSON. They are validated here
against a discriminated union on "type" (the client's event names) and
converted into the engine's typed command dataclasses.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from ...models.command import (
    BuildFactory,
    Command,
    EndTurn,
    JoinGame,
    MoveFleet,
    PurchaseUnits,
    ResolveCombat,
    StartGame,
)
from ...models.unit import UnitType


class CreateGameRequest(BaseModel):
    """Request to create a new match."""

    seed: int | None = Field(default=None, description="Optional RNG seed for determinism")


class JoinGameMessage(BaseModel):
    type: Literal["joinGame"]
    playerName: str = Field(min_length=1)  # noqa: N815

    def to_command(self) -> Command:
        return JoinGame(player_name=self.playerName)


class StartGameMessage(BaseModel):
    type: Literal["startGame"]

    def to_command(self) -> Command:
        return StartGame()


class PurchaseUnitsMessage(BaseModel):
    type: Literal["purchaseUnits"]
    playerName: str = Field(min_length=1)  # noqa: N815
    unitType: UnitType  # noqa: N815
    count: int = Field(gt=0, strict=True, description="Number of units to buy")
    systemId: str = Field(min_length=1)  # noqa: N815

    def to_command(self) -> Command:
        return PurchaseUnits(
            player_name=self.playerName,
            unit_type=self.unitType,
            count=self.count,
            system_id=self.systemId,
        )


class BuildFactoryMessage(BaseModel):
    type: Literal["buildFactory"]
    playerName: str = Field(min_length=1)  # noqa: N815
    systemId: str = Field(min_length=1)  # noqa: N815

    def to_command(self) -> Command:
        return BuildFactory(player_name=self.playerName, system_id=self.systemId)


class MoveFleetMessage(BaseModel):
    type: Literal["moveFleet"]
    playerName: str = Field(min_length=1)  # noqa: N815
    fromSystemId: str = Field(min_length=1)  # noqa: N815
    toSystemId: str = Field(min_length=1)  # noqa: N815
    unitIds: list[str] = Field(min_length=1)  # noqa: N815

    def to_command(self) -> Command:
        return MoveFleet(
            player_name=self.playerName,
            from_system_id=self.fromSystemId,
            to_system_id=self.toSystemId,
            unit_ids=tuple(self.unitIds),
        )


class ResolveCombatMessage(BaseModel):
    type: Literal["resolveCombat"]
    systemId: str = Field(min_length=1)  # noqa: N815
    playerName: Optional[str] = None  # noqa: N815

    def to_command(self) -> Command:
        return ResolveCombat(system_id=self.systemId, player_name=self.playerName)


class EndTurnMessage(BaseModel):
    type: Literal["endTurn"]
    playerName: str = Field(min_length=1)  # noqa: N815

    def to_command(self) -> Command:
        return EndTurn(player_name=self.playerName)


CommandMessage = Annotated[
    Union[
        JoinGameMessage,
        StartGameMessage,
        PurchaseUnitsMessage,
        BuildFactoryMessage,
        MoveFleetMessage,
        ResolveCombatMessage,
        EndTurnMessage,
    ],
    Field(discriminator="type"),
]

_command_adapter = TypeAdapter(CommandMessage)


def parse_command(payload: Any) -> Command:
    """Validate a raw command payload and convert it to a typed command.

    Raises:
        ValueError: If the payload is malformed (pydantic's ValidationError
            is a ValueError subclass)
    """
    return _command_adapter.validate_python(payload).to_command()
