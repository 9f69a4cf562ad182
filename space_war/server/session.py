"""Match session management.

A GameSession pairs one GameController with the WebSocket connections
watching it. Commands for a session are applied one at a time under an
asyncio lock, and the full snapshot is published after every command,
whether it was accepted or rejected.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket

from ..engine.turn_controller import GameController
from ..utils.rng import GameRNG
from .schemas.requests import parse_command

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """One match plus its connected clients."""

    id: str
    controller: GameController
    seed: int | None = None
    connections: list[WebSocket] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def get_state(self) -> dict:
        return self.controller.snapshot()

    def apply(self, payload: Any) -> dict:
        """Validate and apply one raw command payload.

        Malformed payloads never reach the engine; they are reported as a
        rejection with code INVALID_COMMAND.

        Returns:
            Dictionary with accepted, command, error and state keys
        """
        try:
            command = parse_command(payload)
        except ValueError as e:
            logger.warning(f"Game {self.id}: malformed command rejected: {e}")
            return {
                "accepted": False,
                "command": None,
                "error": {"code": "INVALID_COMMAND", "message": str(e), "context": {}},
                "state": self.get_state(),
            }

        result = self.controller.handle(command)
        return {**result.to_dict(), "state": self.get_state()}

    async def apply_and_broadcast(self, payload: Any) -> dict:
        """Apply a command under the session lock, then publish the state."""
        async with self.lock:
            response = self.apply(payload)
            await self.broadcast({"type": "gameState", "state": response["state"]})
        return response

    async def broadcast(self, message: dict):
        """Send message to all connected WebSocket clients.

        Args:
            message: Dictionary to send as JSON
        """
        disconnected = []
        for ws in self.connections:
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                disconnected.append(ws)

        # Remove disconnected clients
        for ws in disconnected:
            self.connections.remove(ws)

    def add_connection(self, websocket: WebSocket):
        """Add a WebSocket connection to this session."""
        self.connections.append(websocket)
        logger.info(f"WebSocket connected to game {self.id}, total: {len(self.connections)}")

    def remove_connection(self, websocket: WebSocket):
        """Remove a WebSocket connection from this session."""
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(
                f"WebSocket disconnected from game {self.id}, remaining: {len(self.connections)}"
            )


class GameSessionManager:
    """Manages all active game sessions.

    Sessions live in memory only; matches do not survive a restart.
    """

    def __init__(self):
        self.sessions: dict[str, GameSession] = {}

    def create_session(self, seed: int | None = None) -> GameSession:
        """Create a new unstarted match on the default galaxy.

        Args:
            seed: Optional RNG seed for reproducible combat

        Returns:
            Newly created GameSession
        """
        game_id = f"game-{uuid.uuid4().hex[:8]}"
        controller = GameController.new_match(game_id, rng=GameRNG(seed))
        session = GameSession(id=game_id, controller=controller, seed=seed)
        self.sessions[game_id] = session
        logger.info(f"Created game {game_id} (seed={seed})")
        return session

    def get(self, game_id: str) -> GameSession | None:
        """Get a game session by ID."""
        return self.sessions.get(game_id)

    def delete(self, game_id: str) -> bool:
        """Delete a game session.

        Returns:
            True if deleted, False if not found
        """
        if game_id in self.sessions:
            del self.sessions[game_id]
            logger.info(f"Deleted game {game_id}")
            return True
        return False

    def cleanup_all(self):
        """Clean up all sessions (called on shutdown)."""
        logger.info(f"Cleaning up {len(self.sessions)} game sessions")
        self.sessions.clear()
