"""FastAPI server for Space War.

Provides HTTP and WebSocket access to matches. Every command, accepted
or rejected, is followed by a broadcast of the full game state.
"""

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .schemas.requests import CreateGameRequest
from .schemas.responses import CommandResponse, CreateGameResponse, GameStateResponse
from .session import GameSessionManager

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Global session manager
sessions = GameSessionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    logger.info("Space War server starting...")
    yield
    logger.info("Space War server shutting down...")
    sessions.cleanup_all()


app = FastAPI(
    title="Space War API",
    description="Turn-based space conquest engine",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# API ENDPOINTS
# ============================================


@app.get("/api/health")
async def health():
    """Server health check."""
    return {"status": "ok", "activeGames": len(sessions.sessions)}


@app.post("/api/games", response_model=CreateGameResponse)
async def create_game(request: CreateGameRequest):
    """Create a new unstarted match on the default galaxy.

    Example:
        POST /api/games
        {"seed": 42}
    """
    session = sessions.create_session(seed=request.seed)
    return CreateGameResponse(gameId=session.id, seed=session.seed, state=session.get_state())


@app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
async def get_game_state(game_id: str):
    """Get the current game state."""
    session = sessions.get(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    return GameStateResponse(gameId=game_id, state=session.get_state())


@app.post("/api/games/{game_id}/commands", response_model=CommandResponse)
async def submit_command(game_id: str, payload: dict):
    """Apply one command and return the resulting state.

    Rejected commands return 200 with accepted=false and the unchanged state.

    Example:
        POST /api/games/game-abc123/commands
        {"type": "purchaseUnits", "playerName": "Ada", "unitType": "fighter",
         "count": 1, "systemId": "sys-1"}
    """
    session = sessions.get(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    response = await session.apply_and_broadcast(payload)
    return CommandResponse(**response)


@app.delete("/api/games/{game_id}")
async def delete_game(game_id: str):
    """Delete a game session."""
    if sessions.delete(game_id):
        return {"message": f"Game {game_id} deleted"}
    raise HTTPException(status_code=404, detail="Game not found")


# ============================================
# WEBSOCKET ENDPOINT
# ============================================


@app.websocket("/ws/games/{game_id}")
async def websocket_endpoint(websocket: WebSocket, game_id: str):
    """WebSocket connection for commands and live state.

    Clients receive:
    - gameState: Full state, on connect and after every command
    - commandResult: Acknowledgement of the client's own command
    - PONG: Reply to a PING keepalive
    """
    session = sessions.get(game_id)
    if not session:
        await websocket.close(code=1008, reason="Game not found")
        return

    await websocket.accept()
    session.add_connection(websocket)

    try:
        await websocket.send_json({"type": "gameState", "state": session.get_state()})

        while True:
            text = await websocket.receive_text()
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                # Forwarded as-is so it is rejected like any malformed command
                logger.warning(f"Game {game_id}: received a frame that is not JSON")
                data = text

            if isinstance(data, dict) and data.get("type") == "PING":
                await websocket.send_json({"type": "PONG"})
                continue

            response = await session.apply_and_broadcast(data)
            await websocket.send_json(
                {
                    "type": "commandResult",
                    "accepted": response["accepted"],
                    "command": response["command"],
                    "error": response["error"],
                }
            )

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from game {game_id}")
    except Exception as e:
        logger.error(f"WebSocket error in game {game_id}: {e}", exc_info=True)
    finally:
        session.remove_connection(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
