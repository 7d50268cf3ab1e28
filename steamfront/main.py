from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from typing import Dict, Optional
import json
import logging
from datetime import datetime
import uuid

from steamfront import config, messages
from steamfront.enums import MatchOutcome
from steamfront.game.catalog import PieceCatalog
from steamfront.messages import ValidationError
from steamfront.player import Player
from steamfront.services.game_manager import GameManager
from steamfront.services.game_state import GameState

logger = logging.getLogger(__name__)

# ============================================================================
# LOGGING SETUP
# ============================================================================

def setup_logging() -> None:
    """Console logging, plus a timestamped log file unless disabled."""
    handlers = [logging.StreamHandler()]  # Always print to console

    if config.LOG_TO_FILE:
        config.LOG_DIR.mkdir(parents=True, exist_ok=True)
        log_filename = config.LOG_DIR / f"server_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        handlers.append(logging.FileHandler(log_filename))

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=handlers
    )

# ============================================================================
# CONNECTION MANAGER
# ============================================================================

class ConnectionManager:
    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, connection_id: str):
        await websocket.accept()
        self.active_connections[connection_id] = websocket
        logger.info(f"Client connected: {connection_id} | Total connections: {len(self.active_connections)}")

    def disconnect(self, connection_id: str):
        self.active_connections.pop(connection_id, None)
        logger.info(f"Client disconnected: {connection_id} | Total connections: {len(self.active_connections)}")

    async def send_personal_message(self, message: dict, connection_id: str):
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            logger.warning(f"Cannot send to {connection_id}: not in active connections")
            return
        try:
            await websocket.send_json(message)
            logger.debug(f"Sent to {connection_id}: {message['type']}")
        except Exception as e:
            # One dead socket must not stop delivery to the other player
            logger.error(f"Error sending to {connection_id}: {e}", exc_info=True)

    async def broadcast_game_state(self, game: GameState):
        """Send the full snapshot to both players, each tagged with their own side"""
        for player in game.players.values():
            await self.send_personal_message(
                messages.game_state(game.to_dict(player.connection_id)),
                player.connection_id
            )
        logger.info(f"Broadcast game state for {game.game_id} (turn: {game.turn.value}, status: {game.status.value})")

# ============================================================================
# APPLICATION
# ============================================================================

def create_app(catalog: Optional[PieceCatalog] = None, configure_logging: bool = True,
               guest_ids: Optional[bool] = None) -> FastAPI:
    """
    Build the application. The catalog, game manager and connection manager
    are owned by the app and shared by every connection handler.

    guest_ids enables /get_player_id for local development; it defaults to
    the STEAMFRONT_GUEST_IDS setting and is off unless set.
    """
    catalog = catalog or PieceCatalog.load()
    game_manager = GameManager(catalog)
    manager = ConnectionManager()
    if guest_ids is None:
        guest_ids = config.GUEST_IDS

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if configure_logging:
            setup_logging()
        logger.info("=" * 60)
        logger.info("STEAMFRONT SERVER STARTING")
        logger.info("=" * 60)
        logger.info(f"Piece types loaded: {', '.join(d.type for d in catalog)}")
        yield
        logger.info(f"Server shutting down | {game_manager}")

    app = FastAPI(title="Steamfront", lifespan=lifespan)
    app.state.catalog = catalog
    app.state.game_manager = game_manager
    app.state.connections = manager

    # ------------------------------------------------------------------------
    # HTTP ENDPOINTS
    # ------------------------------------------------------------------------

    @app.get("/status")
    async def status():
        """Get server status"""
        stats = game_manager.get_stats()
        return {
            "connections": len(manager.active_connections),
            "waiting": stats["waiting"],
            "active_games": stats["active_games"],
            "total_games": stats["total_games"],
        }

    @app.get("/pieces")
    async def pieces():
        """The piece catalog, as sent to clients on connect"""
        return catalog.to_dict()

    if guest_ids:
        @app.get("/get_player_id")
        async def get_player_id():
            """Development only: an identity for a client without a sign-in provider"""
            player_id = f"player_{uuid.uuid4().hex[:8]}"
            logger.info(f"Generated new player ID: {player_id}")
            return {
                "player_id": player_id
            }

    @app.get("/game/{game_id}")
    async def get_game_state(game_id: str):
        """Get the state of a specific game"""
        game = game_manager.get_game(game_id)
        if not game:
            logger.warning(f"Game state request for nonexistent game: {game_id}")
            raise HTTPException(status_code=404, detail="Game not found")
        return game.to_dict()

    # ------------------------------------------------------------------------
    # WEBSOCKET ENDPOINT
    # ------------------------------------------------------------------------

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket, user_id: Optional[str] = None,
                                 name: Optional[str] = None):
        connection_id = uuid.uuid4().hex
        await manager.connect(websocket, connection_id)

        try:
            await manager.send_personal_message(messages.pieces_data(catalog.to_dict()), connection_id)

            if user_id:
                logger.info(f"Connection {connection_id} identified as {user_id} ({name or user_id})")
                await join_matchmaking(Player(connection_id, user_id, name))
            else:
                logger.info(f"Connection {connection_id} has no identity")
                await manager.send_personal_message(
                    messages.error("Authentication required to play. Please sign in and reconnect."),
                    connection_id
                )

            while True:
                event = await websocket.receive()
                if event["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(event.get("code", 1000))
                data = event.get("text")
                if data is None:
                    data = (event.get("bytes") or b"").decode("utf-8", errors="replace")

                # RecursionError: deeply nested arrays overflow the JSON decoder
                try:
                    message = messages.parse_incoming(json.loads(data))
                except (json.JSONDecodeError, RecursionError, ValidationError) as e:
                    logger.warning(f"Malformed message from {connection_id}: {e}")
                    continue

                if message is None:
                    logger.warning(f"Unhandled message type from {connection_id}")
                    continue

                if not user_id:
                    continue

                logger.info(f"Move attempt: {connection_id}: {message.origin} -> {message.destination}")
                success, reason, game = await game_manager.make_move(
                    connection_id, message.origin, message.destination,
                    on_applied=manager.broadcast_game_state
                )
                if not success:
                    logger.info(f"Move dropped for {connection_id}: {reason}")

        except WebSocketDisconnect:
            logger.info(f"Client disconnected normally: {connection_id}")
        except Exception as e:
            logger.error(f"Error with client {connection_id}: {e}", exc_info=True)
        finally:
            manager.disconnect(connection_id)
            await end_connection(connection_id)

    async def join_matchmaking(player: Player):
        result = await game_manager.try_match(player)

        if result.outcome == MatchOutcome.WAITING:
            await manager.send_personal_message(messages.waiting(), player.connection_id)
        elif result.outcome == MatchOutcome.SELF_MATCH:
            await manager.send_personal_message(
                messages.waiting("Cannot match with yourself. Still waiting for opponent..."),
                player.connection_id
            )
        else:
            game = result.game
            logger.info(f"MATCH CREATED: {game.game_id}")
            if not await game_manager.announce_start(game, manager.broadcast_game_state):
                logger.info(f"Game {game.game_id} ended before its first snapshot was sent")

    async def end_connection(connection_id: str):
        result = await game_manager.handle_disconnect(connection_id)
        if result.opponent is None:
            return

        game = result.game
        leaver = game.get_player_by_connection(connection_id)
        await manager.send_personal_message(
            messages.opponent_disconnected(leaver.name if leaver else "unknown"),
            result.opponent.connection_id
        )
        logger.info(f"Game {game.game_id} removed due to player disconnection")

    # Static client assets; registered last so API routes take precedence
    if config.STATIC_DIR.exists():
        app.mount("/", StaticFiles(directory=str(config.STATIC_DIR), html=True), name="static")
        logger.info(f"Mounted static directory: {config.STATIC_DIR}")

    return app


app = create_app()


def run():
    import uvicorn
    setup_logging()
    logger.info(f"Starting server on http://{config.HOST}:{config.PORT}")
    uvicorn.run(create_app(configure_logging=False), host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
