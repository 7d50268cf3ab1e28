"""
GameManager - owns matchmaking and the table of running games
- Single-slot matchmaking queue
- Game creation
- Game lookup and teardown on disconnect

One instance is created by the application and handed to connection
handlers. Every change to the waiting slot or the game table happens under
a single asyncio lock, so two simultaneous arrivals can never both see an
empty slot.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from steamfront.enums import MatchOutcome
from steamfront.game.catalog import PieceCatalog
from steamfront.game.coordinate import Coordinate
from steamfront.player import Player
from steamfront.services.game_state import GameState

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    outcome: MatchOutcome
    game: Optional[GameState] = None

    @property
    def matched(self) -> bool:
        return self.outcome == MatchOutcome.MATCHED


@dataclass
class DisconnectResult:
    was_waiting: bool = False
    game: Optional[GameState] = None
    opponent: Optional[Player] = None


class GameManager:
    """Manages all active games and matchmaking"""

    def __init__(self, catalog: PieceCatalog):
        self.catalog = catalog
        self.games: Dict[str, GameState] = {}
        self.waiting_player: Optional[Player] = None
        self._player_games: Dict[str, str] = {}  # connection_id -> game_id
        self._lock = asyncio.Lock()
        self._game_counter = 0  # For unique game IDs

    # ============================================================================
    # MATCHMAKING
    # ============================================================================

    async def try_match(self, player: Player) -> MatchResult:
        """
        Offer a newly arrived, identified player to the matchmaking slot.

        - empty slot: the player takes it and waits
        - slot held by the same identity (e.g. a second tab): refused, the
          original occupant keeps waiting
        - slot held by someone else: the two are paired, the waiting player
          plays white
        """
        async with self._lock:
            if self.waiting_player is None:
                self.waiting_player = player
                logger.info(f"{player.name} ({player.user_id}) is waiting for an opponent")
                return MatchResult(MatchOutcome.WAITING)

            if self.waiting_player.user_id == player.user_id:
                logger.info(f"User {player.user_id} tried to match with themselves. Ignoring.")
                return MatchResult(MatchOutcome.SELF_MATCH)

            opponent = self.waiting_player
            self.waiting_player = None
            game = self._start_game(opponent, player)
            return MatchResult(MatchOutcome.MATCHED, game)

    async def remove_from_queue(self, connection_id: str) -> bool:
        """Empty the slot if connection_id is the one waiting in it"""
        async with self._lock:
            return self._clear_waiting(connection_id)

    def _clear_waiting(self, connection_id: str) -> bool:
        if self.waiting_player and self.waiting_player.connection_id == connection_id:
            logger.info(f"Removed {self.waiting_player.name} from matchmaking")
            self.waiting_player = None
            return True
        return False

    # ============================================================================
    # GAME CREATION
    # ============================================================================

    def _start_game(self, white_player: Player, black_player: Player) -> GameState:
        # Generate unique game ID
        self._game_counter += 1
        game_id = f"game_{self._game_counter}_{uuid.uuid4().hex[:8]}"

        game = GameState(game_id, white_player, black_player, self.catalog)
        self.games[game_id] = game
        self._player_games[white_player.connection_id] = game_id
        self._player_games[black_player.connection_id] = game_id

        logger.info(f"Game {game_id} created: {white_player.name} (White) vs {black_player.name} (Black)")
        return game

    # ============================================================================
    # GAME RETRIEVAL
    # ============================================================================

    def get_game(self, game_id: str) -> Optional[GameState]:
        """Get a game by its ID"""
        return self.games.get(game_id)

    def get_player_game(self, connection_id: str) -> Optional[GameState]:
        """Find the game a connection is currently playing in"""
        game_id = self._player_games.get(connection_id)
        return self.games.get(game_id) if game_id else None

    def get_all_active_games(self) -> List[GameState]:
        """Get all games that are still being played"""
        return [game for game in self.games.values() if not game.is_over]

    def is_registered(self, game: GameState) -> bool:
        """False once the game has been torn down, even if a caller still holds it"""
        return self.games.get(game.game_id) is game

    # ============================================================================
    # GAME LIFECYCLE
    # ============================================================================

    async def remove_game(self, game_id: str) -> Optional[GameState]:
        """Remove a game from the table. Returns the removed game, if any."""
        async with self._lock:
            return self._drop_game(game_id)

    def _drop_game(self, game_id: str) -> Optional[GameState]:
        game = self.games.pop(game_id, None)
        if game:
            for player in game.players.values():
                self._player_games.pop(player.connection_id, None)
            logger.info(f"Game {game_id} removed")
        return game

    async def handle_disconnect(self, connection_id: str) -> DisconnectResult:
        """
        Tear down everything a closed connection was part of.

        Empties the waiting slot if this connection held it, and removes the
        connection's game (after any move already in progress on it has
        finished). The surviving opponent is returned so the caller can
        notify them.
        """
        result = DisconnectResult()
        async with self._lock:
            result.was_waiting = self._clear_waiting(connection_id)
            game = self.get_player_game(connection_id)
            if game is None:
                return result

            async with game.lock:
                result.game = self._drop_game(game.game_id)
                result.opponent = game.get_opponent_of(connection_id)

        logger.info(f"Game {game.game_id} ended: {connection_id} disconnected")
        return result

    # ============================================================================
    # GAME ACTIONS (Delegate to GameState)
    # ============================================================================

    async def announce_start(self, game: GameState,
                             on_started: Callable[[GameState], Awaitable[None]]) -> bool:
        """
        Run on_started (normally the first snapshot broadcast) under the game's
        lock, unless a disconnect has already torn the game down since it was
        paired. Returns whether it ran.
        """
        async with game.lock:
            if not self.is_registered(game):
                return False
            await on_started(game)
        return True

    async def make_move(self, connection_id: str, origin: Coordinate, dest: Coordinate,
                        on_applied: Optional[Callable[[GameState], Awaitable[None]]] = None
                        ) -> Tuple[bool, str, Optional[GameState]]:
        """
        Make a move in the connection's game.

        The move and the on_applied callback (normally the snapshot broadcast)
        run under the game's lock, so both players always observe a fully
        applied move. Returns (success, message, game).
        """
        game = self.get_player_game(connection_id)
        if not game:
            return False, "Not in a game", None

        async with game.lock:
            if not self.is_registered(game):
                return False, "Game has ended", None

            success, message = game.apply_move(connection_id, origin, dest)
            if success and on_applied:
                await on_applied(game)

        return success, message, game

    # ============================================================================
    # STATISTICS & INFO
    # ============================================================================

    def get_stats(self) -> dict:
        """Get statistics about current games and queue"""
        active = len(self.get_all_active_games())
        return {
            "total_games": len(self.games),
            "active_games": active,
            "finished_games": len(self.games) - active,
            "waiting": 1 if self.waiting_player else 0,
        }

    def __repr__(self):
        stats = self.get_stats()
        return f"<GameManager games={stats['total_games']} waiting={stats['waiting']}>"
