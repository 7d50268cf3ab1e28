import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from steamfront.enums import Color, GameStatus
from steamfront.game.board import Board
from steamfront.game.catalog import PieceCatalog
from steamfront.game.combat import apply_move as resolve_move
from steamfront.game.control import ControlMap, accrue_steam
from steamfront.game.coordinate import Coordinate
from steamfront.game.move import MoveResult
from steamfront.game.validator import is_legal, legal_destinations
from steamfront.player import Player

logger = logging.getLogger(__name__)


class GameState:
    def __init__(self, game_id: str, white_player: Player, black_player: Player,
                 catalog: PieceCatalog):
        # Game identification
        self.game_id: str = game_id
        self.status: GameStatus = GameStatus.ACTIVE
        self.winner: Optional[Color] = None

        # Players
        white_player.color = Color.WHITE
        black_player.color = Color.BLACK
        self.players: Dict[Color, Player] = {
            Color.WHITE: white_player,
            Color.BLACK: black_player
        }

        # Board and square control
        self.catalog = catalog
        self.board: Board = Board.from_catalog(catalog)
        self.control: ControlMap = ControlMap()

        # Turn tracking
        self.turn: Color = Color.WHITE  # White goes first
        self.steam: Dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 0}
        self.last_move: Optional[MoveResult] = None

        # Timestamps
        self.created_at: datetime = datetime.now()
        self.last_update: datetime = datetime.now()

        # Moves on one game are applied one at a time
        self.lock = asyncio.Lock()

    # --- Helper Methods ---
    def get_current_player(self) -> Player:
        """Get the player whose turn it is"""
        return self.players[self.turn]

    def get_player_by_connection(self, connection_id: str) -> Optional[Player]:
        for player in self.players.values():
            if player.connection_id == connection_id:
                return player
        return None

    def get_player_color(self, connection_id: str) -> Optional[Color]:
        player = self.get_player_by_connection(connection_id)
        return player.color if player else None

    def get_opponent_of(self, connection_id: str) -> Optional[Player]:
        color = self.get_player_color(connection_id)
        return self.players[color.opponent] if color else None

    def is_players_turn(self, connection_id: str) -> bool:
        return self.get_current_player().connection_id == connection_id

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.ACTIVE

    def switch_turn(self) -> None:
        self.turn = self.turn.opponent

    # --- Move Methods ---
    def legal_destinations(self, origin: Coordinate) -> List[Coordinate]:
        """Every legal destination for the piece on origin (empty if there is none)."""
        if not origin.is_within_bounds():
            return []
        piece = self.board.piece_at(origin)
        if not piece:
            return []
        return legal_destinations(self.board, piece)

    def apply_move(self, connection_id: str, origin: Coordinate, dest: Coordinate) -> Tuple[bool, str]:
        """
        Validate and apply one move for the player on connection_id.
        Returns (success, message). A rejected move leaves the game untouched.
        """
        if self.is_over:
            return False, f"Game is over ({self.status.value})"

        if not self.is_players_turn(connection_id):
            return False, "Not your turn"

        if not origin.is_within_bounds() or not dest.is_within_bounds():
            return False, "Square off the board"

        piece = self.board.piece_at(origin)
        if not piece or piece.color != self.turn:
            return False, "Invalid piece selection"

        if not is_legal(self.board, piece, dest):
            return False, "Illegal move"

        mover = self.turn
        self.last_move = resolve_move(self.board, origin, dest)
        self.check_end_conditions()

        self.control.recompute(self.board)
        gained = accrue_steam(self.control, self.steam, mover)
        logger.info(f"Game {self.game_id}: {self.last_move} | {mover.value} +{gained} steam")

        self.switch_turn()
        self.last_update = datetime.now()
        return True, "Move successful"

    # --- Game End Conditions ---
    def check_end_conditions(self) -> GameStatus:
        """
        A side with no pieces left loses; the other side's win becomes the status.
        Returns the current game status.
        """
        counts = self.board.count_by_color()
        for color in Color:
            if counts[color] == 0:
                self.winner = color.opponent
                self.status = GameStatus.won_by(self.winner)
                logger.info(f"Game {self.game_id} over: {self.status.value}")
                break
        return self.status

    # --- Serialization ---
    def to_dict(self, perspective_connection_id: Optional[str] = None) -> dict:
        """
        Full snapshot of the game. With a perspective, the snapshot also names
        the recipient's own side; otherwise the two players' snapshots are identical.
        """
        snapshot = {
            "id": self.game_id,
            "playersInfo": {color.value: player.to_dict() for color, player in self.players.items()},
            "turn": self.turn.value,
            "board": self.board.to_dict(),
            "squareControl": self.control.to_dict(),
            "status": self.status.value,
            "winner": self.winner.value if self.winner else None,
            "whiteSteam": self.steam[Color.WHITE],
            "blackSteam": self.steam[Color.BLACK],
            "lastMove": self.last_move.to_dict() if self.last_move else None,
        }

        if perspective_connection_id:
            color = self.get_player_color(perspective_connection_id)
            if color:
                snapshot["playerColor"] = color.value

        return snapshot

