from enum import Enum


class Color(Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class GameStatus(Enum):
    ACTIVE = "active"
    WHITE_WINS = "white_wins"
    BLACK_WINS = "black_wins"

    @classmethod
    def won_by(cls, color: Color) -> "GameStatus":
        return cls.WHITE_WINS if color is Color.WHITE else cls.BLACK_WINS


class MovementType(Enum):
    STRAIGHT = "straight"
    HOP = "hop"


class Direction(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class MessageType(Enum):
    # Client -> Server
    MOVE = "move"
    # Server -> Client
    PIECES_DATA = "piecesData"
    WAITING = "waiting"
    GAME_STATE = "gameState"
    OPPONENT_DISCONNECTED = "opponentDisconnected"
    ERROR = "error"


class MatchOutcome(Enum):
    WAITING = "waiting"
    SELF_MATCH = "self_match"
    MATCHED = "matched"
