"""
Wire messages.

All messages are JSON objects with a 'type' field.

Client -> Server:
- move: { type: 'move', from: [row, col], to: [row, col] }

Server -> Client:
- piecesData: { type: 'piecesData', data: {<piece type>: {...}, ...} }
- waiting: { type: 'waiting', message: str }
- gameState: { type: 'gameState', data: {<snapshot>, playerColor: 'white'|'black'} }
- opponentDisconnected: { type: 'opponentDisconnected', message: str }
- error: { type: 'error', message: str }
"""

from typing import Annotated, Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from steamfront.enums import MessageType
from steamfront.game.coordinate import BOARD_SIZE, Coordinate

# One board coordinate on the wire: [row, col], each 0-7
BoardIndex = Annotated[int, Field(ge=0, lt=BOARD_SIZE)]
Square = Tuple[BoardIndex, BoardIndex]


class MoveMsg(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["move"]
    from_: Square = Field(alias="from")
    to: Square

    @property
    def origin(self) -> Coordinate:
        return Coordinate.from_pair(self.from_)

    @property
    def destination(self) -> Coordinate:
        return Coordinate.from_pair(self.to)


class AnyMsg(BaseModel):
    type: str


def parse_incoming(raw: Dict[str, Any]) -> Optional[MoveMsg]:
    """
    Interpret a decoded client message. Returns None for message types the
    server does not handle; raises ValidationError for malformed ones.
    """
    envelope = AnyMsg.model_validate(raw)
    if envelope.type == MessageType.MOVE.value:
        return MoveMsg.model_validate(raw)
    return None


# --- Outbound builders ---

def pieces_data(catalog: Dict[str, Any]) -> dict:
    return {"type": MessageType.PIECES_DATA.value, "data": catalog}


def waiting(message: str = "Waiting for opponent...") -> dict:
    return {"type": MessageType.WAITING.value, "message": message}


def game_state(snapshot: Dict[str, Any]) -> dict:
    return {"type": MessageType.GAME_STATE.value, "data": snapshot}


def opponent_disconnected(name: str) -> dict:
    return {
        "type": MessageType.OPPONENT_DISCONNECTED.value,
        "message": f"Your opponent ({name}) has disconnected. Game over.",
    }


def error(message: str) -> dict:
    return {"type": MessageType.ERROR.value, "message": message}


__all__ = [
    "MoveMsg",
    "ValidationError",
    "error",
    "game_state",
    "opponent_disconnected",
    "parse_incoming",
    "pieces_data",
    "waiting",
]
