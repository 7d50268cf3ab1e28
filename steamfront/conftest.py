"""
Pytest will auto-discover this file. It defines fixtures shared by the
game, services and websocket tests.
"""

from typing import Callable, Optional

import pytest

from steamfront.enums import Color, Direction
from steamfront.game.board import Board
from steamfront.game.catalog import PieceCatalog
from steamfront.game.coordinate import Coordinate
from steamfront.game.movement import Hop, Straight
from steamfront.game.piece import Piece, PieceDefinition

# A two-piece catalog: a single white striker facing a single black scrap heap
DUEL_CATALOG = {
    "striker": {
        "health": 10,
        "attack": 5,
        "movement": [
            {"type": "straight", "direction": "vertical", "range": 2},
            {"type": "straight", "direction": "horizontal", "range": 2},
        ],
        "initialPositions": {"white": [[4, 4]], "black": []},
    },
    "scrap": {
        "health": 3,
        "attack": 1,
        "movement": [{"type": "straight", "direction": "vertical", "range": 1}],
        "initialPositions": {"white": [], "black": [[3, 4]]},
    },
}

ROOKISH = PieceDefinition(
    type="rookish",
    health=10,
    attack=5,
    movement=(Straight(Direction.HORIZONTAL, 3), Straight(Direction.VERTICAL, 3)),
)

HOPPER = PieceDefinition(
    type="hopper",
    health=6,
    attack=3,
    movement=(Hop(1, 2), Hop(2, 1)),
)

DUMMY = PieceDefinition(
    type="dummy",
    health=3,
    attack=1,
    movement=(Straight(Direction.VERTICAL, 1),),
)


@pytest.fixture
def catalog() -> PieceCatalog:
    """The catalog shipped with the server."""
    return PieceCatalog.load()


@pytest.fixture
def duel_catalog() -> PieceCatalog:
    return PieceCatalog.from_dict(DUEL_CATALOG)


@pytest.fixture
def empty_board() -> Board:
    return Board()


@pytest.fixture
def put() -> Callable[..., Piece]:
    """Place a fresh piece on a board: put(board, definition, color, row, col)."""

    def _put(board: Board, definition: PieceDefinition, color: Color, row: int, col: int,
             health: Optional[int] = None) -> Piece:
        coord = Coordinate(row, col)
        piece = Piece(f"{color.value[0]}_{definition.type}_{row}_{col}", definition, color, coord)
        if health is not None:
            piece.health = health
        board.place_piece(piece, coord)
        return piece

    return _put
