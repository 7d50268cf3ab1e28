"""Move legality: destination occupancy first, then the piece type's movement rules."""

from typing import List

from steamfront.game.board import Board
from steamfront.game.coordinate import Coordinate, all_coordinates
from steamfront.game.piece import Piece


def is_legal(board: Board, piece: Piece, dest: Coordinate) -> bool:
    """
    Decide whether piece may move to dest.

    A move is legal when dest is on the board, is not held by a friendly
    piece, and at least one of the piece type's rules is satisfied. Rule
    order carries no priority; the first satisfied rule short-circuits.
    """
    if not dest.is_within_bounds():
        return False

    if board.is_friendly(dest, piece.color):
        return False

    origin = piece.position
    return any(rule.is_satisfied(board, origin, dest) for rule in piece.movement)


def legal_destinations(board: Board, piece: Piece) -> List[Coordinate]:
    """Every square piece could legally move to, in row-major order."""
    return [coord for coord in all_coordinates() if is_legal(board, piece, coord)]
