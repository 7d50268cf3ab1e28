"""
Move executor / combat resolver.

Applies a move that has already been validated. Moving onto an empty square
relocates the piece. Moving onto an enemy is an attack: the defender loses
health equal to the attacker's attack; if that destroys it the attacker takes
its square, otherwise both pieces stay where they are. There is no
counter-attack, and a failed attack still uses up the mover's turn.
"""

from steamfront.game.board import Board
from steamfront.game.coordinate import Coordinate
from steamfront.game.move import MoveResult


def apply_move(board: Board, origin: Coordinate, dest: Coordinate) -> MoveResult:
    piece = board.piece_at(origin)
    if piece is None:
        raise ValueError(f"No piece at {origin}")

    target = board.piece_at(dest)
    if target is None:
        board.relocate(origin, dest)
        return MoveResult(origin, dest, piece)

    if target.color == piece.color:
        raise ValueError(f"{piece.id} cannot attack friendly piece {target.id}")

    target.take_damage(piece.attack)
    result = MoveResult(origin, dest, piece, target=target, damage=piece.attack)

    if target.is_destroyed:
        board.relocate(origin, dest)
        result.captured = True
    else:
        result.advanced = False

    return result
