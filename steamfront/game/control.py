"""
Square control and steam accrual.

Control is recomputed after every completed move:

1. every occupied square is controlled by its occupant's side;
2. each piece adds one influence for its side to each of its (up to 8)
   neighbouring squares;
3. an empty square goes to the side with strictly more influence on it.
   On a tie, including 0-0, the square keeps whatever control it had before.

The side that just moved then gains one steam per square it controls.
"""

from typing import Dict, List, Optional

from steamfront.enums import Color
from steamfront.game.board import Board
from steamfront.game.coordinate import BOARD_SIZE, Coordinate


class ControlMap:
    """8x8 grid of optional side markers, stored flat in row-major order."""

    def __init__(self):
        self.squares: List[Optional[Color]] = [None] * (BOARD_SIZE * BOARD_SIZE)

    def controller(self, coord: Coordinate) -> Optional[Color]:
        return self.squares[coord.index]

    def set_controller(self, coord: Coordinate, color: Optional[Color]) -> None:
        self.squares[coord.index] = color

    def count(self, color: Color) -> int:
        return sum(1 for marker in self.squares if marker == color)

    def recompute(self, board: Board) -> None:
        """Apply direct control, accumulate influence and resolve empty squares."""
        influence: Dict[Color, List[int]] = {
            color: [0] * (BOARD_SIZE * BOARD_SIZE) for color in Color
        }

        for piece in board.pieces():
            self.squares[piece.position.index] = piece.color
            counts = influence[piece.color]
            for neighbor in piece.position.neighbors():
                counts[neighbor.index] += 1

        white, black = influence[Color.WHITE], influence[Color.BLACK]
        for index, occupant in enumerate(board.squares):
            if occupant is not None:
                continue
            if white[index] > black[index]:
                self.squares[index] = Color.WHITE
            elif black[index] > white[index]:
                self.squares[index] = Color.BLACK
            # tie: control is sticky

    def to_dict(self) -> List[List[Optional[str]]]:
        return [
            [marker.value if marker else None
             for marker in self.squares[row * BOARD_SIZE:(row + 1) * BOARD_SIZE]]
            for row in range(BOARD_SIZE)
        ]


def accrue_steam(control: ControlMap, steam: Dict[Color, int], mover: Color) -> int:
    """Add the mover's controlled-square count to its steam; return the amount gained."""
    gained = control.count(mover)
    steam[mover] += gained
    return gained
