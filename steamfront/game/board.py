from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from steamfront.enums import Color
from steamfront.exceptions import InvalidCoordinateError
from steamfront.game.coordinate import BOARD_SIZE, Coordinate
from steamfront.game.piece import Piece, pieces_for

if TYPE_CHECKING:
    from steamfront.game.catalog import PieceCatalog


class Board:
    """8x8 grid of optional pieces, stored flat in row-major order."""

    def __init__(self):
        self.squares: List[Optional[Piece]] = [None] * (BOARD_SIZE * BOARD_SIZE)

    # ================================================================
    # Setup
    # ================================================================
    def initialize(self, catalog: PieceCatalog) -> None:
        """
        Populate the board from the catalog's starting squares for both sides.
        The same catalog always yields the same layout and piece ids.
        """
        self.squares = [None] * (BOARD_SIZE * BOARD_SIZE)
        definitions = catalog.definitions()
        for color in Color:
            for piece in pieces_for(definitions, color):
                self.place_piece(piece, piece.position)

    @classmethod
    def from_catalog(cls, catalog: PieceCatalog) -> "Board":
        board = cls()
        board.initialize(catalog)
        return board

    # ================================================================
    # Queries
    # ================================================================
    def piece_at(self, coord: Coordinate) -> Optional[Piece]:
        if not self.is_in_bounds(coord):
            raise InvalidCoordinateError(f"{coord!r} is outside the board")
        return self.squares[coord.index]

    def is_in_bounds(self, coord: Coordinate) -> bool:
        return coord.is_within_bounds()

    def is_empty(self, coord: Coordinate) -> bool:
        return self.piece_at(coord) is None

    def is_friendly(self, coord: Coordinate, color: Color) -> bool:
        piece = self.piece_at(coord)
        return piece is not None and piece.color == color

    def pieces(self, color: Optional[Color] = None) -> Iterator[Piece]:
        """Occupying pieces in row-major order, optionally of one side only."""
        for piece in self.squares:
            if piece is not None and (color is None or piece.color == color):
                yield piece

    def count_by_color(self) -> Dict[Color, int]:
        counts = {color: 0 for color in Color}
        for piece in self.pieces():
            counts[piece.color] += 1
        return counts

    # ================================================================
    # Mutation (used by the combat resolver, no legality checks)
    # ================================================================
    def place_piece(self, piece: Piece, coord: Coordinate) -> None:
        """Put piece on coord and keep its stored position in sync."""
        if not self.is_in_bounds(coord):
            raise InvalidCoordinateError(f"{coord!r} is outside the board")
        self.squares[coord.index] = piece
        piece.position = coord

    def remove_piece(self, coord: Coordinate) -> Optional[Piece]:
        """Empty coord, returning whatever was there."""
        piece = self.piece_at(coord)
        self.squares[coord.index] = None
        return piece

    def relocate(self, origin: Coordinate, dest: Coordinate) -> Piece:
        """Move the piece on origin to dest, overwriting anything on dest."""
        piece = self.remove_piece(origin)
        if piece is None:
            raise ValueError(f"No piece at {origin}")
        self.place_piece(piece, dest)
        return piece

    # ================================================================
    # Serialization
    # ================================================================
    def to_dict(self) -> List[List[Optional[dict]]]:
        """8x8 nested list of piece payloads (None for empty squares)."""
        return [
            [piece.to_dict() if piece else None
             for piece in self.squares[row * BOARD_SIZE:(row + 1) * BOARD_SIZE]]
            for row in range(BOARD_SIZE)
        ]

    def __str__(self):
        rows = []
        for row in range(BOARD_SIZE):
            cells = []
            for piece in self.squares[row * BOARD_SIZE:(row + 1) * BOARD_SIZE]:
                cells.append(f"{piece.color.value[0]}{piece.type[0].upper()}" if piece else "..")
            rows.append(" ".join(cells))
        return "\n".join(rows)

