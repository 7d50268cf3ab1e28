from typing import Iterator, Optional, Sequence

BOARD_SIZE = 8

# The eight orthogonal and diagonal steps around a square
NEIGHBOR_STEPS = [(dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)]


class Coordinate:
    row: int  # 0-7, top to bottom
    col: int  # 0-7, left to right

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col

    def __eq__(self, other):
        return isinstance(other, Coordinate) and self.row == other.row and self.col == other.col

    def __hash__(self):
        """Allow Coordinate to be used as dict key"""
        return hash((self.row, self.col))

    @staticmethod
    def from_pair(pair: Sequence[int]) -> "Coordinate":
        """Create a coordinate from a wire-format [row, col] pair."""
        row, col = pair
        return Coordinate(int(row), int(col))

    def to_pair(self) -> list:
        return [self.row, self.col]

    def is_within_bounds(self) -> bool:
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE

    @property
    def index(self) -> int:
        """Row-major index into a flat 64-cell grid."""
        return self.row * BOARD_SIZE + self.col

    @staticmethod
    def from_index(index: int) -> "Coordinate":
        return Coordinate(index // BOARD_SIZE, index % BOARD_SIZE)

    def offset(self, dr: int, dc: int) -> Optional["Coordinate"]:
        """
        Return a new coordinate offset by (dr, dc).
        If the result is off the board, return None.
        """
        target = Coordinate(self.row + dr, self.col + dc)
        return target if target.is_within_bounds() else None

    def neighbors(self) -> Iterator["Coordinate"]:
        """Up to eight adjacent squares; edges and corners have fewer (no wraparound)."""
        for dr, dc in NEIGHBOR_STEPS:
            target = self.offset(dr, dc)
            if target is not None:
                yield target

    def __str__(self):
        return f"({self.row},{self.col})"

    def __repr__(self):
        return f"Coordinate({self.row}, {self.col})"


def all_coordinates() -> Iterator[Coordinate]:
    """Every square of the board in row-major order."""
    for index in range(BOARD_SIZE * BOARD_SIZE):
        yield Coordinate.from_index(index)
