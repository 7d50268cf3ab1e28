"""
Movement rules - the closed set of ways a piece type may move.

A piece definition carries an ordered list of rules; a move is legal when
any one of them is satisfied. Each rule variant tests itself.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict

from steamfront.enums import Direction, MovementType
from steamfront.exceptions import CatalogError
from steamfront.game.coordinate import Coordinate

if TYPE_CHECKING:
    from steamfront.game.board import Board


class MovementRule(ABC):
    type: MovementType

    @abstractmethod
    def is_satisfied(self, board: Board, origin: Coordinate, dest: Coordinate) -> bool:
        """Return True if moving from origin to dest is allowed by this rule."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MovementRule":
        """Build a rule from its catalog entry."""
        if not isinstance(data, dict):
            raise CatalogError(f"Movement rule must be an object (got {data!r})")
        rule_type = data.get("type")
        if rule_type == MovementType.STRAIGHT.value:
            try:
                direction = Direction(data.get("direction"))
            except ValueError:
                raise CatalogError(f"Unknown straight direction: {data.get('direction')!r}")
            return Straight(direction, _as_int(data, "range"))
        if rule_type == MovementType.HOP.value:
            return Hop(_as_int(data, "horizontal"), _as_int(data, "vertical"))
        raise CatalogError(f"Unknown movement rule type: {rule_type!r}")


class Straight(MovementRule):
    """Slide along a row or column up to `range` squares through empty squares."""
    type = MovementType.STRAIGHT

    def __init__(self, direction: Direction, range: int):
        if range < 1:
            raise CatalogError(f"Straight range must be positive (got {range})")
        self.direction = direction
        self.range = range

    def is_satisfied(self, board: Board, origin: Coordinate, dest: Coordinate) -> bool:
        if self.direction == Direction.HORIZONTAL:
            if origin.row != dest.row:
                return False
            distance = abs(dest.col - origin.col)
            step = (0, 1 if dest.col > origin.col else -1)
        else:
            if origin.col != dest.col:
                return False
            distance = abs(dest.row - origin.row)
            step = (1 if dest.row > origin.row else -1, 0)

        if not 1 <= distance <= self.range:
            return False

        # Every square strictly between origin and dest must be empty.
        # The destination itself is not checked so that captures are possible.
        current = origin
        for _ in range(distance - 1):
            current = Coordinate(current.row + step[0], current.col + step[1])
            if not board.is_empty(current):
                return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "direction": self.direction.value, "range": self.range}

    def __repr__(self):
        return f"Straight({self.direction.value}, range={self.range})"


class Hop(MovementRule):
    """Jump to an exact (horizontal, vertical) offset, ignoring anything in between."""
    type = MovementType.HOP

    def __init__(self, horizontal: int, vertical: int):
        if horizontal < 0 or vertical < 0:
            raise CatalogError(f"Hop offsets must be non-negative (got {horizontal}, {vertical})")
        if horizontal == 0 and vertical == 0:
            raise CatalogError("Hop must move at least one square")
        self.horizontal = horizontal
        self.vertical = vertical

    def is_satisfied(self, board: Board, origin: Coordinate, dest: Coordinate) -> bool:
        return (abs(dest.col - origin.col) == self.horizontal
                and abs(dest.row - origin.row) == self.vertical)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "horizontal": self.horizontal, "vertical": self.vertical}

    def __repr__(self):
        return f"Hop({self.horizontal}, {self.vertical})"


def _as_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise CatalogError(f"Movement rule field {key!r} must be an integer (got {value!r})")
    return value
