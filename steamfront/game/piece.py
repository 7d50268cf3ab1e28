from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from steamfront.enums import Color
from steamfront.game.coordinate import Coordinate
from steamfront.game.movement import MovementRule


@dataclass(frozen=True)
class PieceDefinition:
    """Static description of a piece type, shared read-only by every game."""

    type: str
    health: int
    attack: int
    movement: Tuple[MovementRule, ...]
    initial_positions: Dict[Color, Tuple[Coordinate, ...]] = field(default_factory=dict)
    image: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {
            "health": self.health,
            "attack": self.attack,
            "movement": [rule.to_dict() for rule in self.movement],
            "initialPositions": {
                color.value: [coord.to_pair() for coord in self.initial_positions.get(color, ())]
                for color in Color
            },
        }
        if self.image is not None:
            payload["image"] = self.image
        return payload


class Piece:
    def __init__(self, id: str, definition: PieceDefinition, color: Color, position: Coordinate):
        self.id = id
        self.definition = definition
        self.color = color
        self.health = definition.health
        self.attack = definition.attack
        self.position = position

    @property
    def type(self) -> str:
        return self.definition.type

    @property
    def movement(self) -> Tuple[MovementRule, ...]:
        return self.definition.movement

    @property
    def is_destroyed(self) -> bool:
        return self.health <= 0

    def take_damage(self, amount: int) -> int:
        """Reduce health by amount and return the remaining health."""
        self.health -= amount
        return self.health

    def __str__(self):
        return f"{self.color.value} {self.type} ({self.id})"

    def __repr__(self):
        return f"<Piece {self.id} hp={self.health} at {self.position}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "player": self.color.value,
            "health": self.health,
            "attack": self.attack,
            "image": self.definition.image,
            "position": self.position.to_pair(),
        }


def make_piece_id(color: Color, piece_type: str, coord: Coordinate) -> str:
    """Identity derived from side, type and starting square, e.g. w_gyrocopter_7_1."""
    return f"{color.value[0]}_{piece_type}_{coord.row}_{coord.col}"


def pieces_for(definitions: List[PieceDefinition], color: Color) -> List[Piece]:
    """Fresh pieces of one side at their starting squares, in catalog order."""
    pieces = []
    for definition in definitions:
        for coord in definition.initial_positions.get(color, ()):
            pieces.append(Piece(make_piece_id(color, definition.type, coord), definition, color, coord))
    return pieces
