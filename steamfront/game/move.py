from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from steamfront.game.coordinate import Coordinate

# Only import Piece for type checking, not at runtime
if TYPE_CHECKING:
    from steamfront.game.piece import Piece


@dataclass
class MoveResult:
    """What happened when a validated move was applied to the board."""

    from_sq: Coordinate
    to_sq: Coordinate
    piece: Piece
    target: Optional[Piece] = None  # enemy piece that was attacked, if any
    damage: int = 0
    captured: bool = False
    advanced: bool = True  # False when a failed attack left the attacker at from_sq

    @property
    def is_attack(self) -> bool:
        return self.target is not None

    def __str__(self):
        text = f"{self.piece.id} {self.from_sq}->{self.to_sq}"
        if self.is_attack:
            outcome = "captured" if self.captured else f"hit for {self.damage}"
            text += f" ({outcome} {self.target.id})"
        return text

    def to_dict(self) -> dict:
        return {
            "from": self.from_sq.to_pair(),
            "to": self.to_sq.to_pair(),
            "pieceId": self.piece.id,
            "targetId": self.target.id if self.target else None,
            "damage": self.damage,
            "captured": self.captured,
            "advanced": self.advanced,
        }
