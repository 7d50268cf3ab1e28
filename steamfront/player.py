from __future__ import annotations
from typing import Optional

from steamfront.enums import Color


class Player:
    """
    One seat in a game: the connection it plays through, the identity behind
    that connection, and the side it was assigned.
    """

    def __init__(self, connection_id: str, user_id: str, name: Optional[str] = None,
                 color: Optional[Color] = None):
        self.connection_id = connection_id
        self.user_id = user_id
        self.name = name or user_id
        self.color = color

    def __repr__(self) -> str:
        side = self.color.name if self.color else "unassigned"
        return f"<Player {self.name} ({side})>"

    def to_dict(self) -> dict:
        """
        Public information about the player, safe to send to both participants.
        The connection handle is never included.
        """
        return {
            "userId": self.user_id,
            "name": self.name,
        }
