"""
Piece Catalog - load-once definitions of every piece type.

The catalog document is a JSON object keyed by piece type name:

    {
        "gyrocopter": {
            "health": 6,
            "attack": 3,
            "image": "images/gyrocopter.png",
            "movement": [{"type": "hop", "horizontal": 1, "vertical": 2}],
            "initialPositions": {"white": [[7, 1]], "black": [[0, 1]]}
        }
    }

Definitions keep the document's declaration order, which is also the order
movement rules are tried and pieces are placed.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from steamfront import config
from steamfront.enums import Color
from steamfront.exceptions import CatalogError
from steamfront.game.coordinate import Coordinate
from steamfront.game.movement import MovementRule
from steamfront.game.piece import PieceDefinition

logger = logging.getLogger(__name__)


class PieceCatalog:
    def __init__(self, definitions: List[PieceDefinition]):
        self._definitions: Dict[str, PieceDefinition] = {}
        occupied: Dict[Coordinate, str] = {}

        for definition in definitions:
            if definition.type in self._definitions:
                raise CatalogError(f"Duplicate piece type: {definition.type}")
            for color, coords in definition.initial_positions.items():
                for coord in coords:
                    if coord in occupied:
                        raise CatalogError(
                            f"{definition.type} ({color.value}) starts on {coord}, "
                            f"already taken by {occupied[coord]}"
                        )
                    occupied[coord] = definition.type
            self._definitions[definition.type] = definition

    # ============================================================================
    # LOADING
    # ============================================================================

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "PieceCatalog":
        """Read the catalog from a JSON file (the configured one by default)."""
        path = Path(path) if path is not None else config.PIECES_FILE
        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except OSError as e:
            raise CatalogError(f"Cannot read piece catalog {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Piece catalog {path} is not valid JSON: {e}") from e

        catalog = cls.from_dict(data)
        logger.info(f"Loaded {len(catalog)} piece types from {path}")
        return catalog

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PieceCatalog":
        if not isinstance(data, dict):
            raise CatalogError("Piece catalog must be a JSON object keyed by piece type")
        return cls([_parse_definition(name, entry) for name, entry in data.items()])

    # ============================================================================
    # ACCESS
    # ============================================================================

    def get(self, piece_type: str) -> PieceDefinition:
        try:
            return self._definitions[piece_type]
        except KeyError:
            raise CatalogError(f"Unknown piece type: {piece_type}") from None

    def definitions(self) -> List[PieceDefinition]:
        return list(self._definitions.values())

    def __iter__(self) -> Iterator[PieceDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, piece_type: str) -> bool:
        return piece_type in self._definitions

    def to_dict(self) -> Dict[str, Any]:
        """The catalog snapshot sent to every client at connection setup."""
        return {name: definition.to_dict() for name, definition in self._definitions.items()}


def _parse_definition(name: str, entry: Dict[str, Any]) -> PieceDefinition:
    if not isinstance(entry, dict):
        raise CatalogError(f"Entry for {name} must be an object")

    health = entry.get("health")
    attack = entry.get("attack")
    if not isinstance(health, int) or health < 1:
        raise CatalogError(f"{name}: health must be a positive integer (got {health!r})")
    if not isinstance(attack, int) or attack < 0:
        raise CatalogError(f"{name}: attack must be a non-negative integer (got {attack!r})")

    rules = entry.get("movement")
    if not isinstance(rules, list) or not rules:
        raise CatalogError(f"{name}: movement must be a non-empty list")
    try:
        movement = tuple(MovementRule.from_dict(rule) for rule in rules)
    except CatalogError as e:
        raise CatalogError(f"{name}: {e}") from e

    positions = entry.get("initialPositions", {})
    if not isinstance(positions, dict):
        raise CatalogError(f"{name}: initialPositions must be an object keyed by side")
    initial_positions = {}
    for color in Color:
        coords = []
        for pair in positions.get(color.value, []):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise CatalogError(f"{name}: initial position {pair!r} must be a [row, col] pair")
            try:
                coord = Coordinate.from_pair(pair)
            except (TypeError, ValueError):
                raise CatalogError(f"{name}: initial position {pair!r} must hold integers") from None
            if not coord.is_within_bounds():
                raise CatalogError(f"{name}: initial position {coord} is off the board")
            coords.append(coord)
        initial_positions[color] = tuple(coords)

    return PieceDefinition(
        type=name,
        health=health,
        attack=attack,
        movement=movement,
        initial_positions=initial_positions,
        image=entry.get("image"),
    )
