"""Exceptions raised by the game engine."""


class SteamfrontError(Exception):
    """Base class for all engine errors."""


class CatalogError(SteamfrontError):
    """The piece catalog document is missing, unreadable or inconsistent."""


class InvalidCoordinateError(SteamfrontError, ValueError):
    """A board coordinate lies outside the 8x8 grid."""
