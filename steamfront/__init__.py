"""Steamfront - authoritative server for a two-player steam-powered board game."""

__version__ = "0.1.0"
