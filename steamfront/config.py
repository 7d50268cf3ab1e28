"""
Server settings, read once from the environment at import time.
"""

import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_PIECES_FILE = PACKAGE_DIR / "data" / "pieces.json"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


HOST = os.getenv("STEAMFRONT_HOST", "0.0.0.0")
PORT = int(os.getenv("STEAMFRONT_PORT", "3000"))

PIECES_FILE = Path(os.getenv("STEAMFRONT_PIECES_FILE", str(DEFAULT_PIECES_FILE)))

LOG_DIR = Path(os.getenv("STEAMFRONT_LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("STEAMFRONT_LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = _flag("STEAMFRONT_LOG_TO_FILE", "1")

# Static client assets, mounted only when the directory exists
STATIC_DIR = Path(os.getenv("STEAMFRONT_STATIC_DIR", "public"))

# Development only: serve /get_player_id throwaway identities
GUEST_IDS = _flag("STEAMFRONT_GUEST_IDS", "0")
