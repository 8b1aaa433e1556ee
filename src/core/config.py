"""
Application wide settings.

Plain module constants; override the database location with the CHESS_DATABASE_URL environment variable.
"""

import logging
import os

# Number of game states kept for undo. Oldest state gets evicted first.
MAX_HISTORY_SIZE = 10

# Name of the single slot used for autosaving the running game
AUTOSAVE_SLOT = "autosave"

DATABASE_URL = os.environ.get("CHESS_DATABASE_URL", "sqlite:///chess_autosave.db")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Opt-in console logging. The engine itself only ever emits records, it never installs handlers."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
