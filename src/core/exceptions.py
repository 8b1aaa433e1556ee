"""Domain exceptions.

Only structural problems raise. An illegal move is an expected outcome during play and is reported
as a validation message instead (see src/chess/validators.py).
"""


class GameError(Exception):
    """Base class for all errors raised by the chess core."""


class OutOfBoundsError(GameError):
    """Coordinates outside of the 8x8 board."""


class SnapshotError(GameError):
    """A game state snapshot could not be restored onto a board."""


class RepositoryError(GameError):
    """The persistence layer failed to store or fetch a snapshot."""
