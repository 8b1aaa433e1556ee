"""The Board owns the 8x8 grid of pieces and implements every mutation of the position"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.chess.location import Location, is_within_bounds
from src.chess.pieces import Piece
from src.core.exceptions import GameError, OutOfBoundsError
from src.core.shared_types import Color, PieceKind

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_PLACEMENT = "/".join(["8"] * 8)


@dataclass
class AppliedMove:
    """
    Token returned by `Board.apply_move()`.

    It remembers exactly what the move changed, so `undo()` is the precise inverse:
    piece back to its origin, its moved-flag restored, and the captured piece (if any) back where it stood.
    """

    board: Board
    piece: Piece
    from_location: Location
    to_location: Location
    captured: Optional[Piece]
    captured_location: Optional[Location]
    had_moved: bool
    undone: bool = False

    def undo(self) -> None:
        if self.undone:
            raise GameError(
                f"Move {self.from_location.to_algebraic()}{self.to_location.to_algebraic()} was already undone."
            )
        with self.board.lock:
            self.board.remove_piece(self.to_location)
            self.board.place_piece(self.piece, self.from_location)
            self.piece.has_moved = self.had_moved
            if self.captured is not None and self.captured_location is not None:
                self.board.place_piece(self.captured, self.captured_location)
        self.undone = True


@dataclass
class Board:
    position: dict[Location, Piece] = field(default_factory=dict)
    lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for location, piece in self.position.items():
            piece.location = location

    # -- CREATION LOGIC ---
    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def standard(cls) -> Self:
        return cls.from_fen(STARTING_PLACEMENT)

    @classmethod
    def from_fen(cls, placement: str) -> Self:
        """Construct a board from the piece placement field of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * the first rank written is the 8th (row 0), black pieces are lower case
        * a number denotes that many consecutive empty squares
        * the last rank written is the 1st (row 7), white pieces are upper case
        """
        position: dict[Location, Piece] = {}
        for row, fen_one_rank in enumerate(placement.split("/")):
            column = 0
            for character in fen_one_rank:
                if character.isalpha():
                    position[Location(row, column)] = Piece.from_fen(character)
                    column += 1
                else:
                    column += int(character)
        return cls(position)

    def copy(self) -> Board:
        """
        Independent copy (new Piece objects, own lock).

        Use one copy per thread when evaluating moves concurrently: legality checks mutate the board they run on.
        """
        with self.lock:
            return Board(
                {
                    location: Piece(piece.kind, piece.color, has_moved=piece.has_moved)
                    for location, piece in self.position.items()
                }
            )

    # -- BOUNDS ---
    @staticmethod
    def is_in_bounds(row: int, column: int) -> bool:
        return is_within_bounds(row, column)

    # -- READING ---
    def piece_at(self, location: Location) -> Optional[Piece]:
        return self.position.get(location)

    def piece_at_coords(self, row: int, column: int) -> Optional[Piece]:
        if not self.is_in_bounds(row, column):
            raise OutOfBoundsError(f"({row}, {column}) is outside of the board.")
        return self.piece_at(Location(row, column))

    def is_empty(self, location: Location) -> bool:
        return location not in self.position

    def pieces_of(self, color: Color) -> list[Piece]:
        """All pieces of the color still on the board, in row-major order"""
        return [
            self.position[location]
            for location in sorted(
                self.position, key=lambda loc: (loc.row, loc.column)
            )
            if self.position[location].color == color
        ]

    def find_king(self, color: Color) -> Optional[Piece]:
        """
        The king of the given color. No king is a valid outcome (test positions / partial boards).
        """
        return next(
            (
                piece
                for piece in self.position.values()
                if piece.is_same_as(PieceKind.KING, color)
            ),
            None,
        )

    # -- MUTATIONS ---
    def place_piece(self, piece: Piece, location: Location) -> None:
        """Put the piece on the square, replacing whatever stood there. Keeps the piece's location in sync."""
        with self.lock:
            replaced = self.position.get(location)
            if replaced is not None and replaced is not piece:
                replaced.location = None
            self.position[location] = piece
            piece.location = location

    def remove_piece(self, location: Location) -> Optional[Piece]:
        """Take the piece off the square (if any). The removed piece no longer has a location."""
        with self.lock:
            piece = self.position.pop(location, None)
            if piece is not None:
                piece.location = None
            return piece

    def clear(self) -> None:
        with self.lock:
            for location in list(self.position):
                self.remove_piece(location)

    def apply_move(
        self,
        from_location: Location,
        to_location: Location,
        capture_at: Optional[Location] = None,
        mark_moved: bool = False,
    ) -> AppliedMove:
        """
        Move the piece and capture whatever stands on `capture_at` (defaults to the destination).
        Returns the token to revert exactly this change.
        """
        with self.lock:
            piece = self.piece_at(from_location)
            if piece is None:
                raise GameError(f"No piece on {from_location.to_algebraic()} to move.")

            captured_location = capture_at or to_location
            if captured_location != to_location and not self.is_empty(to_location):
                raise GameError(
                    f"Cannot move onto occupied {to_location.to_algebraic()} while capturing on {captured_location.to_algebraic()}."
                )
            captured = self.remove_piece(captured_location)

            had_moved = piece.has_moved
            self.remove_piece(from_location)
            self.place_piece(piece, to_location)
            if mark_moved:
                piece.has_moved = True

            return AppliedMove(
                board=self,
                piece=piece,
                from_location=from_location,
                to_location=to_location,
                captured=captured,
                captured_location=captured_location if captured else None,
                had_moved=had_moved,
            )

    @contextmanager
    def simulated_move(
        self,
        from_location: Location,
        to_location: Location,
        capture_at: Optional[Location] = None,
    ) -> Iterator[AppliedMove]:
        """
        Play the move for the duration of the `with` block only.

        The board lock is held throughout: no other thread can observe or change the board
        between the move and its revert.
        """
        with self.lock:
            applied = self.apply_move(from_location, to_location, capture_at)
            try:
                yield applied
            finally:
                applied.undo()
