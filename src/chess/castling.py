"""
Castling
----

Two separate concerns:
* deciding whether a player may castle (`castling_block_reason()` / `can_castle()`)
* moving king and rook once that decision was made (`execute_castle()`), which trusts its caller blindly.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.location import Location
from src.chess.rules import king_in_check, square_under_attack
from src.core.shared_types import CastlingSide, Color, PieceKind


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    `path` are the squares between king and rook, `king_path` the squares the king crosses or lands on.
    """

    king_from: Location
    king_to: Location
    rook_from: Location
    rook_to: Location
    path: tuple[Location, ...]
    king_path: tuple[Location, ...]

    @classmethod
    def from_algebraic(
        cls, k_from: str, k_to: str, r_from: str, r_to: str, path: str
    ) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        king_from = Location.from_algebraic(k_from)
        king_to = Location.from_algebraic(k_to)
        squares_between = tuple(Location.from_algebraic(sq) for sq in path.split())
        step = 1 if king_to.column > king_from.column else -1
        king_path = tuple(
            Location(king_from.row, column)
            for column in range(king_from.column + step, king_to.column + step, step)
        )
        return cls(
            king_from,
            king_to,
            Location.from_algebraic(r_from),
            Location.from_algebraic(r_to),
            squares_between,
            king_path,
        )


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KINGSIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1", "f1 g1"
    ),
    (Color.WHITE, CastlingSide.QUEENSIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1", "b1 c1 d1"
    ),
    (Color.BLACK, CastlingSide.KINGSIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8", "f8 g8"
    ),
    (Color.BLACK, CastlingSide.QUEENSIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8", "b8 c8 d8"
    ),
}


def castling_block_reason(board: Board, color: Color, side: CastlingSide) -> Optional[str]:
    """
    Why the player may not castle to this side (None if castling is allowed)
    ---

    **you are allowed to castle if**

    * King and rook still stand on their starting squares and have never moved.
    * All squares between the two are empty.
    * You are not currently in check (you cannot castle out of a check).
    * The king does not pass through or land on a square that is under attack.
    """
    squares = CASTLING_RULES[(color, side)]

    king = board.piece_at(squares.king_from)
    if king is None or not king.is_same_as(PieceKind.KING, color) or king.has_moved:
        return "Cannot castle: the king has moved."

    rook = board.piece_at(squares.rook_from)
    if rook is None or not rook.is_same_as(PieceKind.ROOK, color) or rook.has_moved:
        return f"Cannot castle {side}: the rook has moved."

    if any(not board.is_empty(location) for location in squares.path):
        return f"Cannot castle {side}: there are pieces in the way."

    if king_in_check(board, color):
        return "Cannot castle out of check."

    if any(square_under_attack(board, location, color) for location in squares.king_path):
        return f"Cannot castle {side}: the king would cross or land on an attacked square."

    return None


def can_castle(board: Board, color: Color, side: CastlingSide) -> bool:
    return castling_block_reason(board, color, side) is None


def execute_castle(board: Board, color: Color, side: CastlingSide) -> None:
    """
    Move both the King and the Rook
    ---

    The king moves two squares towards the rook, the rook lands on the square the king jumped over.
    NOTE: no validation at all. Call `castling_block_reason()` first.
    """
    squares = CASTLING_RULES[(color, side)]
    with board.lock:
        board.apply_move(squares.king_from, squares.king_to, mark_moved=True)
        board.apply_move(squares.rook_from, squares.rook_to, mark_moved=True)
