"""Unit tests for /src/chess/history.py"""

import pytest

from src.chess.history import MoveHistory, to_notation
from src.chess.location import Location
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.core.shared_types import CastlingSide, Color, PieceKind


def make_move(kind: PieceKind, color: Color, from_square: str, to_square: str) -> Move:
    return Move(
        Location.from_algebraic(from_square),
        Location.from_algebraic(to_square),
        Piece(kind, color),
    )


@pytest.mark.parametrize(
    "kind, capture, check, mate, expected",
    [
        (PieceKind.PAWN, False, False, False, "e2-e4"),
        (PieceKind.KNIGHT, True, False, False, "Ne2xe4"),
        (PieceKind.QUEEN, False, True, False, "Qe2-e4+"),
        (PieceKind.ROOK, True, True, True, "Re2xe4#"),
    ],
)
def test_notation(
    kind: PieceKind, capture: bool, check: bool, mate: bool, expected: str
) -> None:
    """{letter}{from}{x or -}{to}{+ or #}"""
    move = make_move(kind, Color.WHITE, "e2", "e4")
    assert to_notation(move, capture, check, mate) == expected


@pytest.mark.parametrize(
    "side, expected", [(CastlingSide.KINGSIDE, "O-O"), (CastlingSide.QUEENSIDE, "O-O-O")]
)
def test_castling_notation(side: CastlingSide, expected: str) -> None:
    move = make_move(PieceKind.KING, Color.BLACK, "e8", "g8")
    move.castling_side = side
    assert to_notation(move, False, False, False) == expected
    assert to_notation(move, False, True, False) == f"{expected}+"


def test_move_numbers() -> None:
    """White and black share a move number"""
    history = MoveHistory()
    first = history.add_move(make_move(PieceKind.PAWN, Color.WHITE, "e2", "e4"), Color.WHITE, False)
    second = history.add_move(make_move(PieceKind.PAWN, Color.BLACK, "e7", "e5"), Color.BLACK, False)
    third = history.add_move(make_move(PieceKind.KNIGHT, Color.WHITE, "g1", "f3"), Color.WHITE, False)

    assert (first.move_number, second.move_number, third.move_number) == (1, 1, 2)
    assert history.count == 3
    assert history.last_move is third
    assert history.notations() == ["e2-e4", "e7-e5", "Ng1-f3"]
    assert first.timestamp.tzinfo is not None


def test_all_moves_is_a_copy() -> None:
    history = MoveHistory()
    history.add_move(make_move(PieceKind.PAWN, Color.WHITE, "e2", "e4"), Color.WHITE, False)
    moves = history.all_moves()
    moves.clear()
    assert history.count == 1


def test_pop_and_restore() -> None:
    history = MoveHistory()
    record = history.add_move(make_move(PieceKind.PAWN, Color.WHITE, "e2", "e4"), Color.WHITE, False)
    assert history.pop_last() is record
    assert history.pop_last() is None
    assert history.last_move is None
    history.restore(record)
    assert history.all_moves() == [record]


def test_clear() -> None:
    history = MoveHistory()
    history.add_move(make_move(PieceKind.PAWN, Color.WHITE, "e2", "e4"), Color.WHITE, False)
    history.clear()
    assert history.count == 0
