"""Unit tests for /src/chess/pieces.py"""

import pytest

from src.chess.pieces import Piece
from src.core.shared_types import Color, PieceKind


@pytest.mark.parametrize(
    "character, kind, color",
    [
        ("P", PieceKind.PAWN, Color.WHITE),
        ("n", PieceKind.KNIGHT, Color.BLACK),
        ("B", PieceKind.BISHOP, Color.WHITE),
        ("r", PieceKind.ROOK, Color.BLACK),
        ("Q", PieceKind.QUEEN, Color.WHITE),
        ("k", PieceKind.KING, Color.BLACK),
    ],
)
def test_fen_characters(character: str, kind: PieceKind, color: Color) -> None:
    """Upper case is white, lower case is black"""
    piece = Piece.from_fen(character)
    assert piece.kind == kind
    assert piece.color == color
    assert not piece.has_moved


@pytest.mark.parametrize(
    "kind, letter",
    [(PieceKind.PAWN, ""), (PieceKind.KNIGHT, "N"), (PieceKind.KING, "K")],
)
def test_notation_letter(kind: PieceKind, letter: str) -> None:
    assert Piece(kind, Color.BLACK).letter == letter


def test_pieces_compare_by_identity() -> None:
    """Two white pawns are still two different pieces"""
    first = Piece(PieceKind.PAWN, Color.WHITE)
    second = Piece(PieceKind.PAWN, Color.WHITE)
    assert first != second
    assert first.is_same_as(PieceKind.PAWN, Color.WHITE)
    assert not first.is_same_as(PieceKind.PAWN, Color.BLACK)


def test_opponent_color() -> None:
    assert Color.WHITE.opponent == Color.BLACK
    assert Color.BLACK.opponent == Color.WHITE
