"""Unit tests for /src/chess/castling.py"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_RULES,
    can_castle,
    castling_block_reason,
    execute_castle,
)
from src.chess.location import Location
from src.chess.pieces import Piece
from src.core.shared_types import CastlingSide, Color, PieceKind

BoardFactory = Callable[..., Board]


@pytest.fixture
def castling_board(board_with: BoardFactory) -> Board:
    """Kings and rooks on their home squares, nothing in between"""
    return board_with(
        {
            "e1": (PieceKind.KING, Color.WHITE),
            "a1": (PieceKind.ROOK, Color.WHITE),
            "h1": (PieceKind.ROOK, Color.WHITE),
            "e8": (PieceKind.KING, Color.BLACK),
            "a8": (PieceKind.ROOK, Color.BLACK),
            "h8": (PieceKind.ROOK, Color.BLACK),
        }
    )


@pytest.mark.parametrize(
    "color, side, king_to, rook_to",
    [
        (Color.WHITE, CastlingSide.KINGSIDE, "g1", "f1"),
        (Color.WHITE, CastlingSide.QUEENSIDE, "c1", "d1"),
        (Color.BLACK, CastlingSide.KINGSIDE, "g8", "f8"),
        (Color.BLACK, CastlingSide.QUEENSIDE, "c8", "d8"),
    ],
)
def test_execute_castle(
    castling_board: Board, color: Color, side: CastlingSide, king_to: str, rook_to: str
) -> None:
    """King two squares towards the rook, rook on the square the king jumped over, both marked as moved"""
    assert can_castle(castling_board, color, side)
    execute_castle(castling_board, color, side)

    king = castling_board.piece_at(Location.from_algebraic(king_to))
    rook = castling_board.piece_at(Location.from_algebraic(rook_to))
    assert king is not None and king.is_same_as(PieceKind.KING, color)
    assert rook is not None and rook.is_same_as(PieceKind.ROOK, color)
    assert king.has_moved and rook.has_moved

    squares = CASTLING_RULES[(color, side)]
    assert castling_board.is_empty(squares.king_from)
    assert castling_board.is_empty(squares.rook_from)


def test_moved_king_cannot_castle(castling_board: Board) -> None:
    king = castling_board.find_king(Color.WHITE)
    assert king is not None
    king.has_moved = True
    assert castling_block_reason(castling_board, Color.WHITE, CastlingSide.KINGSIDE) is not None
    assert not can_castle(castling_board, Color.WHITE, CastlingSide.QUEENSIDE)


def test_moved_rook_blocks_only_its_side(castling_board: Board) -> None:
    rook = castling_board.piece_at(Location.from_algebraic("h1"))
    assert rook is not None
    rook.has_moved = True
    assert not can_castle(castling_board, Color.WHITE, CastlingSide.KINGSIDE)
    assert can_castle(castling_board, Color.WHITE, CastlingSide.QUEENSIDE)


def test_pieces_in_between() -> None:
    """Start position: nothing can castle yet"""
    board = Board.standard()
    reason = castling_block_reason(board, Color.WHITE, CastlingSide.KINGSIDE)
    assert reason is not None and "in the way" in reason


def test_cannot_castle_out_of_check(castling_board: Board) -> None:
    castling_board.remove_piece(Location.from_algebraic("e8"))
    castling_board.place_piece(
        Piece(PieceKind.ROOK, Color.BLACK), Location.from_algebraic("e5")
    )
    assert castling_block_reason(castling_board, Color.WHITE, CastlingSide.KINGSIDE) == (
        "Cannot castle out of check."
    )


@pytest.mark.parametrize(
    "attacked_file, kingside_allowed, queenside_allowed",
    [
        ("f", False, True),
        ("g", False, True),
        ("d", True, False),
        ("c", True, False),
        # the rook crosses b1, the king does not: castling is fine
        ("b", True, True),
    ],
)
def test_king_path_under_attack(
    board_with: BoardFactory,
    attacked_file: str,
    kingside_allowed: bool,
    queenside_allowed: bool,
) -> None:
    board = board_with(
        {
            "e1": (PieceKind.KING, Color.WHITE),
            "a1": (PieceKind.ROOK, Color.WHITE),
            "h1": (PieceKind.ROOK, Color.WHITE),
            f"{attacked_file}8": (PieceKind.ROOK, Color.BLACK),
        }
    )
    assert can_castle(board, Color.WHITE, CastlingSide.KINGSIDE) is kingside_allowed
    assert can_castle(board, Color.WHITE, CastlingSide.QUEENSIDE) is queenside_allowed
