"""Unit tests for /src/chess/executor.py"""

from typing import Callable
from unittest.mock import Mock

import pytest

from src.chess.board import Board
from src.chess.en_passant import EnPassantTracker
from src.chess.executor import MoveExecutor
from src.chess.history import MoveHistory
from src.chess.location import Location
from src.chess.promotion import FixedPromotionChooser, PromotionChooser
from src.core.exceptions import GameError
from src.core.shared_types import CastlingSide, Color, PieceKind

BoardFactory = Callable[..., Board]
ExecutorFactory = Callable[..., MoveExecutor]


def sq(square: str) -> Location:
    return Location.from_algebraic(square)


@pytest.fixture
def make_executor() -> ExecutorFactory:
    """Call the inner function with a board (and optionally a promotion chooser)"""

    def _create(board: Board, chooser: PromotionChooser | None = None) -> MoveExecutor:
        return MoveExecutor(
            board, EnPassantTracker(), MoveHistory(), chooser or FixedPromotionChooser()
        )

    return _create


def test_pawn_double_push(make_executor: ExecutorFactory) -> None:
    """Scenario: e2-e4 in the starting position"""
    board = Board.standard()
    executor = make_executor(board)

    record = executor.execute_move(Location(6, 4), Location(4, 4))

    assert record is not None
    assert record.notation == "e2-e4"
    assert record.player == Color.WHITE
    assert record.move_number == 1
    assert not record.was_capture
    pawn = board.piece_at(Location(4, 4))
    assert pawn is not None and pawn.has_moved
    assert board.is_empty(Location(6, 4))
    assert executor.en_passant.upcoming_target == Location(5, 4)
    assert executor.history.count == 1


def test_pawn_captures_queen(make_executor: ExecutorFactory, board_with: BoardFactory) -> None:
    """Scenario: white pawn (4,4) takes the black queen on (3,3)"""
    board = board_with(
        {
            "e1": (PieceKind.KING, Color.WHITE),
            "e8": (PieceKind.KING, Color.BLACK),
            "e4": (PieceKind.PAWN, Color.WHITE),
            "d5": (PieceKind.QUEEN, Color.BLACK),
        }
    )
    executor = make_executor(board)
    queen = board.piece_at(Location(3, 3))

    record = executor.execute_move(Location(4, 4), Location(3, 3))

    assert record is not None
    assert record.was_capture
    assert record.notation == "e4xd5"
    assert record.move.captured is queen
    assert executor.captured_pieces == [queen]
    pawn = board.piece_at(Location(3, 3))
    assert pawn is not None and pawn.is_same_as(PieceKind.PAWN, Color.WHITE)


def test_en_passant_capture(make_executor: ExecutorFactory, board_with: BoardFactory) -> None:
    """Black d7-d5 next to the white e5 pawn, white captures on d6 the very next ply"""
    board = board_with(
        {
            "e5": (PieceKind.PAWN, Color.WHITE),
            "d7": (PieceKind.PAWN, Color.BLACK),
        }
    )
    executor = make_executor(board)
    black_pawn = board.piece_at(sq("d7"))

    executor.execute_move(sq("d7"), sq("d5"))
    executor.en_passant.next_turn()
    record = executor.execute_move(sq("e5"), sq("d6"))

    assert record is not None
    assert record.move.is_en_passant
    assert record.was_capture
    assert record.notation == "e5xd6"
    assert board.is_empty(sq("d5"))
    assert executor.captured_pieces == [black_pawn]


def test_en_passant_expires(make_executor: ExecutorFactory, board_with: BoardFactory) -> None:
    """Two plies later the pawn just moves diagonally onto an empty square: nothing is captured"""
    board = board_with(
        {
            "e5": (PieceKind.PAWN, Color.WHITE),
            "d7": (PieceKind.PAWN, Color.BLACK),
        }
    )
    executor = make_executor(board)
    executor.execute_move(sq("d7"), sq("d5"))
    executor.en_passant.next_turn()
    executor.en_passant.next_turn()

    record = executor.execute_move(sq("e5"), sq("d6"))
    assert record is not None
    assert not record.was_capture
    assert board.piece_at(sq("d5")) is not None


def test_promotion(make_executor: ExecutorFactory, board_with: BoardFactory) -> None:
    board = board_with({"b7": (PieceKind.PAWN, Color.WHITE)})
    chooser = Mock(spec=FixedPromotionChooser)
    chooser.choose_promotion.return_value = PieceKind.KNIGHT
    executor = make_executor(board, chooser)

    record = executor.execute_move(sq("b7"), sq("b8"))

    chooser.choose_promotion.assert_called_once_with(Color.WHITE)
    assert record is not None
    assert record.move.promote_to == PieceKind.KNIGHT
    knight = board.piece_at(sq("b8"))
    assert knight is not None and knight.is_same_as(PieceKind.KNIGHT, Color.WHITE)
    assert knight.has_moved


def test_preset_promotion_skips_chooser(
    make_executor: ExecutorFactory, board_with: BoardFactory
) -> None:
    board = board_with({"b2": (PieceKind.PAWN, Color.BLACK)})
    chooser = Mock(spec=FixedPromotionChooser)
    executor = make_executor(board, chooser)

    record = executor.execute_move(sq("b2"), sq("b1"), PieceKind.ROOK)

    chooser.choose_promotion.assert_not_called()
    assert record is not None
    rook = board.piece_at(sq("b1"))
    assert rook is not None and rook.is_same_as(PieceKind.ROOK, Color.BLACK)


@pytest.mark.parametrize("choice", [None, PieceKind.KING, PieceKind.PAWN])
def test_cancelled_promotion_reverts_everything(
    make_executor: ExecutorFactory, board_with: BoardFactory, choice: PieceKind | None
) -> None:
    """Cancelling (or an impossible choice) restores pawn, captured piece, moved-flag and history"""
    board = board_with(
        {
            "b7": (PieceKind.PAWN, Color.WHITE),
            "a8": (PieceKind.ROOK, Color.BLACK),
        }
    )
    pawn = board.piece_at(sq("b7"))
    rook = board.piece_at(sq("a8"))
    executor = make_executor(board, FixedPromotionChooser(choice))
    executor.en_passant.record_pawn_double_move(sq("g7"), sq("g5"))
    en_passant_before = executor.en_passant.state()

    record = executor.execute_move(sq("b7"), sq("a8"))

    assert record is None
    assert board.piece_at(sq("b7")) is pawn
    assert board.piece_at(sq("a8")) is rook
    assert pawn is not None and not pawn.has_moved
    assert rook is not None and rook.location == sq("a8")
    assert executor.history.count == 0
    assert executor.captured_pieces == []
    assert executor.en_passant.state() == en_passant_before


def test_check_and_checkmate_notation(
    make_executor: ExecutorFactory, board_with: BoardFactory
) -> None:
    """Back rank mate: Ra1-a8#"""
    board = board_with(
        {
            "a1": (PieceKind.ROOK, Color.WHITE),
            "e1": (PieceKind.KING, Color.WHITE),
            "g8": (PieceKind.KING, Color.BLACK),
            "f7": (PieceKind.PAWN, Color.BLACK),
            "g7": (PieceKind.PAWN, Color.BLACK),
            "h7": (PieceKind.PAWN, Color.BLACK),
        }
    )
    executor = make_executor(board)
    record = executor.execute_move(sq("a1"), sq("a8"))
    assert record is not None
    assert record.was_check and record.was_checkmate
    assert record.notation == "Ra1-a8#"


def test_check_notation(make_executor: ExecutorFactory, board_with: BoardFactory) -> None:
    board = board_with(
        {
            "a1": (PieceKind.ROOK, Color.WHITE),
            "e1": (PieceKind.KING, Color.WHITE),
            "g8": (PieceKind.KING, Color.BLACK),
        }
    )
    executor = make_executor(board)
    record = executor.execute_move(sq("a1"), sq("a8"))
    assert record is not None
    assert record.was_check and not record.was_checkmate
    assert record.notation == "Ra1-a8+"


def test_castle(make_executor: ExecutorFactory, board_with: BoardFactory) -> None:
    board = board_with(
        {
            "e8": (PieceKind.KING, Color.BLACK),
            "a8": (PieceKind.ROOK, Color.BLACK),
        }
    )
    executor = make_executor(board)
    record = executor.execute_castle(Color.BLACK, CastlingSide.QUEENSIDE)
    assert record.notation == "O-O-O"
    assert record.move.is_castle
    assert board.piece_at(sq("c8")) is not None
    assert board.piece_at(sq("d8")) is not None


def test_castle_without_king(make_executor: ExecutorFactory) -> None:
    with pytest.raises(GameError):
        make_executor(Board.empty()).execute_castle(Color.WHITE, CastlingSide.KINGSIDE)


def test_no_piece_to_move(make_executor: ExecutorFactory) -> None:
    executor = make_executor(Board.empty())
    assert executor.execute_move(sq("e2"), sq("e4")) is None
    assert executor.history.count == 0
