"""
Check / legality rules
----

Everything that depends on "would my own king be attacked?":
attacked squares, check, legal moves, checkmate and stalemate.

NOTE: `would_move_cause_check()` plays the candidate move on the live board and reverts it.
It holds the board lock while doing so; concurrent searches should run on `Board.copy()`s instead.
"""

from typing import Optional

from src.chess.board import Board
from src.chess.location import Location
from src.chess.moves import (
    Move,
    generate_moves,
    generate_moves_with_en_passant,
    is_square_attacked_by,
)
from src.core.shared_types import Color


def square_under_attack(board: Board, square: Location, defending_color: Color) -> bool:
    """True if any of the opponent's pieces could capture on `square`"""
    return is_square_attacked_by(square, defending_color.opponent, board)


def king_in_check(board: Board, color: Color) -> bool:
    """No king on the board (partial/test positions) means: not in check"""
    king = board.find_king(color)
    if king is None or king.location is None:
        return False
    return square_under_attack(board, king.location, color)


def would_move_cause_check(
    board: Board,
    from_location: Location,
    to_location: Location,
    color: Color,
    capture_at: Optional[Location] = None,
) -> bool:
    """
    Would the player of `color` be in check after this move?

    plan:
    1. make the candidate move on the board (`capture_at` for an en passant victim)
    2. determine if the king is in check on the new board
    3. revert the move, also when the check detection fails
    """
    if board.piece_at(from_location) is None:
        return False

    with board.simulated_move(from_location, to_location, capture_at):
        return king_in_check(board, color)


def leaves_king_in_check(board: Board, move: Move, color: Color) -> bool:
    capture_at = move.captured_location if move.is_en_passant else None
    return would_move_cause_check(
        board, move.from_location, move.to_location, color, capture_at
    )


def legal_moves(
    board: Board,
    location: Location,
    color: Color,
    en_passant_target: Optional[Location] = None,
) -> list[Move]:
    """
    Legal moves of the piece on `location`
    ----

    1. generate the pseudo-legal moves (incl. en passant when a live target square is passed)
    2. remove the ones that put (or leave) you in check
    """
    piece = board.piece_at(location)
    if piece is None or piece.color != color:
        return []

    candidates = generate_moves_with_en_passant(
        location, board, en_passant_target, piece
    )
    return [move for move in candidates if not leaves_king_in_check(board, move, color)]


def all_legal_moves(
    board: Board, color: Color, en_passant_target: Optional[Location] = None
) -> list[Move]:
    moves: list[Move] = []
    for piece in board.pieces_of(color):
        if piece.location is not None:
            moves.extend(legal_moves(board, piece.location, color, en_passant_target))
    return moves


def has_any_legal_move(
    board: Board, color: Color, en_passant_target: Optional[Location] = None
) -> bool:
    """Stops at the first legal move found"""
    for piece in board.pieces_of(color):
        location = piece.location
        if location is None:
            continue
        for move in generate_moves(location, board, piece):
            if not leaves_king_in_check(board, move, color):
                return True
        if en_passant_target is not None and legal_moves(
            board, location, color, en_passant_target
        ):
            return True
    return False


# --- CHECKS FOR ENDING THE GAME ---
def is_checkmate(
    board: Board, color: Color, en_passant_target: Optional[Location] = None
) -> bool:
    return king_in_check(board, color) and not has_any_legal_move(
        board, color, en_passant_target
    )


def is_stalemate(
    board: Board, color: Color, en_passant_target: Optional[Location] = None
) -> bool:
    return not king_in_check(board, color) and not has_any_legal_move(
        board, color, en_passant_target
    )
