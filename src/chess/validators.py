"""
Move validation
----

Key idea: strategy pattern again. Each validator checks exactly one aspect of a requested move and returns
None when it is fine, or a human readable reason when it is not.

An illegal move is an everyday outcome during play, so nothing in here raises.
"""

from typing import Callable, Optional

from src.chess.board import Board
from src.chess.location import Location
from src.chess.moves import Move, generate_moves_with_en_passant
from src.chess.rules import leaves_king_in_check
from src.core.shared_types import Color

# (from, to, player to move, board, live en passant target) -> reason or None
MoveValidatorFn = Callable[[Location, Location, Color, Board, Optional[Location]], Optional[str]]


def find_candidate_move(
    from_location: Location,
    to_location: Location,
    board: Board,
    en_passant_target: Optional[Location],
) -> Optional[Move]:
    """The pseudo-legal move of the piece on `from_location` that lands on `to_location`, if it exists"""
    piece = board.piece_at(from_location)
    if piece is None:
        return None
    return next(
        (
            move
            for move in generate_moves_with_en_passant(
                from_location, board, en_passant_target, piece
            )
            if move.to_location == to_location
        ),
        None,
    )


def validate_piece_ownership(
    from_location: Location,
    to_location: Location,
    player: Color,
    board: Board,
    en_passant_target: Optional[Location],
) -> Optional[str]:
    """There must be a piece and it must be yours"""
    piece = board.piece_at(from_location)
    if piece is None:
        return f"No piece at {from_location.to_algebraic()}"
    if piece.color != player:
        return f"That piece belongs to {piece.color}, not {player}"
    return None


def validate_piece_movement(
    from_location: Location,
    to_location: Location,
    player: Color,
    board: Board,
    en_passant_target: Optional[Location],
) -> Optional[str]:
    """The piece must be able to make this move (shape, blockers, captures), ignoring checks"""
    if from_location == to_location:
        return "A piece has to move to a different square"

    move = find_candidate_move(from_location, to_location, board, en_passant_target)
    if move is None:
        piece = board.piece_at(from_location)
        kind = piece.kind if piece is not None else "piece"
        return f"Illegal move for {kind}: {from_location.to_algebraic()} to {to_location.to_algebraic()}"
    return None


def validate_king_safety(
    from_location: Location,
    to_location: Location,
    player: Color,
    board: Board,
    en_passant_target: Optional[Location],
) -> Optional[str]:
    """The move must not put (or leave) your own king in check"""
    move = find_candidate_move(from_location, to_location, board, en_passant_target)
    if move is not None and leaves_king_in_check(board, move, player):
        return "That move would leave your King in check!"
    return None


# -- STRATEGY PATTERN: the order matters, each validator may assume the earlier ones passed ---
MOVE_VALIDATORS: list[MoveValidatorFn] = [
    validate_piece_ownership,
    validate_piece_movement,
    validate_king_safety,
]


def validate_move(
    from_location: Location,
    to_location: Location,
    player: Color,
    board: Board,
    en_passant_target: Optional[Location] = None,
) -> Optional[str]:
    """Run the validators in order and report the first failure"""
    for validator in MOVE_VALIDATORS:
        reason = validator(from_location, to_location, player, board, en_passant_target)
        if reason is not None:
            return reason
    return None
