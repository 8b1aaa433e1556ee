"""Append-only log of the moves played in a game, with their notation"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.chess.moves import Move
from src.core.models import utc_now
from src.core.shared_types import CastlingSide, Color


@dataclass(frozen=True)
class MoveRecord:
    move: Move
    player: Color
    move_number: int
    was_capture: bool
    was_check: bool
    was_checkmate: bool
    notation: str
    timestamp: datetime = field(default_factory=utc_now)


def to_notation(
    move: Move, was_capture: bool, was_check: bool, was_checkmate: bool
) -> str:
    """
    Long algebraic notation
    ----
    <piece letter><from><'x' for a capture, otherwise '-'><to><'#' for mate, '+' for check>

    ex) "e2-e4", "Ng1xf3+", "Qh5xf7#". Pawns have no letter, castles are written "O-O" / "O-O-O".
    """
    check_symbol = "#" if was_checkmate else ("+" if was_check else "")
    if move.castling_side is not None:
        castle = "O-O" if move.castling_side == CastlingSide.KINGSIDE else "O-O-O"
        return f"{castle}{check_symbol}"

    capture_symbol = "x" if was_capture else "-"
    return (
        f"{move.piece.letter}{move.from_location.to_algebraic()}"
        f"{capture_symbol}{move.to_location.to_algebraic()}{check_symbol}"
    )


class MoveHistory:
    def __init__(self) -> None:
        self._moves: list[MoveRecord] = []

    def add_move(
        self,
        move: Move,
        player: Color,
        was_capture: bool,
        was_check: bool = False,
        was_checkmate: bool = False,
    ) -> MoveRecord:
        record = MoveRecord(
            move=move,
            player=player,
            move_number=len(self._moves) // 2 + 1,
            was_capture=was_capture,
            was_check=was_check,
            was_checkmate=was_checkmate,
            notation=to_notation(move, was_capture, was_check, was_checkmate),
        )
        self._moves.append(record)
        return record

    @property
    def last_move(self) -> Optional[MoveRecord]:
        return self._moves[-1] if self._moves else None

    def all_moves(self) -> list[MoveRecord]:
        """A copy: the history itself can only be appended to through `add_move()`"""
        return list(self._moves)

    def notations(self) -> list[str]:
        return [record.notation for record in self._moves]

    @property
    def count(self) -> int:
        return len(self._moves)

    def clear(self) -> None:
        """New game"""
        self._moves.clear()

    # -- UNDO / REDO ---
    def pop_last(self) -> Optional[MoveRecord]:
        return self._moves.pop() if self._moves else None

    def restore(self, record: MoveRecord) -> None:
        """Put back a record taken off by `pop_last()` (redo)"""
        self._moves.append(record)
